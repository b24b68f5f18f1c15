"""
Section kernel test configuration.

Shared fixtures build throwaway library roots under tmp_path. No network:
remote theme calls go to MemoryThemeApi.
"""

from pathlib import Path

import pytest

from engine.kernel.theme_api import MemoryThemeApi
from engine.kernel.types import Theme

SHOP = "test-shop.myshopify.com"


def write_section(
    root: Path,
    section_id: str,
    template: str = "<div>{{ section.settings.heading }}</div>",
    *,
    style: str | None = None,
    script: str | None = None,
    schema: str | None = None,
    preview: tuple[str, bytes] | None = None,
) -> Path:
    """Lay out one section directory under root and return it."""
    directory = root / section_id
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "section.liquid").write_text(template, encoding="utf-8")
    if style is not None:
        (directory / "style.css").write_text(style, encoding="utf-8")
    if script is not None:
        (directory / "script.js").write_text(script, encoding="utf-8")
    if schema is not None:
        (directory / "schema.json").write_text(schema, encoding="utf-8")
    if preview is not None:
        ext, data = preview
        (directory / f"preview.{ext}").write_bytes(data)
    return directory


@pytest.fixture
def make_section():
    return write_section


@pytest.fixture
def shop():
    return SHOP


@pytest.fixture
def roots(tmp_path):
    """Three candidate roots, none created until a section is written."""
    return [tmp_path / "parent_sections", tmp_path / "sections", tmp_path / "public_sections"]


@pytest.fixture
def theme_api():
    return MemoryThemeApi(
        {
            SHOP: [
                Theme(id=1, name="Dawn", role="main"),
                Theme(id=2, name="Dawn (draft)", role="unpublished"),
                Theme(id=42, name="Sense", role="unpublished"),
            ]
        }
    )
