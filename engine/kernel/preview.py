"""
Section Kernel -- Preview Resolver

Finds a section's preview image. Search order:

  1. preview.<ext> beside the section's template (first library root that has it)
  2. a synced copy in the public preview cache: <cache>/<id>/preview.<ext>
  3. a generated SVG placeholder

The placeholder is a pure function of the section id: same id, same bytes.
No randomness, no timestamps, no IO.
"""

from __future__ import annotations

import logging
from html import escape
from pathlib import Path

from engine.kernel.asset_reader import AssetReader, find_preview_file
from engine.kernel.errors import SectionNotFound
from engine.kernel.types import PREVIEW_CONTENT_TYPES, PreviewRef, validate_section_id

logger = logging.getLogger(__name__)

PLACEHOLDER_CAPTION = "Preview coming soon"
PLACEHOLDER_CONTENT_TYPE = "image/svg+xml"


def title_case_id(section_id: str) -> str:
    """'hero-banner' -> 'Hero Banner'."""
    return " ".join(word[:1].upper() + word[1:] for word in section_id.split("-") if word)


def render_placeholder_svg(section_id: str) -> str:
    """800x600 card with the title-cased id and a fixed caption."""
    title = escape(title_case_id(section_id) or section_id)
    return (
        '<svg width="800" height="600" xmlns="http://www.w3.org/2000/svg">\n'
        '  <rect width="800" height="600" fill="#f8f8f8"/>\n'
        '  <rect x="50" y="50" width="700" height="500" rx="10" fill="#ffffff" stroke="#e0e0e0" stroke-width="2"/>\n'
        '  <text x="400" y="150" font-family="Arial, sans-serif" font-size="32" font-weight="bold" '
        f'text-anchor="middle" fill="#333333">{title}</text>\n'
        '  <text x="400" y="300" font-family="Arial, sans-serif" font-size="18" '
        f'text-anchor="middle" fill="#666666">{PLACEHOLDER_CAPTION}</text>\n'
        "</svg>\n"
    )


def content_type_for(path: Path) -> str:
    return PREVIEW_CONTENT_TYPES.get(path.suffix.lstrip(".").lower(), "application/octet-stream")


class PreviewResolver:
    def __init__(self, reader: AssetReader, cache_dir: str | Path | None = None):
        self._reader = reader
        self._cache_dir = Path(cache_dir) if cache_dir is not None else None

    def resolve(self, section_id: str) -> PreviewRef:
        """
        Return the preview for section_id. Only an invalid id raises
        (InvalidRequest); a missing section still gets a placeholder.
        """
        validate_section_id(section_id)

        try:
            directory = self._reader.locate(section_id)
        except SectionNotFound:
            directory = None
        if directory is not None:
            found = find_preview_file(directory)
            if found is not None:
                return PreviewRef(
                    section_id=section_id, source="section", content_type=content_type_for(found), path=found
                )

        if self._cache_dir is not None:
            cached = find_preview_file(self._cache_dir / section_id)
            if cached is not None:
                return PreviewRef(
                    section_id=section_id, source="cache", content_type=content_type_for(cached), path=cached
                )

        logger.debug("preview: no image for %s, generating placeholder", section_id)
        return PreviewRef(
            section_id=section_id,
            source="placeholder",
            content_type=PLACEHOLDER_CONTENT_TYPE,
            data=render_placeholder_svg(section_id).encode("utf-8"),
        )

    def load(self, section_id: str) -> tuple[bytes, str]:
        """Preview bytes and their content type."""
        ref = self.resolve(section_id)
        return ref.read_bytes(), ref.content_type
