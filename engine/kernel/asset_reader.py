"""
Section Kernel -- Asset Reader

Locates a section's files in one of several candidate library roots.

The library may live relative to different working directories depending on
how the host process is started, so the reader searches an ordered list of
roots injected at construction time. The first root holding
<root>/<id>/section.liquid wins. Optional companions are looked up only in that
same directory; there is no per-file fallback to later roots.

Read-only. Deterministic for a fixed list of roots.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from engine.kernel.errors import SectionNotFound
from engine.kernel.types import (
    PREVIEW_CONTENT_TYPES,
    PREVIEW_STEM,
    SCHEMA_FILE,
    SCRIPT_FILE,
    STYLE_FILE,
    TEMPLATE_FILE,
    ResolvedSection,
    validate_section_id,
)

logger = logging.getLogger(__name__)


def find_preview_file(directory: Path) -> Path | None:
    """Return preview.<ext> in directory, checking extensions in a fixed order."""
    for ext in PREVIEW_CONTENT_TYPES:
        candidate = directory / f"{PREVIEW_STEM}.{ext}"
        if candidate.is_file():
            return candidate
    return None


def _read_optional(directory: Path, name: str) -> str | None:
    path = directory / name
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


class AssetReader:
    """Resolves section ids against an ordered list of library roots."""

    def __init__(self, roots: Sequence[str | Path]):
        if not roots:
            raise ValueError("AssetReader needs at least one library root")
        self._roots: tuple[Path, ...] = tuple(Path(r) for r in roots)

    @property
    def roots(self) -> tuple[Path, ...]:
        return self._roots

    def candidate_paths(self, section_id: str) -> list[Path]:
        """Template paths that would be tried for section_id, in search order."""
        return [root / section_id / TEMPLATE_FILE for root in self._roots]

    def locate(self, section_id: str) -> Path:
        """
        Return the directory holding the section's template.

        Raises:
            InvalidRequest: if section_id is not a valid slug
            SectionNotFound: if no root has the template; carries every
                attempted path in search order
        """
        validate_section_id(section_id)
        attempted: list[Path] = []
        for path in self.candidate_paths(section_id):
            attempted.append(path)
            if path.is_file():
                logger.info("asset_reader: found section %s at %s", section_id, path.parent)
                return path.parent
            logger.debug("asset_reader: section %s not at %s", section_id, path)

        logger.warning(
            "asset_reader: section %s not found after trying %s",
            section_id,
            ", ".join(str(p) for p in attempted),
        )
        raise SectionNotFound(section_id, attempted)

    def resolve(self, section_id: str) -> ResolvedSection:
        """Locate the section and read its template plus any companions."""
        directory = self.locate(section_id)
        return ResolvedSection(
            section_id=section_id,
            directory=directory,
            template=(directory / TEMPLATE_FILE).read_text(encoding="utf-8"),
            style=_read_optional(directory, STYLE_FILE),
            script=_read_optional(directory, SCRIPT_FILE),
            schema_text=_read_optional(directory, SCHEMA_FILE),
            preview_path=find_preview_file(directory),
        )
