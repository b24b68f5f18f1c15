"""
Section library repository.

The library is a directory per section under one of several ordered roots:

    <root>/<section_id>/section.liquid, metadata.json, style.css?, script.js?,
                        schema.json?, preview.<ext>?

Reads search every root in order and the first root holding a section wins.
Writes go to the first root. Preview images are also synced into the public
preview cache as <cache>/<section_id>/preview.<ext>.

No locking: concurrent update/delete of the same id is last-writer-wins.
"""

from __future__ import annotations

import json
import logging
import shutil
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from backend.models.section import (
    CreateSectionRequest,
    PreviewImage,
    SectionDefinition,
    SectionMetadata,
    UpdateSectionRequest,
)
from backend.utils.files import write_atomically
from engine.kernel.asset_reader import find_preview_file
from engine.kernel.errors import DuplicateSection, InvalidRequest, SectionNotFound
from engine.kernel.types import (
    METADATA_FILE,
    PREVIEW_CONTENT_TYPES,
    PREVIEW_STEM,
    SCHEMA_FILE,
    SCRIPT_FILE,
    STYLE_FILE,
    TEMPLATE_FILE,
    normalize_section_id,
    validate_section_id,
)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "general"
DEFAULT_DESCRIPTION = "No description available"


def _dump_metadata(metadata: SectionMetadata) -> str:
    return json.dumps(metadata.model_dump(mode="json", by_alias=True), indent=2) + "\n"


def _dump_schema_fragment(fragment: dict) -> str:
    return json.dumps(fragment, indent=2, ensure_ascii=False) + "\n"


def _remove_previews(directory: Path) -> None:
    for ext in PREVIEW_CONTENT_TYPES:
        (directory / f"{PREVIEW_STEM}.{ext}").unlink(missing_ok=True)


def _decode_preview(image: PreviewImage) -> bytes:
    try:
        return image.decode()
    except ValueError as e:
        raise InvalidRequest(str(e)) from e


class SectionRepo:
    """Create, update, delete, get and list library sections on disk."""

    def __init__(self, roots: Sequence[str | Path], preview_cache_dir: str | Path | None = None):
        if not roots:
            raise ValueError("SectionRepo needs at least one library root")
        self._roots: tuple[Path, ...] = tuple(Path(r) for r in roots)
        self._cache_dir = Path(preview_cache_dir) if preview_cache_dir is not None else None

    @property
    def roots(self) -> tuple[Path, ...]:
        return self._roots

    @property
    def write_root(self) -> Path:
        return self._roots[0]

    def _find_dir(self, section_id: str) -> Path | None:
        for root in self._roots:
            directory = root / section_id
            if (directory / TEMPLATE_FILE).is_file():
                return directory
        return None

    def _cache_path(self, section_id: str) -> Path | None:
        return self._cache_dir / section_id if self._cache_dir is not None else None

    def _load_metadata(self, directory: Path) -> SectionMetadata:
        """metadata.json as stored, or a bare record when it is missing or unreadable."""
        section_id = directory.name
        path = directory / METADATA_FILE
        if path.is_file():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                return SectionMetadata.model_validate({**raw, "id": section_id})
            except (json.JSONDecodeError, TypeError, ValidationError) as e:
                logger.warning("section_repo: unreadable metadata for %s: %s", section_id, e)
        return SectionMetadata(id=section_id, title=section_id)

    def read_metadata(self, directory: Path) -> SectionMetadata:
        """
        Metadata for display: blank title, description and categories are
        filled with listing defaults. Never written back to disk.
        """
        section_id = directory.name
        metadata = self._load_metadata(directory)

        updates: dict = {}
        if not metadata.title.strip():
            updates["title"] = section_id
        if not metadata.description.strip():
            updates["description"] = DEFAULT_DESCRIPTION
        if not metadata.categories:
            updates["categories"] = [DEFAULT_CATEGORY]
        return metadata.model_copy(update=updates) if updates else metadata

    # -- reads --

    def exists(self, section_id: str) -> bool:
        validate_section_id(section_id)
        return self._find_dir(section_id) is not None

    def get(self, section_id: str) -> SectionDefinition | None:
        validate_section_id(section_id)
        directory = self._find_dir(section_id)
        if directory is None:
            return None

        def optional(name: str) -> str | None:
            path = directory / name
            return path.read_text(encoding="utf-8") if path.is_file() else None

        preview = find_preview_file(directory)
        return SectionDefinition(
            metadata=self.read_metadata(directory),
            content=(directory / TEMPLATE_FILE).read_text(encoding="utf-8"),
            style=optional(STYLE_FILE),
            script=optional(SCRIPT_FILE),
            schema_text=optional(SCHEMA_FILE),
            preview_file=preview.name if preview is not None else None,
        )

    def list(self) -> list[SectionMetadata]:
        """Every section across all roots, first root wins on duplicate ids, sorted by id."""
        found: dict[str, SectionMetadata] = {}
        for root in self._roots:
            if not root.is_dir():
                continue
            for directory in sorted(root.iterdir()):
                name = directory.name
                if name in found or not (directory / TEMPLATE_FILE).is_file():
                    continue
                try:
                    validate_section_id(name)
                except InvalidRequest:
                    logger.debug("section_repo: skipping %s, not a valid section id", directory)
                    continue
                found[name] = self.read_metadata(directory)
        return [found[k] for k in sorted(found)]

    # -- writes --

    def create(self, req: CreateSectionRequest) -> SectionMetadata:
        """
        Write a new section into the write root.

        Raises:
            InvalidRequest: bad id, blank title or template, bad preview data
            DuplicateSection: a section with the normalized id exists in any root
        """
        section_id = validate_section_id(normalize_section_id(req.id))
        if not req.title.strip():
            raise InvalidRequest("Title is required")
        if not req.content.strip():
            raise InvalidRequest("Section template content is required")
        if self.exists(section_id):
            raise DuplicateSection(section_id)
        preview_bytes = _decode_preview(req.preview) if req.preview is not None else None

        now = datetime.now(UTC)
        metadata = SectionMetadata(
            id=section_id,
            title=req.title.strip(),
            description=req.description.strip(),
            categories=req.categories,
            price=req.price or "Free",
            created_at=now,
            updated_at=now,
        )

        directory = self.write_root / section_id
        if directory.exists():
            # No template, so not a section: leftover of an earlier failed write.
            logger.warning("section_repo: clearing incomplete directory %s", directory)
            shutil.rmtree(directory)

        try:
            write_atomically(directory / TEMPLATE_FILE, req.content)
            write_atomically(directory / METADATA_FILE, _dump_metadata(metadata))
            if req.style is not None:
                write_atomically(directory / STYLE_FILE, req.style)
            if req.script is not None:
                write_atomically(directory / SCRIPT_FILE, req.script)
            if req.schema_fragment is not None:
                write_atomically(directory / SCHEMA_FILE, _dump_schema_fragment(req.schema_fragment))
            if req.preview is not None and preview_bytes is not None:
                self._write_preview(section_id, directory, req.preview.extension, preview_bytes)
        except BaseException:
            logger.error("section_repo: create of %s failed, removing partial files", section_id)
            shutil.rmtree(directory, ignore_errors=True)
            cache = self._cache_path(section_id)
            if cache is not None:
                shutil.rmtree(cache, ignore_errors=True)
            raise

        logger.info("section_repo: created %s in %s", section_id, self.write_root)
        return metadata

    def update(self, section_id: str, req: UpdateSectionRequest) -> SectionMetadata:
        """
        Merge metadata and replace only the files that were provided.

        Raises:
            InvalidRequest: bad id, blank title or template, bad preview data
            SectionNotFound: no root has the section
        """
        validate_section_id(section_id)
        directory = self._find_dir(section_id)
        if directory is None:
            raise SectionNotFound(section_id, [root / section_id / TEMPLATE_FILE for root in self._roots])
        if req.title is not None and not req.title.strip():
            raise InvalidRequest("Title cannot be blank")
        if req.content is not None and not req.content.strip():
            raise InvalidRequest("Section template content cannot be blank")
        preview_bytes = _decode_preview(req.preview) if req.preview is not None else None

        current = self._load_metadata(directory)
        changes = req.model_dump(include={"title", "description", "categories", "price"}, exclude_none=True)
        if "title" in changes:
            changes["title"] = changes["title"].strip()
        metadata = current.model_copy(update={**changes, "updated_at": datetime.now(UTC)})
        if metadata.created_at is None:
            metadata = metadata.model_copy(update={"created_at": metadata.updated_at})

        metadata_text = _dump_metadata(metadata)
        write_atomically(directory / METADATA_FILE, metadata_text)
        if req.content is not None:
            write_atomically(directory / TEMPLATE_FILE, req.content)
        if req.style is not None:
            write_atomically(directory / STYLE_FILE, req.style)
        if req.script is not None:
            write_atomically(directory / SCRIPT_FILE, req.script)
        if req.schema_fragment is not None:
            write_atomically(directory / SCHEMA_FILE, _dump_schema_fragment(req.schema_fragment))
        if req.preview is not None and preview_bytes is not None:
            self._write_preview(section_id, directory, req.preview.extension, preview_bytes)

        # Mirror metadata into the cache only when a cache copy already exists.
        cache = self._cache_path(section_id)
        if cache is not None and cache.is_dir():
            write_atomically(cache / METADATA_FILE, metadata_text)

        logger.info("section_repo: updated %s", section_id)
        return metadata

    def save_preview(self, section_id: str, image: PreviewImage) -> Path:
        """
        Replace the section's preview image and resync the cache copy.

        Raises:
            InvalidRequest: bad id or preview data
            SectionNotFound: no root has the section
        """
        validate_section_id(section_id)
        directory = self._find_dir(section_id)
        if directory is None:
            raise SectionNotFound(section_id, [root / section_id / TEMPLATE_FILE for root in self._roots])
        path = self._write_preview(section_id, directory, image.extension, _decode_preview(image))
        logger.info("section_repo: saved preview for %s as %s", section_id, path.name)
        return path

    def _write_preview(self, section_id: str, directory: Path, extension: str, data: bytes) -> Path:
        filename = f"{PREVIEW_STEM}.{extension}"
        _remove_previews(directory)
        write_atomically(directory / filename, data)

        cache = self._cache_path(section_id)
        if cache is not None:
            if cache.is_dir():
                _remove_previews(cache)
            write_atomically(cache / filename, data)
        return directory / filename

    def delete(self, section_id: str) -> bool:
        """
        Remove every copy of the section across roots plus its cached preview.

        Returns True if anything was removed. A missing section is not an error.
        """
        validate_section_id(section_id)
        targets = [root / section_id for root in self._roots]
        cache = self._cache_path(section_id)
        if cache is not None:
            targets.append(cache)

        removed = False
        for target in targets:
            if target.is_dir():
                shutil.rmtree(target)
                removed = True
        if removed:
            logger.info("section_repo: deleted %s", section_id)
        else:
            logger.info("section_repo: delete of %s was a no-op, nothing on disk", section_id)
        return removed
