"""
Section Kernel -- Shared Types

Data classes passed between the asset reader, theme resolver, schema merger,
installer, and preview resolver. These are the contracts that bind the
kernel together. No IO here.

On-disk layout of one section:
    <library_root>/<section_id>/
        section.liquid      required template
        style.css           optional, deployed as assets/<id>.css
        script.js           optional, deployed as assets/<id>.js
        schema.json         optional settings-schema fragment
        preview.<ext>       optional preview image
        metadata.json       title, description, categories, price, timestamps
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from engine.kernel.errors import InvalidRequest, SectionEngineError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SECTION_ID_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]{0,99}$")

TEMPLATE_FILE = "section.liquid"
STYLE_FILE = "style.css"
SCRIPT_FILE = "script.js"
SCHEMA_FILE = "schema.json"
METADATA_FILE = "metadata.json"
PREVIEW_STEM = "preview"

# Insertion order is the preview search order.
PREVIEW_CONTENT_TYPES: dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "svg": "image/svg+xml",
    "gif": "image/gif",
}

SETTINGS_SCHEMA_KEY = "config/settings_schema.json"
MAIN_THEME_ROLE = "main"
UNKNOWN_THEME_NAME = "Unknown Theme"

AssetName = Literal["template", "style", "script", "schema"]
AssetStatus = Literal["installed", "skipped", "failed"]
PreviewSource = Literal["section", "cache", "placeholder"]


def now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def validate_section_id(section_id: str | None) -> str:
    """
    Return the section id if it is a valid library slug.

    Raises:
        InvalidRequest: if the id is missing or not a slug. Slugs never
            contain path separators, so a valid id is always safe to join
            onto a library root.
    """
    if not section_id:
        raise InvalidRequest("Section ID is required")
    if not SECTION_ID_PATTERN.match(section_id):
        raise InvalidRequest(f"Invalid section ID: {section_id!r}")
    return section_id


def normalize_section_id(raw: str) -> str:
    """Lower-case an uploaded id and replace anything outside [a-z0-9-] with '-'."""
    return re.sub(r"[^a-z0-9-]", "-", raw.strip().lower())


def template_key(section_id: str) -> str:
    return f"sections/{section_id}.liquid"


def style_key(section_id: str) -> str:
    return f"assets/{section_id}.css"


def script_key(section_id: str) -> str:
    return f"assets/{section_id}.js"


# ---------------------------------------------------------------------------
# Remote entities
# ---------------------------------------------------------------------------


@dataclass
class Theme:
    """A theme on the remote store. Read-only from this system's point of view."""

    id: int
    name: str
    role: str

    @property
    def is_main(self) -> bool:
        return self.role == MAIN_THEME_ROLE

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "role": self.role}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Theme:
        return cls(
            id=int(d["id"]),
            name=d.get("name") or "",
            role=d.get("role") or "",
        )


@dataclass
class AssetEntry:
    """A single (key, value) pair written to a theme."""

    key: str
    value: str


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------


@dataclass
class ResolvedSection:
    """
    A section's files as found in one library root.

    Optional companions are read from the same directory as the template;
    a missing companion is None.
    """

    section_id: str
    directory: Path
    template: str
    style: str | None = None
    script: str | None = None
    schema_text: str | None = None
    preview_path: Path | None = None

    @property
    def template_entry(self) -> AssetEntry:
        return AssetEntry(key=template_key(self.section_id), value=self.template)


@dataclass
class PreviewRef:
    """Where a section's preview image comes from."""

    section_id: str
    source: PreviewSource
    content_type: str
    path: Path | None = None
    data: bytes | None = None

    @property
    def generated(self) -> bool:
        return self.source == "placeholder"

    def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise SectionEngineError(f"preview for {self.section_id} has neither data nor a path")
        return self.path.read_bytes()


# ---------------------------------------------------------------------------
# Installation
# ---------------------------------------------------------------------------


@dataclass
class InstallationRequest:
    """
    What the caller asks for. Absence of theme_id triggers main-theme
    auto-selection.
    """

    shop: str
    section_id: str
    theme_id: int | None = None


@dataclass
class AssetOutcome:
    """Tagged outcome of one deployment step."""

    asset: AssetName
    key: str
    status: AssetStatus
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"asset": self.asset, "key": self.key, "status": self.status}
        if self.reason is not None:
            d["reason"] = self.reason
        return d


@dataclass
class InstallationResult:
    """
    Aggregated result of one install.

    success is true iff the required template asset was installed. Optional
    companions that failed or were skipped are visible in `assets` but never
    flip success.
    """

    section_id: str
    theme_id: int
    shop: str
    theme_name: str = UNKNOWN_THEME_NAME
    assets: list[AssetOutcome] = field(default_factory=list)
    timestamp: str = field(default_factory=now_iso)

    def outcome(self, asset: AssetName) -> AssetOutcome | None:
        for o in self.assets:
            if o.asset == asset:
                return o
        return None

    @property
    def success(self) -> bool:
        template = self.outcome("template")
        return template is not None and template.status == "installed"

    @property
    def failed_assets(self) -> list[AssetOutcome]:
        return [o for o in self.assets if o.status == "failed"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "section_id": self.section_id,
            "theme_id": self.theme_id,
            "theme_name": self.theme_name,
            "shop": self.shop,
            "success": self.success,
            "assets": [o.to_dict() for o in self.assets],
            "timestamp": self.timestamp,
        }
