"""
Section Kernel -- Errors

Fatal conditions raise one of these. Non-fatal per-asset problems are never
raised; the installer records them as AssetOutcome values instead.
"""

from __future__ import annotations

from pathlib import Path


class SectionEngineError(Exception):
    """Base class for everything the kernel raises."""


class InvalidRequest(SectionEngineError):
    """Required input is missing or malformed."""


class DuplicateSection(InvalidRequest):
    """A section with this id already exists in the library."""

    def __init__(self, section_id: str):
        self.section_id = section_id
        super().__init__(f"Section '{section_id}' already exists")


class SectionNotFound(SectionEngineError):
    """No library root contains the section's template."""

    def __init__(self, section_id: str, attempted_paths: list[Path] | None = None):
        self.section_id = section_id
        self.attempted_paths = list(attempted_paths or [])
        message = f"Section '{section_id}' not found"
        if self.attempted_paths:
            message += " (tried: " + ", ".join(str(p) for p in self.attempted_paths) + ")"
        super().__init__(message)


class NoActiveTheme(SectionEngineError):
    """Theme discovery found no theme with the main role."""

    def __init__(self, shop: str):
        self.shop = shop
        super().__init__(f"No active theme found for {shop}")


class ThemeApiError(SectionEngineError):
    """A call to the remote theme/asset API failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class DeployFailed(SectionEngineError):
    """The required template asset could not be written."""

    def __init__(self, section_id: str, theme_id: int, reason: str):
        self.section_id = section_id
        self.theme_id = theme_id
        self.reason = reason
        super().__init__(f"Failed to install section '{section_id}' into theme {theme_id}: {reason}")


class SchemaMergeError(SectionEngineError):
    """A settings schema or schema fragment could not be parsed."""
