"""
Section Kernel -- the deployment core.

Components:
  asset_reader    -- resolves a section's files from ordered library roots
  schema_merge    -- append-if-absent merge into the theme settings schema (pure)
  theme_resolver  -- lists themes, picks explicit or main theme
  installer       -- deploys template + optional companions, tagged outcomes
  preview         -- on-disk preview, cached copy, or deterministic placeholder

The remote theme/asset API is the ThemeApi protocol in theme_api.
"""

from engine.kernel.asset_reader import AssetReader
from engine.kernel.errors import (
    DeployFailed,
    DuplicateSection,
    InvalidRequest,
    NoActiveTheme,
    SchemaMergeError,
    SectionEngineError,
    SectionNotFound,
    ThemeApiError,
)
from engine.kernel.installer import SectionInstaller
from engine.kernel.preview import PreviewResolver, render_placeholder_svg
from engine.kernel.schema_merge import merge_fragment
from engine.kernel.theme_api import MemoryThemeApi, ThemeApi
from engine.kernel.theme_resolver import ThemeResolver
from engine.kernel.types import InstallationRequest, InstallationResult, Theme

__all__ = [
    "AssetReader",
    "SectionInstaller",
    "PreviewResolver",
    "ThemeResolver",
    "ThemeApi",
    "MemoryThemeApi",
    "merge_fragment",
    "render_placeholder_svg",
    "InstallationRequest",
    "InstallationResult",
    "Theme",
    "SectionEngineError",
    "InvalidRequest",
    "DuplicateSection",
    "SectionNotFound",
    "NoActiveTheme",
    "ThemeApiError",
    "DeployFailed",
    "SchemaMergeError",
]
