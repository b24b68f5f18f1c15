"""
FastAPI dependency providers.

Each provider builds its object once from settings. Tests swap any of them
through app.dependency_overrides.
"""

from __future__ import annotations

from functools import lru_cache

from backend import config
from backend.repos.credential_repo import CredentialStore, MemoryCredentialStore
from backend.repos.section_repo import SectionRepo
from backend.services.shopify_client import ShopifyAdminClient
from engine.kernel.asset_reader import AssetReader
from engine.kernel.installer import SectionInstaller
from engine.kernel.preview import PreviewResolver
from engine.kernel.theme_api import ThemeApi


@lru_cache(maxsize=1)
def get_section_repo() -> SectionRepo:
    return SectionRepo(config.settings.LIBRARY_ROOTS, config.settings.PREVIEW_CACHE_DIR)


@lru_cache(maxsize=1)
def get_asset_reader() -> AssetReader:
    return AssetReader(config.settings.LIBRARY_ROOTS)


@lru_cache(maxsize=1)
def get_preview_resolver() -> PreviewResolver:
    return PreviewResolver(get_asset_reader(), config.settings.PREVIEW_CACHE_DIR)


@lru_cache(maxsize=1)
def get_credential_store() -> CredentialStore:
    return MemoryCredentialStore(config.settings.SHOP_ACCESS_TOKENS)


@lru_cache(maxsize=1)
def get_theme_api() -> ThemeApi:
    return ShopifyAdminClient(
        get_credential_store(),
        api_version=config.settings.SHOPIFY_API_VERSION,
        timeout=config.settings.SHOPIFY_TIMEOUT_SECONDS,
    )


@lru_cache(maxsize=1)
def get_installer() -> SectionInstaller:
    """One installer per process so its per-theme locks are shared across requests."""
    return SectionInstaller(get_asset_reader(), get_theme_api())
