"""
Section Kernel -- Theme API protocol

The remote theme/asset API is consumed, never reimplemented. Implement
ThemeApi over the store's HTTP API for production (backend.services), or use
MemoryThemeApi for tests and local development.

Every method takes the shop explicitly; credentials are the implementation's
concern. Any remote failure is raised as ThemeApiError.
"""

from __future__ import annotations

from engine.kernel.errors import ThemeApiError
from engine.kernel.types import Theme


class ThemeApi:
    """Abstract remote theme/asset API."""

    async def list_themes(self, shop: str) -> list[Theme]:
        """All themes of the shop."""
        raise NotImplementedError

    async def get_theme(self, shop: str, theme_id: int) -> Theme | None:
        """One theme, or None if the store says it does not exist."""
        raise NotImplementedError

    async def get_asset(self, shop: str, theme_id: int, key: str) -> str | None:
        """Asset text content, or None if the asset does not exist."""
        raise NotImplementedError

    async def put_asset(self, shop: str, theme_id: int, key: str, value: str) -> None:
        """Create or replace an asset."""
        raise NotImplementedError


class MemoryThemeApi(ThemeApi):
    """
    In-memory theme API for testing.

    fail_puts / fail_gets hold asset keys whose writes / reads raise
    ThemeApiError, to exercise partial-failure paths. `writes` records every
    successful put in order.
    """

    def __init__(self, themes: dict[str, list[Theme]] | None = None) -> None:
        self.themes: dict[str, list[Theme]] = themes or {}
        self.assets: dict[tuple[str, int], dict[str, str]] = {}
        self.fail_puts: set[str] = set()
        self.fail_gets: set[str] = set()
        self.fail_list_themes = False
        self.writes: list[tuple[str, int, str]] = []

    def seed_asset(self, shop: str, theme_id: int, key: str, value: str) -> None:
        self.assets.setdefault((shop, theme_id), {})[key] = value

    def asset(self, shop: str, theme_id: int, key: str) -> str | None:
        return self.assets.get((shop, theme_id), {}).get(key)

    async def list_themes(self, shop: str) -> list[Theme]:
        if self.fail_list_themes:
            raise ThemeApiError("themes unavailable", status_code=503)
        return list(self.themes.get(shop, []))

    async def get_theme(self, shop: str, theme_id: int) -> Theme | None:
        if self.fail_list_themes:
            raise ThemeApiError("themes unavailable", status_code=503)
        for theme in self.themes.get(shop, []):
            if theme.id == theme_id:
                return theme
        return None

    async def get_asset(self, shop: str, theme_id: int, key: str) -> str | None:
        if key in self.fail_gets:
            raise ThemeApiError(f"read of {key} failed", status_code=500)
        return self.asset(shop, theme_id, key)

    async def put_asset(self, shop: str, theme_id: int, key: str, value: str) -> None:
        if key in self.fail_puts:
            raise ThemeApiError(f"write of {key} failed", status_code=422)
        self.seed_asset(shop, theme_id, key, value)
        self.writes.append((shop, theme_id, key))
