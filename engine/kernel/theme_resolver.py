"""
Section Kernel -- Theme Resolver

Lists a shop's themes and picks the install target.

An explicit theme id is used as-is, without validating it against the theme
list; a bad id surfaces later when the template write fails. The only extra
call on that path is a best-effort lookup of the theme's display name.
Without an explicit id, the first theme whose role is "main" is selected.
"""

from __future__ import annotations

import logging

from engine.kernel.errors import NoActiveTheme, ThemeApiError
from engine.kernel.theme_api import ThemeApi
from engine.kernel.types import UNKNOWN_THEME_NAME, Theme

logger = logging.getLogger(__name__)


class ThemeResolver:
    def __init__(self, api: ThemeApi):
        self._api = api

    async def list_themes(self, shop: str) -> list[Theme]:
        return await self._api.list_themes(shop)

    async def resolve_target(self, shop: str, explicit_id: int | None = None) -> Theme:
        """
        Pick the theme to install into.

        Raises:
            NoActiveTheme: no explicit id and no theme has the main role
            ThemeApiError: no explicit id and the theme list could not be fetched
        """
        if explicit_id is not None:
            return await self._describe(shop, explicit_id)

        for theme in await self._api.list_themes(shop):
            if theme.is_main:
                logger.info("theme_resolver: active theme for %s is %s (%s)", shop, theme.id, theme.name)
                return theme
        raise NoActiveTheme(shop)

    async def _describe(self, shop: str, theme_id: int) -> Theme:
        try:
            theme = await self._api.get_theme(shop, theme_id)
        except ThemeApiError as e:
            logger.warning("theme_resolver: could not fetch name of theme %s for %s: %s", theme_id, shop, e)
            theme = None
        if theme is None:
            return Theme(id=theme_id, name=UNKNOWN_THEME_NAME, role="")
        return theme
