"""Shopify Admin REST client implementing the kernel's ThemeApi."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from backend.repos.credential_repo import CredentialStore
from engine.kernel.errors import ThemeApiError
from engine.kernel.theme_api import ThemeApi
from engine.kernel.types import Theme

logger = logging.getLogger(__name__)

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


class ShopifyAdminClient(ThemeApi):
    """
    Themes and assets over the Admin REST API.

    One short-lived httpx.AsyncClient per call. Transport errors and non-2xx
    responses become ThemeApiError; a 404 on a single-resource read means the
    resource does not exist and returns None. Access tokens are never logged.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        api_version: str = "2024-01",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._api_version = api_version
        self._timeout = timeout
        self._transport = transport

    def _base_url(self, shop: str) -> str:
        return f"https://{shop}/admin/api/{self._api_version}"

    def _headers(self, shop: str) -> dict[str, str]:
        token = self._credentials.get(shop)
        if not token:
            raise ThemeApiError(f"Store not authorized: {shop}", status_code=401)
        return {ACCESS_TOKEN_HEADER: token, "Accept": "application/json"}

    async def _request(
        self,
        method: str,
        shop: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        missing_ok: bool = False,
    ) -> dict[str, Any] | None:
        headers = self._headers(shop)
        logger.debug("shopify: %s %s for %s", method, path, shop)
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.request(
                    method,
                    f"{self._base_url(shop)}{path}",
                    headers=headers,
                    params=params,
                    json=json,
                )
            except httpx.HTTPError as e:
                raise ThemeApiError(f"{method} {path} failed: {e}") from e

        if response.status_code == 404 and missing_ok:
            return None
        if response.is_error:
            logger.warning("shopify: %s %s for %s returned %s", method, path, shop, response.status_code)
            raise ThemeApiError(
                f"{method} {path} returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise ThemeApiError(f"{method} {path} returned invalid JSON", status_code=response.status_code) from e

    async def list_themes(self, shop: str) -> list[Theme]:
        data = await self._request("GET", shop, "/themes.json")
        return [Theme.from_dict(t) for t in (data or {}).get("themes", [])]

    async def get_theme(self, shop: str, theme_id: int) -> Theme | None:
        data = await self._request("GET", shop, f"/themes/{theme_id}.json", missing_ok=True)
        if not data or "theme" not in data:
            return None
        return Theme.from_dict(data["theme"])

    async def get_asset(self, shop: str, theme_id: int, key: str) -> str | None:
        data = await self._request(
            "GET",
            shop,
            f"/themes/{theme_id}/assets.json",
            params={"asset[key]": key},
            missing_ok=True,
        )
        if not data:
            return None
        return (data.get("asset") or {}).get("value")

    async def put_asset(self, shop: str, theme_id: int, key: str, value: str) -> None:
        await self._request(
            "PUT",
            shop,
            f"/themes/{theme_id}/assets.json",
            json={"asset": {"key": key, "value": value}},
        )
