"""
Shop credential store.

Maps a shop domain to its Admin API access token. Routes and the Shopify
client look tokens up here instead of holding process-wide maps. OAuth is
out of scope; tokens are seeded from configuration or set by the host.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def normalize_shop(shop: str) -> str:
    return shop.strip().lower()


class CredentialStore:
    """Abstract get/set of access tokens by shop domain."""

    def get(self, shop: str) -> str | None:
        raise NotImplementedError

    def set(self, shop: str, token: str) -> None:
        raise NotImplementedError

    def remove(self, shop: str) -> None:
        raise NotImplementedError


class MemoryCredentialStore(CredentialStore):
    """In-process credential store."""

    def __init__(self, tokens: dict[str, str] | None = None) -> None:
        self._tokens: dict[str, str] = {}
        for shop, token in (tokens or {}).items():
            self.set(shop, token)

    def get(self, shop: str) -> str | None:
        return self._tokens.get(normalize_shop(shop))

    def set(self, shop: str, token: str) -> None:
        if not shop.strip() or not token:
            raise ValueError("shop and token are required")
        self._tokens[normalize_shop(shop)] = token
        logger.info("credential_repo: stored token for %s", normalize_shop(shop))

    def remove(self, shop: str) -> None:
        self._tokens.pop(normalize_shop(shop), None)

    def shops(self) -> list[str]:
        return sorted(self._tokens)
