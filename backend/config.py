"""
Section library configuration. All environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import json
import os
from pathlib import Path


def _default_library_roots() -> list[Path]:
    """
    Candidate roots in search order. The host process may be started from
    the repo root or from a web/ subdirectory, so all three are tried.
    """
    cwd = Path.cwd()
    return [cwd.parent / "sections", cwd / "sections", cwd / "public" / "sections"]


def _library_roots_from_env() -> list[Path]:
    raw = os.environ.get("LIBRARY_ROOTS", "")
    roots = [Path(p) for p in raw.split(os.pathsep) if p.strip()]
    return roots or _default_library_roots()


def _shop_tokens_from_env() -> dict[str, str]:
    raw = os.environ.get("SHOP_ACCESS_TOKENS", "")
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RuntimeError("SHOP_ACCESS_TOKENS must be a JSON object of shop -> token") from e
    if not isinstance(data, dict):
        raise RuntimeError("SHOP_ACCESS_TOKENS must be a JSON object of shop -> token")
    return {str(shop): str(token) for shop, token in data.items() if token}


class Settings:
    """Application settings from environment variables."""

    # Library
    LIBRARY_ROOTS: list[Path] = _library_roots_from_env()
    PREVIEW_CACHE_DIR: Path = Path(
        os.environ.get("PREVIEW_CACHE_DIR", str(Path.cwd() / "public" / "section-previews"))
    )

    # Shopify Admin API
    SHOPIFY_API_VERSION: str = os.environ.get("SHOPIFY_API_VERSION", "2024-01")
    SHOPIFY_TIMEOUT_SECONDS: float = float(os.environ.get("SHOPIFY_TIMEOUT_SECONDS", "15"))
    SHOP_ACCESS_TOKENS: dict[str, str] = _shop_tokens_from_env()

    # Admin auth
    ADMIN_PASSWORD: str = os.environ.get("ADMIN_PASSWORD", "")
    JWT_SECRET: str = os.environ.get("JWT_SECRET", "")
    JWT_ALGORITHM: str = os.environ.get("JWT_ALGORITHM", "HS256")
    JWT_EXPIRY_HOURS: int = int(os.environ.get("JWT_EXPIRY_HOURS", "24"))

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    @property
    def LIBRARY_WRITE_ROOT(self) -> Path:
        """Uploads land in the first candidate root."""
        return self.LIBRARY_ROOTS[0]


# Singleton instance
settings = Settings()

# Validate required settings (skip in test mode)
_testing = os.environ.get("TESTING", "").lower() == "true"

if not _testing:
    if not settings.JWT_SECRET:
        raise RuntimeError("JWT_SECRET environment variable is required")
    if not settings.ADMIN_PASSWORD:
        raise RuntimeError("ADMIN_PASSWORD environment variable is required")
