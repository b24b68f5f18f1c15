"""Theme listing for the install picker."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.auth import get_shop
from backend.deps import get_installer
from backend.http_errors import to_http_exception
from backend.models.theme import ThemeResponse
from engine.kernel.errors import ThemeApiError
from engine.kernel.installer import SectionInstaller

router = APIRouter(prefix="/api/themes", tags=["themes"])


@router.get("", status_code=200)
async def list_themes(
    shop: str = Depends(get_shop),
    installer: SectionInstaller = Depends(get_installer),
) -> list[ThemeResponse]:
    """All themes of the calling shop."""
    try:
        themes = await installer.resolver.list_themes(shop)
    except ThemeApiError as e:
        raise to_http_exception(e) from e
    return [ThemeResponse.from_theme(t) for t in themes]
