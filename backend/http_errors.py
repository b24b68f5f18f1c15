"""Translate kernel errors into HTTPException for the routes."""

from __future__ import annotations

from fastapi import HTTPException, status

from engine.kernel.errors import (
    DeployFailed,
    DuplicateSection,
    InvalidRequest,
    NoActiveTheme,
    SectionEngineError,
    SectionNotFound,
    ThemeApiError,
)


def to_http_exception(e: SectionEngineError) -> HTTPException:
    if isinstance(e, DuplicateSection):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if isinstance(e, InvalidRequest):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, SectionNotFound):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "message": f"Section '{e.section_id}' not found",
                "attempted_paths": [str(p) for p in e.attempted_paths],
            },
        )
    if isinstance(e, NoActiveTheme):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, (DeployFailed, ThemeApiError)):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
