"""Section library routes: browse, preview, install, and admin management."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from backend.auth import get_shop, require_admin
from backend.deps import get_installer, get_preview_resolver, get_section_repo
from backend.http_errors import to_http_exception
from backend.models.section import (
    CreateSectionRequest,
    DeleteSectionResponse,
    PreviewImage,
    SectionDetail,
    SectionMetadata,
    SectionSummary,
    UpdateSectionRequest,
    UpdateSectionResponse,
    UploadSectionResponse,
)
from backend.models.theme import InstallationResultResponse, InstallSectionRequest
from backend.repos.section_repo import SectionRepo
from engine.kernel.errors import SectionEngineError
from engine.kernel.installer import SectionInstaller
from engine.kernel.preview import PreviewResolver
from engine.kernel.types import InstallationRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sections", tags=["sections"])


def preview_url(section_id: str) -> str:
    return f"/api/sections/{section_id}/preview"


def _summary(metadata: SectionMetadata, previews: PreviewResolver) -> SectionSummary:
    return SectionSummary(
        id=metadata.id,
        title=metadata.title,
        description=metadata.description,
        categories=metadata.categories,
        price=metadata.price,
        preview_url=preview_url(metadata.id),
        preview_source=previews.resolve(metadata.id).source,
    )


# ── browse ──────────────────────────────────────────────────────────────────


@router.get("", status_code=200)
async def list_sections(
    repo: SectionRepo = Depends(get_section_repo),
    previews: PreviewResolver = Depends(get_preview_resolver),
) -> list[SectionSummary]:
    """Every section in the library, sorted by id."""
    return [_summary(m, previews) for m in repo.list()]


@router.post("/install", status_code=200)
async def install_section(
    req: InstallSectionRequest,
    shop: str = Depends(get_shop),
    installer: SectionInstaller = Depends(get_installer),
) -> InstallationResultResponse:
    """
    Install a library section into one of the shop's themes.

    Without theme_id the shop's main theme is used. The response is 200
    whenever the template was written, even if optional assets failed; the
    per-asset breakdown says which ones.
    """
    request = InstallationRequest(shop=shop, section_id=req.section_id, theme_id=req.theme_id)
    try:
        result = await installer.install(request)
    except SectionEngineError as e:
        raise to_http_exception(e) from e
    return InstallationResultResponse.from_result(result)


@router.get("/{section_id}", status_code=200)
async def get_section(
    section_id: str,
    repo: SectionRepo = Depends(get_section_repo),
    previews: PreviewResolver = Depends(get_preview_resolver),
) -> SectionDetail:
    """Single section with its template text."""
    try:
        section = repo.get(section_id)
    except SectionEngineError as e:
        raise to_http_exception(e) from e
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found.")

    summary = _summary(section.metadata, previews)
    return SectionDetail(
        **summary.model_dump(),
        content=section.content,
        has_css=section.style is not None,
        has_js=section.script is not None,
        has_schema=section.schema_text is not None,
        created_at=section.metadata.created_at,
        updated_at=section.metadata.updated_at,
    )


@router.get("/{section_id}/preview", status_code=200)
async def get_preview(
    section_id: str,
    previews: PreviewResolver = Depends(get_preview_resolver),
) -> Response:
    """Preview image bytes, or a generated SVG placeholder."""
    try:
        data, content_type = previews.load(section_id)
    except SectionEngineError as e:
        raise to_http_exception(e) from e
    return Response(content=data, media_type=content_type, headers={"Cache-Control": "public, max-age=300"})


# ── admin ───────────────────────────────────────────────────────────────────


@router.post("", status_code=201)
async def upload_section(
    req: CreateSectionRequest,
    repo: SectionRepo = Depends(get_section_repo),
    _admin: str = Depends(require_admin),
) -> UploadSectionResponse:
    """Add a new section to the library. Existing ids are never overwritten."""
    try:
        metadata = repo.create(req)
    except SectionEngineError as e:
        raise to_http_exception(e) from e
    return UploadSectionResponse(
        section_id=metadata.id,
        message=f"Section {metadata.title} uploaded successfully",
    )


@router.put("/{section_id}", status_code=200)
async def update_section(
    section_id: str,
    req: UpdateSectionRequest,
    repo: SectionRepo = Depends(get_section_repo),
    _admin: str = Depends(require_admin),
) -> UpdateSectionResponse:
    """Merge metadata and replace the files that were sent."""
    try:
        metadata = repo.update(section_id, req)
    except SectionEngineError as e:
        raise to_http_exception(e) from e
    return UpdateSectionResponse(
        section_id=section_id,
        message=f"Section {metadata.title} updated successfully",
    )


@router.put("/{section_id}/preview", status_code=200)
async def save_preview(
    section_id: str,
    image: PreviewImage,
    repo: SectionRepo = Depends(get_section_repo),
    _admin: str = Depends(require_admin),
) -> UpdateSectionResponse:
    """Replace the preview image and resync the public cache copy."""
    try:
        path = repo.save_preview(section_id, image)
    except SectionEngineError as e:
        raise to_http_exception(e) from e
    return UpdateSectionResponse(section_id=section_id, message=f"Preview saved as {path.name}")


@router.delete("/{section_id}", status_code=200)
async def delete_section(
    section_id: str,
    repo: SectionRepo = Depends(get_section_repo),
    _admin: str = Depends(require_admin),
) -> DeleteSectionResponse:
    """Remove a section. Deleting a missing section succeeds with deleted=false."""
    try:
        deleted = repo.delete(section_id)
    except SectionEngineError as e:
        raise to_http_exception(e) from e
    return DeleteSectionResponse(section_id=section_id, deleted=deleted)
