"""
Pydantic models for the section library service.

All data shapes defined here. No imports from repos, services, or routes.
"""

from backend.models.auth import AdminLoginRequest, AdminLoginResponse, LogoutResponse
from backend.models.section import (
    CreateSectionRequest,
    DeleteSectionResponse,
    PreviewImage,
    SectionDefinition,
    SectionDetail,
    SectionMetadata,
    SectionSummary,
    UpdateSectionRequest,
    UpdateSectionResponse,
    UploadSectionResponse,
)
from backend.models.theme import (
    AssetOutcomeResponse,
    InstallationResultResponse,
    InstallSectionRequest,
    ThemeResponse,
)

__all__ = [
    # Auth models
    "AdminLoginRequest",
    "AdminLoginResponse",
    "LogoutResponse",
    # Section models
    "SectionMetadata",
    "SectionDefinition",
    "SectionSummary",
    "SectionDetail",
    "PreviewImage",
    "CreateSectionRequest",
    "UpdateSectionRequest",
    "UploadSectionResponse",
    "UpdateSectionResponse",
    "DeleteSectionResponse",
    # Theme models
    "ThemeResponse",
    "InstallSectionRequest",
    "AssetOutcomeResponse",
    "InstallationResultResponse",
]
