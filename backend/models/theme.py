"""Theme listing and install request/response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from engine.kernel.types import AssetOutcome, InstallationResult, Theme


class ThemeResponse(BaseModel):
    """A theme as shown in the install picker."""

    id: int
    name: str
    role: str

    @classmethod
    def from_theme(cls, theme: Theme) -> ThemeResponse:
        return cls(id=theme.id, name=theme.name, role=theme.role)


class InstallSectionRequest(BaseModel):
    """Install a library section into a theme. No theme_id means the main theme."""

    model_config = ConfigDict(extra="forbid")

    section_id: str = Field(min_length=1, max_length=100)
    theme_id: int | None = Field(default=None, gt=0)


class AssetOutcomeResponse(BaseModel):
    asset: str
    key: str
    status: str
    reason: str | None = None

    @classmethod
    def from_outcome(cls, outcome: AssetOutcome) -> AssetOutcomeResponse:
        return cls(asset=outcome.asset, key=outcome.key, status=outcome.status, reason=outcome.reason)


class InstallationResultResponse(BaseModel):
    """
    Overall success plus a per-asset breakdown.

    success reflects the template write only; companions that failed or were
    skipped show up in assets.
    """

    success: bool
    message: str
    section_id: str
    theme_id: int
    theme_name: str
    shop: str
    assets: list[AssetOutcomeResponse]
    timestamp: str

    @classmethod
    def from_result(cls, result: InstallationResult) -> InstallationResultResponse:
        failed = [o.asset for o in result.failed_assets]
        message = f"Section '{result.section_id}' installed into {result.theme_name}"
        if failed:
            message += f" ({', '.join(failed)} failed)"
        return cls(
            success=result.success,
            message=message,
            section_id=result.section_id,
            theme_id=result.theme_id,
            theme_name=result.theme_name,
            shop=result.shop,
            assets=[AssetOutcomeResponse.from_outcome(o) for o in result.assets],
            timestamp=result.timestamp,
        )
