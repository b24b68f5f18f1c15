"""Admin session models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AdminLoginRequest(BaseModel):
    """Request to open an admin session."""

    model_config = ConfigDict(extra="forbid")

    password: str = Field(..., min_length=1, max_length=200)


class AdminLoginResponse(BaseModel):
    """Session token, also set as the session cookie."""

    token: str
    expires_at: datetime


class LogoutResponse(BaseModel):
    """Response after logout."""

    message: str = "Logged out successfully"
