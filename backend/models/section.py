"""Section library models: on-disk metadata, upload/update requests, API responses."""

from __future__ import annotations

import base64
import binascii
import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from engine.kernel.types import PREVIEW_CONTENT_TYPES

_DATA_URL_PREFIX = re.compile(r"^data:[\w/+.-]+;base64,")


def normalize_categories(value: Any) -> Any:
    """
    Accept a list or a comma-separated string. Trim, drop empties, and
    de-duplicate while keeping first-seen order.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return value
    seen: list[str] = []
    for item in value:
        cat = str(item).strip()
        if cat and cat not in seen:
            seen.append(cat)
    return seen


class SectionMetadata(BaseModel):
    """Contents of <section>/metadata.json. Keys on disk are camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str = ""
    categories: list[str] = Field(default_factory=list)
    price: str = "Free"
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("categories", mode="before")
    @classmethod
    def clean_categories(cls, v: Any) -> Any:
        return normalize_categories(v)


class PreviewImage(BaseModel):
    """An uploaded preview image. data is base64, optionally as a data: URL."""

    model_config = ConfigDict(extra="forbid")

    filename: str = Field(min_length=1, max_length=255)
    data: str = Field(min_length=1)

    @property
    def extension(self) -> str:
        return self.filename.rsplit(".", 1)[-1].lower() if "." in self.filename else ""

    @field_validator("filename")
    @classmethod
    def check_extension(cls, v: str) -> str:
        ext = v.rsplit(".", 1)[-1].lower() if "." in v else ""
        if ext not in PREVIEW_CONTENT_TYPES:
            allowed = ", ".join(PREVIEW_CONTENT_TYPES)
            raise ValueError(f"preview must be one of: {allowed}")
        return v

    def decode(self) -> bytes:
        """Raw image bytes. Raises ValueError on bad base64."""
        payload = _DATA_URL_PREFIX.sub("", self.data.strip())
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("preview data is not valid base64") from e


class CreateSectionRequest(BaseModel):
    """What the admin sends to upload a new section."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1, max_length=100)
    title: str = Field(max_length=200)
    description: str = Field(default="", max_length=2000)
    categories: list[str] = Field(default_factory=list)
    price: str = Field(default="Free", max_length=50)
    content: str
    style: str | None = None
    script: str | None = None
    schema_fragment: dict[str, Any] | None = None
    preview: PreviewImage | None = None

    @field_validator("categories", mode="before")
    @classmethod
    def clean_categories(cls, v: Any) -> Any:
        return normalize_categories(v)


class UpdateSectionRequest(BaseModel):
    """
    What the admin sends to update a section. All fields optional.

    Metadata fields that are None keep their stored value. Companion files
    are replaced only when provided.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    categories: list[str] | None = None
    price: str | None = Field(default=None, max_length=50)
    content: str | None = None
    style: str | None = None
    script: str | None = None
    schema_fragment: dict[str, Any] | None = None
    preview: PreviewImage | None = None

    @field_validator("categories", mode="before")
    @classmethod
    def clean_categories(cls, v: Any) -> Any:
        return None if v is None else normalize_categories(v)


class SectionDefinition(BaseModel):
    """A section as stored in the library: metadata plus file contents."""

    metadata: SectionMetadata
    content: str
    style: str | None = None
    script: str | None = None
    schema_text: str | None = None
    preview_file: str | None = None

    @property
    def id(self) -> str:
        return self.metadata.id


class SectionSummary(BaseModel):
    """What the browse listing returns per section."""

    id: str
    title: str
    description: str
    categories: list[str]
    price: str
    preview_url: str
    preview_source: str


class SectionDetail(SectionSummary):
    """Single-section view, including the template text."""

    content: str
    has_css: bool
    has_js: bool
    has_schema: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UploadSectionResponse(BaseModel):
    section_id: str
    message: str


class UpdateSectionResponse(BaseModel):
    section_id: str
    message: str


class DeleteSectionResponse(BaseModel):
    section_id: str
    deleted: bool
