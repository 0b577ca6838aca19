"""Pydantic models for apps, versions, platform offerings and submissions."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from appcatalog.models.enums import ApprovalStatus, PlatformName

APP_ID_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"


# ── Request models ─────────────────────────────────────────────────────────────

class AppCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    app_id: str = Field(..., pattern=APP_ID_PATTERN, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    developer: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=50)
    release_date: date = Field(default_factory=date.today)
    is_featured: bool = False
    source_repository: str | None = Field(None, max_length=255)


class AppUpdate(BaseModel):
    """Partial update: only fields that are supplied and not null are applied."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=100)
    developer: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1)
    category: str | None = Field(None, min_length=1, max_length=50)
    release_date: date | None = None
    is_featured: bool | None = None
    source_repository: str | None = Field(None, max_length=255)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class VersionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str = Field(..., min_length=1, max_length=50)
    release_notes: str | None = None
    release_date: date = Field(default_factory=date.today)
    min_os_version: str | None = Field(None, max_length=50)
    size_bytes: int | None = Field(None, ge=0)


class PlatformSupportCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    platform_id: int
    download_url: str = Field(..., min_length=1, max_length=255)
    price: float = Field(0.0, ge=0)


class PlatformAsset(BaseModel):
    """One downloadable offering inside a submission."""

    model_config = ConfigDict(extra="forbid")

    platform: PlatformName
    download_url: str = Field(..., min_length=1, max_length=255)
    price: float = Field(0.0, ge=0)
    file_name: str | None = None
    size_bytes: int | None = Field(None, ge=0)


class Submission(BaseModel):
    """Normalized payload persisted atomically as app + version + offerings.

    Produced directly from a developer request or synthesized from an
    external release. ``app_id`` may be omitted for a brand new app, in
    which case one is generated from the name.
    """

    model_config = ConfigDict(extra="forbid")

    app_id: str | None = Field(None, pattern=APP_ID_PATTERN, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    developer: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=50)
    version: str = Field(..., min_length=1, max_length=50)
    release_notes: str | None = None
    release_date: date = Field(default_factory=date.today)
    min_os_version: str | None = Field(None, max_length=50)
    size_bytes: int | None = Field(None, ge=0)
    source_repository: str | None = Field(None, max_length=255)
    assets: list[PlatformAsset] = Field(default_factory=list)


# ── Response models ────────────────────────────────────────────────────────────

class AppResponse(BaseModel):
    app_id: str
    name: str
    developer: str
    description: str
    category: str
    release_date: date
    is_featured: bool
    approval_status: ApprovalStatus
    submitted_by: str | None
    source_repository: str | None
    date_added: datetime
    last_updated: datetime

    model_config = {"from_attributes": True}


class VersionResponse(BaseModel):
    id: int
    app_id: str
    version: str
    release_notes: str | None
    release_date: date
    min_os_version: str | None
    size_bytes: int | None
    approval_status: ApprovalStatus
    submitted_by: str | None

    model_config = {"from_attributes": True}


class PlatformResponse(BaseModel):
    id: int
    name: str
    display_name: str

    model_config = {"from_attributes": True}


class PlatformSupportResponse(BaseModel):
    id: int
    app_id: str
    platform_id: int
    version_id: int
    download_url: str
    price: float

    model_config = {"from_attributes": True}


class SubmissionResponse(BaseModel):
    app: AppResponse
    version: VersionResponse
    platform_support: list[PlatformSupportResponse]
    app_created: bool
