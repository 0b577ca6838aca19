"""Models for GitHub release ingestion.

Provider payloads are parsed with ``extra="ignore"`` since the GitHub
REST API returns far more than the importer reads.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ── Request models ─────────────────────────────────────────────────────────────

class ImportReleaseRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    repo_owner: str = Field(..., min_length=1, max_length=100)
    repo_name: str = Field(..., min_length=1, max_length=100)
    release_tag: str = Field(..., min_length=1, max_length=100)
    app_name: str = Field(..., min_length=1, max_length=100)
    app_description: str = Field(..., min_length=1)
    app_category: str = Field(..., min_length=1, max_length=50)


class UpdateFromReleaseRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    repo_owner: str = Field(..., min_length=1, max_length=100)
    repo_name: str = Field(..., min_length=1, max_length=100)
    release_tag: str = Field(..., min_length=1, max_length=100)


# ── Provider payloads ──────────────────────────────────────────────────────────

class GithubRepository(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    full_name: str
    owner_login: str
    description: str | None = None
    default_branch: str = "main"
    html_url: str = ""
    private: bool = False
    updated_at: datetime | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "GithubRepository":
        owner = payload.get("owner") or {}
        return cls.model_validate({**payload, "owner_login": owner.get("login", "")})


class GithubReleaseAsset(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    label: str | None = None
    content_type: str = "application/octet-stream"
    size: int = 0
    download_count: int = 0
    browser_download_url: str


class GithubRelease(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    tag_name: str
    name: str | None = None
    body: str | None = None
    draft: bool = False
    prerelease: bool = False
    created_at: datetime | None = None
    published_at: datetime | None = None
    html_url: str = ""
    assets: list[GithubReleaseAsset] = Field(default_factory=list)


# ── Preview ────────────────────────────────────────────────────────────────────

class ReleaseAssetInfo(BaseModel):
    file_name: str
    download_url: str
    size: int
    download_count: int


class ReleaseInfo(BaseModel):
    tag_name: str
    name: str | None
    description: str | None
    published_at: datetime | None
    platforms: dict[str, ReleaseAssetInfo]
    unmapped_assets: list[str] = Field(default_factory=list)
