"""Pydantic models for moderation decisions and the approval ledger."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from appcatalog.models.enums import ApprovalStatus


class ApprovalDecisionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    notes: str | None = Field(None, max_length=2000)


class ApprovalRecordResponse(BaseModel):
    id: int
    app_id: str
    version_id: int | None
    status: ApprovalStatus
    reviewed_by: str
    reviewer_name: str | None = None
    review_notes: str | None
    decided_at: datetime

    model_config = {"from_attributes": True}


class PendingAppResponse(BaseModel):
    app_id: str
    name: str
    developer: str
    category: str
    date_added: datetime
    submitted_by: str | None

    model_config = {"from_attributes": True}


class PendingVersionResponse(BaseModel):
    id: int
    app_id: str
    app_name: str
    version: str
    release_date: date
    submitted_by: str | None
