"""Moderation routes: approve/reject apps and versions, ledger reads, queues."""

from fastapi import APIRouter, Query

from appcatalog.api.outcomes import unwrap
from appcatalog.dependencies import Moderator, StateMachine
from appcatalog.errors.exceptions import NotFoundError
from appcatalog.models.approval import (
    ApprovalDecisionRequest,
    ApprovalRecordResponse,
    PendingAppResponse,
    PendingVersionResponse,
)
from appcatalog.models.enums import ApprovalStatus

router = APIRouter(tags=["Approvals"])


async def _decide(
    machine,
    app_id: str,
    version_id: int | None,
    status: ApprovalStatus,
    reviewer_id: str,
    body: ApprovalDecisionRequest | None,
) -> dict:
    notes = body.notes if body else None
    if not await machine.decide(app_id, version_id, status, reviewer_id, notes):
        if version_id is None:
            raise NotFoundError("App", app_id)
        raise NotFoundError("Version", f"{app_id}#{version_id}")
    return {
        "app_id": app_id,
        "version_id": version_id,
        "approval_status": status,
        "reviewed_by": reviewer_id,
    }


@router.post("/apps/{app_id}/approve")
async def approve_app(
    app_id: str, actor: Moderator, machine: StateMachine, body: ApprovalDecisionRequest | None = None,
) -> dict:
    return await _decide(machine, app_id, None, ApprovalStatus.APPROVED, actor.actor_id, body)


@router.post("/apps/{app_id}/reject")
async def reject_app(
    app_id: str, actor: Moderator, machine: StateMachine, body: ApprovalDecisionRequest | None = None,
) -> dict:
    return await _decide(machine, app_id, None, ApprovalStatus.REJECTED, actor.actor_id, body)


@router.post("/apps/{app_id}/versions/{version_id}/approve")
async def approve_version(
    app_id: str,
    version_id: int,
    actor: Moderator,
    machine: StateMachine,
    body: ApprovalDecisionRequest | None = None,
) -> dict:
    return await _decide(machine, app_id, version_id, ApprovalStatus.APPROVED, actor.actor_id, body)


@router.post("/apps/{app_id}/versions/{version_id}/reject")
async def reject_version(
    app_id: str,
    version_id: int,
    actor: Moderator,
    machine: StateMachine,
    body: ApprovalDecisionRequest | None = None,
) -> dict:
    return await _decide(machine, app_id, version_id, ApprovalStatus.REJECTED, actor.actor_id, body)


@router.get("/apps/{app_id}/approval-history")
async def app_approval_history(app_id: str, actor: Moderator, machine: StateMachine) -> list[ApprovalRecordResponse]:
    return unwrap(await machine.history(app_id))


@router.get("/apps/{app_id}/versions/{version_id}/approval-history")
async def version_approval_history(
    app_id: str, version_id: int, actor: Moderator, machine: StateMachine,
) -> list[ApprovalRecordResponse]:
    return unwrap(await machine.history(app_id, version_id))


@router.get("/moderation/pending-apps")
async def pending_apps(
    actor: Moderator,
    machine: StateMachine,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
) -> list[PendingAppResponse]:
    return [PendingAppResponse.model_validate(row) for row in await machine.pending_apps(page, page_size)]


@router.get("/moderation/pending-versions")
async def pending_versions(
    actor: Moderator,
    machine: StateMachine,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
) -> list[PendingVersionResponse]:
    return await machine.pending_versions(page, page_size)
