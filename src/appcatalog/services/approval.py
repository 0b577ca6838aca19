"""ApprovalStateMachine: moderation decisions on apps and versions.

Any status may move to any other status; there is no terminal state.
App and version statuses are independent of each other.
"""

from __future__ import annotations

import logging

from appcatalog.config import settings
from appcatalog.db.base import utcnow
from appcatalog.db.engine import Database
from appcatalog.db.models.catalog import AppRow
from appcatalog.models.approval import ApprovalRecordResponse, PendingVersionResponse
from appcatalog.models.enums import ApprovalStatus
from appcatalog.models.results import NotFound
from appcatalog.repositories.app_repo import AppRepository, AppVersionRepository
from appcatalog.repositories.approval_repo import ApprovalRecordRepository
from appcatalog.services.catalog_store import advance_timestamp

logger = logging.getLogger(__name__)


def _window(page: int, page_size: int | None) -> tuple[int, int]:
    size = min(max(page_size or settings.default_page_size, 1), settings.max_page_size)
    return (max(page, 1) - 1) * size, size


class ApprovalStateMachine:
    def __init__(self, db: Database):
        self.db = db

    async def decide(
        self,
        app_id: str,
        version_id: int | None,
        new_status: ApprovalStatus | str,
        reviewer_id: str,
        notes: str | None = None,
    ) -> bool:
        """Set the target's status and append one ledger entry, atomically.

        ``version_id=None`` targets the app itself. Returns False, writing
        nothing, when the app (or the version under that app) is missing.
        """
        status = ApprovalStatus(new_status)

        async with self.db.session() as session:
            app = await AppRepository(session).get(app_id)
            if app is None:
                return False

            if version_id is None:
                previous = app.approval_status
                app.approval_status = status
                app.last_updated = advance_timestamp(app.last_updated)
            else:
                version = await AppVersionRepository(session).get_for_app(app_id, version_id)
                if version is None:
                    return False
                previous = version.approval_status
                version.approval_status = status

            await ApprovalRecordRepository(session).append(
                app_id=app_id,
                version_id=version_id,
                status=status,
                reviewed_by=reviewer_id,
                review_notes=notes,
                decided_at=utcnow(),
            )
            await session.commit()

        logger.info(
            "Approval decision on %s%s: %s -> %s by %s",
            app_id,
            f"#{version_id}" if version_id is not None else "",
            previous,
            status,
            reviewer_id,
        )
        return True

    async def history(
        self,
        app_id: str,
        version_id: int | None = None,
    ) -> list[ApprovalRecordResponse] | NotFound:
        """Ledger entries for an app (or one of its versions), newest first.

        Entries outlive the app they describe, so a deleted app's history is
        still readable; ``NotFound`` only when there is neither a subject
        nor any recorded decision.
        """
        async with self.db.session() as session:
            entries = await ApprovalRecordRepository(session).history(app_id, version_id)
            if not entries:
                if version_id is None:
                    exists = await AppRepository(session).get(app_id) is not None
                else:
                    exists = await AppVersionRepository(session).get_for_app(app_id, version_id) is not None
                if not exists:
                    subject = app_id if version_id is None else f"{app_id}#{version_id}"
                    return NotFound("App" if version_id is None else "Version", subject)

        return [
            ApprovalRecordResponse.model_validate(row).model_copy(update={"reviewer_name": username})
            for row, username in entries
        ]

    async def pending_apps(self, page: int = 1, page_size: int | None = None) -> list[AppRow]:
        offset, limit = _window(page, page_size)
        async with self.db.session() as session:
            return await AppRepository(session).list_pending(offset, limit)

    async def pending_versions(self, page: int = 1, page_size: int | None = None) -> list[PendingVersionResponse]:
        offset, limit = _window(page, page_size)
        async with self.db.session() as session:
            rows = await AppVersionRepository(session).list_pending(offset, limit)
        return [
            PendingVersionResponse(
                id=row.id,
                app_id=row.app_id,
                app_name=app_name,
                version=row.version,
                release_date=row.release_date,
                submitted_by=row.submitted_by,
            )
            for row, app_name in rows
        ]
