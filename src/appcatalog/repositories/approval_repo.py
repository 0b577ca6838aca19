"""Approval ledger repository (append and ordered reads only)."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from appcatalog.db.models.approval import ApprovalRecordRow
from appcatalog.db.models.user import UserRow
from appcatalog.repositories.base import BaseRepository


class ApprovalRecordRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, ApprovalRecordRow)

    async def append(
        self,
        app_id: str,
        version_id: int | None,
        status: str,
        reviewed_by: str,
        review_notes: str | None,
        decided_at: datetime,
    ) -> ApprovalRecordRow:
        return await self.create(
            app_id=app_id,
            version_id=version_id,
            status=status,
            reviewed_by=reviewed_by,
            review_notes=review_notes,
            decided_at=decided_at,
        )

    async def history(
        self,
        app_id: str,
        version_id: int | None = None,
    ) -> list[tuple[ApprovalRecordRow, str | None]]:
        """Ledger entries newest-first, with the reviewer's username when known."""
        stmt = (
            select(ApprovalRecordRow, UserRow.username)
            .outerjoin(UserRow, UserRow.user_id == ApprovalRecordRow.reviewed_by)
            .where(ApprovalRecordRow.app_id == app_id)
        )
        if version_id is not None:
            stmt = stmt.where(ApprovalRecordRow.version_id == version_id)
        stmt = stmt.order_by(ApprovalRecordRow.decided_at.desc(), ApprovalRecordRow.id.desc())
        result = await self.session.execute(stmt)
        return [(row, username) for row, username in result.all()]
