"""Repository for GitHub credentials linked to users."""

from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from appcatalog.db.models.user import GithubTokenRow
from appcatalog.repositories.base import BaseRepository


class GithubTokenRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, GithubTokenRow)

    async def latest_valid_for_user(self, user_id: str, now: datetime) -> GithubTokenRow | None:
        """Most recently linked token that has no expiry or expires after ``now``."""
        stmt = (
            select(GithubTokenRow)
            .where(
                GithubTokenRow.user_id == user_id,
                or_(GithubTokenRow.expires_at.is_(None), GithubTokenRow.expires_at > now),
            )
            .order_by(GithubTokenRow.created_at.desc(), GithubTokenRow.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
