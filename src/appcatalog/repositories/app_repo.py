"""App and app version repositories."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from appcatalog.db.models.catalog import AppRow, AppVersionRow
from appcatalog.models.enums import ApprovalStatus
from appcatalog.repositories.base import BaseRepository


class AppRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, AppRow)

    async def get(self, app_id: str) -> AppRow | None:
        return await self.get_by_id("app_id", app_id)

    async def delete(self, app_id: str) -> int:
        return await self.delete_by_field("app_id", app_id)

    async def list_categories(self) -> list[str]:
        stmt = select(AppRow.category).distinct().order_by(AppRow.category)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_pending(self, offset: int, limit: int) -> list[AppRow]:
        stmt = (
            select(AppRow)
            .where(AppRow.approval_status == ApprovalStatus.PENDING)
            .order_by(AppRow.date_added.desc(), AppRow.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class AppVersionRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, AppVersionRow)

    async def get(self, version_id: int) -> AppVersionRow | None:
        return await self.get_by_id("id", version_id)

    async def get_for_app(self, app_id: str, version_id: int) -> AppVersionRow | None:
        """Return the version only if it belongs to the given app."""
        stmt = select(AppVersionRow).where(
            AppVersionRow.id == version_id,
            AppVersionRow.app_id == app_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_key(self, app_id: str, version: str) -> AppVersionRow | None:
        stmt = select(AppVersionRow).where(
            AppVersionRow.app_id == app_id,
            AppVersionRow.version == version,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_app(self, app_id: str) -> list[AppVersionRow]:
        stmt = (
            select(AppVersionRow)
            .where(AppVersionRow.app_id == app_id)
            .order_by(AppVersionRow.release_date.desc(), AppVersionRow.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_pending(self, offset: int, limit: int) -> list[tuple[AppVersionRow, str]]:
        """Pending versions joined with their app's display name."""
        stmt = (
            select(AppVersionRow, AppRow.name)
            .join(AppRow, AppRow.app_id == AppVersionRow.app_id)
            .where(AppVersionRow.approval_status == ApprovalStatus.PENDING)
            .order_by(AppVersionRow.release_date.desc(), AppVersionRow.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(row, name) for row, name in result.all()]

    async def delete_for_app(self, app_id: str) -> int:
        return await self.delete_by_field("app_id", app_id)
