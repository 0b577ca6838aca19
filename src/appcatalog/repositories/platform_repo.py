"""Platform reference data and platform-support repositories."""

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from appcatalog.db.models.catalog import PlatformRow, PlatformSupportRow
from appcatalog.repositories.base import BaseRepository

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

_SUPPORT_KEY = ["app_id", "platform_id", "version_id"]


class PlatformRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, PlatformRow)

    async def get(self, platform_id: int) -> PlatformRow | None:
        return await self.get_by_id("id", platform_id)

    async def get_by_name(self, name: str) -> PlatformRow | None:
        return await self.get_by_id("name", name)

    async def list_all(self) -> list[PlatformRow]:
        result = await self.session.execute(select(PlatformRow).order_by(PlatformRow.id))
        return list(result.scalars().all())


class PlatformSupportRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, PlatformSupportRow)

    async def get_by_key(
        self,
        app_id: str,
        platform_id: int,
        version_id: int,
        refresh: bool = False,
    ) -> PlatformSupportRow | None:
        stmt = select(PlatformSupportRow).where(
            PlatformSupportRow.app_id == app_id,
            PlatformSupportRow.platform_id == platform_id,
            PlatformSupportRow.version_id == version_id,
        )
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        app_id: str,
        platform_id: int,
        version_id: int,
        download_url: str,
        price: float,
    ) -> PlatformSupportRow:
        """INSERT ... ON CONFLICT DO UPDATE on the offering key, then reload the row.

        A concurrent writer that inserted the same key first has its row
        updated in place instead of failing the uniqueness constraint.
        """
        insert = _DIALECT_INSERTS[self.session.bind.dialect.name]
        stmt = insert(PlatformSupportRow).values(
            app_id=app_id,
            platform_id=platform_id,
            version_id=version_id,
            download_url=download_url,
            price=price,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=_SUPPORT_KEY,
            set_={"download_url": stmt.excluded.download_url, "price": stmt.excluded.price},
        )
        await self.session.execute(stmt)
        return await self.get_by_key(app_id, platform_id, version_id, refresh=True)

    async def list_for_app(self, app_id: str) -> list[PlatformSupportRow]:
        stmt = (
            select(PlatformSupportRow)
            .where(PlatformSupportRow.app_id == app_id)
            .order_by(PlatformSupportRow.version_id, PlatformSupportRow.platform_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_for_app(self, app_id: str) -> int:
        return await self.delete_by_field("app_id", app_id)
