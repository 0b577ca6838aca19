"""CatalogStore: owns app, version and platform-support records.

Every public method runs as its own unit of work unless a ``session`` is
passed in, in which case it joins the caller's transaction and leaves
commit/rollback to the caller. Uniqueness violations come back as
``Conflict`` and missing targets as ``NotFound``; both roll the unit back.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from appcatalog.db.base import as_utc, utcnow
from appcatalog.db.engine import Database
from appcatalog.db.models.catalog import AppRow, AppVersionRow, PlatformRow, PlatformSupportRow
from appcatalog.models.catalog import AppCreate, AppUpdate, VersionCreate
from appcatalog.models.enums import ApprovalStatus
from appcatalog.models.results import Conflict, NotFound, is_failure
from appcatalog.repositories.app_repo import AppRepository, AppVersionRepository
from appcatalog.repositories.platform_repo import PlatformRepository, PlatformSupportRepository

logger = logging.getLogger(__name__)


def advance_timestamp(previous: datetime | None) -> datetime:
    """Return now, nudged forward so it is strictly later than ``previous``."""
    now = utcnow()
    if previous is not None and now <= as_utc(previous):
        return as_utc(previous) + timedelta(microseconds=1)
    return now


class CatalogStore:
    def __init__(self, db: Database):
        self.db = db

    async def _run(
        self,
        session: AsyncSession | None,
        operation: Callable[[AsyncSession], Awaitable[Any]],
    ) -> Any:
        if session is not None:
            return await operation(session)
        async with self.db.session() as own:
            outcome = await operation(own)
            if is_failure(outcome):
                await own.rollback()
            else:
                await own.commit()
            return outcome

    # ------------------------------------------------------------------
    # Apps
    # ------------------------------------------------------------------

    async def create_app(
        self,
        spec: AppCreate,
        submitted_by: str | None = None,
        *,
        session: AsyncSession | None = None,
    ) -> AppRow | Conflict:
        """Insert a new app in PENDING state; ``Conflict`` if the app_id is taken."""

        async def _create(s: AsyncSession) -> AppRow | Conflict:
            repo = AppRepository(s)
            if await repo.get(spec.app_id) is not None:
                return Conflict("App", spec.app_id)
            now = utcnow()
            try:
                row = await repo.create(
                    **spec.model_dump(),
                    approval_status=ApprovalStatus.PENDING,
                    submitted_by=submitted_by,
                    date_added=now,
                    last_updated=now,
                )
            except IntegrityError:
                # Lost a race against a concurrent insert of the same app_id
                await s.rollback()
                return Conflict("App", spec.app_id)
            logger.info("App %s created (submitted_by=%s)", row.app_id, submitted_by)
            return row

        return await self._run(session, _create)

    async def get_app(self, app_id: str, *, session: AsyncSession | None = None) -> AppRow | NotFound:
        async def _get(s: AsyncSession) -> AppRow | NotFound:
            row = await AppRepository(s).get(app_id)
            return row if row is not None else NotFound("App", app_id)

        return await self._run(session, _get)

    async def update_app(
        self,
        app_id: str,
        changes: AppUpdate,
        *,
        session: AsyncSession | None = None,
    ) -> AppRow | NotFound:
        """Apply only the supplied fields; ``last_updated`` always advances."""

        async def _update(s: AsyncSession) -> AppRow | NotFound:
            repo = AppRepository(s)
            row = await repo.get(app_id)
            if row is None:
                return NotFound("App", app_id)
            fields = changes.changes()
            await repo.update(row, **fields, last_updated=advance_timestamp(row.last_updated))
            logger.info("App %s updated (fields=%s)", app_id, sorted(fields))
            return row

        return await self._run(session, _update)

    async def delete_app(self, app_id: str, *, session: AsyncSession | None = None) -> bool:
        """Remove an app and everything hanging off it.

        Deletion order is fixed: platform support, then versions, then the
        app row. A missing app is a no-op that reports False.
        """

        async def _delete(s: AsyncSession) -> bool:
            apps = AppRepository(s)
            if await apps.get(app_id) is None:
                return False
            supports = await PlatformSupportRepository(s).delete_for_app(app_id)
            versions = await AppVersionRepository(s).delete_for_app(app_id)
            await apps.delete(app_id)
            logger.info(
                "App %s deleted (versions=%d, platform_support=%d)", app_id, versions, supports,
            )
            return True

        return await self._run(session, _delete)

    async def list_categories(self) -> list[str]:
        """Distinct categories currently in use."""
        return await self._run(None, lambda s: AppRepository(s).list_categories())

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    async def create_version(
        self,
        app_id: str,
        spec: VersionCreate,
        submitted_by: str | None = None,
        *,
        session: AsyncSession | None = None,
    ) -> AppVersionRow | Conflict | NotFound:
        """Insert a PENDING version; ``Conflict`` if (app_id, version) exists."""

        async def _create(s: AsyncSession) -> AppVersionRow | Conflict | NotFound:
            if await AppRepository(s).get(app_id) is None:
                return NotFound("App", app_id)
            repo = AppVersionRepository(s)
            key = f"{app_id}@{spec.version}"
            if await repo.get_by_key(app_id, spec.version) is not None:
                return Conflict("Version", key)
            try:
                row = await repo.create(
                    app_id=app_id,
                    **spec.model_dump(),
                    approval_status=ApprovalStatus.PENDING,
                    submitted_by=submitted_by,
                )
            except IntegrityError:
                await s.rollback()
                return Conflict("Version", key)
            logger.info("Version %s created (id=%d)", key, row.id)
            return row

        return await self._run(session, _create)

    async def get_version(
        self,
        app_id: str,
        version_id: int,
        *,
        session: AsyncSession | None = None,
    ) -> AppVersionRow | NotFound:
        async def _get(s: AsyncSession) -> AppVersionRow | NotFound:
            row = await AppVersionRepository(s).get_for_app(app_id, version_id)
            return row if row is not None else NotFound("Version", f"{app_id}#{version_id}")

        return await self._run(session, _get)

    async def list_versions(self, app_id: str) -> list[AppVersionRow] | NotFound:
        async def _list(s: AsyncSession) -> list[AppVersionRow] | NotFound:
            if await AppRepository(s).get(app_id) is None:
                return NotFound("App", app_id)
            return await AppVersionRepository(s).list_for_app(app_id)

        return await self._run(None, _list)

    # ------------------------------------------------------------------
    # Platform support
    # ------------------------------------------------------------------

    async def upsert_platform_support(
        self,
        app_id: str,
        version_id: int,
        platform_id: int,
        download_url: str,
        price: float = 0.0,
        *,
        session: AsyncSession | None = None,
    ) -> PlatformSupportRow | NotFound:
        """Create or refresh the offering for (app_id, platform_id, version_id).

        The version must already be persisted and belong to ``app_id``.
        Resubmitting an existing key, including one inserted concurrently
        by another transaction, updates url and price in place.
        """

        async def _upsert(s: AsyncSession) -> PlatformSupportRow | NotFound:
            if await AppVersionRepository(s).get_for_app(app_id, version_id) is None:
                return NotFound("Version", f"{app_id}#{version_id}")
            if await PlatformRepository(s).get(platform_id) is None:
                return NotFound("Platform", str(platform_id))

            repo = PlatformSupportRepository(s)
            existing = await repo.get_by_key(app_id, platform_id, version_id)
            if existing is not None:
                await repo.update(existing, download_url=download_url, price=price)
                logger.info(
                    "Platform support %d refreshed (app=%s, version=%d, platform=%d)",
                    existing.id, app_id, version_id, platform_id,
                )
                return existing

            row = await repo.upsert(app_id, platform_id, version_id, download_url, price)
            logger.info(
                "Platform support %d stored (app=%s, version=%d, platform=%d)",
                row.id, app_id, version_id, platform_id,
            )
            return row

        return await self._run(session, _upsert)

    async def list_platform_support(self, app_id: str) -> list[PlatformSupportRow]:
        return await self._run(None, lambda s: PlatformSupportRepository(s).list_for_app(app_id))

    async def list_platforms(self, *, session: AsyncSession | None = None) -> list[PlatformRow]:
        return await self._run(session, lambda s: PlatformRepository(s).list_all())
