"""SubmissionCoordinator: persists app, version and offerings as one unit."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from appcatalog.db.engine import Database
from appcatalog.db.models.catalog import PlatformSupportRow
from appcatalog.models.catalog import AppCreate, AppUpdate, Submission, VersionCreate
from appcatalog.models.results import Conflict, NotFound, SubmissionResult, is_failure
from appcatalog.services.catalog_store import CatalogStore
from appcatalog.services.id_generator import generate_app_id

logger = logging.getLogger(__name__)

_SUBMIT_ATTEMPTS = 2


class SubmissionCoordinator:
    """Used by direct developer submissions and by the release importer."""

    def __init__(self, db: Database, store: CatalogStore):
        self.db = db
        self.store = store

    async def submit(
        self,
        submission: Submission,
        actor_id: str | None,
    ) -> SubmissionResult | Conflict | NotFound:
        """Create (or reuse) the app, create the version, upsert each offering.

        Any failure aborts the whole submission: nothing is committed unless
        every step succeeds. Losing the race to create a brand new app to a
        concurrent submission retries once, reusing the app the other
        submission committed.
        """
        if submission.app_id is None:
            submission = submission.model_copy(update={"app_id": generate_app_id(submission.name)})

        for attempt in range(1, _SUBMIT_ATTEMPTS + 1):
            async with self.db.session() as session:
                outcome = await self._submit(session, submission, actor_id)
                if not is_failure(outcome):
                    await session.commit()
                    break
                await session.rollback()

            if not (isinstance(outcome, Conflict) and outcome.resource == "App") or attempt == _SUBMIT_ATTEMPTS:
                logger.info("Submission aborted: %s", outcome.message)
                return outcome
            logger.info("App %s created concurrently; retrying submission", submission.app_id)

        logger.info(
            "Submission committed: %s %s (app_created=%s, platforms=%d, actor=%s)",
            outcome.app.app_id,
            outcome.version.version,
            outcome.app_created,
            len(outcome.platform_support),
            actor_id,
        )
        return outcome

    async def _submit(
        self,
        session: AsyncSession,
        submission: Submission,
        actor_id: str | None,
    ) -> SubmissionResult | Conflict | NotFound:
        app_id = submission.app_id

        app = await self.store.get_app(app_id, session=session)
        app_created = False
        if isinstance(app, NotFound):
            app = await self.store.create_app(
                AppCreate(
                    app_id=app_id,
                    name=submission.name,
                    developer=submission.developer,
                    description=submission.description,
                    category=submission.category,
                    release_date=submission.release_date,
                    source_repository=submission.source_repository,
                ),
                submitted_by=actor_id,
                session=session,
            )
            if is_failure(app):
                return app
            app_created = True
        elif submission.source_repository and submission.source_repository != app.source_repository:
            app = await self.store.update_app(
                app_id, AppUpdate(source_repository=submission.source_repository), session=session,
            )
            if is_failure(app):
                return app

        version = await self.store.create_version(
            app_id,
            VersionCreate(
                version=submission.version,
                release_notes=submission.release_notes,
                release_date=submission.release_date,
                min_os_version=submission.min_os_version,
                size_bytes=submission.size_bytes,
            ),
            submitted_by=actor_id,
            session=session,
        )
        if is_failure(version):
            return version

        platforms = {p.name: p for p in await self.store.list_platforms(session=session)}
        offerings: dict[int, PlatformSupportRow] = {}
        for asset in submission.assets:
            platform = platforms.get(str(asset.platform))
            if platform is None:
                return NotFound("Platform", str(asset.platform))
            support = await self.store.upsert_platform_support(
                app_id,
                version.id,
                platform.id,
                asset.download_url,
                asset.price,
                session=session,
            )
            if is_failure(support):
                return support
            offerings[support.id] = support

        return SubmissionResult(
            app=app,
            version=version,
            platform_support=list(offerings.values()),
            app_created=app_created,
        )
