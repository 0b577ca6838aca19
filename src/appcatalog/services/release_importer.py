"""ReleaseImporter: turns a GitHub release into a catalog submission.

Provider calls run outside any database transaction; the submission that
follows is its own, later transaction. A crash in between loses the
import attempt and leaves no catalog rows behind.
"""

from __future__ import annotations

import logging
from datetime import date

from pydantic import ValidationError as PydanticValidationError

from appcatalog.errors.exceptions import ProviderAuthenticationError, ReleaseNotFoundError, ValidationError
from appcatalog.integrations.github_releases import GitHubReleaseClient
from appcatalog.models.catalog import PlatformAsset, Submission
from appcatalog.models.github import GithubRelease, GithubRepository, ReleaseAssetInfo, ReleaseInfo
from appcatalog.models.results import Conflict, NotFound, SubmissionResult, is_failure
from appcatalog.services.catalog_store import CatalogStore
from appcatalog.services.credentials import GithubCredentialStore
from appcatalog.services.platform_detection import map_assets
from appcatalog.services.submission import SubmissionCoordinator

logger = logging.getLogger(__name__)


def build_submission(
    release: GithubRelease,
    repository: GithubRepository,
    *,
    app_id: str,
    name: str,
    description: str,
    category: str,
    developer: str | None = None,
) -> Submission:
    """Normalize a release into a Submission.

    The tag becomes the version, the body the release notes, and every
    asset the platform heuristic recognises becomes an offering. Assets
    it cannot place are dropped.
    """
    mapped, _ = map_assets(release.assets)
    published = release.published_at or release.created_at
    sizes = [asset.size for asset in mapped.values() if asset.size]

    try:
        return Submission(
            app_id=app_id,
            name=name,
            developer=developer or repository.owner_login or repository.full_name.split("/")[0],
            description=description,
            category=category,
            version=release.tag_name,
            release_notes=release.body or None,
            release_date=published.date() if published else date.today(),
            size_bytes=max(sizes) if sizes else None,
            source_repository=repository.full_name,
            assets=[
                PlatformAsset(
                    platform=platform,
                    download_url=asset.browser_download_url,
                    file_name=asset.name,
                    size_bytes=asset.size,
                )
                for platform, asset in mapped.items()
            ],
        )
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Release '{release.tag_name}' cannot be mapped to a submission",
            details=[{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()],
        ) from exc


class ReleaseImporter:
    def __init__(
        self,
        store: CatalogStore,
        coordinator: SubmissionCoordinator,
        client: GitHubReleaseClient,
        credentials: GithubCredentialStore,
    ):
        self.store = store
        self.coordinator = coordinator
        self.client = client
        self.credentials = credentials

    async def import_release(
        self,
        user_id: str,
        owner: str,
        repo: str,
        tag: str,
        app_id: str,
        name: str,
        description: str,
        category: str,
    ) -> SubmissionResult | Conflict | NotFound:
        """Import a release as a new app (or a new version of ``app_id``)."""
        repository, release = await self._fetch(user_id, owner, repo, tag)
        submission = build_submission(
            release,
            repository,
            app_id=app_id,
            name=name,
            description=description,
            category=category,
        )
        return await self._submit(submission, user_id, release)

    async def update_from_release(
        self,
        user_id: str,
        app_id: str,
        owner: str,
        repo: str,
        tag: str,
    ) -> SubmissionResult | Conflict | NotFound:
        """Add a release as a new version of an existing app."""
        app = await self.store.get_app(app_id)
        if is_failure(app):
            return app

        repository, release = await self._fetch(user_id, owner, repo, tag)
        submission = build_submission(
            release,
            repository,
            app_id=app.app_id,
            name=app.name,
            description=app.description,
            category=app.category,
            developer=app.developer,
        )
        return await self._submit(submission, user_id, release)

    async def list_releases(self, user_id: str, owner: str, repo: str) -> list[GithubRelease]:
        token = await self._token(user_id)
        return await self.client.list_releases(token, owner, repo)

    async def release_info(self, user_id: str, owner: str, repo: str, tag: str) -> ReleaseInfo:
        """Preview what an import of this release would produce."""
        token = await self._token(user_id)
        release = await self.client.get_release(token, owner, repo, tag)
        mapped, unmapped = map_assets(release.assets)
        return ReleaseInfo(
            tag_name=release.tag_name,
            name=release.name,
            description=release.body,
            published_at=release.published_at,
            platforms={
                str(platform): ReleaseAssetInfo(
                    file_name=asset.name,
                    download_url=asset.browser_download_url,
                    size=asset.size,
                    download_count=asset.download_count,
                )
                for platform, asset in mapped.items()
            },
            unmapped_assets=unmapped,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _token(self, user_id: str) -> str:
        token = await self.credentials.access_token(user_id)
        if not token:
            raise ProviderAuthenticationError("No GitHub account linked for this user")
        return token

    async def _fetch(
        self, user_id: str, owner: str, repo: str, tag: str,
    ) -> tuple[GithubRepository, GithubRelease]:
        token = await self._token(user_id)
        repository = await self.client.get_repository(token, owner, repo)
        release = await self.client.get_release(token, owner, repo, tag)
        if release.draft:
            raise ReleaseNotFoundError(owner, repo, tag)
        return repository, release

    async def _submit(
        self,
        submission: Submission,
        user_id: str,
        release: GithubRelease,
    ) -> SubmissionResult | Conflict | NotFound:
        outcome = await self.coordinator.submit(submission, actor_id=user_id)
        if is_failure(outcome):
            logger.info("Release %s from %s not imported: %s", release.tag_name, submission.source_repository, outcome.message)
        else:
            logger.info(
                "Imported release %s from %s into %s (%d of %d assets mapped)",
                release.tag_name,
                submission.source_repository,
                outcome.app.app_id,
                len(submission.assets),
                len(release.assets),
            )
        return outcome
