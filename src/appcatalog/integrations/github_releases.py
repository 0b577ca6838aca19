"""GitHub Releases client: repository and release lookups via the REST API."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from appcatalog.config import settings
from appcatalog.errors.exceptions import (
    CatalogError,
    ExternalServiceError,
    ProviderAuthenticationError,
    ProviderRateLimitError,
    ReleaseNotFoundError,
    RepositoryNotFoundError,
)
from appcatalog.models.github import GithubRelease, GithubRepository

logger = logging.getLogger(__name__)


class GitHubReleaseClient:
    """Read-only access to repositories and releases.

    Every call is a single attempt; failures surface as distinct
    ``ExternalServiceError`` subclasses and are never retried here.
    ``transport`` lets callers substitute an ``httpx`` transport.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.github_api_url).rstrip("/")
        self.timeout = timeout or settings.github_timeout_seconds
        self._transport = transport

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_repository(self, token: str, owner: str, repo: str) -> GithubRepository:
        payload = await self._get(
            token,
            f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}",
            not_found=RepositoryNotFoundError(owner, repo),
        )
        return GithubRepository.from_api(payload)

    async def get_release(self, token: str, owner: str, repo: str, tag: str) -> GithubRelease:
        payload = await self._get(
            token,
            f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/releases/tags/{quote(tag, safe='')}",
            not_found=ReleaseNotFoundError(owner, repo, tag),
        )
        return GithubRelease.model_validate(payload)

    async def list_releases(self, token: str, owner: str, repo: str) -> list[GithubRelease]:
        payload = await self._get(
            token,
            f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/releases",
            params={"per_page": 100},
            not_found=RepositoryNotFoundError(owner, repo),
        )
        return [GithubRelease.model_validate(item) for item in payload]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get(
        self,
        token: str,
        path: str,
        *,
        not_found: CatalogError,
        params: dict | None = None,
    ) -> Any:
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                transport=self._transport,
                timeout=self.timeout,
            ) as client:
                response = await client.get(path, headers=headers, params=params)
        except httpx.HTTPError as exc:
            logger.error("GitHub request %s failed: %s", path, exc)
            raise ExternalServiceError(
                f"GitHub request failed: {exc.__class__.__name__}",
            ) from exc

        self._raise_for_status(response, path, not_found)
        return response.json()

    @staticmethod
    def _raise_for_status(response: httpx.Response, path: str, not_found: CatalogError) -> None:
        status = response.status_code
        if status == 200:
            return

        logger.warning("GitHub returned %s for %s: %s", status, path, response.text[:300])
        if status == 401:
            raise ProviderAuthenticationError()
        if status == 429 or (status == 403 and response.headers.get("x-ratelimit-remaining") == "0"):
            reset = response.headers.get("x-ratelimit-reset")
            reset_at = datetime.fromtimestamp(int(reset), tz=timezone.utc) if reset and reset.isdigit() else None
            raise ProviderRateLimitError(reset_at)
        if status == 403:
            raise ProviderAuthenticationError("GitHub denied access with the linked credential")
        if status == 404:
            raise not_found
        raise ExternalServiceError(
            f"GitHub returned HTTP {status}",
            details={"status_code": status},
        )
