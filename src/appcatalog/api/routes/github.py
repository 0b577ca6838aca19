"""GitHub release ingestion routes."""

from fastapi import APIRouter

from appcatalog.api.outcomes import submission_response, unwrap
from appcatalog.dependencies import Developer, Importer
from appcatalog.models.catalog import SubmissionResponse
from appcatalog.models.github import (
    GithubRelease,
    ImportReleaseRequest,
    ReleaseInfo,
    UpdateFromReleaseRequest,
)

router = APIRouter(tags=["GitHub"])


@router.post("/apps/{app_id}/github/import", status_code=201)
async def import_release(
    app_id: str, body: ImportReleaseRequest, actor: Developer, importer: Importer,
) -> SubmissionResponse:
    outcome = await importer.import_release(
        user_id=actor.actor_id,
        owner=body.repo_owner,
        repo=body.repo_name,
        tag=body.release_tag,
        app_id=app_id,
        name=body.app_name,
        description=body.app_description,
        category=body.app_category,
    )
    return submission_response(unwrap(outcome))


@router.put("/apps/{app_id}/github/update")
async def update_from_release(
    app_id: str, body: UpdateFromReleaseRequest, actor: Developer, importer: Importer,
) -> SubmissionResponse:
    outcome = await importer.update_from_release(
        user_id=actor.actor_id,
        app_id=app_id,
        owner=body.repo_owner,
        repo=body.repo_name,
        tag=body.release_tag,
    )
    return submission_response(unwrap(outcome))


@router.get("/github/repositories/{owner}/{repo}/releases")
async def list_releases(owner: str, repo: str, actor: Developer, importer: Importer) -> list[GithubRelease]:
    return await importer.list_releases(actor.actor_id, owner, repo)


@router.get("/github/repositories/{owner}/{repo}/releases/{tag}")
async def release_info(owner: str, repo: str, tag: str, actor: Developer, importer: Importer) -> ReleaseInfo:
    return await importer.release_info(actor.actor_id, owner, repo, tag)
