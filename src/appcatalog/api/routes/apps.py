"""Catalog write routes: submissions, apps, versions and platform offerings."""

import logging

from fastapi import APIRouter

from appcatalog.api.outcomes import submission_response, unwrap
from appcatalog.dependencies import Coordinator, Developer, Store
from appcatalog.errors.exceptions import NotFoundError
from appcatalog.models.catalog import (
    AppCreate,
    AppResponse,
    AppUpdate,
    PlatformResponse,
    PlatformSupportCreate,
    PlatformSupportResponse,
    Submission,
    SubmissionResponse,
    VersionCreate,
    VersionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Apps"])


@router.get("/apps/categories")
async def list_categories(store: Store) -> list[str]:
    return await store.list_categories()


@router.get("/platforms")
async def list_platforms(store: Store) -> list[PlatformResponse]:
    return [PlatformResponse.model_validate(p) for p in await store.list_platforms()]


@router.post("/apps/submissions", status_code=201)
async def submit_app(body: Submission, actor: Developer, coordinator: Coordinator) -> SubmissionResponse:
    result = unwrap(await coordinator.submit(body, actor_id=actor.actor_id))
    return submission_response(result)


@router.post("/apps", status_code=201)
async def create_app(body: AppCreate, actor: Developer, store: Store) -> AppResponse:
    row = unwrap(await store.create_app(body, submitted_by=actor.actor_id))
    return AppResponse.model_validate(row)


@router.get("/apps/{app_id}")
async def get_app(app_id: str, store: Store) -> AppResponse:
    return AppResponse.model_validate(unwrap(await store.get_app(app_id)))


@router.put("/apps/{app_id}")
async def update_app(app_id: str, body: AppUpdate, actor: Developer, store: Store) -> AppResponse:
    row = unwrap(await store.update_app(app_id, body))
    return AppResponse.model_validate(row)


@router.delete("/apps/{app_id}")
async def delete_app(app_id: str, actor: Developer, store: Store) -> dict:
    if not await store.delete_app(app_id):
        raise NotFoundError("App", app_id)
    logger.info("App %s deleted by %s", app_id, actor.actor_id)
    return {"app_id": app_id, "deleted": True}


@router.get("/apps/{app_id}/versions")
async def list_versions(app_id: str, store: Store) -> list[VersionResponse]:
    rows = unwrap(await store.list_versions(app_id))
    return [VersionResponse.model_validate(row) for row in rows]


@router.post("/apps/{app_id}/versions", status_code=201)
async def create_version(app_id: str, body: VersionCreate, actor: Developer, store: Store) -> VersionResponse:
    row = unwrap(await store.create_version(app_id, body, submitted_by=actor.actor_id))
    return VersionResponse.model_validate(row)


@router.get("/apps/{app_id}/platforms")
async def list_platform_support(app_id: str, store: Store) -> list[PlatformSupportResponse]:
    unwrap(await store.get_app(app_id))
    return [PlatformSupportResponse.model_validate(row) for row in await store.list_platform_support(app_id)]


@router.post("/apps/{app_id}/versions/{version_id}/platforms", status_code=201)
async def upsert_platform_support(
    app_id: str,
    version_id: int,
    body: PlatformSupportCreate,
    actor: Developer,
    store: Store,
) -> PlatformSupportResponse:
    row = unwrap(
        await store.upsert_platform_support(
            app_id, version_id, body.platform_id, body.download_url, body.price,
        )
    )
    return PlatformSupportResponse.model_validate(row)
