"""Master API router mounted at /api/v1."""

from fastapi import APIRouter

from appcatalog.api.routes import approvals, apps, github, health

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(apps.router)
api_router.include_router(approvals.router)
api_router.include_router(github.router)
