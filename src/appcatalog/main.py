"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from appcatalog import __version__
from appcatalog.config import settings
from appcatalog.db.engine import Database
from appcatalog.integrations.github_releases import GitHubReleaseClient
from appcatalog.logging_config import configure_logging
from appcatalog.services.approval import ApprovalStateMachine
from appcatalog.services.catalog_store import CatalogStore
from appcatalog.services.credentials import GithubCredentialStore
from appcatalog.services.release_importer import ReleaseImporter
from appcatalog.services.submission import SubmissionCoordinator

# Configure logging at import time
configure_logging(log_level=settings.log_level, json_output=not settings.local_mode)

logger = logging.getLogger(__name__)


def attach_services(app: FastAPI, db: Database, release_client: GitHubReleaseClient | None = None) -> None:
    """Wire every catalog component to one persistence handle."""
    store = CatalogStore(db)
    coordinator = SubmissionCoordinator(db, store)
    app.state.db = db
    app.state.catalog_store = store
    app.state.submission_coordinator = coordinator
    app.state.approval_state_machine = ApprovalStateMachine(db)
    app.state.release_importer = ReleaseImporter(
        store,
        coordinator,
        release_client or GitHubReleaseClient(),
        GithubCredentialStore(db),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown resources."""
    db = getattr(app.state, "db", None)
    owns_db = db is None
    if owns_db:
        db = Database()
        # SQLite has no migrations; build the schema on startup
        await db.open(create_schema="sqlite" in db.url)
        attach_services(app, db)

    logger.info("App catalog API started (db=%s)", "sqlite" if "sqlite" in db.url else "postgresql")
    yield

    if owns_db:
        await db.close()
    logger.info("App catalog API shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="App Catalog API",
        version=__version__,
        description="Multi-platform application catalog with moderation and GitHub release ingestion.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add middleware (order matters: last added = first executed)
    from appcatalog.api.middleware.auth import AuthMiddleware
    from appcatalog.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(AuthMiddleware)
    app.add_middleware(TraceIdMiddleware)

    from appcatalog.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from appcatalog.api.router import api_router
    app.include_router(api_router)

    return app


app = create_app()
