"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from appcatalog.errors.exceptions import AuthenticationError, AuthorizationError
from appcatalog.models.identity import Actor
from appcatalog.services.approval import ApprovalStateMachine
from appcatalog.services.catalog_store import CatalogStore
from appcatalog.services.release_importer import ReleaseImporter
from appcatalog.services.submission import SubmissionCoordinator


def get_catalog_store(request: Request) -> CatalogStore:
    return request.app.state.catalog_store


def get_submission_coordinator(request: Request) -> SubmissionCoordinator:
    return request.app.state.submission_coordinator


def get_approval_state_machine(request: Request) -> ApprovalStateMachine:
    return request.app.state.approval_state_machine


def get_release_importer(request: Request) -> ReleaseImporter:
    return request.app.state.release_importer


async def get_current_actor(request: Request) -> Actor:
    """Return the authenticated actor or raise 401."""
    user = getattr(request.state, "user", {}) or {}
    if "_auth_error" in user:
        raise AuthenticationError(user["_auth_error"])
    if not user or user.get("sub") in ("anonymous", ""):
        raise AuthenticationError("Authentication required")
    return Actor(
        actor_id=user["sub"],
        is_developer=bool(user.get("is_developer")),
        is_admin=bool(user.get("is_admin")),
    )


async def require_developer(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not (actor.is_developer or actor.is_admin):
        raise AuthorizationError("Developer account required")
    return actor


async def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.is_admin:
        raise AuthorizationError("Moderator account required")
    return actor


# Type aliases for dependency injection
Store = Annotated[CatalogStore, Depends(get_catalog_store)]
Coordinator = Annotated[SubmissionCoordinator, Depends(get_submission_coordinator)]
StateMachine = Annotated[ApprovalStateMachine, Depends(get_approval_state_machine)]
Importer = Annotated[ReleaseImporter, Depends(get_release_importer)]
Developer = Annotated[Actor, Depends(require_developer)]
Moderator = Annotated[Actor, Depends(require_admin)]
