"""Translate catalog outcome values into HTTP errors and response bodies."""

from typing import TypeVar

from appcatalog.errors.exceptions import ConflictError, NotFoundError
from appcatalog.models.catalog import (
    AppResponse,
    PlatformSupportResponse,
    SubmissionResponse,
    VersionResponse,
)
from appcatalog.models.results import Conflict, NotFound, SubmissionResult

T = TypeVar("T")


def unwrap(outcome: T | Conflict | NotFound) -> T:
    """Return the successful value or raise the matching HTTP error."""
    if isinstance(outcome, Conflict):
        raise ConflictError(outcome.message)
    if isinstance(outcome, NotFound):
        raise NotFoundError(outcome.resource, outcome.key)
    return outcome


def submission_response(result: SubmissionResult) -> SubmissionResponse:
    return SubmissionResponse(
        app=AppResponse.model_validate(result.app),
        version=VersionResponse.model_validate(result.version),
        platform_support=[PlatformSupportResponse.model_validate(row) for row in result.platform_support],
        app_created=result.app_created,
    )
