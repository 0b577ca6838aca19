"""Custom exception classes for the catalog API."""

from datetime import datetime


class CatalogError(Exception):
    """Base exception for the catalog."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(CatalogError):
    """Malformed date, missing required field or bad request payload."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class NotFoundError(CatalogError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} '{resource_id}' not found",
            status_code=404,
        )


class AuthenticationError(CatalogError):
    """Authentication required or token invalid."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__("AUTHENTICATION_ERROR", message, status_code=401)


class AuthorizationError(CatalogError):
    """Insufficient permissions."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__("AUTHORIZATION_ERROR", message, status_code=403)


class ConflictError(CatalogError):
    """Uniqueness violation on an app, version or platform offering."""

    def __init__(self, message: str):
        super().__init__("CONFLICT", message, status_code=409)


class PersistenceError(CatalogError):
    """Transaction or storage failure; fatal to the current operation."""

    def __init__(self, message: str = "Storage failure"):
        super().__init__("PERSISTENCE_ERROR", message, status_code=500)


# ── External release provider ──────────────────────────────────────────────────

class ExternalServiceError(CatalogError):
    """The external release provider failed or is unreachable."""

    def __init__(
        self,
        message: str,
        details=None,
        code: str = "EXTERNAL_SERVICE_ERROR",
        status_code: int = 502,
    ):
        super().__init__(code, message, details, status_code=status_code)


class ProviderAuthenticationError(ExternalServiceError):
    """Missing, expired or rejected provider credential."""

    def __init__(self, message: str = "GitHub credential rejected"):
        super().__init__(message, code="PROVIDER_AUTH_FAILED", status_code=502)


class ProviderRateLimitError(ExternalServiceError):
    """Provider refused the call because the rate limit is exhausted."""

    def __init__(self, reset_at: datetime | None = None):
        self.reset_at = reset_at
        details = {"reset_at": reset_at.isoformat()} if reset_at else None
        super().__init__(
            "GitHub rate limit exceeded",
            details,
            code="PROVIDER_RATE_LIMITED",
            status_code=503,
        )


class RepositoryNotFoundError(ExternalServiceError):
    def __init__(self, owner: str, repo: str):
        super().__init__(
            f"Repository '{owner}/{repo}' not found",
            code="REPOSITORY_NOT_FOUND",
            status_code=404,
        )


class ReleaseNotFoundError(ExternalServiceError):
    def __init__(self, owner: str, repo: str, tag: str):
        super().__init__(
            f"Release '{tag}' not found in '{owner}/{repo}'",
            code="RELEASE_NOT_FOUND",
            status_code=404,
        )
