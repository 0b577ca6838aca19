"""JWT Bearer authentication middleware.

Tokens are minted by the identity service; this layer only verifies them
and exposes the actor id and capability flags on ``request.state.user``.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from appcatalog.config import settings
from appcatalog.logging_config import bind_request_context

logger = logging.getLogger(__name__)

_ANONYMOUS = {"sub": "anonymous", "is_developer": False, "is_admin": False}


def _decode_jwt(token: str) -> dict:
    from jose import JWTError, jwt

    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError as exc:
        logger.debug("JWT decode failed: %s", exc)
        raise ValueError(f"Invalid token: {exc}") from exc


class AuthMiddleware(BaseHTTPMiddleware):
    """Validate a Bearer token if present; routes decide whether auth is required."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        auth_header = request.headers.get("authorization", "")

        if auth_header.startswith("Bearer "):
            request.state.user = self._validate_jwt(auth_header[7:])
            if "_auth_error" not in request.state.user:
                trace_id = getattr(request.state, "trace_id", "trc_unknown")
                bind_request_context(trace_id, user_id=request.state.user["sub"])
        else:
            request.state.user = dict(_ANONYMOUS)
        return await call_next(request)

    @staticmethod
    def _validate_jwt(token: str) -> dict:
        try:
            payload = _decode_jwt(token)
        except ValueError:
            return {**_ANONYMOUS, "_auth_error": "invalid_token"}

        if payload.get("type", "access") != "access":
            return {**_ANONYMOUS, "_auth_error": "not_access_token"}

        return {
            "sub": payload.get("sub", ""),
            "is_developer": bool(payload.get("is_developer", False)),
            "is_admin": bool(payload.get("is_admin", False)),
        }
