"""Resolves a user's GitHub credential from the identity store."""

import logging

from appcatalog.db.base import utcnow
from appcatalog.db.engine import Database
from appcatalog.repositories.user_repo import GithubTokenRepository

logger = logging.getLogger(__name__)


class GithubCredentialStore:
    """Read-only view over tokens linked during GitHub sign-in."""

    def __init__(self, db: Database):
        self.db = db

    async def access_token(self, user_id: str) -> str | None:
        """Latest non-expired access token for the user, or None."""
        async with self.db.session() as session:
            token = await GithubTokenRepository(session).latest_valid_for_user(user_id, utcnow())
        if token is None:
            logger.info("No usable GitHub token linked for %s", user_id)
            return None
        return token.access_token
