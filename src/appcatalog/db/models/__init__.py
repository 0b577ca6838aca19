"""SQLAlchemy ORM models - import all to register with Base.metadata."""

from appcatalog.db.models.catalog import AppRow, AppVersionRow, PlatformRow, PlatformSupportRow
from appcatalog.db.models.approval import ApprovalRecordRow
from appcatalog.db.models.user import GithubTokenRow, UserRow

__all__ = [
    "AppRow",
    "AppVersionRow",
    "PlatformRow",
    "PlatformSupportRow",
    "ApprovalRecordRow",
    "UserRow",
    "GithubTokenRow",
]
