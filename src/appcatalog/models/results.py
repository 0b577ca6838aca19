"""Explicit outcome values for catalog operations.

Uniqueness and existence failures are returned, not raised, so callers
can branch on them without exception handling. The HTTP layer turns them
into ``ConflictError`` / ``NotFoundError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from appcatalog.db.models.catalog import AppRow, AppVersionRow, PlatformSupportRow


@dataclass(frozen=True)
class Conflict:
    resource: str
    key: str

    @property
    def message(self) -> str:
        return f"{self.resource} '{self.key}' already exists"


@dataclass(frozen=True)
class NotFound:
    resource: str
    key: str

    @property
    def message(self) -> str:
        return f"{self.resource} '{self.key}' not found"


@dataclass
class SubmissionResult:
    app: AppRow
    version: AppVersionRow
    platform_support: list[PlatformSupportRow] = field(default_factory=list)
    app_created: bool = False


Failure = Conflict | NotFound


def is_failure(outcome: object) -> bool:
    return isinstance(outcome, Failure)
