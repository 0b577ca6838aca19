"""Authenticated caller identity handed to mutating operations."""

from pydantic import BaseModel


class Actor(BaseModel):
    """Opaque actor id plus capability flags resolved upstream.

    The catalog trusts these flags and never re-derives them.
    """

    actor_id: str
    is_developer: bool = False
    is_admin: bool = False
