"""Prefixed ID generation utility."""

import re
import uuid


def generate_id(prefix: str) -> str:
    """Generate a prefixed unique ID.

    Args:
        prefix: The prefix (e.g., "notes-app_").

    Returns:
        A string like "notes-app_a1b2c3d4e5f6".
    """
    short_uuid = uuid.uuid4().hex[:12]
    return f"{prefix}{short_uuid}"


def generate_app_id(name: str) -> str:
    """Derive a stable external key for a submission that did not bring one."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")[:60] or "app"
    return generate_id(f"{slug}_")
