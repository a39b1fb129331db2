"""Identifier and clock helpers."""
from datetime import datetime, timezone

from ulid import ULID


def new_uid() -> str:
    """Generate a new lexicographically sortable identifier."""
    return str(ULID())


def now() -> datetime:
    return datetime.now(timezone.utc)
