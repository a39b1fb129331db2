"""Bookmark entity."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from pathmark.core.errors import DecodeFailure


@dataclass
class Bookmark:
    id: str = ""
    user_id: str = ""
    title: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    resource_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Bookmark":
        try:
            return cls(**{column: row[column] for column in cls.__dataclass_fields__})
        except KeyError as e:
            raise DecodeFailure("bookmark", row=dict(row), reason=f"missing column {e}") from e
