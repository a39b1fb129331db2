"""Tag and tag association entities."""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pathmark.core.errors import DecodeFailure
from pathmark.models.path import derive


@dataclass
class Tag:
    """A tag owned by one user, addressed by its path."""

    id: str = ""
    path: str = ""
    prefix: str = ""
    name: str = ""
    label: Optional[str] = None
    parent_id: Optional[str] = None
    depth: int = 1
    value_type: Optional[str] = None
    user_id: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_path(cls, path: str, **fields: Any) -> "Tag":
        """Build an unsaved tag whose structural fields come from `path`."""
        derived = derive(path)
        return cls(
            path=derived.path,
            prefix=derived.prefix,
            name=derived.name,
            depth=derived.depth,
            **fields,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Tag":
        try:
            return cls(
                id=row["id"],
                path=row["path"],
                prefix=row["prefix"],
                name=row["name"],
                label=row["label"],
                parent_id=row["parent_id"],
                depth=int(row["depth"]),
                value_type=row["value_type"],
                user_id=row["user_id"],
                created_at=row["created_at"],
                updated_at=row["updated_at"],
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeFailure("tag", row=dict(row), reason=str(e)) from e

    @property
    def is_linked(self) -> bool:
        return self.parent_id is not None

    def with_path(self, path: str) -> "Tag":
        """Copy of this tag renamed to `path`, structural fields re-derived."""
        derived = derive(path)
        return replace(
            self,
            path=derived.path,
            prefix=derived.prefix,
            name=derived.name,
            depth=derived.depth,
        )


class TaggedType(str, Enum):
    """Kind of entity an association points at.

    Each kind lives in its own association table.
    """

    BOOKMARK = "bookmark"

    @property
    def table(self) -> str:
        return _TAGGED_TABLES[self]


_TAGGED_TABLES: Dict[TaggedType, str] = {
    TaggedType.BOOKMARK: "tagged_bookmark",
}


@dataclass
class TaggedItem:
    """Link between one tag and one referenced entity."""

    id: str = ""
    ref_id: str = ""
    tag_id: str = ""
    value: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        """Identity used when reconciling, independent of `id` and `value`."""
        return (self.tag_id, self.ref_id)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TaggedItem":
        try:
            return cls(
                id=row["id"],
                ref_id=row["ref_id"],
                tag_id=row["tag_id"],
                value=row["value"],
            )
        except (KeyError, TypeError) as e:
            raise DecodeFailure("tagged item", row=dict(row), reason=str(e)) from e


@dataclass
class TaggedData:
    """A tag together with one of its associations."""

    tag: Tag
    item: TaggedItem


@dataclass
class TaggedResult:
    """Tags and associations loaded or synchronized for a set of references."""

    tagged_type: TaggedType
    tags: List[Tag] = field(default_factory=list)
    tagged_items: List[TaggedItem] = field(default_factory=list)

    def find_tags(self, ref_id: str) -> List[TaggedData]:
        """Pair every association of `ref_id` with its tag, in stored order."""
        tags_by_id = {tag.id: tag for tag in self.tags}
        return [
            TaggedData(tags_by_id[item.tag_id], item)
            for item in self.tagged_items
            if item.ref_id == ref_id and item.tag_id in tags_by_id
        ]
