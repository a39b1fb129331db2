"""Domain entities."""
from pathmark.models.bookmark import Bookmark
from pathmark.models.path import TagPath, derive, parent_path
from pathmark.models.tag import Tag, TaggedData, TaggedItem, TaggedResult, TaggedType

__all__ = [
    "Bookmark",
    "Tag",
    "TagPath",
    "TaggedData",
    "TaggedItem",
    "TaggedResult",
    "TaggedType",
    "derive",
    "parent_path",
]
