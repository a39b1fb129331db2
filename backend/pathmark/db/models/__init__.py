"""Database models package."""
from pathmark.db.models.bookmark import BookmarkRecord
from pathmark.db.models.tag import TagRecord
from pathmark.db.models.tagged_bookmark import TaggedBookmarkRecord

__all__ = [
    "BookmarkRecord",
    "TagRecord",
    "TaggedBookmarkRecord",
]
