"""Repository exports."""
from pathmark.repositories.bookmark_repository import BookmarkRepository, SearchBookmark
from pathmark.repositories.tag_repository import SearchTag, TagRepository
from pathmark.repositories.tagged_item_repository import SearchTaggedItem, TaggedItemRepository

__all__ = [
    "BookmarkRepository",
    "SearchBookmark",
    "SearchTag",
    "SearchTaggedItem",
    "TagRepository",
    "TaggedItemRepository",
]
