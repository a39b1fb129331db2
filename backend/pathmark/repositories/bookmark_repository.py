"""Bookmark repository."""
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from pathmark.core import util
from pathmark.db.models.bookmark import BookmarkRecord
from pathmark.models.bookmark import Bookmark
from pathmark.repositories.base_repository import BaseRepository


@dataclass
class SearchBookmark:
    id: Optional[str] = None
    user_id: Optional[str] = None


class BookmarkRepository(BaseRepository[Bookmark]):
    """Repository for bookmarks, always scoped by owner in the API layer."""

    entity_name = "bookmark"

    def __init__(self, session: Session):
        super().__init__(BookmarkRecord.__table__, session, Bookmark.from_row)

    def _select(self, search: SearchBookmark):
        t = self.table
        query = select(t)
        if search.id is not None:
            query = query.where(t.c.id == search.id)
        if search.user_id is not None:
            query = query.where(t.c.user_id == search.user_id)
        return query.order_by(t.c.id)

    def find_bookmarks(self, search: SearchBookmark) -> List[Bookmark]:
        return self.fetch(self._select(search))

    def find_one(self, search: SearchBookmark) -> Bookmark:
        """Get one bookmark.

        Raises:
            NotFoundError: If the bookmark does not exist for that owner
        """
        return self.fetch_one(self._select(search), id=search.id, user_id=search.user_id)

    def create(self, bookmark: Bookmark) -> Bookmark:
        bookmark.id = util.new_uid()
        bookmark.created_at = bookmark.updated_at = util.now()
        self.execute(insert(self.table).values(**vars(bookmark)))
        return bookmark

    def update(self, bookmark: Bookmark) -> Bookmark:
        bookmark.updated_at = util.now()
        self.execute(
            update(self.table)
            .where(self.table.c.id == bookmark.id)
            .values(
                title=bookmark.title,
                url=bookmark.url,
                description=bookmark.description,
                updated_at=bookmark.updated_at,
            )
        )
        return bookmark

    def delete(self, bookmark_id: str) -> None:
        self.execute(delete(self.table).where(self.table.c.id == bookmark_id))
