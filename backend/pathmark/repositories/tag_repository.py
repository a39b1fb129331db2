"""Tag repository with path lookup and parent linkage."""
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from pathmark.core import util
from pathmark.db.models.tag import TagRecord
from pathmark.models.tag import Tag
from pathmark.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


@dataclass
class SearchTag:
    """Filters for tag lookup; unset filters are not applied."""

    id_vec: Optional[List[str]] = None
    tag_path_vec: Optional[List[str]] = None
    user_id: Optional[str] = None
    parent_id: Optional[str] = None
    depth: Optional[int] = None


class TagRepository(BaseRepository[Tag]):
    """Repository for tags."""

    entity_name = "tag"

    def __init__(self, session: Session):
        """Initialize tag repository.

        Args:
            session: Database session
        """
        super().__init__(TagRecord.__table__, session, Tag.from_row)

    def _select(self, search: SearchTag):
        t = self.table
        query = select(t)
        if search.user_id is not None:
            query = query.where(t.c.user_id == search.user_id)
        if search.parent_id is not None:
            query = query.where(t.c.parent_id == search.parent_id)
        if search.depth is not None:
            query = query.where(t.c.depth == search.depth)
        if search.tag_path_vec is not None:
            query = query.where(t.c.path.in_(search.tag_path_vec))
        if search.id_vec is not None:
            query = query.where(t.c.id.in_(search.id_vec))
        return query.order_by(t.c.path)

    def find_tags(self, search: SearchTag) -> List[Tag]:
        """List tags matching every given filter.

        Args:
            search: Filters to apply

        Returns:
            Matching tags ordered by path
        """
        return self.fetch(self._select(search))

    def find_one(self, search: SearchTag) -> Tag:
        """Get the single tag matching the filters.

        Raises:
            NotFoundError: If no tag matched
        """
        return self.fetch_one(self._select(search), id=search.id_vec, user_id=search.user_id)

    def create_tags(self, tags: List[Tag]) -> List[Tag]:
        """Insert tags in one multi-row statement.

        Fresh identifiers and timestamps are assigned; every other field is
        taken from the inputs.

        Args:
            tags: Unsaved tags

        Returns:
            The inserted tags
        """
        if not tags:
            return []

        created_at = util.now()
        created = [
            Tag(
                id=util.new_uid(),
                path=tag.path,
                prefix=tag.prefix,
                name=tag.name,
                label=tag.label,
                parent_id=tag.parent_id,
                depth=tag.depth,
                value_type=tag.value_type,
                user_id=tag.user_id,
                created_at=created_at,
                updated_at=created_at,
            )
            for tag in tags
        ]
        self.execute(insert(self.table).values([vars(tag) for tag in created]))
        logger.debug(f"Created {len(created)} tags: {[tag.path for tag in created]}")
        return created

    def update_tag(self, tag: Tag) -> Tag:
        """Persist the editable fields of `tag` and bump `updated_at`.

        `parent_id` is left untouched; only `link_parent` sets it.
        """
        tag.updated_at = util.now()
        self.execute(
            update(self.table)
            .where(self.table.c.id == tag.id)
            .values(
                path=tag.path,
                prefix=tag.prefix,
                name=tag.name,
                depth=tag.depth,
                label=tag.label,
                value_type=tag.value_type,
                updated_at=tag.updated_at,
            )
        )
        return tag

    def link_parent(self, tag_id: str, parent_id: str) -> bool:
        """Set `parent_id` on a tag that has none yet.

        Args:
            tag_id: Child tag ID
            parent_id: Parent tag ID

        Returns:
            True if the tag was linked by this call, False if it already had
            a parent or does not exist
        """
        t = self.table
        affected = self.execute(
            update(t)
            .where(t.c.id == tag_id, t.c.parent_id.is_(None))
            .values(parent_id=parent_id)
        )
        return affected == 1

    def delete_tag(self, tag_id: str) -> None:
        self.execute(delete(self.table).where(self.table.c.id == tag_id))
