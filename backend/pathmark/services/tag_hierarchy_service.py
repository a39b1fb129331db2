"""Background maintenance of tag parent links."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from pathmark.models.path import parent_path
from pathmark.models.tag import Tag
from pathmark.services.tag_service import TagService

logger = logging.getLogger(__name__)


class TagHierarchyService:
    """Links a tag to its immediate parent, creating the parent if needed.

    A tag below the top level starts unlinked and is linked at most once.
    Only one level is handled per call: a parent created here is not linked
    to its own parent until something requests maintenance for it.
    """

    def __init__(self, session: Session):
        """Initialize the tag hierarchy service.

        Args:
            session: Database session
        """
        self.tag_service = TagService(session)

    def needs_parent(self, tag: Tag) -> bool:
        return tag.depth > 1 and tag.parent_id is None

    def handle(self, tag: Tag) -> Optional[Tag]:
        """Resolve the parent of `tag` and store the link.

        Args:
            tag: Snapshot of the tag that was created or changed

        Returns:
            The parent tag, or None when there was nothing to do
        """
        if not self.needs_parent(tag):
            logger.debug(f"Tag {tag.path} is top level or already linked, skipping")
            return None

        path = parent_path(tag.path)
        parent = next(
            candidate
            for candidate in self.tag_service.sync_tags(tag.user_id, [path])
            if candidate.path == path
        )

        if self.tag_service.tags.link_parent(tag.id, parent.id):
            logger.info(f"Linked tag {tag.path} to parent {parent.path} ({parent.id})")
        else:
            logger.info(f"Tag {tag.path} was already linked or is gone, left unchanged")
        return parent
