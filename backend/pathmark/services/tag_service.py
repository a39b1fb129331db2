"""Tag resolution and association reconciliation."""
import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from pathmark.models.path import canonical
from pathmark.models.tag import Tag, TaggedData, TaggedItem, TaggedResult, TaggedType
from pathmark.repositories.tag_repository import SearchTag, TagRepository
from pathmark.repositories.tagged_item_repository import SearchTaggedItem, TaggedItemRepository

logger = logging.getLogger(__name__)

ItemKey = Tuple[str, str]


class TagService:
    """Keeps persisted tags and associations in step with what callers want.

    Both sync operations diff the desired state against the store and write
    only the difference. Each write batch commits on its own: if a later
    batch fails the earlier ones stay applied, and running the same sync
    again finishes the job.
    """

    def __init__(self, session: Session):
        """Initialize tag service.

        Args:
            session: Database session shared by the repositories
        """
        self.session = session
        self.tags = TagRepository(session)

    def tagged_items(self, tagged_type: TaggedType) -> TaggedItemRepository:
        return TaggedItemRepository(self.session, tagged_type)

    def sync_tags(self, user_id: str, paths: Iterable[str]) -> List[Tag]:
        """Resolve tag paths to tags owned by `user_id`, creating missing ones.

        Args:
            user_id: Owner of the tags
            paths: Desired tag paths, in any form the path model accepts

        Returns:
            Newly created tags followed by the ones that already existed,
            exactly one per distinct canonical path
        """
        desired = {canonical(path) for path in paths}
        if not desired:
            return []

        existing = self.tags.find_tags(
            SearchTag(user_id=user_id, tag_path_vec=sorted(desired))
        )
        missing = sorted(desired - {tag.path for tag in existing})

        created = []
        if missing:
            created = self.tags.create_tags(
                [Tag.from_path(path, user_id=user_id) for path in missing]
            )
            logger.info(f"Created {len(created)} tags for user {user_id}")

        return created + existing

    def sync_tagged_items(
        self,
        tagged_type: TaggedType,
        items: List[TaggedItem],
        ref_ids: Optional[Iterable[str]] = None,
    ) -> List[TaggedItem]:
        """Reconcile stored associations with the desired `items`.

        Associations are matched on `(tag_id, ref_id)` only. Within the
        references touched by this call:

        1. desired pairs that are not stored are inserted, in caller order
        2. stored pairs that are still desired keep their identifier; only
           those whose value changed are updated
        3. stored pairs that are no longer desired are deleted

        Args:
            tagged_type: Association table to reconcile
            items: Desired associations; a repeated pair keeps its first
                position and its last value
            ref_ids: References whose associations are being replaced.
                Defaults to the references named in `items`; pass it to
                clear every association of a reference with an empty list.

        Returns:
            Created associations in caller order followed by the kept ones
            in stored order, all carrying their persisted identifiers
        """
        scope = sorted(set(ref_ids) if ref_ids is not None else {item.ref_id for item in items})
        if not scope:
            return []

        repo = self.tagged_items(tagged_type)
        existing: Dict[ItemKey, TaggedItem] = {
            item.key: item
            for item in repo.find_tagged_items(SearchTaggedItem(ref_id_vec=scope))
        }

        desired: Dict[ItemKey, Tuple[int, TaggedItem]] = {}
        for position, item in enumerate(items):
            if item.key in desired:
                position = desired[item.key][0]
            desired[item.key] = (position, item)
        ordered = sorted(desired.items(), key=lambda entry: entry[1][0])

        to_create = [item for key, (_, item) in ordered if key not in existing]
        # Kept items stay in stored order; a pure reorder writes nothing
        kept = [
            replace(stored, value=desired[key][1].value)
            for key, stored in existing.items()
            if key in desired
        ]
        to_update = [item for item in kept if item.value != existing[item.key].value]
        to_delete = [item for key, item in existing.items() if key not in desired]

        logger.debug(
            f"sync {tagged_type.value} items for {len(scope)} refs: "
            f"create={[item.tag_id for item in to_create]} "
            f"update={[item.tag_id for item in to_update]} "
            f"delete={[item.tag_id for item in to_delete]}"
        )

        created = repo.create_tagged_items(to_create) if to_create else []
        if to_update:
            repo.update_tagged_items(to_update)
        if to_delete:
            repo.delete_tagged_items(to_delete)

        return created + kept

    def find_tagged_data_from_refs(
        self, tagged_type: TaggedType, ref_ids: List[str]
    ) -> TaggedResult:
        """Load the associations of `ref_ids` together with their tags."""
        tagged_items = self.tagged_items(tagged_type).find_tagged_items(
            SearchTaggedItem(ref_id_vec=list(ref_ids))
        )
        tag_ids = sorted({item.tag_id for item in tagged_items})
        tags = self.tags.find_tags(SearchTag(id_vec=tag_ids)) if tag_ids else []
        return TaggedResult(tagged_type=tagged_type, tags=tags, tagged_items=tagged_items)

    def sync_tagged_data_from_ref(
        self,
        user_id: str,
        tagged_type: TaggedType,
        ref_id: str,
        inputs: List[TaggedData],
    ) -> TaggedResult:
        """Make `inputs` the complete tag set of one referenced entity.

        Tags are resolved (and created) first, then each input is bound to
        its resolved tag by path and the associations are reconciled.

        Args:
            user_id: Owner of the tags
            tagged_type: Kind of the referenced entity
            ref_id: Referenced entity
            inputs: Desired tags, each with the association value to store

        Returns:
            The resolved tags and the committed associations
        """
        tags = self.sync_tags(user_id, [data.tag.path for data in inputs])
        tags_by_path = {tag.path: tag for tag in tags}

        items = [
            TaggedItem(
                ref_id=ref_id,
                tag_id=tags_by_path[canonical(data.tag.path)].id,
                value=data.item.value,
            )
            for data in inputs
        ]
        tagged_items = self.sync_tagged_items(tagged_type, items, ref_ids=[ref_id])

        return TaggedResult(tagged_type=tagged_type, tags=tags, tagged_items=tagged_items)
