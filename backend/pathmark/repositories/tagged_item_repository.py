"""Association repository, one instance per tagged type."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import insert, select, text
from sqlalchemy.orm import Session

from pathmark.core import util
from pathmark.core.database import Base
from pathmark.db import models  # noqa: F401  (registers association tables)
from pathmark.models.tag import TaggedItem, TaggedType
from pathmark.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


@dataclass
class SearchTaggedItem:
    tag_id_vec: Optional[List[str]] = None
    ref_id_vec: Optional[List[str]] = None


def values_cte(
    columns: Sequence[str], rows: Sequence[Dict[str, Any]], name: str = "_data"
) -> Tuple[str, Dict[str, Any]]:
    """Render `WITH name (columns) AS (VALUES ...)` with bound parameters.

    Args:
        columns: Column names of the generated value table
        rows: One dict per row, keyed by column name
        name: Name of the common table expression

    Returns:
        The SQL fragment and its parameters
    """
    params: Dict[str, Any] = {}
    tuples = []
    for index, row in enumerate(rows):
        placeholders = []
        for column in columns:
            key = f"{column}_{index}"
            params[key] = row[column]
            placeholders.append(f":{key}")
        tuples.append(f"({', '.join(placeholders)})")

    sql = f"WITH {name} ({', '.join(columns)}) AS (VALUES {', '.join(tuples)})"
    return sql, params


class TaggedItemRepository(BaseRepository[TaggedItem]):
    """Bulk reads and writes of associations for one `TaggedType`."""

    entity_name = "tagged item"

    def __init__(self, session: Session, tagged_type: TaggedType):
        """Initialize association repository.

        Args:
            session: Database session
            tagged_type: Selects the association table
        """
        super().__init__(Base.metadata.tables[tagged_type.table], session, TaggedItem.from_row)
        self.tagged_type = tagged_type

    def find_tagged_items(self, search: SearchTaggedItem) -> List[TaggedItem]:
        """List associations matching every given filter.

        Rows come back in identifier order, which follows creation order.
        """
        t = self.table
        query = select(t)
        if search.tag_id_vec is not None:
            query = query.where(t.c.tag_id.in_(search.tag_id_vec))
        if search.ref_id_vec is not None:
            query = query.where(t.c.ref_id.in_(search.ref_id_vec))
        return self.fetch(query.order_by(t.c.id))

    def create_tagged_items(self, items: List[TaggedItem]) -> List[TaggedItem]:
        """Insert associations in one multi-row statement.

        Identifiers are handed out in ascending order along `items` so that
        reading back by identifier reproduces the caller's order.

        Args:
            items: Associations to insert, in the order they should be kept

        Returns:
            The inserted associations with their new identifiers
        """
        if not items:
            return []

        ids = sorted(util.new_uid() for _ in items)
        created = [
            TaggedItem(id=item_id, ref_id=item.ref_id, tag_id=item.tag_id, value=item.value)
            for item_id, item in zip(ids, items)
        ]
        self.execute(insert(self.table).values([vars(item) for item in created]))
        return created

    def update_tagged_items(self, items: List[TaggedItem]) -> List[TaggedItem]:
        """Replace the stored value of existing associations by identifier.

        Issued as one UPDATE joined against a generated value table.
        """
        if not items:
            return []

        cte, params = values_cte(("id", "value"), [vars(item) for item in items])
        self.execute(
            text(
                f"{cte} UPDATE {self.table.name} SET value = _data.value"
                f" FROM _data WHERE {self.table.name}.id = _data.id"
            ),
            params,
        )
        return list(items)

    def delete_tagged_items(self, items: List[TaggedItem]) -> List[TaggedItem]:
        """Delete associations by identifier in one statement."""
        if not items:
            return []

        cte, params = values_cte(("id",), [vars(item) for item in items])
        self.execute(
            text(
                f"{cte} DELETE FROM {self.table.name} WHERE EXISTS"
                f" (SELECT 1 FROM _data WHERE {self.table.name}.id = _data.id)"
            ),
            params,
        )
        return list(items)
