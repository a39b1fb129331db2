"""Base repository with common statement execution."""
import logging
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

from sqlalchemy import Table
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable

from pathmark.core.errors import NotFoundError, QueryFailure

logger = logging.getLogger(__name__)

EntityType = TypeVar("EntityType")


class BaseRepository(Generic[EntityType]):
    """Generic base repository that reads rows into domain entities.

    Reads return plain row mappings which are decoded by `decoder`. Every
    write commits on its own, so a multi-statement operation is not atomic.
    """

    entity_name = "row"

    def __init__(
        self,
        table: Table,
        session: Session,
        decoder: Callable[[Mapping[str, Any]], EntityType],
    ):
        """Initialize repository.

        Args:
            table: SQLAlchemy table the repository reads and writes
            session: Database session
            decoder: Converts one row mapping into a domain entity
        """
        self.table = table
        self.session = session
        self.decoder = decoder

    def fetch(self, query: Executable) -> List[EntityType]:
        """Run a SELECT and decode every returned row.

        Args:
            query: Select statement

        Returns:
            List of decoded entities

        Raises:
            QueryFailure: If the statement failed
            DecodeFailure: If a row could not be decoded
        """
        try:
            rows = self.session.execute(query).mappings().all()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise QueryFailure(
                f"Failed to read from {self.table.name}", statement=str(query), error=str(e)
            ) from e
        return [self.decoder(row) for row in rows]

    def fetch_one(self, query: Executable, **criteria: Any) -> EntityType:
        """Run a SELECT expected to match a single row.

        Raises:
            NotFoundError: If nothing matched
        """
        rows = self.fetch(query)
        if not rows:
            raise NotFoundError(self.entity_name, **criteria)
        return rows[0]

    def execute(self, statement: Any, params: Optional[Dict[str, Any]] = None) -> int:
        """Execute a write statement and commit it.

        Args:
            statement: Insert, update or delete statement
            params: Bound parameters for textual statements

        Returns:
            Number of affected rows as reported by the driver
        """
        try:
            result = self.session.execute(statement, params or {})
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Write against {self.table.name} failed: {e}")
            raise QueryFailure(
                f"Failed to write to {self.table.name}", statement=str(statement), error=str(e)
            ) from e
        return result.rowcount
