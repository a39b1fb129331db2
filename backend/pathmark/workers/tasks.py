"""
Background tasks.

Tasks are small value objects put on the task channel by request handlers
and executed by worker threads. Each run opens its own database session.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pathmark.models.tag import Tag
from pathmark.services.tag_hierarchy_service import TagHierarchyService

if TYPE_CHECKING:
    from pathmark.core.state import AppState

logger = logging.getLogger(__name__)


class Task:
    """Base class for everything that can be dispatched."""

    def run(self, state: "AppState") -> None:
        raise NotImplementedError


@dataclass
class EmptyTask(Task):
    """Explicit no-op."""

    def run(self, state: "AppState") -> None:
        logger.debug("EmptyTask discarded")


@dataclass
class TagUpdated(Task):
    """A tag was created or changed; link it to its parent if needed."""

    tag: Tag

    def __repr__(self) -> str:
        return f"TagUpdated({self.tag.path!r}, id={self.tag.id!r})"

    def run(self, state: "AppState") -> None:
        logger.info(f"TagUpdated start - {self.tag.path}")
        with state.session_factory() as session:
            parent = TagHierarchyService(session).handle(self.tag)
        logger.info(
            f"TagUpdated finish - {self.tag.path}"
            + (f" parent {parent.path}" if parent is not None else "")
        )
