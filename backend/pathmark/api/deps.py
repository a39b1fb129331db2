"""Shared endpoint dependencies."""
import logging
from typing import Iterable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from pathmark.core.database import get_db
from pathmark.core.errors import ChannelClosed
from pathmark.core.state import AppState
from pathmark.models.tag import Tag
from pathmark.services.tag_service import TagService
from pathmark.workers.taskqueue import Dispatcher
from pathmark.workers.tasks import TagUpdated

logger = logging.getLogger(__name__)


def get_app_state(request: Request) -> AppState:
    return request.app.state.app_state


def get_dispatcher(state: AppState = Depends(get_app_state)) -> Dispatcher:
    return state.dispatcher


def get_tag_service(session: Session = Depends(get_db)) -> TagService:
    return TagService(session)


def dispatch_tag_updates(dispatcher: Dispatcher, tags: Iterable[Tag]) -> None:
    """Queue hierarchy maintenance for each tag.

    The request has already succeeded at this point, so a closed channel is
    logged rather than reported to the client.
    """
    for tag in tags:
        try:
            dispatcher.dispatch(TagUpdated(tag))
        except ChannelClosed:
            logger.error(f"Could not queue hierarchy update for {tag.path}: channel closed")
