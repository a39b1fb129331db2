"""Bookmark endpoints."""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from pathmark.api.deps import dispatch_tag_updates, get_dispatcher, get_tag_service
from pathmark.api.v1.tags import validate_tag_path
from pathmark.core.auth import get_current_user_id
from pathmark.core.database import get_db
from pathmark.models.bookmark import Bookmark
from pathmark.models.tag import Tag, TaggedData, TaggedItem, TaggedType
from pathmark.repositories.bookmark_repository import BookmarkRepository, SearchBookmark
from pathmark.services.tag_service import TagService
from pathmark.workers.taskqueue import Dispatcher

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/bookmark", tags=["bookmarks"])


class BookmarkRequest(BaseModel):
    """Request model for creating or updating a bookmark.

    Omitted fields are left unchanged on update. `tags`, when given, becomes
    the complete tag set of the bookmark, in display order.
    """

    title: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def check_tags(cls, tags: Optional[List[str]]) -> Optional[List[str]]:
        if tags is not None:
            for path in tags:
                validate_tag_path(path)
        return tags


class BookmarkResponse(BaseModel):
    """Response model for bookmark data."""

    id: str
    title: Optional[str]
    url: Optional[str]
    description: Optional[str]
    tags: List[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def with_tags(cls, bookmark: Bookmark, tagged: List[TaggedData]) -> "BookmarkResponse":
        return cls(
            id=bookmark.id,
            title=bookmark.title,
            url=bookmark.url,
            description=bookmark.description,
            tags=[data.tag.path for data in tagged],
            created_at=bookmark.created_at,
            updated_at=bookmark.updated_at,
        )


def get_bookmark_repository(session: Session = Depends(get_db)) -> BookmarkRepository:
    return BookmarkRepository(session)


def _sync_bookmark_tags(
    service: TagService,
    dispatcher: Dispatcher,
    user_id: str,
    bookmark: Bookmark,
    paths: List[str],
) -> List[TaggedData]:
    result = service.sync_tagged_data_from_ref(
        user_id,
        TaggedType.BOOKMARK,
        bookmark.id,
        [TaggedData(Tag.from_path(path), TaggedItem(ref_id=bookmark.id)) for path in paths],
    )
    dispatch_tag_updates(dispatcher, result.tags)
    # Read back so the response shows the stored order
    return service.find_tagged_data_from_refs(
        TaggedType.BOOKMARK, [bookmark.id]
    ).find_tags(bookmark.id)


@router.get("", response_model=List[BookmarkResponse])
def list_bookmarks(
    user_id: str = Depends(get_current_user_id),
    bookmarks: BookmarkRepository = Depends(get_bookmark_repository),
    service: TagService = Depends(get_tag_service),
):
    """List the caller's bookmarks with their tag paths."""
    found = bookmarks.find_bookmarks(SearchBookmark(user_id=user_id))
    tagged = service.find_tagged_data_from_refs(
        TaggedType.BOOKMARK, [bookmark.id for bookmark in found]
    )
    return [
        BookmarkResponse.with_tags(bookmark, tagged.find_tags(bookmark.id))
        for bookmark in found
    ]


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
def get_bookmark(
    bookmark_id: str,
    user_id: str = Depends(get_current_user_id),
    bookmarks: BookmarkRepository = Depends(get_bookmark_repository),
    service: TagService = Depends(get_tag_service),
):
    bookmark = bookmarks.find_one(SearchBookmark(id=bookmark_id, user_id=user_id))
    tagged = service.find_tagged_data_from_refs(TaggedType.BOOKMARK, [bookmark.id])
    return BookmarkResponse.with_tags(bookmark, tagged.find_tags(bookmark.id))


@router.post("", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
def create_bookmark(
    payload: BookmarkRequest,
    user_id: str = Depends(get_current_user_id),
    bookmarks: BookmarkRepository = Depends(get_bookmark_repository),
    service: TagService = Depends(get_tag_service),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """Save a bookmark and tag it."""
    bookmark = bookmarks.create(
        Bookmark(
            user_id=user_id,
            title=payload.title,
            url=payload.url,
            description=payload.description,
        )
    )
    logger.info(f"User {user_id} created bookmark {bookmark.id}")

    tagged: List[TaggedData] = []
    if payload.tags:
        tagged = _sync_bookmark_tags(service, dispatcher, user_id, bookmark, payload.tags)
    return BookmarkResponse.with_tags(bookmark, tagged)


@router.put("/{bookmark_id}", response_model=BookmarkResponse)
def update_bookmark(
    bookmark_id: str,
    payload: BookmarkRequest,
    user_id: str = Depends(get_current_user_id),
    bookmarks: BookmarkRepository = Depends(get_bookmark_repository),
    service: TagService = Depends(get_tag_service),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """Update bookmark fields and, if `tags` is given, replace its tags."""
    bookmark = bookmarks.find_one(SearchBookmark(id=bookmark_id, user_id=user_id))

    if payload.title is not None:
        bookmark.title = payload.title
    if payload.url is not None:
        bookmark.url = payload.url
    if payload.description is not None:
        bookmark.description = payload.description
    bookmark = bookmarks.update(bookmark)

    if payload.tags is not None:
        tagged = _sync_bookmark_tags(service, dispatcher, user_id, bookmark, payload.tags)
    else:
        tagged = service.find_tagged_data_from_refs(
            TaggedType.BOOKMARK, [bookmark.id]
        ).find_tags(bookmark.id)
    return BookmarkResponse.with_tags(bookmark, tagged)


@router.delete("/{bookmark_id}", response_model=BookmarkResponse)
def delete_bookmark(
    bookmark_id: str,
    user_id: str = Depends(get_current_user_id),
    bookmarks: BookmarkRepository = Depends(get_bookmark_repository),
    service: TagService = Depends(get_tag_service),
):
    """Delete a bookmark together with its tag associations."""
    bookmark = bookmarks.find_one(SearchBookmark(id=bookmark_id, user_id=user_id))
    service.sync_tagged_items(TaggedType.BOOKMARK, [], ref_ids=[bookmark.id])
    bookmarks.delete(bookmark.id)
    logger.info(f"User {user_id} deleted bookmark {bookmark.id}")
    return BookmarkResponse.with_tags(bookmark, [])
