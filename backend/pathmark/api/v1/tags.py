"""Tag endpoints."""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.exc import IntegrityError

from pathmark.api.deps import dispatch_tag_updates, get_dispatcher, get_tag_service
from pathmark.core.auth import get_current_user_id
from pathmark.core.errors import QueryFailure
from pathmark.models.path import canonical, derive
from pathmark.models.tag import Tag
from pathmark.repositories.tag_repository import SearchTag
from pathmark.services.tag_service import TagService
from pathmark.workers.taskqueue import Dispatcher

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/tag", tags=["tags"])


def validate_tag_path(path: str) -> str:
    if not derive(path).name:
        raise ValueError("tag path needs at least one non-empty segment")
    return path


class CreateTagRequest(BaseModel):
    """Request model for creating a tag."""

    path: str = Field(..., min_length=1, max_length=1024)
    label: Optional[str] = None
    value_type: Optional[str] = None

    @field_validator("path")
    @classmethod
    def check_path(cls, path: str) -> str:
        return validate_tag_path(path)


class UpdateTagRequest(BaseModel):
    """Request model for updating a tag; unset fields are kept."""

    path: Optional[str] = Field(default=None, min_length=1, max_length=1024)
    label: Optional[str] = None
    value_type: Optional[str] = None

    @field_validator("path")
    @classmethod
    def check_path(cls, path: Optional[str]) -> Optional[str]:
        return validate_tag_path(path) if path is not None else path


class TagResponse(BaseModel):
    """Response model for tag data."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    path: str
    prefix: str
    name: str
    label: Optional[str]
    parent_id: Optional[str]
    depth: int
    value_type: Optional[str]
    user_id: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


def _path_taken(path: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Tag {path} already exists",
    )


def _ensure_path_free(service: TagService, user_id: str, path: str) -> None:
    if service.tags.find_tags(SearchTag(user_id=user_id, tag_path_vec=[path])):
        raise _path_taken(path)


def _ensure_prefix_kept(current: Tag, renamed: Tag) -> None:
    # A linked tag keeps its parent for good, so it may only move within it
    if current.is_linked and renamed.prefix != current.prefix:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f"Tag {current.path} is linked under {current.prefix}"
                f" and cannot move to {renamed.prefix}"
            ),
        )


@router.get("", response_model=List[TagResponse])
def list_tags(
    path: Optional[List[str]] = Query(None),
    parent_id: Optional[str] = None,
    depth: Optional[int] = None,
    user_id: str = Depends(get_current_user_id),
    service: TagService = Depends(get_tag_service),
):
    """List the caller's tags, optionally filtered."""
    return service.tags.find_tags(
        SearchTag(
            user_id=user_id,
            tag_path_vec=[canonical(p) for p in path] if path else None,
            parent_id=parent_id,
            depth=depth,
        )
    )


@router.get("/{tag_id}", response_model=TagResponse)
def get_tag(
    tag_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TagService = Depends(get_tag_service),
):
    return service.tags.find_one(SearchTag(id_vec=[tag_id], user_id=user_id))


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(
    payload: CreateTagRequest,
    user_id: str = Depends(get_current_user_id),
    service: TagService = Depends(get_tag_service),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """
    Create a tag from its path.

    Linking the tag to its parent happens in the background.
    """
    tag = Tag.from_path(
        payload.path,
        user_id=user_id,
        label=payload.label,
        value_type=payload.value_type,
    )
    _ensure_path_free(service, user_id, tag.path)

    try:
        (created,) = service.tags.create_tags([tag])
    except QueryFailure as e:
        # Lost a race against a concurrent create of the same path
        if isinstance(e.__cause__, IntegrityError):
            raise _path_taken(tag.path) from e
        raise
    logger.info(f"User {user_id} created tag {created.path}")

    dispatch_tag_updates(dispatcher, [created])
    return created


@router.put("/{tag_id}", response_model=TagResponse)
def update_tag(
    tag_id: str,
    payload: UpdateTagRequest,
    user_id: str = Depends(get_current_user_id),
    service: TagService = Depends(get_tag_service),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """Rename a tag or change its label / value type.

    A tag already linked to its parent can only be renamed within that
    parent; moving it elsewhere is rejected with 409.
    """
    tag = service.tags.find_one(SearchTag(id_vec=[tag_id], user_id=user_id))

    if payload.path is not None and canonical(payload.path) != tag.path:
        renamed = tag.with_path(payload.path)
        _ensure_prefix_kept(tag, renamed)
        _ensure_path_free(service, user_id, renamed.path)
        tag = renamed
    if payload.label is not None:
        tag.label = payload.label
    if payload.value_type is not None:
        tag.value_type = payload.value_type

    try:
        tag = service.tags.update_tag(tag)
    except QueryFailure as e:
        if isinstance(e.__cause__, IntegrityError):
            raise _path_taken(tag.path) from e
        raise
    dispatch_tag_updates(dispatcher, [tag])
    return tag


@router.delete("/{tag_id}", response_model=TagResponse)
def delete_tag(
    tag_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TagService = Depends(get_tag_service),
):
    tag = service.tags.find_one(SearchTag(id_vec=[tag_id], user_id=user_id))
    service.tags.delete_tag(tag.id)
    logger.info(f"User {user_id} deleted tag {tag.path}")
    return tag
