"""API v1 router."""
from fastapi import APIRouter

from pathmark.api.v1 import bookmarks, tags

api_router: APIRouter = APIRouter()
api_router.include_router(tags.router)
api_router.include_router(bookmarks.router)
