"""Bookmark model."""
from sqlalchemy import Column, DateTime, String, Text

from pathmark.core.database import Base


class BookmarkRecord(Base):
    """A saved link owned by one user."""

    __tablename__ = "bookmark"

    id = Column(String(26), primary_key=True)
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(500), nullable=True)
    url = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    resource_id = Column(String(26), nullable=True)
    created_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True))
