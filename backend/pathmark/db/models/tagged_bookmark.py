"""Bookmark-Tag association model."""
from sqlalchemy import Column, Index, String, Text, UniqueConstraint

from pathmark.core.database import Base


class TaggedBookmarkRecord(Base):
    """Association between a bookmark and a tag, with an optional value."""

    __tablename__ = "tagged_bookmark"

    id = Column(String(26), primary_key=True)
    # Opaque references, removing a bookmark or tag leaves the row alone
    ref_id = Column(String(26), nullable=False)
    tag_id = Column(String(26), nullable=False)
    value = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("tag_id", "ref_id", name="uq_tagged_bookmark_tag_ref"),
        Index("idx_tagged_bookmark_ref_id", "ref_id"),
    )
