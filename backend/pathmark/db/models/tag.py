"""Tag model with path-addressed hierarchy."""
from sqlalchemy import Column, DateTime, Index, Integer, String, UniqueConstraint

from pathmark.core.database import Base


class TagRecord(Base):
    """Hierarchical tag addressed by its slash-delimited path.

    `prefix`, `name` and `depth` are derived from `path` and stored so they
    can be filtered on. `parent_id` is filled in by the background hierarchy
    job and never cleared.
    """

    __tablename__ = "tag"

    id = Column(String(26), primary_key=True)
    path = Column(String(1024), nullable=False)
    prefix = Column(String(1024), nullable=False)
    name = Column(String(255), nullable=False)
    label = Column(String(255), nullable=True)
    parent_id = Column(String(26), nullable=True)
    depth = Column(Integer, nullable=False)
    value_type = Column(String(50), nullable=True)
    user_id = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True))

    # Two resolve-or-create calls racing on the same path must not both win
    __table_args__ = (
        UniqueConstraint("user_id", "path", name="uq_tag_user_path"),
        Index("idx_tag_parent_id", "parent_id"),
    )
