"""Database package."""
from pathmark.core.database import Base, SessionLocal, get_db

__all__ = ["Base", "SessionLocal", "get_db"]
