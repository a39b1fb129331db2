"""Logging setup."""
import logging
import sys

from pathmark.core.config import settings


def setup_logging() -> None:
    """Setup basic logging for the application."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )

    # Enable SQL query logging only on request
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.SQL_ECHO else logging.WARNING
    )
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)

    logging.getLogger(__name__).info(f"Logging configured at level {settings.LOG_LEVEL}")
