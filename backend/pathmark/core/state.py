"""Process-wide state shared by request handlers and workers."""
from dataclasses import dataclass

from sqlalchemy.orm import sessionmaker

from pathmark.workers.taskqueue import Dispatcher


@dataclass(frozen=True)
class AppState:
    """Created once at startup and handed to every consumer.

    Attributes:
        session_factory: Opens a new database session
        dispatcher: Producer half of the background task channel
    """

    session_factory: sessionmaker
    dispatcher: Dispatcher
