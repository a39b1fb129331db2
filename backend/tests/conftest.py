"""Pytest configuration and fixtures."""
import os
from typing import Generator, Tuple

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from pathmark.core.config import settings
from pathmark.core.database import Base, create_db_engine, create_session_factory, get_db
from pathmark.core.state import AppState
from pathmark.db import models  # noqa: F401
from pathmark.main import create_app
from pathmark.services.tag_service import TagService
from pathmark.workers.taskqueue import Dispatcher, Worker, channel

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def make_token(user_id: str) -> str:
    return jwt.encode({"sub": user_id}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture(scope="function")
def engine(tmp_path) -> Generator[Engine, None, None]:
    """Create a fresh database for each test.

    A file-backed SQLite database is used so worker threads see the same
    data; set TEST_DATABASE_URL to run against another server.
    """
    url = os.getenv("TEST_DATABASE_URL", f"sqlite:///{tmp_path / 'pathmark_test.db'}")
    engine = create_db_engine(url, echo=False)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine: Engine) -> sessionmaker:
    return create_session_factory(engine)


@pytest.fixture(scope="function")
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def tag_service(db: Session) -> TagService:
    return TagService(db)


@pytest.fixture
def task_channel() -> Tuple[Dispatcher, Worker]:
    return channel()


@pytest.fixture
def app_state(session_factory: sessionmaker, task_channel) -> AppState:
    dispatcher, _ = task_channel
    return AppState(session_factory=session_factory, dispatcher=dispatcher)


@pytest.fixture(scope="function")
def client(session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    """Create a test client authenticated as USER_ID with one worker."""
    app = create_app(session_factory=session_factory, worker_count=1)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        test_client.headers.update({"Authorization": f"Bearer {make_token(USER_ID)}"})
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def other_user_headers() -> dict:
    """Authorization header for a second user."""
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}
