"""FastAPI application and background worker lifecycle."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from pathmark import __version__
from pathmark.api.v1.router import api_router
from pathmark.core.config import settings
from pathmark.core.database import SessionLocal, init_db
from pathmark.core.errors import NotFoundError, PathmarkError
from pathmark.core.logging_config import setup_logging
from pathmark.core.state import AppState
from pathmark.workers.taskqueue import WorkerPool, channel

logger = logging.getLogger(__name__)


def create_app(
    session_factory: Optional[sessionmaker] = None,
    worker_count: Optional[int] = None,
) -> FastAPI:
    """Build the application.

    Args:
        session_factory: Session factory for workers (defaults to SessionLocal)
        worker_count: Size of the worker pool (defaults to settings.WORKER_COUNT)
    """
    setup_logging()
    session_factory = session_factory or SessionLocal
    worker_count = settings.WORKER_COUNT if worker_count is None else worker_count

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(session_factory.kw["bind"])

        dispatcher, worker = channel()
        state = AppState(session_factory=session_factory, dispatcher=dispatcher)
        pool = WorkerPool(worker, state, size=worker_count)
        pool.start()
        app.state.app_state = state
        app.state.worker_pool = pool
        try:
            yield
        finally:
            pool.stop()

    app = FastAPI(title=settings.PROJECT_NAME, version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Accept", "Authorization", "Content-Type"],
    )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})

    @app.exception_handler(PathmarkError)
    async def store_error_handler(request: Request, exc: PathmarkError) -> JSONResponse:
        logger.error(f"Request {request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
