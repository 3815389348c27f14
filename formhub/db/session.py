"""SQLModel engine and session management."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from formhub.core.config import Settings


def build_engine(settings: Settings) -> Engine:
    """Create the engine for the configured database URL."""
    connect_args = {}
    if settings.database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        settings.database_url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def init_db(engine: Engine) -> None:
    # Import models so their tables are registered on the metadata
    import formhub.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


@contextmanager
def get_session(engine: Engine) -> Iterator[Session]:
    """Get a database session as a context manager (for use with 'with' statement).

    For FastAPI dependency injection, use ``formhub.api.deps.get_db`` instead,
    which resolves the engine from the application state.
    """
    session = Session(engine)
    try:
        yield session
    finally:
        session.close()
