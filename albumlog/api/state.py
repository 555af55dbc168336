"""Shared application state (injected into routes)."""
from typing import Iterator

from fastapi import Depends
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from albumlog.config import DATABASE_URL
from albumlog.models.tables import Base


class AppState:
    """Engine and session factory, built once and reused by every request."""

    def __init__(self, database_url: str = DATABASE_URL) -> None:
        kwargs = {}
        if database_url.startswith("sqlite"):
            # Handlers run in the threadpool
            kwargs["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        self.database_url = database_url
        self.engine = create_engine(database_url, **kwargs)
        self._session_factory = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )

    def init_db(self) -> None:
        Base.metadata.create_all(self.engine)

    def session(self) -> Session:
        return self._session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


_state = AppState()


def get_state() -> AppState:
    return _state


def get_db(state: AppState = Depends(get_state)) -> Iterator[Session]:
    db = state.session()
    try:
        yield db
    finally:
        db.close()
