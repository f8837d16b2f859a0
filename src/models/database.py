"""Database engine and session management for PostgreSQL."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.config import DatabaseSettings, get_database_settings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages the engine and hands out short-lived sessions."""

    def __init__(
        self,
        database: DatabaseSettings | str | None = None,
        *,
        echo: bool = False,
    ):
        """
        Initialize DatabaseManager.

        ``database`` may be a :class:`DatabaseSettings` descriptor or a
        SQLAlchemy URL. When omitted the descriptor is read from the
        environment at call time, never at import time.
        """
        if database is None:
            database = get_database_settings()
        if isinstance(database, DatabaseSettings):
            database_url = database.url
        else:
            database_url = database

        if "postgresql" not in database_url.lower():
            raise ValueError(
                "DatabaseManager requires a PostgreSQL database URL. "
                f"Got: {database_url.split('://', 1)[0]}://..."
            )

        self.database_url = database_url
        # No connection is opened here; the first query connects.
        self.engine: Engine = create_engine(database_url, echo=echo)
        self._session_factory = sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
        )

    def get_session(self):
        """Context manager for getting a database session.

        Usage:
            with db_manager.get_session() as session:
                # Use session here
                pass
        """

        @contextmanager
        def session_context() -> Iterator[Session]:
            session = self._session_factory()
            try:
                yield session
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()

        return session_context()

    def ping(self) -> None:
        """Run ``SELECT 1``; raises the driver error if unreachable."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def check_health(self) -> tuple[bool, str]:
        """Lightweight health check returning ``(is_healthy, message)``."""
        try:
            self.ping()
        except SQLAlchemyError as exc:
            logger.warning("Database health check failed: %s", exc)
            return False, f"Database connection failed: {exc.__class__.__name__}"
        return True, "Database connection OK"

    def close(self):
        """Dispose the engine and its connection pool."""
        self.engine.dispose()

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
