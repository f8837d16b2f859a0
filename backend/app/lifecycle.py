"""FastAPI lifecycle management for shared resources.

This module centralizes startup and shutdown handling for the
DatabaseManager (engine/connection pool) and the customers schema:

- startup applies ``schema.sql`` before the server accepts traffic; a
  failure is fatal and propagates out of the lifespan
- shutdown disposes the engine

It also provides the small request-scoped accessors used by the health
endpoint and by tests.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from sqlalchemy.engine import Engine

from src.models.database import DatabaseManager
from src.models.schema import apply_schema

logger = logging.getLogger(__name__)

SchemaInitializer = Callable[[Engine], None]


def build_lifespan(
    db_manager: DatabaseManager,
    *,
    schema_initializer: SchemaInitializer = apply_schema,
):
    """Return a lifespan handler bound to ``db_manager``.

    Args:
        db_manager: The manager whose engine the schema is applied to and
            which is disposed on shutdown.
        schema_initializer: Callable applying the schema; tests swap it.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting resource initialization...")
        app.state.ready = False
        app.state.db_manager = db_manager

        # Not caught: a schema failure must abort startup.
        schema_initializer(db_manager.engine)

        app.state.ready = True
        logger.info("All resources initialized, app is ready")
        try:
            yield
        finally:
            logger.info("Starting resource cleanup...")
            app.state.ready = False
            try:
                db_manager.close()
                logger.info("DatabaseManager engine disposed")
            except Exception as exc:
                logger.exception("Error disposing DatabaseManager", exc_info=exc)
            logger.info("Resource cleanup complete")

    return lifespan


def get_db_manager(request: Request) -> DatabaseManager | None:
    """Dependency that provides the shared DatabaseManager.

    Returns None if startup has not attached one.
    """
    return getattr(request.app.state, "db_manager", None)


def is_ready(request: Request) -> bool:
    """True once startup completed and until shutdown begins."""
    return getattr(request.app.state, "ready", False)


def check_db_health(db_manager: DatabaseManager | None) -> tuple[bool, str]:
    """Perform a lightweight database health check.

    Returns:
        Tuple of (is_healthy, message)
    """
    if db_manager is None:
        return False, "DatabaseManager not initialized"
    return db_manager.check_health()
