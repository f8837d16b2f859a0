"""Customers API - FastAPI application factory.

There is no module-level ``app``: the database descriptor is late-bound by
whoever calls :func:`create_app`. To run with uvicorn directly::

    uvicorn --factory backend.app.main:create_app
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.config import DatabaseSettings, get_database_settings
from src.models.database import DatabaseManager
from src.models.repository import CustomerRepository
from src.models.schema import apply_schema

from .customers import build_router
from .lifecycle import (
    SchemaInitializer,
    build_lifespan,
    check_db_health,
    get_db_manager,
    is_ready,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: DatabaseSettings | None = None,
    *,
    schema_initializer: SchemaInitializer = apply_schema,
) -> FastAPI:
    """Wire the application against an explicit database descriptor.

    ``settings`` defaults to the environment, read at call time. The store
    is created here and handed to the router; the schema is applied by the
    lifespan before any request is served.
    """
    if settings is None:
        settings = get_database_settings()
    logger.info("Creating app for database %s", settings.redacted())

    db_manager = DatabaseManager(settings)
    repository = CustomerRepository(db_manager)

    app = FastAPI(
        title="Customers API",
        lifespan=build_lifespan(db_manager, schema_initializer=schema_initializer),
    )
    app.state.settings = settings
    app.include_router(build_router(repository))

    @app.get("/health")
    def health(request: Request):
        healthy, message = check_db_health(get_db_manager(request))
        healthy = healthy and is_ready(request)
        return JSONResponse(
            status_code=200 if healthy else 503,
            content={
                "status": "healthy" if healthy else "unhealthy",
                "database": message,
            },
        )

    return app
