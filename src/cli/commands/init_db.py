"""Apply the customers schema to the configured database."""

from __future__ import annotations

import argparse
import logging

from src import config
from src.models.database import DatabaseManager
from src.models.schema import SchemaInitializationError, apply_schema

logger = logging.getLogger(__name__)


def add_init_db_parser(subparsers) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "init-db",
        help="Create the customers table if it does not exist",
    )
    parser.set_defaults(func=handle_init_db_command)
    return parser


def handle_init_db_command(args) -> int:
    try:
        settings = config.get_database_settings()
    except config.ConfigurationError as exc:
        logger.error("Invalid database configuration: %s", exc)
        return 1

    with DatabaseManager(settings) as db:
        try:
            apply_schema(db.engine)
        except SchemaInitializationError as exc:
            logger.error("%s", exc)
            return 1

    print(f"Schema applied to {settings.host}:{settings.port}/{settings.database}")
    return 0
