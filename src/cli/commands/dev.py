"""Local development mode backed by a throwaway PostgreSQL container.

Starts a container, binds the app to it, optionally seeds sample rows and
serves until interrupted. The container is always removed on exit.
"""

from __future__ import annotations

import argparse
import logging

from src import config

from .serve import run_until_interrupted

logger = logging.getLogger(__name__)

SAMPLE_CUSTOMERS = [
    {"name": "John", "email": "john@example.com"},
    {"name": "Jane", "email": "jane@example.com"},
]


def add_dev_parser(subparsers) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "dev",
        help="Serve the API against an ephemeral PostgreSQL container",
    )
    parser.add_argument(
        "--image",
        default=config.POSTGRES_IMAGE,
        help="PostgreSQL image (default: %(default)s)",
    )
    parser.add_argument(
        "--host",
        default=config.API_HOST,
        help="Interface to bind (default: %(default)s)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=0,
        help="Port to bind; 0 picks a free port (default: %(default)s)",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Insert sample customers after startup",
    )
    parser.set_defaults(func=handle_dev_command)
    return parser


def handle_dev_command(args) -> int:
    from backend.app.main import create_app
    from src.models.database import DatabaseManager
    from src.models.repository import CustomerRepository
    from src.models.schema import apply_schema
    from src.testing.postgres import EphemeralPostgres, ProvisioningError

    postgres = EphemeralPostgres(
        args.image,
        startup_timeout=config.POSTGRES_STARTUP_TIMEOUT,
    )
    try:
        postgres.start()
    except ProvisioningError as exc:
        logger.error("%s", exc)
        return 1

    try:
        settings = postgres.settings()
        print(
            f"Ephemeral database at {settings.host}:{settings.port}/"
            f"{settings.database} (user {settings.user})"
        )

        if args.seed:
            with DatabaseManager(settings) as db:
                apply_schema(db.engine)
                CustomerRepository(db).save_all(SAMPLE_CUSTOMERS)
            logger.info("Seeded %d sample customers", len(SAMPLE_CUSTOMERS))

        return run_until_interrupted(create_app(settings), args.host, args.port)
    finally:
        postgres.stop()
