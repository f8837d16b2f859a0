"""Run the customers API against the configured database."""

from __future__ import annotations

import argparse
import logging

from src import config

logger = logging.getLogger(__name__)


def add_serve_parser(subparsers) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "serve",
        help="Serve the HTTP API using DATABASE_* settings",
    )
    parser.add_argument(
        "--host",
        default=config.API_HOST,
        help="Interface to bind (default: %(default)s)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.API_PORT,
        help="Port to bind; 0 picks a free port (default: %(default)s)",
    )
    parser.set_defaults(func=handle_serve_command)
    return parser


def run_until_interrupted(app, host: str, port: int) -> int:
    """Serve ``app`` in the foreground until Ctrl-C or server exit."""
    from backend.app.server import ApplicationServer, ServerStartupError

    server = ApplicationServer(app, host=host, port=port, log_level="info")
    try:
        server.start()
    except ServerStartupError as exc:
        logger.error("Server failed to start: %s", exc)
        return 1

    print(f"Customers API listening on {server.base_url}")
    try:
        server.wait()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        server.stop()
    return 0


def handle_serve_command(args) -> int:
    from backend.app.main import create_app

    try:
        settings = config.get_database_settings()
    except config.ConfigurationError as exc:
        logger.error("Invalid database configuration: %s", exc)
        return 1

    return run_until_interrupted(create_app(settings), args.host, args.port)
