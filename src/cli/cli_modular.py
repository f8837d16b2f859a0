"""Streamlined CLI interface with modular command structure."""

from __future__ import annotations

import argparse
import functools
import sys
from collections.abc import Callable
from pathlib import Path
from typing import cast

from .commands.dev import add_dev_parser, handle_dev_command  # noqa: F401
from .commands.init_db import (  # noqa: F401
    add_init_db_parser,
    handle_init_db_command,
)
from .commands.list_customers import (  # noqa: F401
    add_list_customers_parser,
    handle_list_customers_command,
)
from .commands.serve import add_serve_parser, handle_serve_command  # noqa: F401

# Ensure project root is discoverable when invoked via ``python -m``
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


SERVICE_NAME = "customers-api"

CommandHandler = Callable[[argparse.Namespace], int]

COMMAND_HANDLER_ATTRS: dict[str, str] = {
    "serve": "handle_serve_command",
    "init-db": "handle_init_db_command",
    "list-customers": "handle_list_customers_command",
    "dev": "handle_dev_command",
}


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog=SERVICE_NAME,
        description="Customers API - serve, bootstrap and inspect the database",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. INFO, DEBUG)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=False,
    )

    add_serve_parser(subparsers)
    add_init_db_parser(subparsers)
    add_list_customers_parser(subparsers)
    add_dev_parser(subparsers)

    return parser


def _resolve_handler(
    args: argparse.Namespace,
    overrides: dict[str, CommandHandler] | None = None,
) -> CommandHandler | None:
    command = getattr(args, "command", None)
    if overrides and command and command in overrides:
        return overrides[command]

    func = getattr(args, "func", None)
    if callable(func):
        return cast(CommandHandler, func)

    if command is None:
        return None

    attr_name = COMMAND_HANDLER_ATTRS.get(command)
    if not attr_name:
        return None

    handler = globals().get(attr_name)
    if callable(handler):
        return cast(CommandHandler, handler)

    return None


def main(
    argv: list[str] | None = None,
    *,
    setup_logging_func: Callable[[str], None] | None = None,
    handler_overrides: dict[str, CommandHandler] | None = None,
) -> int:
    """Main CLI entry point."""

    parser = create_parser()
    args = parser.parse_args(argv)

    log_level = getattr(args, "log_level", "INFO") or "INFO"
    if setup_logging_func is None:
        from src import config
        from src.utils.logging_config import setup_logging as default_setup_logging

        setup_logging_func = functools.partial(
            default_setup_logging,
            force_json=config.LOG_JSON,
            service_name=SERVICE_NAME,
        )

    setup_logging_func(log_level)

    handler = _resolve_handler(args, overrides=handler_overrides)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
