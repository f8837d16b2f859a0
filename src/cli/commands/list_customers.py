"""Print the customers currently stored in the database."""

from __future__ import annotations

import argparse
import json
import logging

from sqlalchemy.exc import SQLAlchemyError

from src import config
from src.models.database import DatabaseManager
from src.models.repository import CustomerRepository

logger = logging.getLogger(__name__)


def add_list_customers_parser(subparsers) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "list-customers",
        help="List customers from the configured database",
    )
    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    parser.set_defaults(func=handle_list_customers_command)
    return parser


def _format_table(customers: list[dict]) -> None:
    print(f"Found {len(customers)} customers")
    if not customers:
        return
    print()
    print(f"{'ID':>6}  {'NAME':<24}  EMAIL")
    print("-" * 60)
    for customer in customers:
        print(f"{customer['id']:>6}  {customer['name']:<24}  {customer['email']}")


def handle_list_customers_command(args) -> int:
    try:
        settings = config.get_database_settings()
    except config.ConfigurationError as exc:
        logger.error("Invalid database configuration: %s", exc)
        return 1

    with DatabaseManager(settings) as db:
        try:
            customers = [c.to_dict() for c in CustomerRepository(db).find_all()]
        except SQLAlchemyError as exc:
            logger.error("Failed to load customers: %s", exc)
            return 1

    if args.format == "json":
        print(json.dumps(customers, indent=2))
    else:
        _format_table(customers)
    return 0
