"""Schema bootstrap for the customers table.

The DDL lives in ``schema.sql`` next to this module and is idempotent
(``CREATE TABLE IF NOT EXISTS``). Because an idempotent create silently
accepts a pre-existing table of any shape, :func:`apply_schema` also
inspects the resulting columns and refuses to continue when they cannot
hold customer rows.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import sqltypes

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")
CUSTOMERS_TABLE = "customers"

# column -> (required SQLAlchemy type family, must be NOT NULL)
EXPECTED_COLUMNS: dict[str, tuple[type, bool]] = {
    "id": (sqltypes.Integer, True),
    "name": (sqltypes.String, True),
    "email": (sqltypes.String, True),
}


class SchemaInitializationError(RuntimeError):
    """The customers schema could not be applied or is incompatible."""


def load_schema_statements(path: Path = SCHEMA_PATH) -> list[str]:
    """Split a DDL script into individual statements.

    ``--`` line comments are dropped; statements are separated by ``;``.
    """
    try:
        script = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaInitializationError(
            f"Cannot read schema script {path}: {exc}"
        ) from exc

    lines = [
        line for line in script.splitlines() if not line.strip().startswith("--")
    ]
    statements = [
        statement.strip() for statement in "\n".join(lines).split(";")
    ]
    return [statement for statement in statements if statement]


def verify_schema(engine: Engine) -> None:
    """Check that the customers table exists with compatible columns."""
    inspector = inspect(engine)
    if not inspector.has_table(CUSTOMERS_TABLE):
        raise SchemaInitializationError(
            f"Table {CUSTOMERS_TABLE!r} does not exist after applying schema"
        )

    columns = {
        column["name"]: column for column in inspector.get_columns(CUSTOMERS_TABLE)
    }
    problems = []
    for name, (type_family, not_null) in EXPECTED_COLUMNS.items():
        column = columns.get(name)
        if column is None:
            problems.append(f"missing column {name!r}")
            continue
        if not isinstance(column["type"], type_family):
            problems.append(
                f"column {name!r} has type {column['type']}, "
                f"expected {type_family.__name__}"
            )
        if not_null and column.get("nullable", True):
            problems.append(f"column {name!r} must be NOT NULL")

    if problems:
        raise SchemaInitializationError(
            f"Incompatible {CUSTOMERS_TABLE!r} table: " + "; ".join(problems)
        )


def apply_schema(engine: Engine, path: Path = SCHEMA_PATH) -> None:
    """Apply the DDL script in a single transaction, then verify it.

    Any failure raises :class:`SchemaInitializationError`; there is no
    partial-success mode.
    """
    statements = load_schema_statements(path)
    if not statements:
        raise SchemaInitializationError(f"Schema script {path} is empty")

    logger.info("Applying schema from %s (%d statements)", path.name, len(statements))
    try:
        with engine.begin() as conn:
            for statement in statements:
                conn.execute(text(statement))
        verify_schema(engine)
    except SQLAlchemyError as exc:
        logger.error("Schema initialization failed: %s", exc)
        raise SchemaInitializationError(f"Failed to apply schema: {exc}") from exc
    logger.info("Schema ready")
