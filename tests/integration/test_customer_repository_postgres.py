"""Store and schema behaviour on a real PostgreSQL instance."""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.config import DatabaseSettings
from src.models import Customer
from src.models.database import DatabaseManager
from src.models.repository import CustomerRepository
from src.models.schema import SchemaInitializationError, apply_schema

pytestmark = [pytest.mark.postgres, pytest.mark.integration]


def test_ids_are_unique_and_database_assigned(clean_customers):
    first = clean_customers.save_all(
        [{"name": f"A{i}", "email": f"a{i}@example.com"} for i in range(5)]
    )
    second = clean_customers.save_all(
        [Customer(name=f"B{i}", email=f"b{i}@example.com") for i in range(5)]
    )

    ids = [c.id for c in first + second]
    assert all(isinstance(i, int) for i in ids)
    assert len(set(ids)) == len(ids)

    stored = [c.id for c in clean_customers.find_all()]
    assert sorted(stored) == sorted(ids)


def test_ids_keep_increasing_after_reset(clean_customers):
    before = clean_customers.save_all([{"name": "X", "email": "x@example.com"}])
    clean_customers.delete_all()
    after = clean_customers.save_all([{"name": "Y", "email": "y@example.com"}])

    assert after[0].id > before[0].id


def test_delete_all_keeps_schema(clean_customers, postgres_db):
    clean_customers.save_all([{"name": "Z", "email": "z@example.com"}])

    assert clean_customers.delete_all() == 1
    assert clean_customers.count() == 0
    with postgres_db.engine.connect() as conn:
        assert conn.execute(text("SELECT to_regclass('public.customers')")).scalar()


def test_apply_schema_is_idempotent(postgres_db, clean_customers):
    clean_customers.save_all([{"name": "Kept", "email": "kept@example.com"}])

    apply_schema(postgres_db.engine)

    assert [c.name for c in clean_customers.find_all()] == ["Kept"]


def test_name_is_required(postgres_db, clean_customers):
    with pytest.raises(SQLAlchemyError):
        clean_customers.save_all([Customer(name=None, email="nobody@example.com")])
    assert clean_customers.count() == 0


def test_incompatible_existing_table_is_fatal(database_settings, postgres_db):
    """A pre-existing table of the wrong shape in another database fails."""
    with postgres_db.engine.connect().execution_options(
        isolation_level="AUTOCOMMIT"
    ) as conn:
        conn.execute(text("DROP DATABASE IF EXISTS incompatible"))
        conn.execute(text("CREATE DATABASE incompatible"))

    other = DatabaseSettings(
        host=database_settings.host,
        port=database_settings.port,
        database="incompatible",
        user=database_settings.user,
        password=database_settings.password,
    )
    with DatabaseManager(other) as db:
        with db.engine.begin() as conn:
            conn.execute(text("CREATE TABLE customers (id TEXT, name INTEGER)"))

        with pytest.raises(SchemaInitializationError) as excinfo:
            apply_schema(db.engine)

    message = str(excinfo.value)
    assert "missing column 'email'" in message
    assert "'name'" in message


def test_find_all_on_missing_table_propagates(database_settings, postgres_db):
    with postgres_db.engine.connect().execution_options(
        isolation_level="AUTOCOMMIT"
    ) as conn:
        conn.execute(text("DROP DATABASE IF EXISTS empty_db"))
        conn.execute(text("CREATE DATABASE empty_db"))

    other = DatabaseSettings(
        host=database_settings.host,
        port=database_settings.port,
        database="empty_db",
        user=database_settings.user,
        password=database_settings.password,
    )
    with DatabaseManager(other) as db:
        with pytest.raises(SQLAlchemyError):
            CustomerRepository(db).find_all()
