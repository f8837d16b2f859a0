"""Pytest-wide fixtures and hooks for the customers service tests."""

from __future__ import annotations

import os

# Unit tests build DatabaseSettings explicitly; keep a developer's shell or
# .env from leaking a real database into them.
for key in [
    "DATABASE_URL",
    "DATABASE_HOST",
    "DATABASE_PORT",
    "DATABASE_NAME",
    "DATABASE_USER",
    "DATABASE_PASSWORD",
    "DATABASE_SSLMODE",
    "DATABASE_REQUIRE_SSL",
    "DATABASE_ENGINE",
]:
    if os.environ.get("PYTEST_KEEP_DB_ENV") != "true":
        os.environ.pop(key, None)

pytest_plugins = [
    "tests.helpers.postgres",
    "tests.helpers.sqlite",
]
