"""Centralized configuration for the customers service.

This module reads environment variables (optionally from a .env file) and
exposes simple constants plus the :class:`DatabaseSettings` connection
descriptor. The descriptor is what ``create_app`` consumes, so callers that
learn the database coordinates at runtime (the integration-test harness,
``dev`` mode) can build one directly instead of going through the
environment.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

# If a .env file is present, load it without overriding real env vars.
_env_path = Path(".") / ".env"
if _env_path.exists():
    load_dotenv(dotenv_path=str(_env_path))

_TRUTHY = {"1", "true", "t", "yes", "y", "on"}

DEFAULT_DATABASE_ENGINE = "postgresql+psycopg2"
DEFAULT_DATABASE_PORT = 5432


class ConfigurationError(ValueError):
    """Raised when the database connection settings are incomplete."""


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection descriptor for the customers database.

    The application never hardcodes these values: they come either from the
    environment (:meth:`from_env`) or from whoever provisioned the database
    (see ``src.testing.postgres.EphemeralPostgres.settings``).
    """

    host: str
    port: int
    database: str
    user: str
    password: Optional[str] = field(default=None, repr=False)
    engine: str = DEFAULT_DATABASE_ENGINE
    sslmode: Optional[str] = None

    def __post_init__(self) -> None:
        missing = [
            name
            for name in ("host", "database", "user")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                "Missing database settings: " + ", ".join(missing)
            )
        if not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise ConfigurationError(f"Invalid database port: {self.port!r}")
        if self.engine.split("+", 1)[0] != "postgresql":
            raise ConfigurationError(
                f"Expected a PostgreSQL engine, got {self.engine!r}"
            )

    @property
    def url(self) -> str:
        """SQLAlchemy URL with credentials quoted."""
        return URL.create(
            drivername=self.engine,
            username=self.user,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.database,
            query={"sslmode": self.sslmode} if self.sslmode else {},
        ).render_as_string(hide_password=False)

    def redacted(self) -> Dict[str, Any]:
        """Dict form safe for logs (password replaced)."""
        values = asdict(self)
        values["password"] = "***" if self.password else None
        return values

    @classmethod
    def from_url(cls, url: str) -> "DatabaseSettings":
        try:
            parsed = make_url(url)
        except ArgumentError as exc:
            raise ConfigurationError(f"Invalid DATABASE_URL: {exc}") from exc
        if parsed.get_backend_name() != "postgresql":
            raise ConfigurationError(
                f"Expected a PostgreSQL URL, got scheme {parsed.drivername!r}"
            )
        engine = parsed.drivername
        if engine == "postgresql":
            engine = DEFAULT_DATABASE_ENGINE
        sslmode = parsed.query.get("sslmode")
        if isinstance(sslmode, tuple):
            sslmode = sslmode[-1]
        return cls(
            host=parsed.host or "",
            port=parsed.port or DEFAULT_DATABASE_PORT,
            database=parsed.database or "",
            user=parsed.username or "",
            password=parsed.password,
            engine=engine,
            sslmode=sslmode,
        )

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        """Build settings from the environment at call time.

        ``DATABASE_URL`` wins when set; otherwise the discrete
        ``DATABASE_*`` variables are combined.
        """
        url = os.getenv("DATABASE_URL")
        if url:
            return cls.from_url(url)

        sslmode = os.getenv("DATABASE_SSLMODE") or (
            "require" if _env_bool("DATABASE_REQUIRE_SSL") else None
        )
        return cls(
            host=os.getenv("DATABASE_HOST", ""),
            port=_env_int("DATABASE_PORT", DEFAULT_DATABASE_PORT),
            database=os.getenv("DATABASE_NAME", ""),
            user=os.getenv("DATABASE_USER", ""),
            password=os.getenv("DATABASE_PASSWORD"),
            engine=os.getenv("DATABASE_ENGINE", DEFAULT_DATABASE_ENGINE),
            sslmode=sslmode,
        )


# Runtime / deployment context
APP_ENV: str = os.getenv("APP_ENV", os.getenv("ENVIRONMENT", "local"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON: bool = _env_bool("LOG_JSON")

# HTTP server defaults for ``python -m src.cli serve``
API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
API_PORT: int = _env_int("API_PORT", 8080)

# Ephemeral database used by the integration tests and ``dev`` mode
POSTGRES_IMAGE: str = os.getenv("POSTGRES_IMAGE", "postgres:16-alpine")
POSTGRES_STARTUP_TIMEOUT: float = float(
    os.getenv("POSTGRES_STARTUP_TIMEOUT", "60")
)


def get_database_settings() -> DatabaseSettings:
    return DatabaseSettings.from_env()


def get_config() -> Dict[str, Any]:
    """Return a dict of the most important configuration values.

    Database settings are reported redacted, or as ``None`` when the
    environment does not describe a database yet.
    """
    try:
        database: Optional[Dict[str, Any]] = get_database_settings().redacted()
    except ConfigurationError:
        database = None

    return {
        "runtime": {"environment": APP_ENV},
        "log_level": LOG_LEVEL,
        "log_json": LOG_JSON,
        "api": {"host": API_HOST, "port": API_PORT},
        "database": database,
        "ephemeral_postgres": {
            "image": POSTGRES_IMAGE,
            "startup_timeout": POSTGRES_STARTUP_TIMEOUT,
        },
    }
