"""
carebook.config.postgres – PostgreSQL connection config (dataclass + validators).

Env vars: DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT,
DB_POOL_RECYCLE, DB_ECHO, DB_APPLICATION_NAME.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

_URL_PREFIXES = ("postgresql://", "postgres://", "postgresql+asyncpg://")


def _validate_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise ValueError("DATABASE_URL is required and must be non-empty")
    if not url.startswith(_URL_PREFIXES):
        raise ValueError(
            "DATABASE_URL must start with postgresql://, postgres:// or postgresql+asyncpg://"
        )
    return url


def _validate_int(value: int, name: str, min_val: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < min_val:
        raise ValueError(f"{name} must be an integer >= {min_val}, got {value!r}")
    return value


def _as_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class PostgresConfig:
    """
    PostgreSQL connection and pool configuration.

    Validated on construction; build from the environment with load_postgres_config().
    """

    url: str
    """DSN. Converted to postgresql+asyncpg in the engine."""

    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    """Seconds to wait for a pooled connection."""

    pool_recycle: int = 1800
    echo: bool = False
    application_name: str = "carebook-api"

    def __post_init__(self) -> None:
        _validate_url(self.url)
        _validate_int(self.pool_size, "pool_size", 1)
        _validate_int(self.max_overflow, "max_overflow", 0)
        _validate_int(self.pool_timeout, "pool_timeout", 1)
        _validate_int(self.pool_recycle, "pool_recycle", 1)
        if not isinstance(self.echo, bool):
            raise ValueError("echo must be a boolean")
        if not isinstance(self.application_name, str) or not self.application_name.strip():
            raise ValueError("application_name must be a non-empty string")

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> "PostgresConfig":
        """
        Build config from environment variables; keyword overrides win over env.

        Env:
            DATABASE_URL          – default postgresql://localhost/carebook
            DB_POOL_SIZE          – default 10
            DB_MAX_OVERFLOW       – default 20
            DB_POOL_TIMEOUT       – default 30
            DB_POOL_RECYCLE       – default 1800
            DB_ECHO               – "1" / "true" / "yes" → True
            DB_APPLICATION_NAME   – default carebook-api
        """
        env = os.environ if env is None else env

        def _pick(attr: str, var: str, default: Any) -> Any:
            if overrides.get(attr) is not None:
                return overrides[attr]
            return env.get(var, default)

        return cls(
            url=_validate_url(str(_pick("url", "DATABASE_URL", "postgresql://localhost/carebook"))),
            pool_size=int(_pick("pool_size", "DB_POOL_SIZE", 10)),
            max_overflow=int(_pick("max_overflow", "DB_MAX_OVERFLOW", 20)),
            pool_timeout=int(_pick("pool_timeout", "DB_POOL_TIMEOUT", 30)),
            pool_recycle=int(_pick("pool_recycle", "DB_POOL_RECYCLE", 1800)),
            echo=_as_bool(_pick("echo", "DB_ECHO", False)),
            application_name=str(_pick("application_name", "DB_APPLICATION_NAME", "carebook-api")),
        )


def load_postgres_config(**overrides: Any) -> PostgresConfig:
    """Load and validate PostgreSQL config from the environment. Raises ValueError."""
    return PostgresConfig.from_env(**overrides)
