"""
carebook.infra.database.engine – Async SQLAlchemy 2.0 engine, session factory, get_db.

Accepts PostgresConfig; when omitted, loads it from env via load_postgres_config().
ensure_database_exists() creates the target database on first run (connects to
"postgres", then CREATE DATABASE).
"""
from __future__ import annotations

import logging
import re
from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING, Optional
from urllib.parse import urlparse, urlunparse

import asyncpg
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from carebook.core.exceptions import ExternalServiceError

# Registers every ORM model on Base.metadata before create_all()
import carebook.infra.database.models  # noqa: F401
from carebook.infra.database.models.base import Base

if TYPE_CHECKING:
    from carebook.config import PostgresConfig

logger = logging.getLogger(__name__)

# Database names we are willing to interpolate into CREATE DATABASE
_DBNAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _resolve_config(config: Optional["PostgresConfig"]) -> "PostgresConfig":
    if config is not None:
        return config
    from carebook.config import load_postgres_config
    return load_postgres_config()


def _make_async_url(url: str) -> str:
    """Convert postgresql:// or postgres:// to postgresql+asyncpg://."""
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix):
            return url.replace(prefix, "postgresql+asyncpg://", 1)
    return url


def _split_maintenance_url(url: str) -> tuple[str, str]:
    """Return (target dbname, plain DSN pointing at the "postgres" database)."""
    parsed = urlparse(url.replace("postgresql+asyncpg://", "postgresql://", 1))
    dbname = (parsed.path or "/postgres").strip("/").split("?")[0].strip() or "postgres"
    maintenance = urlunparse(
        (parsed.scheme, parsed.netloc, "/postgres", parsed.params, parsed.query, parsed.fragment)
    )
    return dbname, maintenance


async def ensure_database_exists(config: Optional["PostgresConfig"] = None) -> None:
    """Create the target database when missing. Skipped when the server is unreachable."""
    config = _resolve_config(config)
    dbname, maintenance_url = _split_maintenance_url(config.url)
    if dbname == "postgres":
        return
    if not _DBNAME_PATTERN.match(dbname):
        logger.warning("ensure_database_exists: refusing unsafe database name %r", dbname)
        return
    try:
        conn = await asyncpg.connect(maintenance_url)
    except (OSError, asyncpg.PostgresError) as exc:
        logger.debug("ensure_database_exists: cannot reach postgres (%s), skipping", exc)
        return
    try:
        exists = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", dbname)
        if exists is None:
            await conn.execute(f'CREATE DATABASE "{dbname}"')
            logger.info("Database created: %s", dbname)
    except asyncpg.PostgresError as exc:
        raise ExternalServiceError(
            f"Could not create database {dbname}", details={"database": dbname}, cause=exc
        ) from exc
    finally:
        await conn.close()


def build_engine(
    config: Optional["PostgresConfig"] = None,
    *,
    echo: Optional[bool] = None,
    use_null_pool: bool = False,
) -> AsyncEngine:
    """
    Create and cache the async SQLAlchemy engine.

    Args:
        config: PostgresConfig (url, pool_size, etc.). If None, loaded from env.
        echo: Override SQL echo (default: config.echo).
        use_null_pool: Use NullPool (e.g. for tests).
    """
    global _engine
    if _engine is not None:
        return _engine

    config = _resolve_config(config)
    url = _make_async_url(config.url)
    connect_args: dict = {
        "server_settings": {"application_name": config.application_name},
    }
    do_echo = echo if echo is not None else config.echo

    if use_null_pool:
        _engine = create_async_engine(
            url, echo=do_echo, poolclass=NullPool, connect_args=connect_args
        )
        logger.info("AsyncEngine created with NullPool (test mode)")
    else:
        _engine = create_async_engine(
            url,
            echo=do_echo,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        logger.info(
            "AsyncEngine created: pool_size=%d max_overflow=%d",
            config.pool_size, config.max_overflow,
        )
    return _engine


def build_session_factory(
    engine: Optional[AsyncEngine] = None,
) -> async_sessionmaker[AsyncSession]:
    """Create async session factory bound to engine."""
    global _session_factory
    if _session_factory is not None:
        return _session_factory
    if engine is None:
        engine = build_engine()
    _session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    return _session_factory


async def get_db(
    config: Optional["PostgresConfig"] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a transactional AsyncSession (commit on success, rollback on error)."""
    session_factory = build_session_factory(build_engine(config))
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(
    config: Optional["PostgresConfig"] = None,
    *,
    drop_all: bool = False,
) -> None:
    """Create all ORM tables. For dev/test; production schemas are migrated separately."""
    engine = build_engine(_resolve_config(config))
    async with engine.begin() as conn:
        if drop_all:
            logger.warning("Dropping all ORM tables (drop_all=True)")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialised successfully")


async def close_engine() -> None:
    """Dispose the connection pool. Call on app shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("AsyncEngine disposed")
        _engine = None
        _session_factory = None
