"""Tests for engine URL helpers and database bootstrap."""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import asyncpg
import pytest

from carebook.config.postgres import PostgresConfig
from carebook.core.exceptions import ExternalServiceError
from carebook.infra.database.engine import (
    _make_async_url,
    _split_maintenance_url,
    ensure_database_exists,
)


class TestUrls:
    @pytest.mark.parametrize(
        "url",
        ["postgresql://u:p@db/care", "postgres://u:p@db/care", "postgresql+asyncpg://u:p@db/care"],
    )
    def test_async_url(self, url):
        assert _make_async_url(url) == "postgresql+asyncpg://u:p@db/care"

    def test_maintenance_url_points_at_postgres(self):
        dbname, maintenance = _split_maintenance_url("postgresql+asyncpg://u:p@db:5432/care?sslmode=require")
        assert dbname == "care"
        assert maintenance == "postgresql://u:p@db:5432/postgres?sslmode=require"


class TestEnsureDatabaseExists:
    def test_unreachable_server_is_skipped(self):
        cfg = PostgresConfig(url="postgresql://localhost/care")
        with patch("asyncpg.connect", AsyncMock(side_effect=OSError("refused"))):
            asyncio.run(ensure_database_exists(cfg))

    def test_unsafe_name_is_not_interpolated(self):
        cfg = PostgresConfig(url='postgresql://localhost/care"; DROP')
        with patch("asyncpg.connect", AsyncMock()) as connect:
            asyncio.run(ensure_database_exists(cfg))
        connect.assert_not_awaited()

    def test_creates_missing_database(self):
        conn = AsyncMock()
        conn.fetchval = AsyncMock(return_value=None)
        cfg = PostgresConfig(url="postgresql://localhost/care")
        with patch("asyncpg.connect", AsyncMock(return_value=conn)):
            asyncio.run(ensure_database_exists(cfg))
        conn.execute.assert_awaited_once_with('CREATE DATABASE "care"')
        conn.close.assert_awaited_once()

    def test_create_failure_is_an_external_service_error(self):
        conn = AsyncMock()
        conn.fetchval = AsyncMock(return_value=None)
        conn.execute = AsyncMock(side_effect=asyncpg.PostgresError("permission denied"))
        cfg = PostgresConfig(url="postgresql://localhost/care")
        with patch("asyncpg.connect", AsyncMock(return_value=conn)):
            with pytest.raises(ExternalServiceError):
                asyncio.run(ensure_database_exists(cfg))
        conn.close.assert_awaited_once()
