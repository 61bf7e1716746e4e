"""
People API — Configuration and Engine Tests
=============================================

What we test:
    ✅ Defaults (port 8080, pool size 5, sql backend)
    ✅ Environment variables override defaults
    ✅ postgres:// URLs are rewritten to the asyncpg driver
    ✅ Invalid log levels and storage backends are rejected
    ✅ build_engine applies pool sizing and timeouts for PostgreSQL only
    ✅ asyncpg receives the connect and statement timeouts from settings
    ✅ build_repository honors STORAGE_BACKEND
"""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from people_api.config import Settings
from people_api.database import build_engine
from people_api.repositories import (
    InMemoryPeopleRepository,
    SqlPeopleRepository,
    build_repository,
)

ENV_VARS = [
    "PORT", "HOST", "DATABASE_URL", "DB_POOL_SIZE", "DB_MAX_OVERFLOW",
    "DB_POOL_TIMEOUT", "DB_CONNECT_TIMEOUT", "DB_COMMAND_TIMEOUT",
    "STORAGE_BACKEND", "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Tests for Settings defaults, overrides and validation."""

    def test_defaults(self, clean_env):
        """Settings without environment should use the documented defaults."""
        settings = Settings(_env_file=None)

        assert settings.port == 8080
        assert settings.db_pool_size == 5
        assert settings.db_max_overflow == 0
        assert settings.storage_backend == "sql"
        assert settings.database_url.startswith("postgresql+asyncpg://")

    def test_environment_overrides(self, clean_env):
        """Environment variables should override defaults and be normalized."""
        clean_env.setenv("PORT", "9999")
        clean_env.setenv("STORAGE_BACKEND", "MEMORY")
        clean_env.setenv("LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.port == 9999
        assert settings.storage_backend == "memory"
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("url", [
        "postgres://admin:secret@db:5432/people",
        "postgresql://admin:secret@db:5432/people",
    ])
    def test_driverless_postgres_url_uses_asyncpg(self, clean_env, url):
        """Plain PostgreSQL URLs should be rewritten to the asyncpg driver."""
        settings = Settings(_env_file=None, database_url=url)
        assert settings.database_url == "postgresql+asyncpg://admin:secret@db:5432/people"

    def test_explicit_driver_untouched(self, clean_env):
        """URLs naming a driver should be kept as given."""
        url = "sqlite+aiosqlite:///./people.db"
        assert Settings(_env_file=None, database_url=url).database_url == url

    def test_invalid_log_level(self, clean_env):
        """Unknown log levels should be rejected at load time."""
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, log_level="LOUD")

    def test_invalid_storage_backend(self, clean_env):
        """Unknown storage backends should be rejected at load time."""
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, storage_backend="redis")

    def test_port_range(self, clean_env):
        """Ports outside 1-65535 should be rejected."""
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, port=70000)


class TestBuildEngine:
    """Tests for build_engine pool sizing and timeouts."""

    @pytest.mark.asyncio
    async def test_postgres_pool_settings(self, clean_env):
        """PostgreSQL engine should use the configured pool size and wait timeout."""
        settings = Settings(_env_file=None, db_pool_size=7, db_pool_timeout=3)
        engine = build_engine(settings)
        try:
            assert engine.dialect.name == "postgresql"
            assert engine.pool.size() == 7
            assert engine.pool.timeout() == settings.db_pool_timeout
        finally:
            await engine.dispose()

    def test_postgres_connect_args_carry_timeouts(self, clean_env):
        """asyncpg should get the connect and statement timeouts from settings."""
        settings = Settings(
            _env_file=None,
            db_pool_timeout=2.5,
            db_connect_timeout=4,
            db_command_timeout=12,
        )
        with patch("people_api.database.create_async_engine", MagicMock()) as mock_create:
            build_engine(settings)

        kwargs = mock_create.call_args.kwargs
        assert kwargs["pool_timeout"] == 2.5
        assert kwargs["pool_size"] == settings.db_pool_size
        assert kwargs["max_overflow"] == settings.db_max_overflow
        assert kwargs["connect_args"] == {"timeout": 4, "command_timeout": 12}

    def test_sqlite_gets_no_pool_or_timeout_options(self, clean_env, tmp_path):
        """SQLite engine should keep dialect defaults: no pool sizing, no asyncpg args."""
        settings = Settings(
            _env_file=None,
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}",
        )
        with patch("people_api.database.create_async_engine", MagicMock()) as mock_create:
            build_engine(settings)

        kwargs = mock_create.call_args.kwargs
        for option in ("pool_size", "max_overflow", "pool_timeout", "connect_args"):
            assert option not in kwargs

    @pytest.mark.asyncio
    async def test_sqlite_engine(self, clean_env, tmp_path):
        """A sqlite+aiosqlite URL should build a working SQLite engine."""
        settings = Settings(
            _env_file=None,
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}",
        )
        engine = build_engine(settings)
        try:
            assert engine.dialect.name == "sqlite"
        finally:
            await engine.dispose()



class TestBuildRepository:
    """Tests for build_repository backend selection."""

    def test_memory_backend(self, clean_env):
        """STORAGE_BACKEND=memory should build the in-memory repository."""
        repo = build_repository(Settings(_env_file=None, storage_backend="memory"))
        assert isinstance(repo, InMemoryPeopleRepository)

    @pytest.mark.asyncio
    async def test_sql_backend(self, clean_env, tmp_path):
        """STORAGE_BACKEND=sql should build the SQL repository."""
        repo = build_repository(
            Settings(
                _env_file=None,
                storage_backend="sql",
                database_url=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}",
            )
        )
        try:
            assert isinstance(repo, SqlPeopleRepository)
            assert repo.backend_name == "sql"
        finally:
            await repo.close()
