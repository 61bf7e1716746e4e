"""
People API — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Overview:
    ├── memory_repository: fresh InMemoryPeopleRepository
    ├── sql_repository:    SqlPeopleRepository on a throwaway SQLite file (aiosqlite)
    ├── repository:        parametrized over both implementations
    ├── app / test_client: FastAPI app on the in-memory repository + HTTPX AsyncClient
    └── new_person / new_person_payload: sample input
"""

import os
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any people_api import: the module-level app in people_api.main
# must not build a PostgreSQL engine during tests
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from people_api.config import Settings  # noqa: E402
from people_api.database import Base, build_engine, build_session_factory  # noqa: E402
from people_api.repositories import InMemoryPeopleRepository, SqlPeopleRepository  # noqa: E402
from people_api.schemas.person import NewPerson  # noqa: E402


def _make_new_person(nick: str, name: str = "John Smith", stack=None) -> NewPerson:
    return NewPerson(
        name=name,
        nick=nick,
        birth_date=date(2000, 1, 1),
        stack=stack,
    )


# ══════════════════════════════════════════════════════════════════════════
# Repository Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def memory_repository():
    return InMemoryPeopleRepository()


async def _open_sqlite_repository(tmp_path) -> SqlPeopleRepository:
    """
    SqlPeopleRepository backed by a SQLite file.

    The people table is created from the ORM metadata; stack falls back to a
    JSON column and ILIKE compiles to lower(...) LIKE lower(...).
    """
    settings = Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'people.db'}",
        log_level="WARNING",
    )
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return SqlPeopleRepository(build_session_factory(engine), engine=engine)


@pytest_asyncio.fixture
async def sql_repository(tmp_path):
    repo = await _open_sqlite_repository(tmp_path)
    yield repo
    await repo.close()


@pytest_asyncio.fixture(params=["memory", "sql"])
async def repository(request, tmp_path):
    """Runs a test once per repository implementation."""
    if request.param == "memory":
        yield InMemoryPeopleRepository()
        return

    repo = await _open_sqlite_repository(tmp_path)
    yield repo
    await repo.close()


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app():
    from people_api.main import create_app

    return create_app(
        settings=Settings(_env_file=None, storage_backend="memory", log_level="WARNING"),
        repository=InMemoryPeopleRepository(),
    )


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server, no lifespan).

    Usage:
        async def test_count(test_client):
            response = await test_client.get("/people/count")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_person():
    """Factory building a NewPerson by field name, bypassing the JSON aliases."""
    return _make_new_person


@pytest.fixture
def new_person():
    return _make_new_person("jsmith", stack=["Rust", "Java"])


@pytest.fixture
def new_person_payload():
    return {
        "nome": "John Smith",
        "apelido": "jsmith",
        "nascimento": "2000-01-01",
        "stack": ["Rust", "Java"],
    }
