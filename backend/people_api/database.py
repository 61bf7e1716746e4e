"""
People API — Database Engine & Session Factory
================================================

What:  Async SQLAlchemy engine construction, session factory, and the ORM base.
How:   build_engine() turns Settings into an AsyncEngine that owns the connection
       pool; build_session_factory() wraps it in an async_sessionmaker.
Who:   Called by create_app() when the SQL storage backend is selected, and by
       tests that point the repository at a throwaway SQLite file.
When:  Once per application instance; sessions are opened per repository call.

Connection Pooling Strategy (PostgreSQL):
    pool_size=5, max_overflow=0:  fixed pool; excess requests queue on the pool
    pool_timeout:                 bound on how long a request waits for a connection
    pool_pre_ping:                validates connections before use
    pool_recycle=3600:            recycles connections every hour
    connect_args.timeout:         asyncpg connect timeout
    connect_args.command_timeout: asyncpg per-statement timeout

The engine is NOT a module-level global. It lives inside the repository that
create_app() stores on app.state, so every handler receives it through
dependency injection and tests can substitute another repository.
"""

from typing import Any, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from people_api.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, read by Alembic's env.py and by
    tests calling Base.metadata.create_all().
    """
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine (and its pool) described by settings.

    Pool sizing and timeouts are applied only for PostgreSQL; other backends
    (SQLite in tests) keep SQLAlchemy's defaults for their dialect.
    """
    url = make_url(settings.database_url)
    options: Dict[str, Any] = {
        "echo": settings.log_level == "DEBUG",
        "pool_pre_ping": settings.db_pool_pre_ping,
    }

    if url.get_backend_name() == "postgresql":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=3600,
            connect_args={
                "timeout": settings.db_connect_timeout,
                "command_timeout": settings.db_command_timeout,
            },
        )

    return create_async_engine(url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to engine.

    expire_on_commit=False: ORM rows stay readable after the transaction
    commits, so repositories can build response models without a second query.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
