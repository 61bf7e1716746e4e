# Repositories package init
"""
People API — Repository Layer
===============================

What:  Translates domain operations (insert, find, search, count) into store queries.

Repository Inventory:
    - PeopleRepository (abstract): contract shared by every store
    - SqlPeopleRepository: async SQLAlchemy over the connection pool
    - InMemoryPeopleRepository: process-local dict, no persistence

build_repository() picks the implementation named by STORAGE_BACKEND.
"""

from people_api.config import Settings
from people_api.database import build_engine, build_session_factory
from people_api.repositories.base import SEARCH_LIMIT, PeopleRepository
from people_api.repositories.memory_repository import InMemoryPeopleRepository
from people_api.repositories.sql_repository import SqlPeopleRepository

__all__ = [
    "SEARCH_LIMIT",
    "PeopleRepository",
    "InMemoryPeopleRepository",
    "SqlPeopleRepository",
    "build_repository",
]


def build_repository(settings: Settings) -> PeopleRepository:
    """Construct the repository selected by settings.storage_backend."""
    if settings.storage_backend == "memory":
        return InMemoryPeopleRepository()

    engine = build_engine(settings)
    return SqlPeopleRepository(build_session_factory(engine), engine=engine)
