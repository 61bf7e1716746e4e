"""
People API — SQL Repository (async SQLAlchemy)
================================================

What:  PeopleRepository backed by the `people` table.
How:   Holds an async_sessionmaker bound to the application's engine; every
       operation opens a session, runs one statement, and closes it, so each
       call borrows exactly one pooled connection.
Who:   Built by create_app() when STORAGE_BACKEND=sql; reached by routes
       through the get_repository dependency.

Statements:
    insert      INSERT INTO people (id, name, nick, birth_date, stack, search) VALUES (...)
    find_by_id  SELECT ... FROM people WHERE id = :id
    search      SELECT ... FROM people WHERE search ILIKE '%' || :term || '%'
                ORDER BY id LIMIT 50
    count       SELECT count(*) FROM people

Error Translation:
    IntegrityError (unique violation on nick) → ConflictError
    any other SQLAlchemyError / OSError / TimeoutError → StoreUnavailableError
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from people_api.exceptions import ConflictError, StoreUnavailableError
from people_api.models.person import PersonRecord, build_search_text
from people_api.repositories.base import SEARCH_LIMIT, PeopleRepository, new_person_id
from people_api.schemas.person import NewPerson, Person

logger = logging.getLogger(__name__)

# Errors that mean "the store did not answer properly"
TRANSPORT_ERRORS = (SQLAlchemyError, OSError, TimeoutError)

UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True when an IntegrityError was caused by a UNIQUE constraint.

    asyncpg reports SQLSTATE 23505; SQLite only reports a message.
    """
    orig = exc.orig
    for attr in ("sqlstate", "pgcode"):
        if getattr(orig, attr, None) == UNIQUE_VIOLATION_SQLSTATE:
            return True
    return "unique" in str(orig).lower()


def escape_like(term: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so term matches literally."""
    return (
        term.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


def to_person(record: PersonRecord) -> Person:
    return Person(
        id=record.id,
        name=record.name,
        nick=record.nick,
        birth_date=record.birth_date,
        stack=list(record.stack) if record.stack is not None else None,
    )


class SqlPeopleRepository(PeopleRepository):
    """
    Relational implementation of PeopleRepository.

    The repository is the single long-lived owner of the pool. It is created
    once per application and disposed in the lifespan shutdown hook.
    """

    backend_name = "sql"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ):
        self._session_factory = session_factory
        self._engine = engine

    async def insert(self, new_person: NewPerson) -> Person:
        person = Person.from_new(new_person_id(), new_person)
        record = PersonRecord(
            id=person.id,
            name=person.name,
            nick=person.nick,
            birth_date=person.birth_date,
            stack=person.stack,
            search=build_search_text(person.name, person.nick, person.stack),
        )

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(record)
        except IntegrityError as e:
            if is_unique_violation(e):
                logger.info("Nickname already taken: %s", person.nick)
                raise ConflictError(field="apelido", value=person.nick)
            logger.error("Integrity error inserting person: %s", str(e))
            raise StoreUnavailableError(
                context={"operation": "insert", "error_type": type(e).__name__},
            )
        except TRANSPORT_ERRORS as e:
            logger.error("Store error inserting person: %s", str(e))
            raise StoreUnavailableError(
                context={"operation": "insert", "error_type": type(e).__name__},
            )

        logger.debug("Person %s created", person.id)
        return person

    async def find_by_id(self, person_id: uuid.UUID) -> Optional[Person]:
        try:
            async with self._session_factory() as session:
                record = await session.get(PersonRecord, person_id)
        except TRANSPORT_ERRORS as e:
            logger.error("Store error fetching person %s: %s", person_id, str(e))
            raise StoreUnavailableError(
                context={"operation": "find_by_id", "person_id": str(person_id)},
            )

        return to_person(record) if record is not None else None

    async def search(self, term: str) -> List[Person]:
        query = (
            select(PersonRecord)
            .where(PersonRecord.search.ilike(f"%{escape_like(term)}%", escape="\\"))
            .order_by(PersonRecord.id)
            .limit(SEARCH_LIMIT)
        )

        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                records = list(result.scalars().all())
        except TRANSPORT_ERRORS as e:
            logger.error("Store error searching people: %s", str(e))
            raise StoreUnavailableError(
                context={"operation": "search", "error_type": type(e).__name__},
            )

        return [to_person(record) for record in records]

    async def count(self) -> int:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(func.count()).select_from(PersonRecord)
                )
                return int(result.scalar_one())
        except TRANSPORT_ERRORS as e:
            logger.error("Store error counting people: %s", str(e))
            raise StoreUnavailableError(
                context={"operation": "count", "error_type": type(e).__name__},
            )

    async def health_check(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except TRANSPORT_ERRORS as e:
            logger.warning("Health check: database unreachable: %s", str(e))
            return False

    async def close(self) -> None:
        # Close all pooled connections
        if self._engine is not None:
            await self._engine.dispose()
