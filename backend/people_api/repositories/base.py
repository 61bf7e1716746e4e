"""
People API — Abstract Repository Interface
============================================

What:  Abstract base class defining the contract every person store satisfies.
How:   Concrete implementations inherit from PeopleRepository and implement the
       four domain operations plus the two lifecycle hooks.
Who:   Called by route handlers through the get_repository dependency.

Implementations:
    - SqlPeopleRepository:      async SQLAlchemy over a pooled connection (default)
    - InMemoryPeopleRepository: lock-guarded dict, nothing persisted

Shared semantics (both implementations must agree):
    Identifiers:  UUIDv7 generated by the repository, never by the client.
    Search:       case-insensitive literal substring match against
                  "name nick tag1 tag2 ...", ordered by id (= creation order),
                  at most SEARCH_LIMIT rows.
    Errors:       ConflictError on duplicate nick, StoreUnavailableError on any
                  transport failure. Missing rows are None, not an error.
"""

import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from uuid6 import uuid7

from people_api.schemas.person import NewPerson, Person

SEARCH_LIMIT = 50


def new_person_id() -> uuid.UUID:
    """A fresh time-ordered identifier as a plain uuid.UUID."""
    return uuid.UUID(bytes=uuid7().bytes)


class PeopleRepository(ABC):
    """
    Contract for person storage.

    All operations are single-statement: a failure never leaves a partial
    write behind, and nothing is retried.
    """

    backend_name: str = "abstract"

    @abstractmethod
    async def insert(self, new_person: NewPerson) -> Person:
        """
        Persist a new person under a generated identifier.

        Returns:
            The stored Person, identical to what find_by_id() later returns.

        Raises:
            ConflictError: The nickname is already taken.
            StoreUnavailableError: The store could not complete the write.
        """
        ...

    @abstractmethod
    async def find_by_id(self, person_id: uuid.UUID) -> Optional[Person]:
        """
        Fetch one person.

        Returns:
            The Person, or None when no row has this identifier.

        Raises:
            StoreUnavailableError: The store could not be queried.
        """
        ...

    @abstractmethod
    async def search(self, term: str) -> List[Person]:
        """
        Up to SEARCH_LIMIT persons whose search text contains term,
        case-insensitively. Wildcard characters in term match literally.

        Case folding follows the backend: the in-memory store and PostgreSQL
        ILIKE fold Unicode letters; SQLite's lower() folds ASCII only, so
        "JOSÉ" does not find "josé" there.

        Returns:
            Matching persons ordered by id; an empty list when nothing matches.

        Raises:
            StoreUnavailableError: The store could not be queried.
        """
        ...

    @abstractmethod
    async def count(self) -> int:
        """Exact number of stored persons."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight probe used by GET /health.
        Returns True if the store answers, False otherwise. Never raises.
        """
        ...

    async def close(self) -> None:
        """Release held resources. Called once at application shutdown."""
        return None
