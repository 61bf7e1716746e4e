"""
People API — In-Memory Repository
===================================

What:  PeopleRepository kept in process memory; nothing survives a restart.
How:   A dict keyed by id plus a nick → id index, both guarded by one
       asyncio.Lock. Search and ordering follow the SQL implementation.
Who:   Selected with STORAGE_BACKEND=memory; used by the route tests.

Only safe inside a single process: two uvicorn workers each get their own
independent table.
"""

import asyncio
import uuid
from typing import Dict, List, Optional

from people_api.exceptions import ConflictError
from people_api.models.person import build_search_text
from people_api.repositories.base import SEARCH_LIMIT, PeopleRepository, new_person_id
from people_api.schemas.person import NewPerson, Person


class InMemoryPeopleRepository(PeopleRepository):
    """Dict-backed implementation of PeopleRepository."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._people: Dict[uuid.UUID, Person] = {}
        self._ids_by_nick: Dict[str, uuid.UUID] = {}
        self._search_text: Dict[uuid.UUID, str] = {}

    async def insert(self, new_person: NewPerson) -> Person:
        async with self._lock:
            if new_person.nick in self._ids_by_nick:
                raise ConflictError(field="apelido", value=new_person.nick)

            person = Person.from_new(new_person_id(), new_person)
            self._people[person.id] = person
            self._ids_by_nick[person.nick] = person.id
            self._search_text[person.id] = build_search_text(
                person.name, person.nick, person.stack
            ).lower()
            return person

    async def find_by_id(self, person_id: uuid.UUID) -> Optional[Person]:
        async with self._lock:
            return self._people.get(person_id)

    async def search(self, term: str) -> List[Person]:
        needle = term.lower()
        async with self._lock:
            matches: List[Person] = []
            for person_id in sorted(self._people):
                if needle in self._search_text[person_id]:
                    matches.append(self._people[person_id])
                    if len(matches) == SEARCH_LIMIT:
                        break
            return matches

    async def count(self) -> int:
        async with self._lock:
            return len(self._people)

    async def health_check(self) -> bool:
        return True
