"""
People API — People Route Handlers
====================================

What:  The four person endpoints.
How:   Extracts path/query/body data, calls the repository, returns JSON.
       Failures are raised as application exceptions and turned into status
       codes by the handlers registered in main.py.

Route Table:
    GET  /people?t=<term>   → 200 [Person, ...]          (max 50)
    GET  /people/count      → 200 <int>
    GET  /people/{id}       → 200 Person | 400 | 404
    POST /people            → 201 Person + Location      | 422

/people/count is registered before /people/{id} so "count" is never parsed
as an identifier.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from people_api.dependencies import get_repository
from people_api.exceptions import NotFoundError, ValidationError
from people_api.repositories import PeopleRepository
from people_api.schemas.person import ErrorResponse, NewPerson, Person

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/people", tags=["People"])


def parse_person_id(raw: str) -> UUID:
    """Path identifier → UUID, or a 400 ValidationError."""
    try:
        return UUID(raw)
    except ValueError:
        raise ValidationError(
            message=f"'{raw}' is not a valid person identifier",
            field="id",
        )


@router.get(
    "",
    response_model=List[Person],
    responses={
        400: {"description": "Missing search term", "model": ErrorResponse},
        500: {"description": "Store unavailable", "model": ErrorResponse},
    },
    summary="Search people by substring",
    description=(
        "Case-insensitive substring match against name, nickname and stack. "
        "Returns at most 50 people, oldest first."
    ),
)
async def search_people(
    t: str = Query(description="Search term"),
    repo: PeopleRepository = Depends(get_repository),
) -> List[Person]:
    return await repo.search(t)


@router.get(
    "/count",
    response_model=int,
    responses={500: {"description": "Store unavailable", "model": ErrorResponse}},
    summary="Count people",
)
async def count_people(
    repo: PeopleRepository = Depends(get_repository),
) -> int:
    return await repo.count()


@router.get(
    "/{person_id}",
    response_model=Person,
    responses={
        400: {"description": "Malformed identifier", "model": ErrorResponse},
        404: {"description": "Person not found", "model": ErrorResponse},
        500: {"description": "Store unavailable", "model": ErrorResponse},
    },
    summary="Get a person by ID",
)
async def get_person(
    person_id: str,
    repo: PeopleRepository = Depends(get_repository),
) -> Person:
    parsed_id = parse_person_id(person_id)
    person = await repo.find_by_id(parsed_id)
    if person is None:
        raise NotFoundError(resource="person", resource_id=str(parsed_id))
    return person


@router.post(
    "",
    response_model=Person,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"description": "Invalid body or nickname already taken", "model": ErrorResponse},
        500: {"description": "Store unavailable", "model": ErrorResponse},
    },
    summary="Create a person",
)
async def create_person(
    new_person: NewPerson,
    response: Response,
    repo: PeopleRepository = Depends(get_repository),
) -> Person:
    """
    Create a person.

    The body is fully validated (lengths, date format, types) before this
    function runs. The response carries Location: /people/{id}.
    """
    person = await repo.insert(new_person)
    response.headers["Location"] = f"{router.prefix}/{person.id}"
    logger.info("Created person %s", person.id)
    return person
