"""
People API — Pydantic Request/Response Schemas
================================================

What:  Pydantic models defining the API contract.
How:   FastAPI validates request bodies against NewPerson, serializes Person
       responses, and generates the OpenAPI document from both.

Wire format (localized field names):
    {
        "id": "0190f1d2-...",           (responses only)
        "nome": "John Smith",
        "apelido": "jsmith",
        "nascimento": "2000-01-01",
        "stack": ["Rust", "Java"]       (or null / absent)
    }

Python code uses the English attribute names (name, nick, birth_date);
the aliases only exist at the JSON boundary.
"""

import re
import uuid
from datetime import date
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from people_api.schemas.bounded import NickField, PersonNameField, TechField

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _require_iso_date_string(value: Any) -> Any:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise ValueError("Date must be a string in YYYY-MM-DD format")
    return value


# pydantic still rejects impossible dates such as 2000-02-30
IsoDate = Annotated[date, BeforeValidator(_require_iso_date_string)]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NewPerson(BaseModel):
    """
    What:  Body of POST /people.
    Who:   Passed unchanged from the route to PeopleRepository.insert().

    Every bound is checked while parsing, so an instance is always valid.
    nascimento only accepts a "YYYY-MM-DD" string, never a timestamp number
    or a datetime string.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: PersonNameField = Field(alias="nome", description="Full name (max 100 chars)")
    nick: NickField = Field(alias="apelido", description="Unique nickname (max 32 chars)")
    birth_date: IsoDate = Field(
        alias="nascimento",
        description="Birth date, ISO 8601 (YYYY-MM-DD)",
    )
    stack: Optional[List[TechField]] = Field(
        default=None,
        description="Technologies, each max 32 chars",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class Person(BaseModel):
    """
    What:  A persisted person.
    Who:   Returned by every repository read and by GET/POST /people routes.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: uuid.UUID = Field(description="Time-ordered identifier (UUIDv7)")
    name: str = Field(alias="nome")
    nick: str = Field(alias="apelido")
    birth_date: date = Field(alias="nascimento")
    stack: Optional[List[str]] = Field(default=None)

    @classmethod
    def from_new(cls, person_id: uuid.UUID, new_person: NewPerson) -> "Person":
        """Materialize a NewPerson under a freshly generated identifier."""
        return cls(
            id=person_id,
            name=new_person.name,
            nick=new_person.nick,
            birth_date=new_person.birth_date,
            stack=list(new_person.stack) if new_person.stack is not None else None,
        )


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "A person with apelido 'jsmith' already exists",
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Body of GET /health."""
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    storage: str = Field(description="Repository backend: sql or memory")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
