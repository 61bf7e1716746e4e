"""
People API — Person SQLAlchemy Model
======================================

What:  ORM model representing the `people` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for migrations.
Who:   Used by SqlPeopleRepository for inserts and queries.

Table Design:
    - id:          UUIDv7 generated by the application (time-ordered)
    - name:        VARCHAR(100), bound enforced upstream by PersonName
    - nick:        VARCHAR(32) UNIQUE, uniqueness enforced here by the store
    - birth_date:  DATE
    - stack:       VARCHAR(32)[] on PostgreSQL, JSON elsewhere; NULL when absent
    - search:      "name nick tag1 tag2 ..." written alongside the row and
                   matched with ILIKE '%term%'

    GIN trigram index on search (PostgreSQL, requires pg_trgm) keeps the
    leading-wildcard ILIKE from scanning the whole table.
"""

import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import JSON, Date, Index, String, Text, Uuid
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from people_api.database import Base

# ARRAY is PostgreSQL-only; SQLite (tests) stores the list as JSON
StackType = ARRAY(String(32)).with_variant(JSON(), "sqlite")


def build_search_text(name: str, nick: str, stack: Optional[List[str]]) -> str:
    """Concatenation matched by substring search."""
    return " ".join([name, nick, *(stack or [])])


class PersonRecord(Base):
    """
    A row in the people table.

    Rows are written once by the create operation and never updated.
    """

    __tablename__ = "people"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        comment="UUIDv7 generated by the application",
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    nick: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        comment="Nickname, unique across all persons",
    )

    birth_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    stack: Mapped[Optional[List[str]]] = mapped_column(
        StackType,
        nullable=True,
        default=None,
    )

    search: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="name, nick and stack joined by spaces; target of substring search",
    )

    __table_args__ = (
        Index(
            "idx_people_search_trgm",
            "search",
            postgresql_using="gin",
            postgresql_ops={"search": "gin_trgm_ops"},
        ),
    )

    def __repr__(self) -> str:
        return f"<PersonRecord(id={self.id}, nick='{self.nick}')>"
