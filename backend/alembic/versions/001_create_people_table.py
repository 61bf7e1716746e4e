"""Create people table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `people` table and its substring-search index.
How:   PostgreSQL-specific: UUID primary key, VARCHAR(32)[] stack column,
       pg_trgm GIN index so `search ILIKE '%term%'` avoids a sequential scan.

Rollback: downgrade() drops the table (all person data is lost). The pg_trgm
extension is left installed.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm")

    op.create_table(
        "people",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            comment="UUIDv7 generated by the application",
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column(
            "nick",
            sa.String(32),
            nullable=False,
            comment="Nickname, unique across all persons",
        ),
        sa.Column("birth_date", sa.Date(), nullable=False),
        sa.Column("stack", postgresql.ARRAY(sa.String(32)), nullable=True),
        sa.Column(
            "search",
            sa.Text(),
            nullable=False,
            comment="name, nick and stack joined by spaces; target of substring search",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("nick", name="uq_people_nick"),
    )

    op.create_index(
        "idx_people_search_trgm",
        "people",
        ["search"],
        postgresql_using="gin",
        postgresql_ops={"search": "gin_trgm_ops"},
    )


def downgrade() -> None:
    op.drop_index("idx_people_search_trgm", table_name="people")
    op.drop_table("people")
