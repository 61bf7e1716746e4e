"""
People API — Application Package
==================================

HTTP service managing person records (name, nickname, birth date, tech stack).

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Repositories (Data Access)      │  ← SQL or in-memory store
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async engine and pool
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
