"""
Quotebook Backend: Application Package Initializer
===================================================

What: Marks the `quotebook` directory as a Python package.
Who:  Imported by Alembic, pytest, and uvicorn (`uvicorn quotebook.main:app`).

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (validation, similarity, │  ← Business rules, query policies
    │   duplicates, queries, daily pick)  │
    ├─────────────────────────────────────┤
    │       Storage port (services/)      │  ← insert/update/query/aggregate
    ├─────────────────────────────────────┤
    │  Models & Schemas / Database        │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Services never reach for a global database handle. Every call receives
    a storage port bound to the current session.
"""

__version__ = "1.0.0"
