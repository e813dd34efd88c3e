"""
Wildwood Zoo Backend — Application Package Initializer
=======================================================

What: Marks the `wildwood` directory as a Python package.
Who:  Imported by uvicorn (`wildwood.main:app`), Alembic and pytest.

Architecture Note:
    The backend keeps a layered layout:

    ┌─────────────────────────────────────┐
    │     Routes (API Layer) + Policy     │  ← HTTP concerns, access checks
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Queries, purchases, patches
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database handle (Persistence)     │  ← Injected async engine/sessions
    └─────────────────────────────────────┘

    Routes never touch SQL directly; services never touch HTTP objects.
"""

__version__ = "1.0.0"
