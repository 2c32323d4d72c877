"""
Cooking Tips Backend — Application Package Initializer
======================================================

What: Marks the `cooking_tips` directory as a Python package.
Why:  Enables module imports like `from cooking_tips.config import settings`.
Who:  Used by uvicorn (`cooking_tips.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │         Routes (API Layer)          │  ← HTTP concerns, caller identity
    ├─────────────────────────────────────┤
    │      Services (Business Logic)      │  ← ownership, rating aggregation
    ├─────────────────────────────────────┤
    │   Stores (Document persistence)     │  ← TipStore / UserDirectory
    ├─────────────────────────────────────┤
    │  Models & Schemas │ Database layer  │  ← SQLAlchemy rows, Pydantic docs
    └─────────────────────────────────────┘

    Routes resolve the caller once and pass it down explicitly. Services never
    touch the request, and stores never apply business rules.
"""

__version__ = "1.0.0"
