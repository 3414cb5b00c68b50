"""
DualStore — Application Package Initializer
=============================================

What: Marks the `dualstore` directory as a Python package.
Why:  Enables module imports like `from dualstore.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The API fronts two independent stores through the same layering:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (customer / order)       │  ← Store calls, error translation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM, documents, Pydantic
    ├─────────────────────────────────────┤
    │  database.py (PostgreSQL) │ mongo.py (MongoDB)  │
    └─────────────────────────────────────┘

    The customer side never touches MongoDB and the order side never touches
    PostgreSQL; the two halves only share the HTTP layer and error model.
"""

__version__ = "1.0.0"
