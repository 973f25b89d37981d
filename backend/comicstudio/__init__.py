"""
Comic Studio Backend — Application Package Initializer
======================================================

What: Marks the `comicstudio` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    This backend follows a layered architecture:
    
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, sessions, status codes
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Ownership checks, asset cleanup
    ├─────────────────────────────────────┤
    │   Documents (Chapter Tree Logic)    │  ← Pure extraction + reconciliation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
    
    The documents package has no I/O and no framework imports, so the
    reconciliation logic is testable with plain lists and dicts.
"""

__version__ = "1.0.0"
