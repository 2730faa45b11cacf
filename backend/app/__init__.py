"""
Folio Backend — Application Package
=====================================

Layered architecture:

    ┌─────────────────────────────────────┐
    │   Routes + dependencies (HTTP)      │  ← status codes, cookies, auth gates
    ├─────────────────────────────────────┤
    │   Services (business rules)         │  ← ownership, notifications, uploads
    ├─────────────────────────────────────┤
    │   Models & Schemas (data)           │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (persistence)            │  ← async SQLAlchemy sessions
    └─────────────────────────────────────┘

Every long-lived object is owned by an AppContext (app/context.py) rather
than a module global.
"""

__version__ = "1.0.0"
