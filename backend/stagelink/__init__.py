"""
StageLink Backend — Application Package Initializer
===================================================

What: Marks the `stagelink` directory as a Python package.
Why:  Enables module imports like `from stagelink.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows the same layered shape for every resource
    (profiles, media, venues, jobs, groups, messages):

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (validation + gate)      │  ← Business rules, authorization
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Every mutation passes through the authorization gate
    (`stagelink.services.authorization`) before the row is flushed.
    Uniqueness and enum constraints live in the schema itself and are
    translated into conflict errors by the service that hit them.
"""

__version__ = "1.0.0"
