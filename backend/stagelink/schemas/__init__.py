"""
StageLink Backend — API Schemas
=================================

Pydantic models defining the API contract. Kept separate from the ORM
models so the wire format can change without a migration and so internal
columns (password hashes, revoked session ids) never leak into responses.
"""
