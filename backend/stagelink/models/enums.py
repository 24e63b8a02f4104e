"""
Enumerated column values shared by models, schemas and the check constraints.

The database stores plain strings (VARCHAR + CHECK); these enums are the
single Python-side source of the allowed values.
"""

from enum import Enum
from typing import Type


class ProfileType(str, Enum):
    ARTIST = "artist"
    VENUE = "venue"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


class JobStatus(str, Enum):
    OPEN = "open"
    FILLED = "filled"
    CANCELLED = "cancelled"


class ApplicationStatus(str, Enum):
    """pending → accepted | rejected. Used by individual and group applications."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def check_in(column: str, enum: Type[Enum]) -> str:
    """Build the SQL text for `column IN (...)` from an enum's values."""
    values = ", ".join(f"'{member.value}'" for member in enum)
    return f"{column} IN ({values})"
