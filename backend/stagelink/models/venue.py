"""
StageLink Backend — Venue Model
=================================

What:  ORM model for `venues`: physical places shown on the map.
Why:   Separate from venue *profiles*: a venue row is a map pin with an
       address and coordinates, optionally managed by a profile.

Ownership:
    owner_id is nullable. Venues seeded before ownership existed have no
    owner and therefore cannot be edited or deleted through the API.
    Deleting the owning profile keeps the pin and clears owner_id.
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from stagelink.database import Base
from stagelink.models.mixins import TimestampMixin


class Venue(TimestampMixin, Base):
    __tablename__ = "venues"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    genre: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)

    # DECIMAL(10,8) / DECIMAL(11,8) in Postgres, read back as float
    latitude: Mapped[float] = mapped_column(Numeric(10, 8, asdecimal=False), nullable=False)
    longitude: Mapped[float] = mapped_column(Numeric(11, 8, asdecimal=False), nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    owner_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        Index("idx_venues_coordinates", "latitude", "longitude"),
        Index("idx_venues_owner", "owner_id"),
    )

    def __repr__(self) -> str:
        return f"<Venue(id={self.id}, name='{self.name}')>"
