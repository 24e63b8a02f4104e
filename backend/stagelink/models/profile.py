"""
StageLink Backend — Profile Model
===================================

What:  ORM model for the `user_profiles` table: the public record of an
       artist or venue.
Why:   Every other entity's owner/creator column points here, so this row is
       the anchor for all authorization decisions.
How:   Primary key equals the owning account id (one profile per identity).

Table Design Rationale:
    - profile_type is constrained to artist | venue and never changes after
      sign-up; it decides what a profile may create (jobs vs groups)
    - role is the artist's instrument/position ("guitarist"); used as the
      default member role when the artist creates a group
    - social_links is a free-form JSON object ({"instagram": "..."})
    - idx_user_profiles_type: search filters by type on every query
"""

import uuid
from typing import Dict, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, JSON, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from stagelink.database import Base
from stagelink.models.enums import ProfileType, check_in
from stagelink.models.mixins import TimestampMixin


class Profile(TimestampMixin, Base):
    """
    An artist or venue profile.

    Lifecycle:
        1. Provisioned by the identity service inside the sign-up transaction
        2. Edited only by its owner (PATCH /api/profiles/me)
        3. Removed only when the owning account is deleted (cascade)
    """

    __tablename__ = "user_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Same value as the owning account id",
    )

    email: Mapped[str] = mapped_column(String(320), nullable=False)

    profile_type: Mapped[str] = mapped_column(
        "user_type",
        String(20),
        nullable=False,
        default=ProfileType.ARTIST.value,
        comment="artist or venue",
    )

    display_name: Mapped[str] = mapped_column(String(200), nullable=False)

    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    profile_picture_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    social_links: Mapped[Dict[str, str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )

    __table_args__ = (
        CheckConstraint(check_in("user_type", ProfileType), name="ck_user_profiles_type"),
        Index("idx_user_profiles_type", "user_type"),
    )

    @property
    def is_artist(self) -> bool:
        return self.profile_type == ProfileType.ARTIST.value

    @property
    def is_venue(self) -> bool:
        return self.profile_type == ProfileType.VENUE.value

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, type='{self.profile_type}', name='{self.display_name}')>"
