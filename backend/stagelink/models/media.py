"""
StageLink Backend — Media Item Model
======================================

What:  ORM model for `user_media`: image/video/audio references shared on a
       profile.
Why:   Media is stored as an opaque URL; the backend never touches the bytes.

Index on (user_id, created_at DESC):
    The only read pattern is "this profile's media, newest first".
"""

import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from stagelink.database import Base
from stagelink.models.enums import MediaType, check_in
from stagelink.models.mixins import TimestampMixin


class MediaItem(TimestampMixin, Base):
    __tablename__ = "user_media"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    profile_id: Mapped[uuid.UUID] = mapped_column(
        "user_id",
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    media_type: Mapped[str] = mapped_column(String(20), nullable=False)
    media_url: Mapped[str] = mapped_column(Text, nullable=False)
    caption: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(check_in("media_type", MediaType), name="ck_user_media_type"),
        Index("idx_user_media_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<MediaItem(id={self.id}, type='{self.media_type}', profile={self.profile_id})>"
