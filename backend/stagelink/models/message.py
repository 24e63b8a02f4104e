"""
StageLink Backend — Message Model
===================================

What:  ORM model for `messages`: one directed message between two profiles.
Why:   Conversations are NOT stored; they are derived from these rows on
       every request (see MessageService).

Constraints:
    - ck_messages_sender_not_receiver: nobody messages themself

Index on (sender_id, receiver_id, created_at):
    Serves both directions of the thread query and the per-partner
    "latest message" window in the conversation list.
"""

import uuid

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from stagelink.database import Base
from stagelink.models.mixins import TimestampMixin


class Message(TimestampMixin, Base):
    __tablename__ = "messages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    sender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    receiver_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("sender_id <> receiver_id", name="ck_messages_sender_not_receiver"),
        Index("idx_messages_sender_id", "sender_id"),
        Index("idx_messages_receiver_id", "receiver_id"),
        Index("idx_messages_created_at", "created_at"),
        Index("idx_messages_conversation", "sender_id", "receiver_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, {self.sender_id} → {self.receiver_id}, read={self.is_read})>"
