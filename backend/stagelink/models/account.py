"""
StageLink Backend — Identity Models
=====================================

What:  `accounts` (credentials) and `revoked_sessions` (sign-out ledger).
Why:   The identity service owns these tables; everything else in the schema
       hangs off `user_profiles`, whose primary key IS the account id.
How:   Deleting an account cascades to its profile, and from there to every
       row the profile owns.

Table Design Rationale:
    - email is stored lower-cased and unique: one account per address
    - password_hash holds a bcrypt hash, never the password
    - revoked_sessions keys on the token's jti; expires_at lets a cleanup
      job drop rows once the token would have expired anyway
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from stagelink.database import Base
from stagelink.models.mixins import utcnow


class Account(Base):
    """A sign-in identity. Created by sign-up together with its Profile."""

    __tablename__ = "accounts"
    __table_args__ = (UniqueConstraint("email", name="accounts_email_key"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        comment="Lower-cased sign-in email",
    )

    password_hash: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="bcrypt hash",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email='{self.email}')>"


class RevokedSession(Base):
    """A session token that was explicitly signed out before it expired."""

    __tablename__ = "revoked_sessions"
    __table_args__ = (Index("ix_revoked_sessions_jti", "jti", unique=True),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    jti: Mapped[str] = mapped_column(String(64), nullable=False)

    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )

    revoked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
