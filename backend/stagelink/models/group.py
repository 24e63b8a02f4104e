"""
StageLink Backend — Group Registry Models
===========================================

What:  ORM models for `groups` (artist-formed bands), `group_members` and
       `group_job_applications`.
Why:   Lets several artists apply to a gig as one act.

Constraints:
    - uq_group_members_group_user: one membership per (group, profile)
    - uq_group_job_applications_job_group: one application per (job, group)

Creation is two statements (group, then the creator's membership) and they
are NOT in one transaction. A group without its creator as a member is a
valid, repairable state; see GroupService.ensure_creator_membership.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from stagelink.database import Base
from stagelink.models.enums import ApplicationStatus, check_in
from stagelink.models.mixins import TimestampMixin, utcnow


class Group(TimestampMixin, Base):
    __tablename__ = "groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    genre: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    created_by: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_groups_created_by", "created_by"),
    )

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name='{self.name}')>"


class GroupMember(Base):
    __tablename__ = "group_members"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    group_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
    )

    profile_id: Mapped[uuid.UUID] = mapped_column(
        "user_id",
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Free text: 'guitarist', 'singer', 'drummer', ...
    role: Mapped[str] = mapped_column(String(50), nullable=False)

    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
        Index("idx_group_members_group_id", "group_id"),
        Index("idx_group_members_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<GroupMember(group={self.group_id}, profile={self.profile_id}, role='{self.role}')>"


class GroupJobApplication(TimestampMixin, Base):
    __tablename__ = "group_job_applications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
    )

    group_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
    )

    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ApplicationStatus.PENDING.value,
    )

    __table_args__ = (
        UniqueConstraint("job_id", "group_id", name="uq_group_job_applications_job_group"),
        CheckConstraint(
            check_in("status", ApplicationStatus),
            name="ck_group_job_applications_status",
        ),
        Index("idx_group_job_applications_job_id", "job_id"),
        Index("idx_group_job_applications_group_id", "group_id"),
    )

    def __repr__(self) -> str:
        return f"<GroupJobApplication(job={self.job_id}, group={self.group_id}, status='{self.status}')>"
