"""
StageLink Backend — Job Board Models
======================================

What:  ORM models for `jobs` (venue-posted gigs) and `job_applications`
       (an artist's application to a gig).
Why:   The job board is the marketplace half of the product.

Constraints that carry business rules:
    - uq_job_applications_job_artist: one application per (job, artist).
      Concurrent duplicate applications race on this constraint; exactly
      one insert wins and the other surfaces as "already applied".
    - ck_jobs_status / ck_job_applications_status: enum values enforced in
      the store as well as in the request schemas.

Query Patterns:
    - Open jobs by event date: WHERE status = 'open' ORDER BY event_date
      → idx_jobs_status, idx_jobs_event_date
    - "My applications": WHERE artist_id = :me → idx_job_applications_artist_id
    - "Applications for my job": WHERE job_id = :job → idx_job_applications_job_id
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from stagelink.database import Base
from stagelink.models.enums import ApplicationStatus, JobStatus, check_in
from stagelink.models.mixins import TimestampMixin


class Job(TimestampMixin, Base):
    """A performance opportunity posted by a venue profile."""

    __tablename__ = "jobs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    venue_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    genre: Mapped[str] = mapped_column(Text, nullable=False)
    event_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)

    latitude: Mapped[Optional[float]] = mapped_column(Numeric(10, 8, asdecimal=False), nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Numeric(11, 8, asdecimal=False), nullable=True)

    pay_range: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    requirements: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    contact_info: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=JobStatus.OPEN.value,
        comment="open, filled, cancelled",
    )

    __table_args__ = (
        CheckConstraint(check_in("status", JobStatus), name="ck_jobs_status"),
        Index("idx_jobs_venue_id", "venue_id"),
        Index("idx_jobs_status", "status"),
        Index("idx_jobs_event_date", "event_date"),
        Index("idx_jobs_genre", "genre"),
    )

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title='{self.title}', status='{self.status}')>"


class JobApplication(TimestampMixin, Base):
    """An individual artist's application to a job."""

    __tablename__ = "job_applications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
    )

    artist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ApplicationStatus.PENDING.value,
    )

    __table_args__ = (
        UniqueConstraint("job_id", "artist_id", name="uq_job_applications_job_artist"),
        CheckConstraint(check_in("status", ApplicationStatus), name="ck_job_applications_status"),
        Index("idx_job_applications_job_id", "job_id"),
        Index("idx_job_applications_artist_id", "artist_id"),
        Index("idx_job_applications_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<JobApplication(job={self.job_id}, artist={self.artist_id}, status='{self.status}')>"
