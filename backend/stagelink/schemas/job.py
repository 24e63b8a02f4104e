"""
StageLink Backend — Job Board Schemas
=======================================

What:  Gigs, individual applications and group applications.
Why:   Status fields are typed with the enums so an unknown status is
       rejected before any query runs.

Status lifecycle (applications):
    pending ──▶ accepted
       └──────▶ rejected
    Re-sending the current status is a no-op; anything else is applied as
    given (a rejected application can be accepted later).
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from stagelink.models.enums import ApplicationStatus, JobStatus


# ══════════════════════════════════════════════════════════════════════════
# Jobs
# ══════════════════════════════════════════════════════════════════════════


class JobCreate(BaseModel):
    """
    What:  Body of POST /api/jobs.
    How:   Required text fields are trimmed and must be non-blank (checked by
           JobService, answered with 400). Optional text fields are trimmed
           and stored as null when blank.
    """
    title: str
    description: str
    genre: str
    event_date: datetime
    location: str
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    pay_range: Optional[str] = None
    requirements: Optional[str] = None
    contact_info: Optional[str] = None


class JobUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    genre: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    pay_range: Optional[str] = None
    requirements: Optional[str] = None
    contact_info: Optional[str] = None
    status: Optional[JobStatus] = None


class JobResponse(BaseModel):
    id: uuid.UUID
    venue_id: uuid.UUID
    venue_name: Optional[str] = Field(default=None, description="Display name of the posting venue")
    title: str
    description: str
    genre: str
    event_date: datetime
    location: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    pay_range: Optional[str] = None
    requirements: Optional[str] = None
    contact_info: Optional[str] = None
    status: JobStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class JobListResponse(BaseModel):
    jobs: List[JobResponse] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════
# Applications
# ══════════════════════════════════════════════════════════════════════════

DEFAULT_APPLICATION_MESSAGE = "I'm interested in this opportunity!"


class JobApplicationCreate(BaseModel):
    message: Optional[str] = Field(
        default=None,
        description=f"Cover note; defaults to \"{DEFAULT_APPLICATION_MESSAGE}\"",
    )


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class JobApplicationResponse(BaseModel):
    id: uuid.UUID
    job_id: uuid.UUID
    artist_id: uuid.UUID
    artist_name: Optional[str] = None
    job_title: Optional[str] = None
    message: Optional[str] = None
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class GroupJobApplicationCreate(BaseModel):
    group_id: uuid.UUID
    message: Optional[str] = None


class GroupJobApplicationResponse(BaseModel):
    id: uuid.UUID
    job_id: uuid.UUID
    group_id: uuid.UUID
    group_name: Optional[str] = None
    job_title: Optional[str] = None
    message: Optional[str] = None
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class JobApplicationsResponse(BaseModel):
    """Everything that applied to one job, split by applicant kind."""
    applications: List[JobApplicationResponse] = Field(default_factory=list)
    group_applications: List[GroupJobApplicationResponse] = Field(default_factory=list)


class MyApplicationsResponse(BaseModel):
    applications: List[JobApplicationResponse] = Field(default_factory=list)
