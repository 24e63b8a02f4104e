"""
StageLink Backend — Job Board Service
=======================================

What:  Gigs posted by venues, individual artist applications and group
       applications, plus the status lifecycle of both application kinds.
Who:   Called by the /api/jobs route handlers.

Application flow:
    ┌──────────────┐    ┌───────────────┐    ┌─────────────────┐
    │ venue posts  │───▶│ artist / group│───▶│ venue accepts   │
    │ job (open)   │    │ applies       │    │ or rejects      │
    └──────────────┘    │ (pending)     │    └─────────────────┘
                        └───────────────┘
    A second application by the same artist (or group) to the same job
    trips a unique constraint and is answered with a 409 carrying a
    specific message. Concurrent duplicates race on that constraint; the
    store lets exactly one through.

Status updates:
    Same status as stored → nothing is written and the current row is
    returned. Any other valid status is applied as given.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.database import flush_or_conflict
from stagelink.exceptions import NotFoundError
from stagelink.models import Group, GroupJobApplication, Job, JobApplication, Profile
from stagelink.models.enums import ApplicationStatus, JobStatus
from stagelink.schemas.job import (
    DEFAULT_APPLICATION_MESSAGE,
    GroupJobApplicationCreate,
    GroupJobApplicationResponse,
    JobApplicationCreate,
    JobApplicationResponse,
    JobApplicationsResponse,
    JobCreate,
    JobResponse,
    JobUpdate,
)
from stagelink.services.authorization import Action, Entity, authorize
from stagelink.services.validation import clean_update, optional_text, require_text

logger = logging.getLogger(__name__)

_REQUIRED_TEXT = ("title", "description", "genre", "location")
_OPTIONAL_TEXT = ("pay_range", "requirements", "contact_info")


def _job_response(job: Job, venue_name: Optional[str] = None) -> JobResponse:
    return JobResponse.model_validate(job).model_copy(update={"venue_name": venue_name})


def _application_response(
    application: JobApplication,
    artist_name: Optional[str] = None,
    job_title: Optional[str] = None,
) -> JobApplicationResponse:
    return JobApplicationResponse.model_validate(application).model_copy(
        update={"artist_name": artist_name, "job_title": job_title}
    )


def _group_application_response(
    application: GroupJobApplication,
    group_name: Optional[str] = None,
    job_title: Optional[str] = None,
) -> GroupJobApplicationResponse:
    return GroupJobApplicationResponse.model_validate(application).model_copy(
        update={"group_name": group_name, "job_title": job_title}
    )


class JobService:
    """
    Responsibilities:
        - Jobs: list_jobs, get_job, create_job, update_job, delete_job
        - Individual applications: apply, list_applications, list_my_applications,
          update_application_status
        - Group applications: apply_as_group, get_group_application,
          update_group_application_status
    """

    # ══════════════════════════════════════════════════════════════════════
    # Jobs
    # ══════════════════════════════════════════════════════════════════════

    async def list_jobs(
        self,
        db: AsyncSession,
        genre: Optional[str] = None,
        status: JobStatus = JobStatus.OPEN,
    ) -> List[JobResponse]:
        """
        Jobs in `status` (open by default), soonest event first, each with
        the posting venue's display name.

        Query plan:
            SELECT jobs.*, user_profiles.display_name
            FROM jobs JOIN user_profiles ON user_profiles.id = jobs.venue_id
            WHERE jobs.status = :status [AND lower(jobs.genre) = lower(:genre)]
            ORDER BY jobs.event_date ASC
            → idx_jobs_status + idx_jobs_event_date
        """
        stmt = (
            select(Job, Profile.display_name)
            .join(Profile, Profile.id == Job.venue_id)
            .where(Job.status == JobStatus(status).value)
            .order_by(Job.event_date.asc(), Job.created_at.asc())
        )
        genre = optional_text(genre)
        if genre:
            stmt = stmt.where(func.lower(Job.genre) == genre.lower())

        result = await db.execute(stmt)
        return [_job_response(job, venue_name) for job, venue_name in result.all()]

    async def get_job(self, db: AsyncSession, job_id: uuid.UUID) -> JobResponse:
        result = await db.execute(
            select(Job, Profile.display_name)
            .join(Profile, Profile.id == Job.venue_id)
            .where(Job.id == job_id)
        )
        row = result.first()
        if row is None:
            raise NotFoundError(resource="job", resource_id=str(job_id))
        job, venue_name = row
        return _job_response(job, venue_name)

    async def create_job(self, db: AsyncSession, requester: Profile, payload: JobCreate) -> JobResponse:
        """
        Post a job as the requesting venue.

        Raises:
            ValidationError:       Required text blank after trimming
            PermissionDeniedError: Requester is not a venue profile
        """
        job = Job(
            venue_id=requester.id,
            title=require_text(payload.title, "title"),
            description=require_text(payload.description, "description"),
            genre=require_text(payload.genre, "genre"),
            event_date=payload.event_date,
            location=require_text(payload.location, "location"),
            latitude=payload.latitude,
            longitude=payload.longitude,
            pay_range=optional_text(payload.pay_range),
            requirements=optional_text(payload.requirements),
            contact_info=optional_text(payload.contact_info),
            status=JobStatus.OPEN.value,
        )
        await authorize(db, requester, Entity.JOB, Action.CREATE, job)

        db.add(job)
        await db.flush()
        logger.info("Job %s '%s' posted by %s", job.id, job.title, requester.id)
        return _job_response(job, requester.display_name)

    async def update_job(
        self,
        db: AsyncSession,
        requester: Profile,
        job_id: uuid.UUID,
        payload: JobUpdate,
    ) -> JobResponse:
        job = await self._get_job(db, job_id)
        await authorize(db, requester, Entity.JOB, Action.UPDATE, job)

        changes = clean_update(
            payload.model_dump(exclude_unset=True),
            required=_REQUIRED_TEXT,
            text_fields=_OPTIONAL_TEXT,
        )
        for key in ("event_date", "status"):
            if key in changes and changes[key] is None:
                del changes[key]
        if "status" in changes:
            changes["status"] = JobStatus(changes["status"]).value

        for key, value in changes.items():
            setattr(job, key, value)
        await db.flush()
        await db.refresh(job)

        logger.info("Job %s updated by %s: %s", job.id, requester.id, sorted(changes))
        return _job_response(job, requester.display_name)

    async def delete_job(self, db: AsyncSession, requester: Profile, job_id: uuid.UUID) -> None:
        job = await self._get_job(db, job_id)
        await authorize(db, requester, Entity.JOB, Action.DELETE, job)

        await db.delete(job)
        await db.flush()
        logger.info("Job %s deleted by %s", job_id, requester.id)

    # ══════════════════════════════════════════════════════════════════════
    # Individual applications
    # ══════════════════════════════════════════════════════════════════════

    async def apply(
        self,
        db: AsyncSession,
        requester: Profile,
        job_id: uuid.UUID,
        payload: JobApplicationCreate,
    ) -> JobApplicationResponse:
        """
        Apply to a job as the requesting artist.

        Raises:
            NotFoundError:         Job does not exist
            PermissionDeniedError: Requester is not an artist profile
            ConflictError:         Requester already applied to this job
        """
        job = await self._get_job(db, job_id)
        application = JobApplication(
            job_id=job.id,
            artist_id=requester.id,
            message=optional_text(payload.message) or DEFAULT_APPLICATION_MESSAGE,
            status=ApplicationStatus.PENDING.value,
        )
        await authorize(db, requester, Entity.JOB_APPLICATION, Action.CREATE, application)

        job_title = job.title
        artist_name = requester.display_name

        db.add(application)
        await flush_or_conflict(
            db,
            message="You have already applied for this job",
            constraint="uq_job_applications_job_artist",
        )
        logger.info("Artist %s applied to job %s", requester.id, job_id)
        return _application_response(application, artist_name, job_title)

    async def list_applications(
        self,
        db: AsyncSession,
        requester: Profile,
        job_id: uuid.UUID,
    ) -> JobApplicationsResponse:
        """Individual and group applications for one job, oldest first (owning venue only)."""
        job = await self._get_job(db, job_id)
        # Only the job's venue manages its applicant list
        await authorize(db, requester, Entity.JOB, Action.UPDATE, job)

        individual = await db.execute(
            select(JobApplication, Profile.display_name)
            .join(Profile, Profile.id == JobApplication.artist_id)
            .where(JobApplication.job_id == job_id)
            .order_by(JobApplication.created_at.asc())
        )
        groups = await db.execute(
            select(GroupJobApplication, Group.name)
            .join(Group, Group.id == GroupJobApplication.group_id)
            .where(GroupJobApplication.job_id == job_id)
            .order_by(GroupJobApplication.created_at.asc())
        )
        return JobApplicationsResponse(
            applications=[
                _application_response(application, artist_name, job.title)
                for application, artist_name in individual.all()
            ],
            group_applications=[
                _group_application_response(application, group_name, job.title)
                for application, group_name in groups.all()
            ],
        )

    async def list_my_applications(self, db: AsyncSession, requester: Profile) -> List[JobApplicationResponse]:
        result = await db.execute(
            select(JobApplication, Job.title)
            .join(Job, Job.id == JobApplication.job_id)
            .where(JobApplication.artist_id == requester.id)
            .order_by(JobApplication.created_at.desc())
        )
        return [
            _application_response(application, requester.display_name, job_title)
            for application, job_title in result.all()
        ]

    async def update_application_status(
        self,
        db: AsyncSession,
        requester: Profile,
        application_id: uuid.UUID,
        status: ApplicationStatus,
    ) -> JobApplicationResponse:
        application = await db.get(JobApplication, application_id)
        if application is None:
            raise NotFoundError(resource="job application", resource_id=str(application_id))
        await authorize(db, requester, Entity.JOB_APPLICATION, Action.UPDATE, application)

        new_status = ApplicationStatus(status).value
        if application.status != new_status:
            application.status = new_status
            await db.flush()
            await db.refresh(application)
            logger.info("Application %s → %s by %s", application_id, new_status, requester.id)

        return _application_response(application)

    # ══════════════════════════════════════════════════════════════════════
    # Group applications
    # ══════════════════════════════════════════════════════════════════════

    async def apply_as_group(
        self,
        db: AsyncSession,
        requester: Profile,
        job_id: uuid.UUID,
        payload: GroupJobApplicationCreate,
    ) -> GroupJobApplicationResponse:
        """
        Apply to a job on behalf of a group the requester belongs to.

        Raises:
            NotFoundError:         Job or group does not exist
            PermissionDeniedError: Requester is not a current member of the group
            ConflictError:         The group already applied to this job
        """
        job = await self._get_job(db, job_id)
        group = await db.get(Group, payload.group_id)
        if group is None:
            raise NotFoundError(resource="group", resource_id=str(payload.group_id))

        application = GroupJobApplication(
            job_id=job.id,
            group_id=group.id,
            message=optional_text(payload.message) or DEFAULT_APPLICATION_MESSAGE,
            status=ApplicationStatus.PENDING.value,
        )
        await authorize(db, requester, Entity.GROUP_JOB_APPLICATION, Action.CREATE, application)

        job_title = job.title
        group_name = group.name

        db.add(application)
        await flush_or_conflict(
            db,
            message="This group has already applied for this job",
            constraint="uq_group_job_applications_job_group",
        )
        logger.info("Group %s applied to job %s (by %s)", group_name, job_id, requester.id)
        return _group_application_response(application, group_name, job_title)

    async def get_group_application(
        self,
        db: AsyncSession,
        requester: Profile,
        application_id: uuid.UUID,
    ) -> GroupJobApplicationResponse:
        result = await db.execute(
            select(GroupJobApplication, Group.name, Job.title)
            .join(Group, Group.id == GroupJobApplication.group_id)
            .join(Job, Job.id == GroupJobApplication.job_id)
            .where(GroupJobApplication.id == application_id)
        )
        row = result.first()
        if row is None:
            raise NotFoundError(resource="group job application", resource_id=str(application_id))
        application, group_name, job_title = row
        await authorize(db, requester, Entity.GROUP_JOB_APPLICATION, Action.READ, application)
        return _group_application_response(application, group_name, job_title)

    async def update_group_application_status(
        self,
        db: AsyncSession,
        requester: Profile,
        application_id: uuid.UUID,
        status: ApplicationStatus,
    ) -> GroupJobApplicationResponse:
        application = await db.get(GroupJobApplication, application_id)
        if application is None:
            raise NotFoundError(resource="group job application", resource_id=str(application_id))
        await authorize(db, requester, Entity.GROUP_JOB_APPLICATION, Action.UPDATE, application)

        new_status = ApplicationStatus(status).value
        if application.status != new_status:
            application.status = new_status
            await db.flush()
            await db.refresh(application)
            logger.info("Group application %s → %s by %s", application_id, new_status, requester.id)

        return _group_application_response(application)

    @staticmethod
    async def _get_job(db: AsyncSession, job_id: uuid.UUID) -> Job:
        job = await db.get(Job, job_id)
        if job is None:
            raise NotFoundError(resource="job", resource_id=str(job_id))
        return job


job_service = JobService()
