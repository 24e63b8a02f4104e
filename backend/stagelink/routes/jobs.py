"""
StageLink Backend — Job Board Route Handlers
==============================================

What:  Gigs, applications and group applications.
Who:   Venue profiles post and manage jobs; artist profiles (alone or as a
       group) apply.

Route Inventory:
    GET    /api/jobs                               open jobs, soonest first
    POST   /api/jobs                               post a job (venues)
    GET    /api/jobs/applications/mine             caller's own applications
    PATCH  /api/jobs/applications/{id}             accept/reject (job's venue)
    GET    /api/jobs/group-applications/{id}       read (members or job's venue)
    PATCH  /api/jobs/group-applications/{id}       accept/reject (job's venue)
    GET    /api/jobs/{id}                          one job
    PATCH  /api/jobs/{id}                          edit / change status (owner)
    DELETE /api/jobs/{id}                          delete (owner)
    POST   /api/jobs/{id}/applications             apply (artists)
    GET    /api/jobs/{id}/applications             all applicants (owner)
    POST   /api/jobs/{id}/group-applications       apply as a group (members)
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.database import get_db_session
from stagelink.models import Profile
from stagelink.models.enums import JobStatus
from stagelink.schemas.common import ErrorResponse
from stagelink.schemas.job import (
    ApplicationStatusUpdate,
    GroupJobApplicationCreate,
    GroupJobApplicationResponse,
    JobApplicationCreate,
    JobApplicationResponse,
    JobApplicationsResponse,
    JobCreate,
    JobListResponse,
    JobResponse,
    JobUpdate,
    MyApplicationsResponse,
)
from stagelink.security import get_current_profile
from stagelink.services.job_service import job_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])

_NOT_FOUND = {"description": "Not found or not visible to you", "model": ErrorResponse}


@router.get("", response_model=JobListResponse, summary="List jobs by event date")
async def list_jobs(
    genre: Optional[str] = Query(default=None, description="Exact genre, case-insensitive"),
    status: JobStatus = Query(default=JobStatus.OPEN, description="Defaults to open jobs"),
    db: AsyncSession = Depends(get_db_session),
) -> JobListResponse:
    jobs = await job_service.list_jobs(db, genre=genre, status=status)
    return JobListResponse(jobs=jobs)


@router.post(
    "",
    status_code=201,
    response_model=JobResponse,
    responses={
        400: {"description": "Required field blank", "model": ErrorResponse},
        403: {"description": "Only venue profiles can post jobs", "model": ErrorResponse},
    },
    summary="Post a job",
)
async def create_job(
    body: JobCreate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> JobResponse:
    return await job_service.create_job(db, profile, body)


# ── Application routes (declared before /{job_id}) ───────────────────────


@router.get(
    "/applications/mine",
    response_model=MyApplicationsResponse,
    summary="Your individual applications",
)
async def my_applications(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> MyApplicationsResponse:
    applications = await job_service.list_my_applications(db, profile)
    return MyApplicationsResponse(applications=applications)


@router.patch(
    "/applications/{application_id}",
    response_model=JobApplicationResponse,
    responses={404: _NOT_FOUND},
    summary="Accept or reject an application",
)
async def update_application_status(
    application_id: uuid.UUID,
    body: ApplicationStatusUpdate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> JobApplicationResponse:
    return await job_service.update_application_status(db, profile, application_id, body.status)


@router.get(
    "/group-applications/{application_id}",
    response_model=GroupJobApplicationResponse,
    responses={404: _NOT_FOUND},
    summary="Read a group application",
)
async def get_group_application(
    application_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> GroupJobApplicationResponse:
    return await job_service.get_group_application(db, profile, application_id)


@router.patch(
    "/group-applications/{application_id}",
    response_model=GroupJobApplicationResponse,
    responses={404: _NOT_FOUND},
    summary="Accept or reject a group application",
)
async def update_group_application_status(
    application_id: uuid.UUID,
    body: ApplicationStatusUpdate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> GroupJobApplicationResponse:
    return await job_service.update_group_application_status(db, profile, application_id, body.status)


# ── Single job ────────────────────────────────────────────────────────────


@router.get(
    "/{job_id}",
    response_model=JobResponse,
    responses={404: _NOT_FOUND},
    summary="Read a job",
)
async def get_job(job_id: uuid.UUID, db: AsyncSession = Depends(get_db_session)) -> JobResponse:
    return await job_service.get_job(db, job_id)


@router.patch(
    "/{job_id}",
    response_model=JobResponse,
    responses={400: {"description": "Required field blank", "model": ErrorResponse}, 404: _NOT_FOUND},
    summary="Edit a job or change its status",
)
async def update_job(
    job_id: uuid.UUID,
    body: JobUpdate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> JobResponse:
    return await job_service.update_job(db, profile, job_id, body)


@router.delete(
    "/{job_id}",
    status_code=204,
    responses={404: _NOT_FOUND},
    summary="Delete a job",
)
async def delete_job(
    job_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await job_service.delete_job(db, profile, job_id)
    return Response(status_code=204)


@router.post(
    "/{job_id}/applications",
    status_code=201,
    response_model=JobApplicationResponse,
    responses={
        403: {"description": "Only artist profiles can apply", "model": ErrorResponse},
        404: _NOT_FOUND,
        409: {"description": "Already applied", "model": ErrorResponse},
    },
    summary="Apply to a job",
)
async def apply_to_job(
    job_id: uuid.UUID,
    body: Optional[JobApplicationCreate] = None,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> JobApplicationResponse:
    return await job_service.apply(db, profile, job_id, body or JobApplicationCreate())


@router.get(
    "/{job_id}/applications",
    response_model=JobApplicationsResponse,
    responses={404: _NOT_FOUND},
    summary="Everyone who applied to your job",
)
async def list_job_applications(
    job_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> JobApplicationsResponse:
    return await job_service.list_applications(db, profile, job_id)


@router.post(
    "/{job_id}/group-applications",
    status_code=201,
    response_model=GroupJobApplicationResponse,
    responses={
        403: {"description": "Not a member of the group", "model": ErrorResponse},
        404: _NOT_FOUND,
        409: {"description": "Group already applied", "model": ErrorResponse},
    },
    summary="Apply to a job as a group",
)
async def apply_as_group(
    job_id: uuid.UUID,
    body: GroupJobApplicationCreate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> GroupJobApplicationResponse:
    return await job_service.apply_as_group(db, profile, job_id, body)
