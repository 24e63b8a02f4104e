"""
StageLink Backend — Group Registry Route Handlers
===================================================

What:  Create and manage artist groups and their membership.

/mine is declared before /{group_id} so it is not parsed as a UUID.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.database import get_db_session
from stagelink.models import Profile
from stagelink.schemas.common import ErrorResponse
from stagelink.schemas.group import (
    GroupApplicationsResponse,
    GroupCreate,
    GroupCreateResponse,
    GroupListResponse,
    GroupMemberCreate,
    GroupMemberResponse,
    GroupResponse,
    GroupUpdate,
)
from stagelink.security import get_current_profile
from stagelink.services.group_service import group_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/groups", tags=["Groups"])

_NOT_FOUND = {"description": "Not found or not yours", "model": ErrorResponse}


@router.post(
    "",
    status_code=201,
    response_model=GroupCreateResponse,
    responses={403: {"description": "Only artist profiles can create groups", "model": ErrorResponse}},
    summary="Create a group",
    description=(
        "Creates the group, then adds the caller as a member with their profile "
        "role (or 'Creator'). If the second step fails the group still exists and "
        "the response carries a warning."
    ),
)
async def create_group(
    body: GroupCreate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> GroupCreateResponse:
    return await group_service.create_group(db, profile, body)


@router.get("/mine", response_model=GroupListResponse, summary="Groups you created or belong to")
async def my_groups(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> GroupListResponse:
    groups = await group_service.list_my_groups(db, profile)
    return GroupListResponse(groups=groups)


@router.get(
    "/{group_id}",
    response_model=GroupResponse,
    responses={404: _NOT_FOUND},
    summary="Read a group with its members",
)
async def get_group(group_id: uuid.UUID, db: AsyncSession = Depends(get_db_session)) -> GroupResponse:
    return await group_service.get_group(db, group_id)


@router.patch(
    "/{group_id}",
    response_model=GroupResponse,
    responses={404: _NOT_FOUND},
    summary="Edit a group you created",
)
async def update_group(
    group_id: uuid.UUID,
    body: GroupUpdate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> GroupResponse:
    return await group_service.update_group(db, profile, group_id, body)


@router.delete(
    "/{group_id}",
    status_code=204,
    responses={404: _NOT_FOUND},
    summary="Delete a group you created",
)
async def delete_group(
    group_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await group_service.delete_group(db, profile, group_id)
    return Response(status_code=204)


@router.post(
    "/{group_id}/members",
    status_code=201,
    response_model=GroupMemberResponse,
    responses={
        403: {"description": "Only the creator can add members", "model": ErrorResponse},
        404: _NOT_FOUND,
        409: {"description": "Already a member", "model": ErrorResponse},
    },
    summary="Add a member",
)
async def add_member(
    group_id: uuid.UUID,
    body: GroupMemberCreate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> GroupMemberResponse:
    return await group_service.add_member(db, profile, group_id, body)


@router.delete(
    "/{group_id}/members/{profile_id}",
    status_code=204,
    responses={404: _NOT_FOUND},
    summary="Remove a member, or leave the group",
)
async def remove_member(
    group_id: uuid.UUID,
    profile_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await group_service.remove_member(db, profile, group_id, profile_id)
    return Response(status_code=204)


@router.post(
    "/{group_id}/ensure-creator-membership",
    response_model=GroupResponse,
    responses={404: _NOT_FOUND},
    summary="Add the creator as a member if missing",
)
async def ensure_creator_membership(
    group_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> GroupResponse:
    return await group_service.ensure_creator_membership(db, profile, group_id)


@router.get(
    "/{group_id}/applications",
    response_model=GroupApplicationsResponse,
    responses={403: {"description": "Not a member", "model": ErrorResponse}, 404: _NOT_FOUND},
    summary="The group's job applications",
)
async def group_applications(
    group_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> GroupApplicationsResponse:
    applications = await group_service.list_group_applications(db, profile, group_id)
    return GroupApplicationsResponse(applications=applications)
