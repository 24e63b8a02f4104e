"""
StageLink Backend — Profile Route Handlers
============================================

What:  Public profile reads, owner edits and search.

Route order matters: /search and /me are declared before /{profile_id} so
they are not parsed as a UUID path parameter.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.database import get_db_session
from stagelink.models import Profile
from stagelink.models.enums import ProfileType
from stagelink.schemas.common import ErrorResponse
from stagelink.schemas.profile import ProfileResponse, ProfileSearchResponse, ProfileUpdate
from stagelink.security import get_current_profile, get_optional_profile
from stagelink.services.profile_service import profile_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profiles", tags=["Profiles"])


@router.get(
    "/search",
    response_model=ProfileSearchResponse,
    summary="Search artists and venues",
    description=(
        "Case-insensitive substring match on display name, bio or location. "
        "Excludes the caller. A blank query returns no results."
    ),
)
async def search_profiles(
    q: str = Query(default="", description="Search text"),
    type: Optional[ProfileType] = Query(default=None, description="Only artists or only venues"),
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileSearchResponse:
    results = await profile_service.search_profiles(db, profile, q, type)
    return ProfileSearchResponse(results=results)


@router.patch(
    "/me",
    response_model=ProfileResponse,
    responses={400: {"description": "Blank display name", "model": ErrorResponse}},
    summary="Update your own profile",
)
async def update_my_profile(
    body: ProfileUpdate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    return await profile_service.update_profile(db, profile, body)


@router.get(
    "/{profile_id}",
    response_model=ProfileResponse,
    responses={404: {"description": "Profile not found", "model": ErrorResponse}},
    summary="Read a profile",
)
async def get_profile(
    profile_id: uuid.UUID,
    requester: Optional[Profile] = Depends(get_optional_profile),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    return await profile_service.get_profile(db, profile_id, requester)
