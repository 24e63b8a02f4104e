"""
StageLink Backend — Media Route Handlers
==========================================

What:  Add, list, re-caption and delete media references on a profile.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.database import get_db_session
from stagelink.models import Profile
from stagelink.schemas.common import ErrorResponse
from stagelink.schemas.media import MediaCreate, MediaListResponse, MediaResponse, MediaUpdate
from stagelink.security import get_current_profile, get_optional_profile
from stagelink.services.media_service import media_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/media", tags=["Media"])


@router.post(
    "",
    status_code=201,
    response_model=MediaResponse,
    responses={400: {"description": "Missing media URL", "model": ErrorResponse}},
    summary="Add media to your profile",
)
async def add_media(
    body: MediaCreate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> MediaResponse:
    return await media_service.add_media(db, profile, body)


@router.get(
    "/profile/{profile_id}",
    response_model=MediaListResponse,
    responses={404: {"description": "Profile not found", "model": ErrorResponse}},
    summary="List a profile's media, newest first",
)
async def list_media(
    profile_id: uuid.UUID,
    requester: Optional[Profile] = Depends(get_optional_profile),
    db: AsyncSession = Depends(get_db_session),
) -> MediaListResponse:
    items = await media_service.list_media(db, profile_id, requester)
    return MediaListResponse(items=items)


@router.patch(
    "/{media_id}",
    response_model=MediaResponse,
    responses={404: {"description": "Media item not found", "model": ErrorResponse}},
    summary="Change a media caption",
)
async def update_media(
    media_id: uuid.UUID,
    body: MediaUpdate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> MediaResponse:
    return await media_service.update_caption(db, profile, media_id, body)


@router.delete(
    "/{media_id}",
    status_code=204,
    responses={404: {"description": "Media item not found", "model": ErrorResponse}},
    summary="Delete a media item",
)
async def delete_media(
    media_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await media_service.delete_media(db, profile, media_id)
    return Response(status_code=204)
