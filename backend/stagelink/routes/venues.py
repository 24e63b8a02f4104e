"""
StageLink Backend — Venue Directory Route Handlers
====================================================

What:  The venue map. Reads are public; adding needs a session; editing
       and deleting are limited to the venue's owner.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.database import get_db_session
from stagelink.models import Profile
from stagelink.schemas.common import ErrorResponse
from stagelink.schemas.venue import VenueCreate, VenueListResponse, VenueResponse, VenueUpdate
from stagelink.security import get_current_profile
from stagelink.services.venue_service import venue_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/venues", tags=["Venues"])


@router.get("", response_model=VenueListResponse, summary="List venues for the map")
async def list_venues(
    genre: Optional[str] = Query(default=None, description="Exact genre, case-insensitive"),
    db: AsyncSession = Depends(get_db_session),
) -> VenueListResponse:
    venues = await venue_service.list_venues(db, genre)
    return VenueListResponse(venues=venues)


@router.get(
    "/{venue_id}",
    response_model=VenueResponse,
    responses={404: {"description": "Venue not found", "model": ErrorResponse}},
    summary="Read a venue",
)
async def get_venue(
    venue_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
) -> VenueResponse:
    return await venue_service.get_venue(db, venue_id)


@router.post(
    "",
    status_code=201,
    response_model=VenueResponse,
    responses={400: {"description": "Missing name", "model": ErrorResponse}},
    summary="Add a venue to the map",
    description=(
        "Genre defaults to 'Unknown', address to 'Unspecified' and coordinates "
        "to the configured map centre. The caller becomes the venue's owner."
    ),
)
async def add_venue(
    body: VenueCreate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> VenueResponse:
    return await venue_service.add_venue(db, profile, body)


@router.patch(
    "/{venue_id}",
    response_model=VenueResponse,
    responses={404: {"description": "Venue not found or not yours", "model": ErrorResponse}},
    summary="Edit a venue you own",
)
async def update_venue(
    venue_id: uuid.UUID,
    body: VenueUpdate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> VenueResponse:
    return await venue_service.update_venue(db, profile, venue_id, body)


@router.delete(
    "/{venue_id}",
    status_code=204,
    responses={404: {"description": "Venue not found or not yours", "model": ErrorResponse}},
    summary="Delete a venue you own",
)
async def delete_venue(
    venue_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await venue_service.delete_venue(db, profile, venue_id)
    return Response(status_code=204)
