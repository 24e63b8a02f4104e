"""
StageLink Backend — Venue Directory Service
=============================================

What:  The venue map: list, read, add, and owner-only edit/delete.

Defaults on create (the map screen lets users drop a pin with just a name):
    genre      → "Unknown"
    address    → "Unspecified"
    lat / lng  → settings.default_latitude / settings.default_longitude

Venues created before ownership was tracked have owner_id NULL and cannot
be edited or deleted through the API by anyone.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.config import settings
from stagelink.exceptions import NotFoundError
from stagelink.models import Profile, Venue
from stagelink.schemas.venue import VenueCreate, VenueResponse, VenueUpdate
from stagelink.services.authorization import Action, Entity, authorize
from stagelink.services.validation import clean_update, optional_text, require_text

logger = logging.getLogger(__name__)

DEFAULT_GENRE = "Unknown"
DEFAULT_ADDRESS = "Unspecified"


class VenueService:

    async def list_venues(self, db: AsyncSession, genre: Optional[str] = None) -> List[VenueResponse]:
        stmt = select(Venue).order_by(Venue.name)
        genre = optional_text(genre)
        if genre:
            stmt = stmt.where(func.lower(Venue.genre) == genre.lower())
        result = await db.execute(stmt)
        return [VenueResponse.model_validate(v) for v in result.scalars().all()]

    async def get_venue(self, db: AsyncSession, venue_id: uuid.UUID) -> VenueResponse:
        venue = await self._get(db, venue_id)
        return VenueResponse.model_validate(venue)

    async def add_venue(self, db: AsyncSession, requester: Profile, payload: VenueCreate) -> VenueResponse:
        venue = Venue(
            name=require_text(payload.name, "name"),
            genre=optional_text(payload.genre) or DEFAULT_GENRE,
            address=optional_text(payload.address) or DEFAULT_ADDRESS,
            latitude=payload.latitude if payload.latitude is not None else settings.default_latitude,
            longitude=payload.longitude if payload.longitude is not None else settings.default_longitude,
            description=optional_text(payload.description),
            website=optional_text(payload.website),
            phone=optional_text(payload.phone),
            capacity=payload.capacity,
            owner_id=requester.id,
        )
        await authorize(db, requester, Entity.VENUE, Action.CREATE, venue)

        db.add(venue)
        await db.flush()
        logger.info("Venue %s '%s' added by %s", venue.id, venue.name, requester.id)
        return VenueResponse.model_validate(venue)

    async def update_venue(
        self,
        db: AsyncSession,
        requester: Profile,
        venue_id: uuid.UUID,
        payload: VenueUpdate,
    ) -> VenueResponse:
        venue = await self._get(db, venue_id)
        await authorize(db, requester, Entity.VENUE, Action.UPDATE, venue)

        changes = clean_update(
            payload.model_dump(exclude_unset=True),
            required=("name", "genre", "address"),
            text_fields=("description", "website", "phone"),
        )
        # Coordinates are NOT NULL; an explicit null keeps the current pin
        for key in ("latitude", "longitude"):
            if key in changes and changes[key] is None:
                del changes[key]

        for key, value in changes.items():
            setattr(venue, key, value)
        await db.flush()
        await db.refresh(venue)
        return VenueResponse.model_validate(venue)

    async def delete_venue(self, db: AsyncSession, requester: Profile, venue_id: uuid.UUID) -> None:
        venue = await self._get(db, venue_id)
        await authorize(db, requester, Entity.VENUE, Action.DELETE, venue)

        await db.delete(venue)
        await db.flush()
        logger.info("Venue %s deleted by %s", venue_id, requester.id)

    @staticmethod
    async def _get(db: AsyncSession, venue_id: uuid.UUID) -> Venue:
        venue = await db.get(Venue, venue_id)
        if venue is None:
            raise NotFoundError(resource="venue", resource_id=str(venue_id))
        return venue


venue_service = VenueService()
