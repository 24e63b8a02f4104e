"""
StageLink Backend — Media Service
===================================

What:  Per-profile media references (image/video/audio URL + caption).
Why:   The backend stores the reference only; upload and transcoding happen
       elsewhere, so a media item is just a validated row.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.exceptions import NotFoundError
from stagelink.models import MediaItem, Profile
from stagelink.schemas.media import MediaCreate, MediaResponse, MediaUpdate
from stagelink.services.authorization import Action, Entity, authorize
from stagelink.services.validation import optional_text, require_text

logger = logging.getLogger(__name__)


class MediaService:

    async def add_media(
        self,
        db: AsyncSession,
        requester: Profile,
        payload: MediaCreate,
    ) -> MediaResponse:
        item = MediaItem(
            profile_id=requester.id,
            media_type=payload.media_type.value,
            media_url=require_text(payload.media_url, "media_url", "Media URL"),
            caption=optional_text(payload.caption),
        )
        await authorize(db, requester, Entity.MEDIA_ITEM, Action.CREATE, item)

        db.add(item)
        await db.flush()
        logger.info("Media %s (%s) added for %s", item.id, item.media_type, requester.id)
        return MediaResponse.model_validate(item)

    async def list_media(
        self,
        db: AsyncSession,
        profile_id: uuid.UUID,
        requester: Optional[Profile] = None,
    ) -> List[MediaResponse]:
        """A profile's media, newest first. Unknown profiles yield 404."""
        if await db.get(Profile, profile_id) is None:
            raise NotFoundError(resource="profile", resource_id=str(profile_id))

        result = await db.execute(
            select(MediaItem)
            .where(MediaItem.profile_id == profile_id)
            .order_by(MediaItem.created_at.desc(), MediaItem.id.desc())
        )
        items = []
        for item in result.scalars().all():
            await authorize(db, requester, Entity.MEDIA_ITEM, Action.READ, item)
            items.append(MediaResponse.model_validate(item))
        return items

    async def update_caption(
        self,
        db: AsyncSession,
        requester: Profile,
        media_id: uuid.UUID,
        payload: MediaUpdate,
    ) -> MediaResponse:
        item = await self._get(db, media_id)
        await authorize(db, requester, Entity.MEDIA_ITEM, Action.UPDATE, item)

        item.caption = optional_text(payload.caption)
        await db.flush()
        await db.refresh(item)
        return MediaResponse.model_validate(item)

    async def delete_media(self, db: AsyncSession, requester: Profile, media_id: uuid.UUID) -> None:
        item = await self._get(db, media_id)
        await authorize(db, requester, Entity.MEDIA_ITEM, Action.DELETE, item)

        await db.delete(item)
        await db.flush()
        logger.info("Media %s deleted by %s", media_id, requester.id)

    @staticmethod
    async def _get(db: AsyncSession, media_id: uuid.UUID) -> MediaItem:
        item = await db.get(MediaItem, media_id)
        if item is None:
            raise NotFoundError(resource="media item", resource_id=str(media_id))
        return item


media_service = MediaService()
