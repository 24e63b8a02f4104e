"""
StageLink Backend — Profile Service
=====================================

What:  Read, owner-edit and search artist/venue profiles.
Who:   Called by /api/profiles and /api/auth/me route handlers.

Search query plan:
    SELECT * FROM user_profiles
    WHERE (display_name ILIKE :q OR bio ILIKE :q OR location ILIKE :q)
      AND user_type = :type            -- optional
      AND id <> :me
    LIMIT :search_result_limit
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.config import settings
from stagelink.exceptions import NotFoundError
from stagelink.models import Profile
from stagelink.models.enums import ProfileType
from stagelink.schemas.profile import ProfileResponse, ProfileSummary, ProfileUpdate
from stagelink.services.authorization import Action, Entity, authorize
from stagelink.services.validation import clean_update

logger = logging.getLogger(__name__)

_OPTIONAL_TEXT = ("bio", "website", "phone", "profile_picture_url", "location", "role")


class ProfileService:

    async def get_profile(
        self,
        db: AsyncSession,
        profile_id: uuid.UUID,
        requester: Optional[Profile] = None,
    ) -> ProfileResponse:
        profile = await db.get(Profile, profile_id)
        if profile is None:
            raise NotFoundError(resource="profile", resource_id=str(profile_id))
        await authorize(db, requester, Entity.PROFILE, Action.READ, profile)
        return ProfileResponse.model_validate(profile)

    async def update_profile(
        self,
        db: AsyncSession,
        requester: Profile,
        update: ProfileUpdate,
    ) -> ProfileResponse:
        """
        Apply the fields present in `update` to the requester's own profile.

        Raises:
            ValidationError: display_name present but blank
        """
        changes = clean_update(
            update.model_dump(exclude_unset=True),
            required=("display_name",),
            text_fields=_OPTIONAL_TEXT,
        )
        if "social_links" in changes and changes["social_links"] is None:
            changes["social_links"] = {}

        await authorize(db, requester, Entity.PROFILE, Action.UPDATE, requester)

        for key, value in changes.items():
            setattr(requester, key, value)
        await db.flush()
        await db.refresh(requester)

        logger.info("Profile %s updated: %s", requester.id, sorted(changes))
        return ProfileResponse.model_validate(requester)

    async def search_profiles(
        self,
        db: AsyncSession,
        requester: Profile,
        query: str,
        profile_type: Optional[ProfileType] = None,
    ) -> List[ProfileSummary]:
        """
        Case-insensitive substring search over name, bio and location.

        A blank query returns an empty list without touching the database.
        """
        term = (query or "").strip()
        if not term:
            return []

        pattern = f"%{term}%"
        stmt = (
            select(Profile)
            .where(
                or_(
                    Profile.display_name.ilike(pattern),
                    Profile.bio.ilike(pattern),
                    Profile.location.ilike(pattern),
                ),
                Profile.id != requester.id,
            )
            .order_by(Profile.display_name)
            .limit(settings.search_result_limit)
        )
        if profile_type is not None:
            stmt = stmt.where(Profile.profile_type == ProfileType(profile_type).value)

        result = await db.execute(stmt)
        return [ProfileSummary.model_validate(p) for p in result.scalars().all()]


profile_service = ProfileService()
