"""
StageLink Backend — Request Authentication Dependencies
=========================================================

What:  FastAPI dependencies that turn `Authorization: Bearer <token>` into
       the current session and Profile.
Why:   Routes receive the requester explicitly and pass it to services;
       there is no ambient "current user" state anywhere else.
How:   HTTPBearer(auto_error=False) extracts the token; IdentityService
       verifies it; the Profile is loaded with the request's own session.

Usage:
    @router.patch("/me")
    async def update_me(
        profile: Profile = Depends(get_current_profile),
        db: AsyncSession = Depends(get_db_session),
    ): ...
"""

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.database import get_db_session
from stagelink.exceptions import AuthenticationError
from stagelink.models import Profile
from stagelink.services.identity_service import identity_service

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentSession:
    account_id: uuid.UUID
    claims: Dict[str, Any]


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> CurrentSession:
    """current_identity(): the verified, non-revoked session or 401."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    account_id, claims = await identity_service.resolve_session(db, credentials.credentials)
    return CurrentSession(account_id=account_id, claims=claims)


async def get_current_profile(
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db_session),
) -> Profile:
    profile = await db.get(Profile, session.account_id)
    if profile is None:
        # Account deleted after the token was issued
        raise AuthenticationError(message="Profile for this session no longer exists")
    return profile


async def get_optional_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[Profile]:
    """Like get_current_profile, but anonymous callers get None instead of 401."""
    if credentials is None or not credentials.credentials:
        return None
    account_id, _ = await identity_service.resolve_session(db, credentials.credentials)
    return await db.get(Profile, account_id)
