"""
StageLink Backend — Identity Route Handlers
=============================================

What:  Sign-up, sign-in, sign-out and "who am I".
How:   Thin wrappers over IdentityService; the bearer token is resolved by
       the dependencies in stagelink.security.

Request Flow (sign-up):
    1. Schema validates email syntax and profile type (422 on failure)
    2. IdentityService checks password rules (400), inserts account and
       profile in one transaction (409 on duplicate email)
    3. 201 Created with a session token the client stores
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.database import get_db_session
from stagelink.models import Profile
from stagelink.schemas.auth import SessionResponse, SignInRequest, SignOutResponse, SignUpRequest
from stagelink.schemas.common import ErrorResponse
from stagelink.schemas.profile import ProfileResponse
from stagelink.security import CurrentSession, get_current_profile, get_current_session
from stagelink.services.identity_service import identity_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/signup",
    status_code=201,
    response_model=SessionResponse,
    responses={
        400: {"description": "Password or display name rejected", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Create an account and its profile",
)
async def sign_up(
    body: SignUpRequest,
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    return await identity_service.create_account(
        db,
        email=body.email,
        password=body.password,
        profile_type=body.profile_type,
        display_name=body.display_name,
    )


@router.post(
    "/signin",
    response_model=SessionResponse,
    responses={401: {"description": "Wrong email or password", "model": ErrorResponse}},
    summary="Sign in with email and password",
)
async def sign_in(
    body: SignInRequest,
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    return await identity_service.authenticate(db, email=body.email, password=body.password)


@router.post(
    "/signout",
    response_model=SignOutResponse,
    responses={401: {"description": "No valid session", "model": ErrorResponse}},
    summary="Revoke the current session token",
)
async def sign_out(
    session: CurrentSession = Depends(get_current_session),
    db: AsyncSession = Depends(get_db_session),
) -> SignOutResponse:
    await identity_service.sign_out(db, session.claims)
    return SignOutResponse()


@router.get(
    "/me",
    response_model=ProfileResponse,
    responses={401: {"description": "No valid session", "model": ErrorResponse}},
    summary="The signed-in profile",
)
async def me(profile: Profile = Depends(get_current_profile)) -> ProfileResponse:
    return ProfileResponse.model_validate(profile)
