"""
StageLink Backend — Identity Schemas
======================================

What:  Request/response bodies for sign-up, sign-in and sign-out.

Password length is checked in IdentityService against
`settings.min_password_length` so the rule is configurable and surfaces
as a 400 with a readable message rather than a schema 422.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from stagelink.models.enums import ProfileType


class SignUpRequest(BaseModel):
    email: EmailStr = Field(description="Login email; stored lower-cased")
    password: str = Field(description="Plain-text password, hashed with bcrypt before storage")
    profile_type: ProfileType = Field(
        default=ProfileType.ARTIST,
        description="Kind of profile provisioned for the account",
    )
    display_name: Optional[str] = Field(
        default=None,
        description="Public name; defaults to the email local part when omitted",
    )


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class SessionResponse(BaseModel):
    """
    What:  A freshly issued bearer session.
    Who:   Returned by POST /api/auth/signup (201) and POST /api/auth/signin.

    The client sends `access_token` back as `Authorization: Bearer <token>`.
    """
    account_id: uuid.UUID = Field(description="Account (and profile) identifier")
    access_token: str = Field(description="Signed session token (JWT)")
    token_type: str = Field(default="bearer")
    expires_at: datetime = Field(description="When the token stops being accepted (UTC)")


class SignOutResponse(BaseModel):
    message: str = Field(default="Signed out")
