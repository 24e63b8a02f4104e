"""
StageLink Backend — Profile Schemas
=====================================

What:  Public profile representation, owner edits and search results.

Type and email are absent from ProfileUpdate on purpose: neither can be
changed after sign-up, and unknown fields in the body are ignored.
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from stagelink.models.enums import ProfileType


class ProfileResponse(BaseModel):
    id: uuid.UUID
    email: str
    profile_type: ProfileType
    display_name: str
    bio: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    profile_picture_url: Optional[str] = None
    location: Optional[str] = None
    role: Optional[str] = None
    social_links: Dict[str, str] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    """
    What:  Partial update of the caller's own profile.
    How:   Only fields present in the body are applied (exclude_unset), so
           sending `"bio": null` clears the bio while omitting it keeps it.
    """
    display_name: Optional[str] = Field(default=None, max_length=200)
    bio: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    profile_picture_url: Optional[str] = None
    location: Optional[str] = None
    role: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None


class ProfileSummary(BaseModel):
    """Compact card used in search results and member lists."""
    id: uuid.UUID
    display_name: str
    profile_type: ProfileType
    profile_picture_url: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None

    model_config = {"from_attributes": True}


class ProfileSearchResponse(BaseModel):
    results: List[ProfileSummary] = Field(default_factory=list)
