"""
StageLink Backend — Media Schemas
===================================
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from stagelink.models.enums import MediaType


class MediaCreate(BaseModel):
    media_type: MediaType = Field(description="image, video or audio")
    media_url: str = Field(description="Where the file lives; the backend never fetches it")
    caption: Optional[str] = None


class MediaUpdate(BaseModel):
    caption: Optional[str] = None


class MediaResponse(BaseModel):
    id: uuid.UUID
    profile_id: uuid.UUID
    media_type: MediaType
    media_url: str
    caption: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MediaListResponse(BaseModel):
    items: List[MediaResponse] = Field(default_factory=list)
