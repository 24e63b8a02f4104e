"""
StageLink Backend — Venue Directory Schemas
=============================================

What:  Map pins. Coordinates are optional on create; VenueService fills in
       the configured map centre when they are missing.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class VenueCreate(BaseModel):
    name: str
    genre: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    description: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    capacity: Optional[int] = Field(default=None, ge=0)


class VenueUpdate(BaseModel):
    name: Optional[str] = None
    genre: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    description: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    capacity: Optional[int] = Field(default=None, ge=0)


class VenueResponse(BaseModel):
    id: uuid.UUID
    name: str
    genre: str
    address: str
    latitude: float
    longitude: float
    description: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    capacity: Optional[int] = None
    owner_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VenueListResponse(BaseModel):
    venues: List[VenueResponse] = Field(default_factory=list)
