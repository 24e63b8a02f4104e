"""
StageLink Backend — Group Registry Schemas
============================================
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from stagelink.schemas.job import GroupJobApplicationResponse


class GroupCreate(BaseModel):
    name: str = Field(max_length=100)
    description: Optional[str] = None
    genre: Optional[str] = Field(default=None, max_length=50)


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    genre: Optional[str] = Field(default=None, max_length=50)


class GroupMemberCreate(BaseModel):
    profile_id: uuid.UUID
    role: str = Field(max_length=50, description="Free text: guitarist, singer, drummer, ...")


class GroupMemberResponse(BaseModel):
    id: uuid.UUID
    group_id: uuid.UUID
    profile_id: uuid.UUID
    display_name: Optional[str] = None
    role: str
    joined_at: datetime

    model_config = {"from_attributes": True}


class GroupResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    genre: Optional[str] = None
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime
    members: List[GroupMemberResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class GroupCreateResponse(BaseModel):
    """
    What:  Result of POST /api/groups.
    Why:   The creator's membership is a second statement after the group is
           committed. When it fails the group still exists; `warning` says so
           and the client can call ensure-creator-membership later.
    """
    group: GroupResponse
    warning: Optional[str] = None


class GroupListResponse(BaseModel):
    groups: List[GroupResponse] = Field(default_factory=list)


class GroupApplicationsResponse(BaseModel):
    applications: List[GroupJobApplicationResponse] = Field(default_factory=list)
