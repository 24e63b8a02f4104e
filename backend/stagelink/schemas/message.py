"""
StageLink Backend — Messaging Schemas
=======================================

What:  Single messages, the A↔B thread and the per-partner conversation list.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from stagelink.models.enums import ProfileType


class MessageCreate(BaseModel):
    receiver_id: uuid.UUID
    content: str


class MessageResponse(BaseModel):
    id: uuid.UUID
    sender_id: uuid.UUID
    receiver_id: uuid.UUID
    content: str
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ThreadMessage(MessageResponse):
    sender_name: Optional[str] = None
    receiver_name: Optional[str] = None


class ThreadResponse(BaseModel):
    messages: List[ThreadMessage] = Field(default_factory=list)


class ConversationSummary(BaseModel):
    """
    What:  One row of the conversation list.
    How:   Derived on every request; nothing here is stored.

    unread_count counts messages the partner sent to the caller that the
    caller has not marked read.
    """
    partner_id: uuid.UUID
    partner_name: str
    partner_type: ProfileType
    last_message: str
    last_message_time: datetime
    unread_count: int = Field(ge=0)


class ConversationListResponse(BaseModel):
    conversations: List[ConversationSummary] = Field(default_factory=list)


class MarkReadResponse(BaseModel):
    updated: int = Field(description="Number of messages flipped to read")
