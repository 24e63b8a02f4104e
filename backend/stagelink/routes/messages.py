"""
StageLink Backend — Messaging Route Handlers
==============================================

What:  Send messages, list conversations, read a thread, mark it read.
Why:   Polling endpoints; there is no push channel. Reading a thread and
       marking it read are separate calls.
"""

import logging
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.database import get_db_session
from stagelink.models import Profile
from stagelink.schemas.common import ErrorResponse
from stagelink.schemas.message import (
    ConversationListResponse,
    MarkReadResponse,
    MessageCreate,
    MessageResponse,
    ThreadResponse,
)
from stagelink.security import get_current_profile
from stagelink.services.message_service import message_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/messages", tags=["Messages"])


@router.post(
    "",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Blank content or message to self", "model": ErrorResponse},
        404: {"description": "Receiver not found", "model": ErrorResponse},
    },
    summary="Send a message",
)
async def send_message(
    body: MessageCreate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await message_service.send_message(db, profile, body)


@router.get(
    "/conversations",
    response_model=ConversationListResponse,
    summary="Your conversations, most recent first",
)
async def list_conversations(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> ConversationListResponse:
    conversations = await message_service.get_user_conversations(db, profile)
    return ConversationListResponse(conversations=conversations)


@router.get(
    "/conversations/{other_id}",
    response_model=ThreadResponse,
    summary="Messages between you and another profile, oldest first",
)
async def get_conversation(
    other_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> ThreadResponse:
    messages = await message_service.get_conversation(db, profile, other_id)
    return ThreadResponse(messages=messages)


@router.post(
    "/conversations/{other_id}/read",
    response_model=MarkReadResponse,
    summary="Mark messages from another profile as read",
)
async def mark_read(
    other_id: uuid.UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db_session),
) -> MarkReadResponse:
    updated = await message_service.mark_conversation_read(db, profile, other_id)
    return MarkReadResponse(updated=updated)
