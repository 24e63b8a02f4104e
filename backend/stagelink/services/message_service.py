"""
StageLink Backend — Messaging Service
=======================================

What:  Directed messages plus the two derived views over them: the A↔B
       thread and the caller's conversation list.
Why:   Conversations are never stored. Both views are recomputed from
       `messages` on every request, inside the database.

get_user_conversations(P):
    1. partner   = CASE WHEN sender_id = P THEN receiver_id ELSE sender_id END
    2. latest    = ROW_NUMBER() OVER (PARTITION BY partner
                                      ORDER BY created_at DESC, id DESC) = 1
    3. unread    = COUNT(*) WHERE receiver_id = P AND NOT is_read
                   GROUP BY sender_id
    4. assemble  = latest JOIN user_profiles ON partner
                   LEFT JOIN unread ON sender_id = partner
                   ORDER BY latest.created_at DESC

    Ties on created_at are broken by id so repeated calls return the same
    row; any maximal row would be acceptable.

get_conversation(A, B):
    (sender, receiver) IN {(A, B), (B, A)} ORDER BY created_at ASC, with
    sender/receiver display names from two aliases of user_profiles.

Reading a thread does NOT mark anything read; mark_conversation_read() is a
separate call. A concurrent reader can see a stale unread count.
"""

import logging
import uuid
from typing import List

from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from stagelink.exceptions import NotFoundError, ValidationError
from stagelink.models import Message, Profile
from stagelink.schemas.message import (
    ConversationSummary,
    MessageCreate,
    MessageResponse,
    ThreadMessage,
)
from stagelink.services.authorization import Action, Entity, authorize
from stagelink.services.validation import require_text

logger = logging.getLogger(__name__)


class MessageService:

    async def send_message(
        self,
        db: AsyncSession,
        requester: Profile,
        payload: MessageCreate,
    ) -> MessageResponse:
        """
        Raises:
            ValidationError: Blank content, or receiver is the sender
            NotFoundError:   Receiver profile does not exist
        """
        content = require_text(payload.content, "content", "Message")
        if payload.receiver_id == requester.id:
            raise ValidationError(message="You cannot send a message to yourself", field="receiver_id")
        if await db.get(Profile, payload.receiver_id) is None:
            raise NotFoundError(resource="profile", resource_id=str(payload.receiver_id))

        message = Message(
            sender_id=requester.id,
            receiver_id=payload.receiver_id,
            content=content,
            is_read=False,
        )
        await authorize(db, requester, Entity.MESSAGE, Action.CREATE, message)

        db.add(message)
        await db.flush()
        logger.info("Message %s: %s → %s", message.id, requester.id, payload.receiver_id)
        return MessageResponse.model_validate(message)

    async def get_conversation(
        self,
        db: AsyncSession,
        requester: Profile,
        other_id: uuid.UUID,
    ) -> List[ThreadMessage]:
        """All messages between the requester and `other_id`, oldest first."""
        sender = aliased(Profile)
        receiver = aliased(Profile)
        me = requester.id

        result = await db.execute(
            select(Message, sender.display_name, receiver.display_name)
            .join(sender, sender.id == Message.sender_id)
            .join(receiver, receiver.id == Message.receiver_id)
            .where(
                or_(
                    and_(Message.sender_id == me, Message.receiver_id == other_id),
                    and_(Message.sender_id == other_id, Message.receiver_id == me),
                )
            )
            .order_by(Message.created_at.asc(), Message.id.asc())
        )

        thread = []
        for message, sender_name, receiver_name in result.all():
            await authorize(db, requester, Entity.MESSAGE, Action.READ, message)
            thread.append(
                ThreadMessage.model_validate(message).model_copy(
                    update={"sender_name": sender_name, "receiver_name": receiver_name}
                )
            )
        return thread

    async def get_user_conversations(self, db: AsyncSession, requester: Profile) -> List[ConversationSummary]:
        """One row per counterpart: latest message, its time, and unread count."""
        me = requester.id
        partner = case((Message.sender_id == me, Message.receiver_id), else_=Message.sender_id)

        ranked = (
            select(
                partner.label("partner_id"),
                Message.content.label("last_message"),
                Message.created_at.label("last_message_time"),
                func.row_number()
                .over(
                    partition_by=partner,
                    order_by=(Message.created_at.desc(), Message.id.desc()),
                )
                .label("rn"),
            )
            .where(or_(Message.sender_id == me, Message.receiver_id == me))
            .subquery("ranked")
        )

        unread = (
            select(
                Message.sender_id.label("partner_id"),
                func.count(Message.id).label("unread_count"),
            )
            .where(Message.receiver_id == me, Message.is_read.is_(False))
            .group_by(Message.sender_id)
            .subquery("unread")
        )

        result = await db.execute(
            select(
                ranked.c.partner_id,
                Profile.display_name,
                Profile.profile_type,
                ranked.c.last_message,
                ranked.c.last_message_time,
                func.coalesce(unread.c.unread_count, 0),
            )
            .join(Profile, Profile.id == ranked.c.partner_id)
            .outerjoin(unread, unread.c.partner_id == ranked.c.partner_id)
            .where(ranked.c.rn == 1)
            .order_by(ranked.c.last_message_time.desc(), ranked.c.partner_id)
        )

        return [
            ConversationSummary(
                partner_id=partner_id,
                partner_name=partner_name,
                partner_type=partner_type,
                last_message=last_message,
                last_message_time=last_message_time,
                unread_count=unread_count,
            )
            for partner_id, partner_name, partner_type, last_message, last_message_time, unread_count
            in result.all()
        ]

    async def mark_conversation_read(
        self,
        db: AsyncSession,
        requester: Profile,
        other_id: uuid.UUID,
    ) -> int:
        """
        Flip every unread message from `other_id` to the requester to read.

        Only rows where the requester is the receiver are touched. The update
        policy is checked once against a row of that shape before the bulk
        UPDATE runs.

        Returns:
            Number of rows changed; 0 when there was nothing to mark
        """
        await authorize(
            db,
            requester,
            Entity.MESSAGE,
            Action.UPDATE,
            Message(sender_id=other_id, receiver_id=requester.id),
        )

        result = await db.execute(
            update(Message)
            .where(
                Message.receiver_id == requester.id,
                Message.sender_id == other_id,
                Message.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        updated = result.rowcount or 0
        if updated:
            logger.info("Marked %d message(s) from %s read for %s", updated, other_id, requester.id)
        return updated


message_service = MessageService()
