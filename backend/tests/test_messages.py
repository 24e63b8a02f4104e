"""
StageLink Backend — Messaging Tests
=====================================

What:  Sending, the A↔B thread, the conversation list and mark-read.

What we test:
    ✅ Thread returns both directions, oldest first, with both names
    ✅ Conversation list: one row per partner, latest message, unread count
       of messages sent TO the caller only, most recent conversation first
    ✅ Reading a thread does not mark anything read; mark-read does, once
    ✅ Re-fetching with no new messages returns the same result
    ✅ Self-messages are rejected by the service and by the table constraint
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from stagelink.exceptions import NotFoundError
from stagelink.models import Message
from stagelink.services.authorization import Action, Entity


async def _send(client, sender, receiver, content):
    response = await client.post(
        "/api/messages",
        json={"receiver_id": receiver.id, "content": content},
        headers=sender.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestSend:

    @pytest.mark.asyncio
    async def test_send(self, test_client, sign_up):
        x = await sign_up("xan")
        y = await sign_up("yara", profile_type="venue")
        message = await _send(test_client, x, y, "  Are you booking for March?  ")

        assert message["sender_id"] == x.id
        assert message["receiver_id"] == y.id
        assert message["content"] == "Are you booking for March?"
        assert message["is_read"] is False

    @pytest.mark.asyncio
    async def test_blank_content(self, test_client, sign_up):
        x = await sign_up("xan")
        y = await sign_up("yara")
        response = await test_client.post(
            "/api/messages", json={"receiver_id": y.id, "content": "   "}, headers=x.headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Message is required"

    @pytest.mark.asyncio
    async def test_message_to_self(self, test_client, sign_up):
        x = await sign_up("xan")
        response = await test_client.post(
            "/api/messages", json={"receiver_id": x.id, "content": "note to self"}, headers=x.headers
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_receiver(self, test_client, sign_up):
        x = await sign_up("xan")
        response = await test_client.post(
            "/api/messages", json={"receiver_id": str(uuid.uuid4()), "content": "hello?"}, headers=x.headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_table_rejects_self_message(self, db_session, make_profile):
        x = await make_profile("xan")
        db_session.add(Message(sender_id=x.id, receiver_id=x.id, content="loop"))
        with pytest.raises(IntegrityError):
            await db_session.flush()


class TestConversations:

    @pytest.mark.asyncio
    async def test_thread_and_unread_scenario(self, test_client, sign_up):
        x = await sign_up("xan")
        y = await sign_up("yara")

        await _send(test_client, x, y, "hi")
        await _send(test_client, y, x, "hey")

        # Y reads X's message
        marked = await test_client.post(f"/api/messages/conversations/{x.id}/read", headers=y.headers)
        assert marked.json() == {"updated": 1}

        thread = await test_client.get(f"/api/messages/conversations/{y.id}", headers=x.headers)
        assert thread.status_code == 200
        messages = thread.json()["messages"]
        assert [m["content"] for m in messages] == ["hi", "hey"]
        assert (messages[0]["sender_name"], messages[0]["receiver_name"]) == ("Xan", "Yara")
        assert messages[0]["is_read"] is True
        assert messages[1]["is_read"] is False

        x_view = (await test_client.get("/api/messages/conversations", headers=x.headers)).json()
        assert len(x_view["conversations"]) == 1
        summary = x_view["conversations"][0]
        assert summary["partner_id"] == y.id
        assert summary["partner_name"] == "Yara"
        assert summary["partner_type"] == "artist"
        assert summary["last_message"] == "hey"
        # Only "hey" (sent to X) is still unread
        assert summary["unread_count"] == 1

        y_view = (await test_client.get("/api/messages/conversations", headers=y.headers)).json()
        assert y_view["conversations"][0]["unread_count"] == 0

    @pytest.mark.asyncio
    async def test_one_row_per_partner_most_recent_first(self, test_client, sign_up):
        me = await sign_up("xan")
        yara = await sign_up("yara")
        zed = await sign_up("zed", profile_type="venue")

        await _send(test_client, yara, me, "first from yara")
        await _send(test_client, zed, me, "gig on friday?")
        await _send(test_client, me, yara, "reply to yara")
        await _send(test_client, yara, me, "second from yara")

        response = await test_client.get("/api/messages/conversations", headers=me.headers)
        conversations = response.json()["conversations"]
        assert [c["partner_id"] for c in conversations] == [yara.id, zed.id]
        assert [c["last_message"] for c in conversations] == ["second from yara", "gig on friday?"]
        assert [c["unread_count"] for c in conversations] == [2, 1]
        assert conversations[1]["partner_type"] == "venue"

    @pytest.mark.asyncio
    async def test_reading_thread_does_not_mark_read(self, test_client, sign_up):
        x = await sign_up("xan")
        y = await sign_up("yara")
        await _send(test_client, x, y, "hi")

        await test_client.get(f"/api/messages/conversations/{x.id}", headers=y.headers)
        listing = await test_client.get("/api/messages/conversations", headers=y.headers)
        assert listing.json()["conversations"][0]["unread_count"] == 1

    @pytest.mark.asyncio
    async def test_mark_read_is_idempotent(self, test_client, sign_up):
        x = await sign_up("xan")
        y = await sign_up("yara")
        await _send(test_client, x, y, "one")
        await _send(test_client, x, y, "two")

        first = await test_client.post(f"/api/messages/conversations/{x.id}/read", headers=y.headers)
        second = await test_client.post(f"/api/messages/conversations/{x.id}/read", headers=y.headers)
        assert first.json()["updated"] == 2
        assert second.json()["updated"] == 0

        # The sender cannot mark their own outgoing messages read
        outgoing = await test_client.post(f"/api/messages/conversations/{y.id}/read", headers=x.headers)
        assert outgoing.json()["updated"] == 0

    @pytest.mark.asyncio
    async def test_mark_read_goes_through_the_gate(self, test_client, sign_up):
        x = await sign_up("xan")
        y = await sign_up("yara")
        await _send(test_client, x, y, "one")

        denied = AsyncMock(side_effect=NotFoundError(resource="message"))
        with patch("stagelink.services.message_service.authorize", denied):
            response = await test_client.post(f"/api/messages/conversations/{x.id}/read", headers=y.headers)
        assert response.status_code == 404

        _, _, entity, action, row = denied.await_args.args
        assert (entity, action) == (Entity.MESSAGE, Action.UPDATE)
        assert (row.sender_id, row.receiver_id) == (uuid.UUID(x.id), uuid.UUID(y.id))

        listing = await test_client.get("/api/messages/conversations", headers=y.headers)
        assert listing.json()["conversations"][0]["unread_count"] == 1

    @pytest.mark.asyncio
    async def test_refetch_is_stable(self, test_client, sign_up):
        x = await sign_up("xan")
        y = await sign_up("yara")
        z = await sign_up("zed")
        await _send(test_client, y, x, "hello")
        await _send(test_client, z, x, "yo")
        await _send(test_client, x, y, "hi back")

        first = await test_client.get("/api/messages/conversations", headers=x.headers)
        second = await test_client.get("/api/messages/conversations", headers=x.headers)
        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_thread_excludes_other_conversations(self, test_client, sign_up):
        x = await sign_up("xan")
        y = await sign_up("yara")
        z = await sign_up("zed")
        await _send(test_client, x, y, "for yara")
        await _send(test_client, x, z, "for zed")
        await _send(test_client, z, y, "between them")

        thread = await test_client.get(f"/api/messages/conversations/{y.id}", headers=x.headers)
        assert [m["content"] for m in thread.json()["messages"]] == ["for yara"]

    @pytest.mark.asyncio
    async def test_no_conversations(self, test_client, sign_up):
        x = await sign_up("xan")
        response = await test_client.get("/api/messages/conversations", headers=x.headers)
        assert response.json() == {"conversations": []}
