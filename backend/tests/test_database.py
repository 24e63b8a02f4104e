"""
StageLink Backend — Persistence Error Mapping Tests
=====================================================

What we test:
    ✅ A violation of the named unique constraint becomes ConflictError
    ✅ Any other integrity failure becomes DatabaseError, not a 409
    ✅ DatabaseError answers 500 with the generic server_error body
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from stagelink.database import flush_or_conflict
from stagelink.exceptions import ConflictError, DatabaseError
from stagelink.models import Group, GroupMember
from stagelink.services.venue_service import VenueService


async def _group_with_member(db_session, creator):
    group = Group(name="The Quiet Hours", created_by=creator.id)
    db_session.add(group)
    await db_session.flush()
    db_session.add(GroupMember(group_id=group.id, profile_id=creator.id, role="Creator"))
    await db_session.commit()
    return group.id


class TestFlushOrConflict:

    @pytest.mark.asyncio
    async def test_named_constraint_is_conflict(self, db_session, make_profile):
        creator = await make_profile("ada")
        group_id = await _group_with_member(db_session, creator)

        db_session.add(GroupMember(group_id=group_id, profile_id=creator.id, role="Singer"))
        with pytest.raises(ConflictError) as exc_info:
            await flush_or_conflict(
                db_session,
                message="Already a member",
                constraint="uq_group_members_group_user",
            )
        assert exc_info.value.message == "Already a member"
        assert exc_info.value.context == {"constraint": "uq_group_members_group_user"}

    @pytest.mark.asyncio
    async def test_other_constraint_is_database_error(self, db_session, make_profile):
        creator = await make_profile("ada")
        group_id = await _group_with_member(db_session, creator)

        db_session.add(GroupMember(group_id=group_id, profile_id=creator.id, role="Singer"))
        with pytest.raises(DatabaseError):
            await flush_or_conflict(
                db_session,
                message="Already applied",
                constraint="uq_group_job_applications_job_group",
            )

    @pytest.mark.asyncio
    async def test_foreign_key_failure_is_database_error(self, db_session, make_profile):
        creator = await make_profile("ada")

        db_session.add(GroupMember(group_id=uuid.uuid4(), profile_id=creator.id, role="Singer"))
        with pytest.raises(DatabaseError) as exc_info:
            await flush_or_conflict(
                db_session,
                message="Already a member",
                constraint="uq_group_members_group_user",
            )
        assert exc_info.value.context == {"expected_constraint": "uq_group_members_group_user"}


class TestDatabaseErrorResponse:

    @pytest.mark.asyncio
    async def test_generic_500(self, test_client):
        with patch.object(
            VenueService,
            "list_venues",
            AsyncMock(side_effect=DatabaseError(context={"table": "venues"})),
        ):
            response = await test_client.get("/api/venues", headers={"X-Request-ID": "db-down"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert body["request_id"] == "db-down"
        assert "venues" not in body["message"]
