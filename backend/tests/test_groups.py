"""
StageLink Backend — Group Registry Tests
==========================================

What we test:
    ✅ Only artists create groups; the creator joins with their profile role
    ✅ Members leave; the group and the creator's membership remain
    ✅ Creator-only edits, member additions and deletion
    ✅ Partial creation: the membership insert fails, the group survives with
       a warning, and ensure-creator-membership repairs it idempotently
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from stagelink.services.group_service import DEFAULT_CREATOR_ROLE, MEMBERSHIP_WARNING, GroupService


async def _create_group(client, user, name="The Quiet Hours", **fields):
    response = await client.post("/api/groups", json={"name": name, **fields}, headers=user.headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateGroup:

    @pytest.mark.asyncio
    async def test_creator_joins_with_profile_role(self, test_client, sign_up):
        creator = await sign_up("ada", role="guitarist")
        created = await _create_group(test_client, creator, genre="Shoegaze")

        assert created["warning"] is None
        group = created["group"]
        assert group["created_by"] == creator.id
        assert [(m["profile_id"], m["role"], m["display_name"]) for m in group["members"]] == [
            (creator.id, "guitarist", "Ada")
        ]

    @pytest.mark.asyncio
    async def test_default_creator_role(self, test_client, sign_up):
        creator = await sign_up("ada")
        group = (await _create_group(test_client, creator))["group"]
        assert group["members"][0]["role"] == DEFAULT_CREATOR_ROLE

    @pytest.mark.asyncio
    async def test_venue_cannot_create(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        response = await test_client.post("/api/groups", json={"name": "House Band"}, headers=venue.headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Only artist profiles can create groups"

    @pytest.mark.asyncio
    async def test_blank_name(self, test_client, sign_up):
        creator = await sign_up("ada")
        response = await test_client.post("/api/groups", json={"name": "  "}, headers=creator.headers)
        assert response.status_code == 400


class TestMembership:

    @pytest.mark.asyncio
    async def test_member_leaves(self, test_client, sign_up):
        creator = await sign_up("ada", role="guitarist")
        member = await sign_up("bo")
        group = (await _create_group(test_client, creator))["group"]

        added = await test_client.post(
            f"/api/groups/{group['id']}/members",
            json={"profile_id": member.id, "role": "drummer"},
            headers=creator.headers,
        )
        assert added.status_code == 201
        assert added.json()["display_name"] == "Bo"

        left = await test_client.delete(f"/api/groups/{group['id']}/members/{member.id}", headers=member.headers)
        assert left.status_code == 204

        after = await test_client.get(f"/api/groups/{group['id']}")
        assert after.status_code == 200
        assert [m["profile_id"] for m in after.json()["members"]] == [creator.id]

    @pytest.mark.asyncio
    async def test_only_creator_adds(self, test_client, sign_up):
        creator = await sign_up("ada")
        member = await sign_up("bo")
        outsider = await sign_up("cleo")
        group = (await _create_group(test_client, creator))["group"]
        await test_client.post(
            f"/api/groups/{group['id']}/members",
            json={"profile_id": member.id, "role": "drummer"},
            headers=creator.headers,
        )

        # Members cannot add others either
        for user in (member, outsider):
            response = await test_client.post(
                f"/api/groups/{group['id']}/members",
                json={"profile_id": outsider.id, "role": "bassist"},
                headers=user.headers,
            )
            assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_duplicate_member(self, test_client, sign_up):
        creator = await sign_up("ada")
        member = await sign_up("bo")
        group = (await _create_group(test_client, creator))["group"]
        body = {"profile_id": member.id, "role": "drummer"}

        await test_client.post(f"/api/groups/{group['id']}/members", json=body, headers=creator.headers)
        again = await test_client.post(f"/api/groups/{group['id']}/members", json=body, headers=creator.headers)
        assert again.status_code == 409
        assert again.json()["message"] == "This profile is already a member of the group"

    @pytest.mark.asyncio
    async def test_outsider_cannot_remove(self, test_client, sign_up):
        creator = await sign_up("ada")
        outsider = await sign_up("cleo")
        group = (await _create_group(test_client, creator))["group"]

        response = await test_client.delete(
            f"/api/groups/{group['id']}/members/{creator.id}", headers=outsider.headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_my_groups(self, test_client, sign_up):
        ada = await sign_up("ada")
        bo = await sign_up("bo")
        mine = (await _create_group(test_client, ada, name="Ada's Trio"))["group"]
        theirs = (await _create_group(test_client, bo, name="Bo Knows"))["group"]
        await test_client.post(
            f"/api/groups/{theirs['id']}/members",
            json={"profile_id": ada.id, "role": "keys"},
            headers=bo.headers,
        )

        response = await test_client.get("/api/groups/mine", headers=ada.headers)
        assert response.status_code == 200
        assert sorted(g["id"] for g in response.json()["groups"]) == sorted([mine["id"], theirs["id"]])


class TestManageGroup:

    @pytest.mark.asyncio
    async def test_creator_only_edit_and_delete(self, test_client, sign_up):
        creator = await sign_up("ada")
        member = await sign_up("bo")
        group = (await _create_group(test_client, creator))["group"]
        await test_client.post(
            f"/api/groups/{group['id']}/members",
            json={"profile_id": member.id, "role": "drummer"},
            headers=creator.headers,
        )

        hijack = await test_client.patch(f"/api/groups/{group['id']}", json={"name": "Bo's Band"}, headers=member.headers)
        assert hijack.status_code == 404

        renamed = await test_client.patch(
            f"/api/groups/{group['id']}", json={"name": "The Loud Hours"}, headers=creator.headers
        )
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "The Loud Hours"
        assert len(renamed.json()["members"]) == 2

        assert (await test_client.delete(f"/api/groups/{group['id']}", headers=member.headers)).status_code == 404
        assert (await test_client.delete(f"/api/groups/{group['id']}", headers=creator.headers)).status_code == 204
        assert (await test_client.get(f"/api/groups/{group['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_group(self, test_client):
        assert (await test_client.get(f"/api/groups/{uuid.uuid4()}")).status_code == 404


class TestPartialCreation:

    @pytest.mark.asyncio
    async def test_membership_failure_leaves_repairable_group(self, test_client, sign_up):
        creator = await sign_up("ada", role="singer")

        with patch.object(
            GroupService,
            "_insert_membership",
            AsyncMock(side_effect=SQLAlchemyError("connection reset")),
        ):
            response = await test_client.post(
                "/api/groups", json={"name": "Half Built"}, headers=creator.headers
            )

        assert response.status_code == 201
        body = response.json()
        assert body["warning"] == MEMBERSHIP_WARNING
        group_id = body["group"]["id"]
        assert body["group"]["members"] == []

        # The group was committed before the failing step
        stored = await test_client.get(f"/api/groups/{group_id}")
        assert stored.status_code == 200
        assert stored.json()["members"] == []

        repaired = await test_client.post(
            f"/api/groups/{group_id}/ensure-creator-membership", headers=creator.headers
        )
        assert repaired.status_code == 200
        assert [(m["profile_id"], m["role"]) for m in repaired.json()["members"]] == [(creator.id, "singer")]

        # Idempotent
        again = await test_client.post(
            f"/api/groups/{group_id}/ensure-creator-membership", headers=creator.headers
        )
        assert again.status_code == 200
        assert len(again.json()["members"]) == 1

    @pytest.mark.asyncio
    async def test_only_creator_repairs(self, test_client, sign_up):
        creator = await sign_up("ada")
        outsider = await sign_up("cleo")
        group = (await _create_group(test_client, creator))["group"]

        response = await test_client.post(
            f"/api/groups/{group['id']}/ensure-creator-membership", headers=outsider.headers
        )
        assert response.status_code == 404
