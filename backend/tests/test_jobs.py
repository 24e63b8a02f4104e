"""
StageLink Backend — Job Board Tests
=====================================

What:  Jobs, individual applications and group applications end to end.

What we test:
    ✅ Only venues post jobs; only artists apply
    ✅ Application lifecycle: apply → visible to applicant and venue only →
       venue accepts → repeat application conflicts (409)
    ✅ Re-sending the current status writes nothing
    ✅ Job listing: open only by default, soonest first, genre filter
    ✅ Group applications: members apply once, venue decides, outsiders
       neither apply nor read
"""

import uuid

import pytest

from stagelink.schemas.job import DEFAULT_APPLICATION_MESSAGE

JOB = {
    "title": "Friday night opener",
    "description": "45-minute acoustic set before the headliner",
    "genre": "Folk",
    "event_date": "2026-12-04T20:00:00Z",
    "location": "Durham, NC",
    "pay_range": "$150-$200",
}


async def _post_job(client, venue, **overrides):
    response = await client.post("/api/jobs", json={**JOB, **overrides}, headers=venue.headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestPostJob:

    @pytest.mark.asyncio
    async def test_venue_posts_open_job(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        job = await _post_job(test_client, venue, contact_info="  ")

        assert job["venue_id"] == venue.id
        assert job["venue_name"] == "Motorco"
        assert job["status"] == "open"
        assert job["contact_info"] is None

    @pytest.mark.asyncio
    async def test_artist_cannot_post(self, test_client, sign_up):
        artist = await sign_up("ada")
        response = await test_client.post("/api/jobs", json=JOB, headers=artist.headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Only venue profiles can post jobs"

    @pytest.mark.asyncio
    async def test_blank_title(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        response = await test_client.post("/api/jobs", json={**JOB, "title": " "}, headers=venue.headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Title is required"


class TestListJobs:

    @pytest.mark.asyncio
    async def test_open_jobs_soonest_first(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        later = await _post_job(test_client, venue, title="New Year's Eve", event_date="2026-12-31T21:00:00Z")
        sooner = await _post_job(test_client, venue, title="Open mic", genre="Jazz")
        filled = await _post_job(test_client, venue, title="Already booked")
        await test_client.patch(f"/api/jobs/{filled['id']}", json={"status": "filled"}, headers=venue.headers)

        listing = await test_client.get("/api/jobs")
        assert [j["id"] for j in listing.json()["jobs"]] == [sooner["id"], later["id"]]

        jazz = await test_client.get("/api/jobs", params={"genre": "jazz"})
        assert [j["title"] for j in jazz.json()["jobs"]] == ["Open mic"]

        wildcard = await test_client.get("/api/jobs", params={"genre": "%"})
        assert wildcard.json()["jobs"] == []

        booked = await test_client.get("/api/jobs", params={"status": "filled"})
        assert [j["id"] for j in booked.json()["jobs"]] == [filled["id"]]

    @pytest.mark.asyncio
    async def test_unknown_job(self, test_client):
        assert (await test_client.get(f"/api/jobs/{uuid.uuid4()}")).status_code == 404


class TestManageJob:

    @pytest.mark.asyncio
    async def test_owner_only(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        rival = await sign_up("cats-cradle", profile_type="venue")
        job = await _post_job(test_client, venue)

        hijack = await test_client.patch(f"/api/jobs/{job['id']}", json={"title": "Mine"}, headers=rival.headers)
        assert hijack.status_code == 404
        assert (await test_client.delete(f"/api/jobs/{job['id']}", headers=rival.headers)).status_code == 404

        edit = await test_client.patch(
            f"/api/jobs/{job['id']}", json={"pay_range": "$300", "status": "cancelled"}, headers=venue.headers
        )
        assert edit.status_code == 200
        assert edit.json()["pay_range"] == "$300"
        assert edit.json()["status"] == "cancelled"

        assert (await test_client.delete(f"/api/jobs/{job['id']}", headers=venue.headers)).status_code == 204
        assert (await test_client.get(f"/api/jobs/{job['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_status_rejected(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        job = await _post_job(test_client, venue)
        response = await test_client.patch(
            f"/api/jobs/{job['id']}", json={"status": "postponed"}, headers=venue.headers
        )
        assert response.status_code == 422


class TestApplications:

    @pytest.mark.asyncio
    async def test_application_lifecycle(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        artist = await sign_up("ada")
        stranger = await sign_up("cleo")
        job = await _post_job(test_client, venue)

        # Apply with no body: default cover note
        applied = await test_client.post(f"/api/jobs/{job['id']}/applications", headers=artist.headers)
        assert applied.status_code == 201
        application = applied.json()
        assert application["status"] == "pending"
        assert application["message"] == DEFAULT_APPLICATION_MESSAGE
        assert application["artist_name"] == "Ada"
        assert application["job_title"] == JOB["title"]

        # Visible to the applicant
        mine = await test_client.get("/api/jobs/applications/mine", headers=artist.headers)
        assert [a["id"] for a in mine.json()["applications"]] == [application["id"]]

        # Visible to the owning venue
        applicants = await test_client.get(f"/api/jobs/{job['id']}/applications", headers=venue.headers)
        assert applicants.status_code == 200
        assert [a["id"] for a in applicants.json()["applications"]] == [application["id"]]

        # Invisible to anyone else
        snoop = await test_client.get(f"/api/jobs/{job['id']}/applications", headers=stranger.headers)
        assert snoop.status_code == 404
        assert (await test_client.get("/api/jobs/applications/mine", headers=stranger.headers)).json() == {
            "applications": []
        }
        meddle = await test_client.patch(
            f"/api/jobs/applications/{application['id']}", json={"status": "rejected"}, headers=stranger.headers
        )
        assert meddle.status_code == 404

        # Venue accepts
        accepted = await test_client.patch(
            f"/api/jobs/applications/{application['id']}", json={"status": "accepted"}, headers=venue.headers
        )
        assert accepted.status_code == 200
        assert accepted.json()["status"] == "accepted"
        mine = await test_client.get("/api/jobs/applications/mine", headers=artist.headers)
        assert mine.json()["applications"][0]["status"] == "accepted"

        # A second application to the same job conflicts
        again = await test_client.post(
            f"/api/jobs/{job['id']}/applications", json={"message": "Me again!"}, headers=artist.headers
        )
        assert again.status_code == 409
        assert again.json()["message"] == "You have already applied for this job"

    @pytest.mark.asyncio
    async def test_same_status_is_a_no_op(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        artist = await sign_up("ada")
        job = await _post_job(test_client, venue)
        application = (
            await test_client.post(f"/api/jobs/{job['id']}/applications", headers=artist.headers)
        ).json()

        first = await test_client.patch(
            f"/api/jobs/applications/{application['id']}", json={"status": "rejected"}, headers=venue.headers
        )
        second = await test_client.patch(
            f"/api/jobs/applications/{application['id']}", json={"status": "rejected"}, headers=venue.headers
        )
        assert second.status_code == 200
        assert second.json()["status"] == "rejected"
        assert second.json()["updated_at"] == first.json()["updated_at"]

    @pytest.mark.asyncio
    async def test_venue_cannot_apply(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        other_venue = await sign_up("cats-cradle", profile_type="venue")
        job = await _post_job(test_client, venue)

        response = await test_client.post(f"/api/jobs/{job['id']}/applications", headers=other_venue.headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Only artist profiles can apply to jobs"

    @pytest.mark.asyncio
    async def test_apply_to_unknown_job(self, test_client, sign_up):
        artist = await sign_up("ada")
        response = await test_client.post(f"/api/jobs/{uuid.uuid4()}/applications", headers=artist.headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_deleting_job_removes_applications(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        artist = await sign_up("ada")
        job = await _post_job(test_client, venue)
        await test_client.post(f"/api/jobs/{job['id']}/applications", headers=artist.headers)

        await test_client.delete(f"/api/jobs/{job['id']}", headers=venue.headers)
        mine = await test_client.get("/api/jobs/applications/mine", headers=artist.headers)
        assert mine.json()["applications"] == []


class TestGroupApplications:

    async def _band(self, client, sign_up):
        creator = await sign_up("ada")
        member = await sign_up("bo")
        created = await client.post("/api/groups", json={"name": "The Quiet Hours"}, headers=creator.headers)
        group = created.json()["group"]
        added = await client.post(
            f"/api/groups/{group['id']}/members",
            json={"profile_id": member.id, "role": "drummer"},
            headers=creator.headers,
        )
        assert added.status_code == 201
        return creator, member, group

    @pytest.mark.asyncio
    async def test_member_applies_once_and_venue_decides(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        creator, member, group = await self._band(test_client, sign_up)
        job = await _post_job(test_client, venue)

        applied = await test_client.post(
            f"/api/jobs/{job['id']}/group-applications",
            json={"group_id": group["id"], "message": "We bring our own PA"},
            headers=member.headers,
        )
        assert applied.status_code == 201
        application = applied.json()
        assert application["group_name"] == "The Quiet Hours"
        assert application["status"] == "pending"

        again = await test_client.post(
            f"/api/jobs/{job['id']}/group-applications",
            json={"group_id": group["id"]},
            headers=creator.headers,
        )
        assert again.status_code == 409
        assert again.json()["message"] == "This group has already applied for this job"

        applicants = await test_client.get(f"/api/jobs/{job['id']}/applications", headers=venue.headers)
        assert [a["id"] for a in applicants.json()["group_applications"]] == [application["id"]]

        # Members cannot decide their own application
        self_accept = await test_client.patch(
            f"/api/jobs/group-applications/{application['id']}", json={"status": "accepted"}, headers=member.headers
        )
        assert self_accept.status_code == 404

        accepted = await test_client.patch(
            f"/api/jobs/group-applications/{application['id']}", json={"status": "accepted"}, headers=venue.headers
        )
        assert accepted.status_code == 200
        assert accepted.json()["status"] == "accepted"

        seen_by_member = await test_client.get(
            f"/api/jobs/group-applications/{application['id']}", headers=creator.headers
        )
        assert seen_by_member.json()["status"] == "accepted"

        listed = await test_client.get(f"/api/groups/{group['id']}/applications", headers=member.headers)
        assert [a["id"] for a in listed.json()["applications"]] == [application["id"]]

    @pytest.mark.asyncio
    async def test_outsiders_cannot_apply_or_read(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        creator, _, group = await self._band(test_client, sign_up)
        outsider = await sign_up("cleo")
        job = await _post_job(test_client, venue)

        denied = await test_client.post(
            f"/api/jobs/{job['id']}/group-applications",
            json={"group_id": group["id"]},
            headers=outsider.headers,
        )
        assert denied.status_code == 403
        assert denied.json()["message"] == "Only group members can apply on behalf of the group"

        application = (
            await test_client.post(
                f"/api/jobs/{job['id']}/group-applications",
                json={"group_id": group["id"]},
                headers=creator.headers,
            )
        ).json()
        assert application["message"] == DEFAULT_APPLICATION_MESSAGE

        snoop = await test_client.get(f"/api/jobs/group-applications/{application['id']}", headers=outsider.headers)
        assert snoop.status_code == 404
        listing = await test_client.get(f"/api/groups/{group['id']}/applications", headers=outsider.headers)
        assert listing.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_group(self, test_client, sign_up):
        venue = await sign_up("motorco", profile_type="venue")
        artist = await sign_up("ada")
        job = await _post_job(test_client, venue)
        response = await test_client.post(
            f"/api/jobs/{job['id']}/group-applications",
            json={"group_id": str(uuid.uuid4())},
            headers=artist.headers,
        )
        assert response.status_code == 404
