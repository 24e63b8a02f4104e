"""
StageLink Backend — Venue Directory Tests
==========================================

What we test:
    ✅ Adding with only a name fills genre, address and map centre defaults
    ✅ The caller becomes the owner; only the owner edits or deletes
    ✅ Venues with no owner cannot be changed through the API
    ✅ Genre filter is exact and case-insensitive; list is ordered by name
"""

import uuid

import pytest

from stagelink.config import settings
from stagelink.models import Venue


class TestAddVenue:

    @pytest.mark.asyncio
    async def test_defaults(self, test_client, sign_up):
        ada = await sign_up("ada")
        response = await test_client.post("/api/venues", json={"name": " The Pinhook "}, headers=ada.headers)

        assert response.status_code == 201
        venue = response.json()
        assert venue["name"] == "The Pinhook"
        assert venue["genre"] == "Unknown"
        assert venue["address"] == "Unspecified"
        assert venue["latitude"] == pytest.approx(settings.default_latitude)
        assert venue["longitude"] == pytest.approx(settings.default_longitude)
        assert venue["owner_id"] == ada.id

    @pytest.mark.asyncio
    async def test_name_required(self, test_client, sign_up):
        ada = await sign_up("ada")
        response = await test_client.post("/api/venues", json={"name": ""}, headers=ada.headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_coordinates_out_of_range(self, test_client, sign_up):
        ada = await sign_up("ada")
        response = await test_client.post(
            "/api/venues", json={"name": "Nowhere", "latitude": 91}, headers=ada.headers
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_requires_session(self, test_client):
        response = await test_client.post("/api/venues", json={"name": "Motorco"})
        assert response.status_code == 401


class TestListVenues:

    @pytest.mark.asyncio
    async def test_genre_filter(self, test_client, sign_up):
        ada = await sign_up("ada")
        for name, genre in (("Motorco", "Rock"), ("Blue Note", "jazz"), ("Beyu Caffe", "Jazz")):
            await test_client.post("/api/venues", json={"name": name, "genre": genre}, headers=ada.headers)

        everything = await test_client.get("/api/venues")
        assert [v["name"] for v in everything.json()["venues"]] == ["Beyu Caffe", "Blue Note", "Motorco"]

        jazz = await test_client.get("/api/venues", params={"genre": "JAZZ"})
        assert [v["name"] for v in jazz.json()["venues"]] == ["Beyu Caffe", "Blue Note"]

    @pytest.mark.asyncio
    async def test_genre_filter_is_literal(self, test_client, sign_up):
        ada = await sign_up("ada")
        await test_client.post("/api/venues", json={"name": "Beyu Caffe", "genre": "Jazz"}, headers=ada.headers)

        for pattern in ("%", "J_zz", "Ja%"):
            response = await test_client.get("/api/venues", params={"genre": pattern})
            assert response.json()["venues"] == []

    @pytest.mark.asyncio
    async def test_unknown_venue(self, test_client):
        response = await test_client.get(f"/api/venues/{uuid.uuid4()}")
        assert response.status_code == 404


class TestOwnership:

    @pytest.mark.asyncio
    async def test_owner_only_edit_and_delete(self, test_client, sign_up):
        ada = await sign_up("ada")
        bo = await sign_up("bo", profile_type="venue")
        created = await test_client.post("/api/venues", json={"name": "Motorco"}, headers=ada.headers)
        venue_id = created.json()["id"]

        hijack = await test_client.patch(f"/api/venues/{venue_id}", json={"genre": "Polka"}, headers=bo.headers)
        assert hijack.status_code == 404
        assert (await test_client.delete(f"/api/venues/{venue_id}", headers=bo.headers)).status_code == 404

        edit = await test_client.patch(
            f"/api/venues/{venue_id}",
            json={"genre": "Indie", "capacity": 450, "latitude": None},
            headers=ada.headers,
        )
        assert edit.status_code == 200
        assert edit.json()["genre"] == "Indie"
        assert edit.json()["capacity"] == 450
        # Explicit null keeps the existing pin
        assert edit.json()["latitude"] == pytest.approx(settings.default_latitude)

        assert (await test_client.delete(f"/api/venues/{venue_id}", headers=ada.headers)).status_code == 204
        assert (await test_client.get(f"/api/venues/{venue_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_unowned_venue_is_read_only(self, test_client, sign_up, db_session):
        venue = Venue(
            name="The Cave",
            genre="Folk",
            address="452 W Franklin St",
            latitude=35.9106,
            longitude=-79.0618,
            owner_id=None,
        )
        db_session.add(venue)
        await db_session.commit()

        ada = await sign_up("ada")
        assert (await test_client.get(f"/api/venues/{venue.id}")).status_code == 200
        edit = await test_client.patch(f"/api/venues/{venue.id}", json={"name": "Mine"}, headers=ada.headers)
        assert edit.status_code == 404
        assert (await test_client.delete(f"/api/venues/{venue.id}", headers=ada.headers)).status_code == 404
