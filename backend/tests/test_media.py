"""
StageLink Backend — Media Store Tests
=======================================

What we test:
    ✅ Add media to your own profile; list newest first
    ✅ Unknown media type answers 422, blank URL answers 400
    ✅ Only the owner can re-caption or delete (others get 404)
    ✅ Listing an unknown profile answers 404
"""

import uuid

import pytest


async def _add(client, user, url, media_type="image", caption=None):
    response = await client.post(
        "/api/media",
        json={"media_type": media_type, "media_url": url, "caption": caption},
        headers=user.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestMedia:

    @pytest.mark.asyncio
    async def test_add_and_list_newest_first(self, test_client, sign_up):
        ada = await sign_up("ada")
        first = await _add(test_client, ada, "https://cdn.example/a.jpg", caption="  Live at the Cat's Cradle ")
        second = await _add(test_client, ada, "https://cdn.example/b.mp3", media_type="audio")

        assert first["profile_id"] == ada.id
        assert first["caption"] == "Live at the Cat's Cradle"
        assert second["caption"] is None

        response = await test_client.get(f"/api/media/profile/{ada.id}")
        assert response.status_code == 200
        assert [item["id"] for item in response.json()["items"]] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_unknown_media_type(self, test_client, sign_up):
        ada = await sign_up("ada")
        response = await test_client.post(
            "/api/media",
            json={"media_type": "hologram", "media_url": "https://cdn.example/x"},
            headers=ada.headers,
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_blank_url(self, test_client, sign_up):
        ada = await sign_up("ada")
        response = await test_client.post(
            "/api/media",
            json={"media_type": "image", "media_url": "  "},
            headers=ada.headers,
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Media URL is required"

    @pytest.mark.asyncio
    async def test_owner_only_changes(self, test_client, sign_up):
        ada = await sign_up("ada")
        bo = await sign_up("bo")
        item = await _add(test_client, ada, "https://cdn.example/a.jpg")

        hijack = await test_client.patch(
            f"/api/media/{item['id']}", json={"caption": "mine now"}, headers=bo.headers
        )
        assert hijack.status_code == 404
        assert (await test_client.delete(f"/api/media/{item['id']}", headers=bo.headers)).status_code == 404

        recaption = await test_client.patch(
            f"/api/media/{item['id']}", json={"caption": "Soundcheck"}, headers=ada.headers
        )
        assert recaption.status_code == 200
        assert recaption.json()["caption"] == "Soundcheck"

        deleted = await test_client.delete(f"/api/media/{item['id']}", headers=ada.headers)
        assert deleted.status_code == 204
        listing = await test_client.get(f"/api/media/profile/{ada.id}")
        assert listing.json()["items"] == []

    @pytest.mark.asyncio
    async def test_unknown_profile(self, test_client):
        response = await test_client.get(f"/api/media/profile/{uuid.uuid4()}")
        assert response.status_code == 404
