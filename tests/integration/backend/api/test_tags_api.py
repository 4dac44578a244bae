"""
Integration Tests for Tags API.

Tags are unique per user by name; links are unique per note and tag.
"""

import pytest
from httpx import AsyncClient


async def _note_id(client: AsyncClient, headers: dict) -> str:
    response = await client.post("/api/v1/notes", headers=headers)
    return response.json()["data"]["id"]


async def _tag_id(client: AsyncClient, headers: dict, name: str = "work") -> str:
    response = await client.post("/api/v1/tags", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


class TestCreateTag:
    """Tests for POST /api/v1/tags."""

    @pytest.mark.asyncio
    async def test_default_color(self, client: AsyncClient, api, auth_headers):
        response = await client.post("/api/v1/tags", json={"name": "ideas"}, headers=auth_headers)

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["name"] == "ideas"
        assert data["color"] == "#6366f1"

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, client: AsyncClient, api, auth_headers):
        await _tag_id(client, auth_headers, "ideas")

        response = await client.post("/api/v1/tags", json={"name": "ideas"}, headers=auth_headers)

        api.assert_error(response, 409, "RES_CONFLICT")

    @pytest.mark.asyncio
    async def test_same_name_for_different_users(
        self, client: AsyncClient, api, auth_headers, other_auth_headers,
    ):
        await _tag_id(client, auth_headers, "ideas")

        response = await client.post(
            "/api/v1/tags", json={"name": "ideas"}, headers=other_auth_headers,
        )

        api.assert_success(response, expected_status=201)

    @pytest.mark.asyncio
    async def test_invalid_color_rejected(self, client: AsyncClient, api, auth_headers):
        response = await client.post(
            "/api/v1/tags", json={"name": "x", "color": "blue"}, headers=auth_headers,
        )

        api.assert_validation_error(response, field="color")


class TestListTags:
    @pytest.mark.asyncio
    async def test_sorted_by_name(self, client: AsyncClient, api, auth_headers):
        for name in ("zeta", "alpha", "mid"):
            await _tag_id(client, auth_headers, name)

        response = await client.get("/api/v1/tags", headers=auth_headers)

        names = [t["name"] for t in api.assert_success(response)["data"]]
        assert names == ["alpha", "mid", "zeta"]


class TestNoteTagLinks:
    """Tests for PUT/DELETE /api/v1/tags/{tag_id}/notes/{note_id}."""

    @pytest.mark.asyncio
    async def test_add_and_list_link(self, client: AsyncClient, api, auth_headers):
        note_id = await _note_id(client, auth_headers)
        tag_id = await _tag_id(client, auth_headers)

        added = await client.put(f"/api/v1/tags/{tag_id}/notes/{note_id}", headers=auth_headers)
        links = await client.get("/api/v1/tags/links", headers=auth_headers)

        assert api.assert_success(added, expected_status=201)["data"] == {
            "note_id": note_id,
            "tag_id": tag_id,
        }
        assert api.assert_success(links)["data"] == [{"note_id": note_id, "tag_id": tag_id}]

    @pytest.mark.asyncio
    async def test_duplicate_link_conflicts(self, client: AsyncClient, api, auth_headers):
        note_id = await _note_id(client, auth_headers)
        tag_id = await _tag_id(client, auth_headers)
        await client.put(f"/api/v1/tags/{tag_id}/notes/{note_id}", headers=auth_headers)

        response = await client.put(f"/api/v1/tags/{tag_id}/notes/{note_id}", headers=auth_headers)

        api.assert_error(response, 409, "RES_CONFLICT")

    @pytest.mark.asyncio
    async def test_link_to_unknown_note(self, client: AsyncClient, api, auth_headers):
        tag_id = await _tag_id(client, auth_headers)

        response = await client.put(f"/api/v1/tags/{tag_id}/notes/missing", headers=auth_headers)

        api.assert_error(response, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_remove_link(self, client: AsyncClient, api, auth_headers):
        note_id = await _note_id(client, auth_headers)
        tag_id = await _tag_id(client, auth_headers)
        await client.put(f"/api/v1/tags/{tag_id}/notes/{note_id}", headers=auth_headers)

        removed = await client.delete(f"/api/v1/tags/{tag_id}/notes/{note_id}", headers=auth_headers)
        again = await client.delete(f"/api/v1/tags/{tag_id}/notes/{note_id}", headers=auth_headers)

        assert removed.status_code == 204
        api.assert_error(again, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_delete_tag_drops_links(self, client: AsyncClient, api, auth_headers):
        note_id = await _note_id(client, auth_headers)
        tag_id = await _tag_id(client, auth_headers)
        await client.put(f"/api/v1/tags/{tag_id}/notes/{note_id}", headers=auth_headers)

        deleted = await client.delete(f"/api/v1/tags/{tag_id}", headers=auth_headers)
        tags = await client.get("/api/v1/tags", headers=auth_headers)
        links = await client.get("/api/v1/tags/links", headers=auth_headers)

        assert deleted.status_code == 204
        assert api.assert_success(tags)["data"] == []
        assert api.assert_success(links)["data"] == []

    @pytest.mark.asyncio
    async def test_links_hidden_from_other_users(
        self, client: AsyncClient, api, auth_headers, other_auth_headers,
    ):
        note_id = await _note_id(client, auth_headers)
        tag_id = await _tag_id(client, auth_headers)
        await client.put(f"/api/v1/tags/{tag_id}/notes/{note_id}", headers=auth_headers)

        response = await client.get("/api/v1/tags/links", headers=other_auth_headers)

        assert api.assert_success(response)["data"] == []
