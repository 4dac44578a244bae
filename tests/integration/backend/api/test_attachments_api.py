"""
Integration Tests for Attachments API.

Uploads go to a LocalObjectStorage rooted in a temporary directory.
"""

import pytest
from httpx import AsyncClient

from modules.backend.services.storage import LocalObjectStorage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


async def _note_id(client: AsyncClient, headers: dict) -> str:
    response = await client.post("/api/v1/notes", headers=headers)
    return response.json()["data"]["id"]


async def _upload(client: AsyncClient, headers: dict, note_id: str, **overrides):
    file_name = overrides.get("file_name", "diagram.png")
    data = overrides.get("data", PNG_BYTES)
    content_type = overrides.get("content_type", "image/png")
    return await client.post(
        f"/api/v1/notes/{note_id}/attachments",
        files={"file": (file_name, data, content_type)},
        headers=headers,
    )


class TestUploadAttachment:
    @pytest.mark.asyncio
    async def test_upload_stores_object(
        self, client: AsyncClient, api, auth_headers, user_id, storage: LocalObjectStorage,
    ):
        note_id = await _note_id(client, auth_headers)

        response = await _upload(client, auth_headers, note_id)

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["file_name"] == "diagram.png"
        assert data["file_type"] == "image/png"
        assert data["file_size"] == len(PNG_BYTES)
        assert data["file_path"].startswith(f"{user_id}/{note_id}/")
        assert data["file_path"].endswith(".png")
        assert data["url"] == f"http://test/files/{data['file_path']}"
        assert (storage.root / data["file_path"]).read_bytes() == PNG_BYTES

    @pytest.mark.asyncio
    async def test_non_image_rejected(self, client: AsyncClient, api, auth_headers):
        note_id = await _note_id(client, auth_headers)

        response = await _upload(
            client, auth_headers, note_id,
            file_name="notes.txt", data=b"hello", content_type="text/plain",
        )

        api.assert_error(response, 400, "VAL_VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_upload_to_unknown_note(self, client: AsyncClient, api, auth_headers):
        response = await _upload(client, auth_headers, "missing")

        api.assert_error(response, 404, "RES_NOT_FOUND")


class TestListAndDeleteAttachments:
    @pytest.mark.asyncio
    async def test_list_attachments(self, client: AsyncClient, api, auth_headers):
        note_id = await _note_id(client, auth_headers)
        await _upload(client, auth_headers, note_id)

        response = await client.get(f"/api/v1/notes/{note_id}/attachments", headers=auth_headers)

        data = api.assert_success(response)["data"]
        assert len(data) == 1
        assert data[0]["note_id"] == note_id

    @pytest.mark.asyncio
    async def test_delete_attachment_removes_object(
        self, client: AsyncClient, api, auth_headers, storage: LocalObjectStorage,
    ):
        note_id = await _note_id(client, auth_headers)
        uploaded = (await _upload(client, auth_headers, note_id)).json()["data"]

        response = await client.delete(f"/api/v1/attachments/{uploaded['id']}", headers=auth_headers)
        listed = await client.get(f"/api/v1/notes/{note_id}/attachments", headers=auth_headers)

        assert response.status_code == 204
        assert api.assert_success(listed)["data"] == []
        assert not (storage.root / uploaded["file_path"]).exists()

    @pytest.mark.asyncio
    async def test_deleting_note_removes_its_objects(
        self, client: AsyncClient, auth_headers, storage: LocalObjectStorage,
    ):
        note_id = await _note_id(client, auth_headers)
        uploaded = (await _upload(client, auth_headers, note_id)).json()["data"]

        response = await client.delete(f"/api/v1/notes/{note_id}", headers=auth_headers)

        assert response.status_code == 204
        assert not (storage.root / uploaded["file_path"]).exists()

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(
        self, client: AsyncClient, api, auth_headers, other_auth_headers,
    ):
        note_id = await _note_id(client, auth_headers)
        uploaded = (await _upload(client, auth_headers, note_id)).json()["data"]

        response = await client.delete(
            f"/api/v1/attachments/{uploaded['id']}", headers=other_auth_headers,
        )

        api.assert_error(response, 404, "RES_NOT_FOUND")
