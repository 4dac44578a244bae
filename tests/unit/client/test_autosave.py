"""Unit tests for the debounced editor auto-save."""

import asyncio

import pytest

from modules.client.autosave import AutoSaver
from modules.client.models import Note
from modules.client.notes_store import NotesStore

DELAY = 0.02


@pytest.fixture
def store(mock_remote, ok_result, make_note_payload) -> NotesStore:
    store = NotesStore(mock_remote)
    store.notes = [Note.model_validate(make_note_payload("n1", title="Draft", content="<p>a</p>"))]

    async def patch(path, json):
        return ok_result(make_note_payload("n1", **json))

    mock_remote.patch.side_effect = patch
    return store


class TestAutoSaver:
    def test_starts_from_stored_note(self, store):
        saver = AutoSaver(store, "n1", delay=DELAY)

        assert saver.title == "Draft"
        assert saver.content == "<p>a</p>"
        assert saver.pending is False

    def test_delay_defaults_to_config(self, store):
        assert AutoSaver(store, "n1").delay == 1.0

    @pytest.mark.asyncio
    async def test_saves_after_quiet_period(self, store, mock_remote):
        saver = AutoSaver(store, "n1", delay=DELAY)

        saver.edit(title="Groceries")
        assert saver.pending is True
        await asyncio.sleep(DELAY * 5)

        mock_remote.patch.assert_awaited_once_with(
            "/notes/n1", json={"title": "Groceries", "content": "<p>a</p>"}
        )
        assert store.get_note("n1").title == "Groceries"
        assert saver.pending is False

    @pytest.mark.asyncio
    async def test_rapid_edits_coalesce(self, store, mock_remote):
        saver = AutoSaver(store, "n1", delay=DELAY)

        saver.edit(content="<p>ab</p>")
        saver.edit(content="<p>abc</p>")
        saver.edit(content="<p>abcd</p>")
        await asyncio.sleep(DELAY * 5)

        mock_remote.patch.assert_awaited_once()
        assert mock_remote.patch.await_args.kwargs["json"]["content"] == "<p>abcd</p>"

    @pytest.mark.asyncio
    async def test_unchanged_text_is_not_saved(self, store, mock_remote):
        saver = AutoSaver(store, "n1", delay=DELAY)

        saver.edit(title="Draft")
        await asyncio.sleep(DELAY * 5)

        mock_remote.patch.assert_not_called()

    @pytest.mark.asyncio
    async def test_flush_saves_immediately(self, store, mock_remote):
        saver = AutoSaver(store, "n1", delay=10)

        saver.edit(title="Now")
        saved = await saver.flush()

        assert saved is True
        assert saver.pending is False
        mock_remote.patch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cancel_drops_pending_save(self, store, mock_remote):
        saver = AutoSaver(store, "n1", delay=DELAY)

        saver.edit(title="Never saved")
        saver.cancel()
        await asyncio.sleep(DELAY * 5)

        mock_remote.patch.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_note_is_not_saved(self, store, mock_remote):
        saver = AutoSaver(store, "n1", delay=DELAY)
        store.notes = []

        saver.edit(title="Gone")

        assert await saver.flush() is False
        mock_remote.patch.assert_not_called()
