"""Unit tests for dashboard helpers."""

from datetime import date, datetime

import pytest

from modules.client.dashboard import (
    DEFAULT_NOTE_COLOR,
    Dashboard,
    greeting_for,
    note_preview,
)
from modules.client.models import Folder, Note
from modules.client.notes_store import NotesStore


@pytest.mark.parametrize(
    ("hour", "greeting"),
    [
        (0, "Good Morning"),
        (11, "Good Morning"),
        (12, "Good Afternoon"),
        (16, "Good Afternoon"),
        (17, "Good Evening"),
        (20, "Good Evening"),
        (21, "Good Night"),
        (23, "Good Night"),
    ],
)
def test_greeting_for(hour, greeting):
    assert greeting_for(datetime(2024, 3, 10, hour, 15)) == greeting


def test_note_preview_strips_html(make_note_payload):
    note = Note.model_validate(make_note_payload(content="<h1>Plan</h1><p>Buy <b>milk</b></p>"))

    assert note_preview(note) == "PlanBuy milk"
    assert note_preview(note, chars=4) == "Plan"


@pytest.fixture
def store(mock_remote, make_note_payload) -> NotesStore:
    store = NotesStore(mock_remote)
    store.folders = [Folder(id="f1", name="Work", color="#f97316")]
    store.notes = [
        Note.model_validate(p) for p in (
            make_note_payload("n1", folder_id="f1", updated_at=datetime(2024, 3, 5, 10)),
            make_note_payload("n2", updated_at=datetime(2024, 3, 9, 8)),
            make_note_payload("n3", folder_id="gone", updated_at=datetime(2024, 3, 1, 23)),
            make_note_payload("n4", is_deleted=True, deleted_at=datetime(2024, 3, 20),
                              updated_at=datetime(2024, 3, 20)),
        )
    ]
    return store


class TestRecentNotes:
    def test_cards_newest_first_with_folder_colors(self, store):
        cards = Dashboard(store).recent_notes()

        assert [c.note.id for c in cards] == ["n2", "n1", "n3"]
        assert [c.color for c in cards] == [DEFAULT_NOTE_COLOR, "#f97316", DEFAULT_NOTE_COLOR]
        assert cards[0].preview == "Start writing..."

    def test_limit_from_config(self, store, make_note_payload):
        store.notes = [
            Note.model_validate(make_note_payload(f"n{i}", updated_at=datetime(2024, 3, i + 1)))
            for i in range(8)
        ]

        assert len(Dashboard(store).recent_notes()) == 5


class TestMonthCalendar:
    def test_marks_days_with_notes(self, store):
        month = Dashboard(store).month_calendar(2024, 3, today=date(2024, 3, 9))

        marked = [d.day for d in month.days if d.has_notes]
        assert marked == [1, 5, 9]
        assert [d.day for d in month.days if d.is_today] == [9]
        assert len(month.days) == 31
        assert month.title == "March 2024"

    @pytest.mark.parametrize(
        ("year", "month", "blanks"),
        [
            (2024, 9, 0),   # starts on Sunday
            (2024, 4, 1),   # Monday
            (2024, 3, 5),   # Friday
            (2024, 6, 6),   # Saturday
        ],
    )
    def test_leading_blanks_for_sunday_weeks(self, store, year, month, blanks):
        assert Dashboard(store).month_calendar(year, month, today=date(2000, 1, 1)).leading_blanks == blanks
