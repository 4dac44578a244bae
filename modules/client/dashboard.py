"""
Dashboard.

Greeting, recent notes with plain-text previews, and a month calendar
that marks the days on which notes were last edited.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime

from modules.backend.core.config import get_app_config
from modules.backend.core.utils import strip_html
from modules.client.models import Note
from modules.client.notes_store import NotesStore

DEFAULT_NOTE_COLOR = "#0d9488"


def greeting_for(moment: datetime) -> str:
    hour = moment.hour
    if hour < 12:
        return "Good Morning"
    if hour < 17:
        return "Good Afternoon"
    if hour < 21:
        return "Good Evening"
    return "Good Night"


def note_preview(note: Note, chars: int = 100) -> str:
    """First characters of the note's plain text."""
    return strip_html(note.content)[:chars]


@dataclass
class RecentNoteCard:
    note: Note
    preview: str
    color: str


@dataclass
class CalendarDay:
    day: int
    has_notes: bool
    is_today: bool


@dataclass
class MonthCalendar:
    year: int
    month: int
    leading_blanks: int  # cells before day 1, weeks start on Sunday
    days: list[CalendarDay]

    @property
    def title(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"


class Dashboard:
    def __init__(self, store: NotesStore) -> None:
        self.store = store
        client_config = get_app_config().client
        self.recent_limit = client_config.recent_notes_limit
        self.preview_chars = client_config.preview_chars

    def _folder_color(self, folder_id: str | None) -> str:
        if not folder_id:
            return DEFAULT_NOTE_COLOR
        folder = next((f for f in self.store.folders if f.id == folder_id), None)
        return folder.color if folder and folder.color else DEFAULT_NOTE_COLOR

    def recent_notes(self) -> list[RecentNoteCard]:
        return [
            RecentNoteCard(
                note=note,
                preview=note_preview(note, self.preview_chars),
                color=self._folder_color(note.folder_id),
            )
            for note in self.store.get_recent_notes(self.recent_limit)
        ]

    def month_calendar(self, year: int, month: int, today: date | None = None) -> MonthCalendar:
        today = today or date.today()
        first_weekday, days_in_month = calendar.monthrange(year, month)
        days = [
            CalendarDay(
                day=day,
                has_notes=bool(self.store.get_notes_for_date(date(year, month, day))),
                is_today=date(year, month, day) == today,
            )
            for day in range(1, days_in_month + 1)
        ]
        # monthrange counts Monday as 0
        return MonthCalendar(year, month, (first_weekday + 1) % 7, days)
