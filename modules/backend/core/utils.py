"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC. This ensures consistent behavior across
    the codebase and simplifies database storage.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def strip_html(html: str | None) -> str:
    """
    Return the plain text of an HTML fragment.

    Note content is stored as editor HTML; previews, search and the
    summarizer work on its text.
    """
    if not html:
        return ""
    from bs4 import BeautifulSoup

    return BeautifulSoup(html, "html.parser").get_text()
