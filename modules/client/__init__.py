"""
Client State Manager.

In-memory cache of the signed-in user's notes, folders, tags and
attachments, kept in sync with the backend API over HTTP (httpx).

Architecture:
- Every mutation calls the backend first; local state changes only
  after the backend accepted it
- Remote failures are logged (source "client") and the operation
  returns None without touching local state
- Sends X-Frontend-ID: client header for log routing

Usage:
    remote = RemoteClient(token=access_token)
    notes = NotesStore(remote)
    await notes.refresh()
    note = await notes.create_note()
    await notes.update_note(note.id, title="Groceries")
"""

from modules.client.remote import RemoteClient, RemoteError, RemoteResult

__all__ = ["RemoteClient", "RemoteError", "RemoteResult"]
