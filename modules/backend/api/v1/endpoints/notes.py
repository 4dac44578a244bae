"""
Notes API Endpoints.

REST API endpoints for notes, including pinning and the recycle bin.
"""

from fastapi import APIRouter, Depends

from modules.backend.core.dependencies import (
    CurrentUserId,
    DbSession,
    RequestId,
    get_object_storage,
)
from modules.backend.schemas.base import ApiResponse, ResponseMetadata
from modules.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from modules.backend.services.note import NoteService
from modules.backend.services.storage import ObjectStorage

router = APIRouter()


def _envelope(note, request_id: str) -> ApiResponse[NoteResponse]:
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note with placeholder title and content, optionally in a folder.",
)
async def create_note(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
    data: NoteCreate | None = None,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    service = NoteService(db, user_id)
    note = await service.create_note(data or NoteCreate())
    return _envelope(note, request_id)


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="All of the user's notes, including the recycle bin, most recently updated first.",
)
async def list_notes(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    service = NoteService(db, user_id)
    notes = await service.list_notes()
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
async def get_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    service = NoteService(db, user_id)
    note = await service.get_note(note_id)
    return _envelope(note, request_id)


@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Update an existing note. Only provided fields are updated.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    service = NoteService(db, user_id)
    note = await service.update_note(note_id, data)
    return _envelope(note, request_id)


@router.post(
    "/{note_id}/pin",
    response_model=ApiResponse[NoteResponse],
    summary="Toggle pin",
)
async def toggle_pin(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    service = NoteService(db, user_id)
    note = await service.toggle_pin(note_id)
    return _envelope(note, request_id)


@router.post(
    "/{note_id}/trash",
    response_model=ApiResponse[NoteResponse],
    summary="Move a note to the recycle bin",
)
async def trash_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    service = NoteService(db, user_id)
    note = await service.trash_note(note_id)
    return _envelope(note, request_id)


@router.post(
    "/{note_id}/restore",
    response_model=ApiResponse[NoteResponse],
    summary="Restore a note from the recycle bin",
)
async def restore_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    service = NoteService(db, user_id)
    note = await service.restore_note(note_id)
    return _envelope(note, request_id)


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Delete a note permanently",
    description="Erase a note with its tag links and attachments.",
)
async def delete_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    storage: ObjectStorage = Depends(get_object_storage),
) -> None:
    service = NoteService(db, user_id, storage=storage)
    await service.delete_note(note_id)
