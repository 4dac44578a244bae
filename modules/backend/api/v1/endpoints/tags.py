"""
Tags API Endpoints.

Tags and the links between tags and notes. `/tags/links` is declared
before `/tags/{tag_id}` routes so it is not captured as an id.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUserId, DbSession, RequestId
from modules.backend.schemas.base import ApiResponse, ResponseMetadata
from modules.backend.schemas.tag import NoteTagResponse, TagCreate, TagResponse
from modules.backend.services.tag import TagService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[TagResponse]],
    summary="List tags",
    description="The user's tags ordered by name.",
)
async def list_tags(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[list[TagResponse]]:
    tags = await TagService(db, user_id).list_tags()
    return ApiResponse(
        data=[TagResponse.model_validate(t) for t in tags],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[TagResponse],
    status_code=201,
    summary="Create a tag",
    description="Create a tag. A duplicate name for the same user returns 409.",
)
async def create_tag(
    data: TagCreate,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[TagResponse]:
    tag = await TagService(db, user_id).create_tag(data)
    return ApiResponse(
        data=TagResponse.model_validate(tag),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/links",
    response_model=ApiResponse[list[NoteTagResponse]],
    summary="List note-tag links",
)
async def list_links(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[list[NoteTagResponse]]:
    links = await TagService(db, user_id).list_links()
    return ApiResponse(
        data=[NoteTagResponse.model_validate(link) for link in links],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{tag_id}",
    status_code=204,
    summary="Delete a tag",
    description="Delete a tag and remove it from every note.",
)
async def delete_tag(
    tag_id: str,
    db: DbSession,
    user_id: CurrentUserId,
) -> None:
    await TagService(db, user_id).delete_tag(tag_id)


@router.put(
    "/{tag_id}/notes/{note_id}",
    response_model=ApiResponse[NoteTagResponse],
    status_code=201,
    summary="Add a tag to a note",
)
async def add_tag_to_note(
    tag_id: str,
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteTagResponse]:
    link = await TagService(db, user_id).add_tag_to_note(note_id, tag_id)
    return ApiResponse(
        data=NoteTagResponse.model_validate(link),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{tag_id}/notes/{note_id}",
    status_code=204,
    summary="Remove a tag from a note",
)
async def remove_tag_from_note(
    tag_id: str,
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
) -> None:
    await TagService(db, user_id).remove_tag_from_note(note_id, tag_id)
