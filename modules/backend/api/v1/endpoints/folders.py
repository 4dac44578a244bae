"""
Folders API Endpoints.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUserId, DbSession, RequestId
from modules.backend.schemas.base import ApiResponse, ResponseMetadata
from modules.backend.schemas.note import FolderCreate, FolderResponse
from modules.backend.services.folder import FolderService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[FolderResponse]],
    summary="List folders",
    description="The user's folders, oldest first.",
)
async def list_folders(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[list[FolderResponse]]:
    folders = await FolderService(db, user_id).list_folders()
    return ApiResponse(
        data=[FolderResponse.model_validate(f) for f in folders],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[FolderResponse],
    status_code=201,
    summary="Create a folder",
)
async def create_folder(
    data: FolderCreate,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[FolderResponse]:
    folder = await FolderService(db, user_id).create_folder(data)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        metadata=ResponseMetadata(request_id=request_id),
    )
