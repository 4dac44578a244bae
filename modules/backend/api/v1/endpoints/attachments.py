"""
Attachments API Endpoints.

Image uploads for notes. Files arrive as multipart form data and are
written to object storage; the response carries the public URL.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from modules.backend.core.config import get_app_config
from modules.backend.core.dependencies import (
    CurrentUserId,
    DbSession,
    RequestId,
    get_object_storage,
)
from modules.backend.core.exceptions import ValidationError
from modules.backend.schemas.attachment import AttachmentResponse
from modules.backend.schemas.base import ApiResponse, ResponseMetadata
from modules.backend.services.attachment import AttachmentService
from modules.backend.services.storage import ObjectStorage

router = APIRouter()


def _service(db, user_id: str, storage: ObjectStorage) -> AttachmentService:
    app_config = get_app_config()
    if not app_config.features.attachments_enabled:
        raise ValidationError("Attachments are disabled")
    storage_config = app_config.storage
    return AttachmentService(
        db,
        user_id,
        storage=storage,
        max_upload_bytes=storage_config.max_upload_bytes,
        allowed_content_prefixes=storage_config.allowed_content_prefixes,
    )


@router.get(
    "/notes/{note_id}/attachments",
    response_model=ApiResponse[list[AttachmentResponse]],
    summary="List a note's attachments",
)
async def list_attachments(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
    storage: ObjectStorage = Depends(get_object_storage),
) -> ApiResponse[list[AttachmentResponse]]:
    service = _service(db, user_id, storage)
    attachments = await service.list_attachments(note_id)
    return ApiResponse(
        data=[service.to_response(a) for a in attachments],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/notes/{note_id}/attachments",
    response_model=ApiResponse[AttachmentResponse],
    status_code=201,
    summary="Upload an image attachment",
)
async def upload_attachment(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
    file: UploadFile = File(...),
    storage: ObjectStorage = Depends(get_object_storage),
) -> ApiResponse[AttachmentResponse]:
    service = _service(db, user_id, storage)
    data = await file.read()
    attachment = await service.upload_attachment(
        note_id,
        file_name=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        data=data,
    )
    return ApiResponse(
        data=service.to_response(attachment),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/attachments/{attachment_id}",
    status_code=204,
    summary="Delete an attachment",
)
async def delete_attachment(
    attachment_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    storage: ObjectStorage = Depends(get_object_storage),
) -> None:
    await _service(db, user_id, storage).delete_attachment(attachment_id)
