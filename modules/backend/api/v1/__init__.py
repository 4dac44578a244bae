"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from modules.backend.api.v1.endpoints import ai, attachments, folders, notes, tags

router = APIRouter()

router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(folders.router, prefix="/folders", tags=["folders"])
router.include_router(tags.router, prefix="/tags", tags=["tags"])
router.include_router(attachments.router, tags=["attachments"])
router.include_router(ai.router, prefix="/ai", tags=["ai"])
