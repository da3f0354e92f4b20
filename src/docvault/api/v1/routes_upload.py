"""Upload API routes."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile

from docvault.core.config import settings
from docvault.core.exceptions import CollectionError, ConfigurationError
from docvault.models.upload import UploadBatchResponse, UploadTaskResponse
from docvault.storage.base import (
    PERMISSION_LEVELS,
    ObjectStore,
    build_metadata_tags,
    normalize_collection_name,
)
from docvault.storage.factory import get_object_store
from docvault.tracker import BatchUploadTracker, LocalFile

router = APIRouter(prefix="/api/v1", tags=["upload"])
logger = logging.getLogger(__name__)


def object_store() -> ObjectStore:
    """Resolve the configured object store."""
    try:
        return get_object_store()
    except ConfigurationError as e:
        logger.error(f"Object store configuration error: {e}")
        raise HTTPException(status_code=500, detail="Storage configuration error")


def _collection_or_400(collection: str) -> str:
    name = normalize_collection_name(collection)
    if not name:
        raise HTTPException(status_code=400, detail="collection is required")
    if name in (".", ".."):
        raise HTTPException(status_code=400, detail=f"Invalid collection name: {name!r}")
    return name


async def _read_upload(file: UploadFile) -> LocalFile:
    """Read one multipart file, enforcing size and MIME constraints."""
    content = await file.read()
    name = file.filename or "unnamed"

    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File {name} exceeds maximum allowed size of {settings.MAX_UPLOAD_MB}MB",
        )

    if settings.allowed_mime_types:
        if file.content_type not in settings.allowed_mime_types:
            raise HTTPException(
                status_code=400,
                detail=f"Content type {file.content_type} not allowed",
            )

    return LocalFile.from_bytes(name, content, file.content_type)


@router.post(
    "/collections/{collection}/uploads",
    response_model=UploadBatchResponse,
    status_code=201,
    responses={207: {"model": UploadBatchResponse, "description": "Some files failed"}},
)
async def upload_files(
    collection: str,
    response: Response,
    files: List[UploadFile] = File(...),
    permission: Optional[str] = Form(None),
    doc_type: Optional[str] = Form(None),
    persona: Optional[str] = Form(None),
    store: ObjectStore = Depends(object_store),
) -> UploadBatchResponse:
    """Upload a batch of files into a collection with optional metadata tags."""
    name = _collection_or_400(collection)

    if permission and permission not in PERMISSION_LEVELS:
        raise HTTPException(
            status_code=400,
            detail=f"permission must be one of {', '.join(PERMISSION_LEVELS)}",
        )

    # Every file is checked before any transfer starts
    local_files = [await _read_upload(file) for file in files]
    names = [f.name for f in local_files]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise HTTPException(
            status_code=400,
            detail=f"Duplicate file names in one upload: {', '.join(duplicates)}",
        )

    tracker = BatchUploadTracker(store)
    batch = await tracker.submit(
        name,
        local_files,
        build_metadata_tags(permission=permission, doc_type=doc_type, persona=persona),
    )

    logger.info(
        f"Upload batch completed: collection={name}, files={len(batch.tasks)}, "
        f"failed={len(batch.failed)}, backend={store.get_backend_name()}"
    )

    if batch.failed:
        response.status_code = 207
    return UploadBatchResponse.from_batch(batch)


@router.get("/collections/{collection}/objects", response_model=List[UploadTaskResponse])
async def list_objects(
    collection: str, store: ObjectStore = Depends(object_store)
) -> List[UploadTaskResponse]:
    """List objects already stored in a collection."""
    name = _collection_or_400(collection)
    tracker = BatchUploadTracker(store)
    try:
        tasks = await tracker.list_existing(name)
    except CollectionError as e:
        logger.error(f"Listing collection {name} failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    return [UploadTaskResponse.from_task(task) for task in tasks]
