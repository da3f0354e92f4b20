"""Generic document CRUD routes."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from docvault.core.exceptions import ConfigurationError, InvalidDocumentError, UpstreamError
from docvault.documents.base import Document, DocumentStore
from docvault.documents.factory import get_document_store
from docvault.documents.registries import validate_document

router = APIRouter(prefix="/api/items", tags=["items"])
logger = logging.getLogger(__name__)


def document_store() -> DocumentStore:
    """Resolve the configured document store."""
    try:
        return get_document_store()
    except ConfigurationError as e:
        logger.error(f"Document store configuration error: {e}")
        raise HTTPException(status_code=500, detail="Storage configuration error")


def _container_or_422(container: str) -> str:
    if container.strip() in ("", ".", ".."):
        raise HTTPException(status_code=422, detail=f"Invalid container name: {container!r}")
    return container


@router.get("/{container}")
async def list_items(
    container: str, store: DocumentStore = Depends(document_store)
) -> list[Document]:
    """Return every document in a container."""
    _container_or_422(container)
    try:
        return await store.list_documents(container)
    except InvalidDocumentError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/{container}/{document_id}")
async def get_item(
    container: str, document_id: str, store: DocumentStore = Depends(document_store)
) -> Document:
    """Return a single document."""
    _container_or_422(container)
    try:
        document = await store.get_document(container, document_id)
    except InvalidDocumentError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if document is None:
        raise HTTPException(status_code=404, detail="Not found")
    return document


@router.post("/{container}")
async def upsert_item(
    container: str,
    body: Any = Body(...),
    store: DocumentStore = Depends(document_store),
) -> Document:
    """Create or replace a document, validating registry containers."""
    _container_or_422(container)
    try:
        document = validate_document(container, body)
        stored = await store.upsert_document(container, document)
    except InvalidDocumentError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))

    logger.info(
        f"Upserted document {stored['id']} into {container}",
        extra={"container": container, "document_id": stored["id"]},
    )
    return stored
