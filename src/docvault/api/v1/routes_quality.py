"""Quality review routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from docvault.api.v1.routes_items import document_store
from docvault.api.v1.routes_upload import object_store
from docvault.core.config import settings
from docvault.core.exceptions import CollectionError, DocumentNotFoundError, UpstreamError
from docvault.documents.base import DocumentStore
from docvault.documents.registries import RESULTS_CONTAINER, seed_quality_from_results
from docvault.models.registries import ResultsDocument
from docvault.storage.base import ObjectStore

router = APIRouter(prefix="/api/v1/quality", tags=["quality"])
logger = logging.getLogger(__name__)


@router.post("/seed/{results_id}")
async def seed_quality(
    results_id: str,
    quality_id: Optional[str] = None,
    documents: DocumentStore = Depends(document_store),
    objects: ObjectStore = Depends(object_store),
) -> dict:
    """Build an unsaved quality review draft from a results document."""
    try:
        raw = await documents.require_document(RESULTS_CONTAINER, results_id)
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Not found")
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))

    try:
        results = ResultsDocument.model_validate(raw)
    except ValidationError:
        raise HTTPException(status_code=422, detail="Stored results document is invalid")

    object_tags = None
    if not results.doc_type or not results.persona:
        try:
            stored = await objects.list_objects(settings.DEFAULT_COLLECTION)
        except CollectionError as e:
            # Tags only fill gaps, so seed without them
            logger.warning(
                f"Object tag lookup failed for results {results_id}: {e}",
                extra={"results_id": results_id},
            )
            stored = []
        match = next((obj for obj in stored if obj.key == results.document_name), None)
        if match is not None:
            object_tags = match.metadata_tags

    quality = seed_quality_from_results(results, quality_id=quality_id, object_tags=object_tags)
    logger.info(
        f"Seeded quality review from results {results_id}",
        extra={"results_id": results_id, "quality_id": quality.id},
    )
    return quality.model_dump(mode="json", by_alias=True, exclude_none=True)
