"""Registry containers and their document schemas."""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Type

from pydantic import ValidationError

from docvault.core.exceptions import InvalidDocumentError
from docvault.documents.base import Document
from docvault.models.registries import (
    Persona,
    PromptRegistry,
    QualityDocument,
    QualityField,
    QuerySet,
    RegistryModel,
    ResultsDocument,
)

PROMPTS_CONTAINER = "Prompts"
PERSONAS_CONTAINER = "Personas"
QUERIES_CONTAINER = "Queries"
RESULTS_CONTAINER = "Results"
QUALITY_CONTAINER = "Quality"

REGISTRY_MODELS: Dict[str, Type[RegistryModel]] = {
    PROMPTS_CONTAINER: PromptRegistry,
    PERSONAS_CONTAINER: Persona,
    QUERIES_CONTAINER: QuerySet,
    RESULTS_CONTAINER: ResultsDocument,
    QUALITY_CONTAINER: QualityDocument,
}


def validate_document(container: str, body: Any) -> Document:
    """Normalize a document bound for ``container``.

    Registry containers are checked against their schema; any other
    container accepts the body unchanged.

    Raises:
        InvalidDocumentError: If the body does not match the container's schema
    """
    if not isinstance(body, dict):
        raise InvalidDocumentError("Document body must be a JSON object")

    model = REGISTRY_MODELS.get(container)
    if model is None:
        return body

    try:
        parsed = model.model_validate(body)
    except ValidationError as e:
        raise InvalidDocumentError(
            f"Invalid {container} document: {e.error_count()} validation error(s)"
        ) from e
    return parsed.model_dump(mode="json", by_alias=True, exclude_none=True)


def seed_quality_from_results(
    results: ResultsDocument,
    quality_id: Optional[str] = None,
    object_tags: Optional[Mapping[str, str]] = None,
) -> QualityDocument:
    """Start a quality review from a results document.

    Every result field becomes an unreviewed quality field. The query set
    and persona come from the results document, falling back to the
    metadata tags of the stored object it was extracted from.
    """
    tags = object_tags or {}
    fields = [
        QualityField(
            field_name=f.field_name,
            extraction_prompt=f.extraction_prompt,
            answer=f.answer,
            time_stamp=f.time_stamp,
        )
        for f in results.fields
    ]
    values: Dict[str, Any] = {
        "file_name": results.document_name,
        "query_set": results.doc_type or tags.get("doctype", ""),
        "persona": results.persona or tags.get("persona", ""),
        "created_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "fields": fields or [QualityField()],
    }
    if quality_id:
        values["id"] = quality_id
    return QualityDocument(**values)
