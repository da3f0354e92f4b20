"""Extraction field registry models.

These mirror the documents the browser pages persist through
``/api/items``. Field names are exposed in camelCase and unknown keys are
kept, since the underlying document store is schemaless.
"""

from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _new_id() -> str:
    return str(uuid4())


class RegistryModel(BaseModel):
    """Base model for registry documents and their nested fields."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class DataType(str, Enum):
    """Answer type expected from an extraction prompt."""

    TEXT = "text"
    DATE = "date"
    NUMBER = "number"
    CURRENCY = "currency"
    SUMMARY_50 = "summary50"  # Summary (<50 words)
    SUMMARY_100 = "summary100"  # Summary (<100 words)


class FieldBlock(RegistryModel):
    section_name: str = ""
    field_name: str = ""
    prompt: str = ""
    data_type: DataType = DataType.TEXT


class PromptRegistry(RegistryModel):
    """Ordered extraction prompts for one persona."""

    id: str = Field(default_factory=_new_id)
    persona: str = "Default"
    fields: List[FieldBlock] = Field(default_factory=list)


class Persona(RegistryModel):
    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""


class QueryField(RegistryModel):
    field_name: str = ""
    prompt: str = ""


class QuerySet(RegistryModel):
    """Named set of extraction queries, used as a document type."""

    id: str = Field(default_factory=_new_id)
    name: str
    persona: Optional[str] = None
    fields: List[QueryField] = Field(default_factory=list)


class ResultField(RegistryModel):
    field_name: str = ""
    extraction_prompt: str = ""
    answer: str = ""
    time_stamp: str = ""
    data_type: Optional[str] = None


class ResultsDocument(RegistryModel):
    """Extraction answers for one stored document."""

    id: str = Field(default_factory=_new_id)
    document_name: str
    document_size: int = 0
    time_imported: str = ""
    fields: List[ResultField] = Field(default_factory=list)
    persona: Optional[str] = None
    doc_type: Optional[str] = None
    permission: Optional[str] = None


class QualityField(ResultField):
    quality_answer: str = ""
    match_pct: str = ""  # Free text such as "97"
    approved: bool = False


class QualityDocument(RegistryModel):
    """Quality review of the answers extracted from one document."""

    id: str = Field(default_factory=_new_id)
    file_name: str
    query_set: str = ""
    persona: str = ""
    created_at: str = ""
    fields: List[QualityField] = Field(default_factory=list)
