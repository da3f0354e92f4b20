"""Abstract document store interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from uuid import uuid4

from docvault.core.exceptions import DocumentNotFoundError, InvalidDocumentError

Document = Dict[str, Any]


def prepare_document(document: Any) -> Document:
    """Validate an upsert body and make sure it carries an ``id``.

    Raises:
        InvalidDocumentError: If the body is not a JSON object or its id is not a string
    """
    if not isinstance(document, dict):
        raise InvalidDocumentError("Document body must be a JSON object")
    prepared = dict(document)
    document_id = prepared.get("id")
    if document_id is None or document_id == "":
        prepared["id"] = str(uuid4())
    elif not isinstance(document_id, str):
        raise InvalidDocumentError("Document id must be a string")
    return prepared


class DocumentStore(ABC):
    """Abstract base class for stores of JSON documents grouped in containers."""

    @abstractmethod
    async def list_documents(self, container: str) -> list[Document]:
        """Return every document in ``container`` (empty if it does not exist)."""
        pass

    @abstractmethod
    async def get_document(self, container: str, document_id: str) -> Optional[Document]:
        """Return one document, or None when it does not exist."""
        pass

    async def require_document(self, container: str, document_id: str) -> Document:
        """Return one document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        document = await self.get_document(container, document_id)
        if document is None:
            raise DocumentNotFoundError(container, document_id)
        return document

    @abstractmethod
    async def upsert_document(self, container: str, document: Document) -> Document:
        """Create or replace a document by its ``id`` and return what was stored.

        A document without an ``id`` is given a generated one.
        """
        pass

    @abstractmethod
    def get_backend_name(self) -> str:
        """Return backend identifier."""
        pass
