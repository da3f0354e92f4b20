"""In-memory document store."""

import copy
from typing import Dict, Optional

from docvault.documents.base import Document, DocumentStore, prepare_document


class InMemoryDocumentStore(DocumentStore):
    """In-memory store for documents, lost on restart."""

    def __init__(self):
        self._containers: Dict[str, Dict[str, Document]] = {}

    async def list_documents(self, container: str) -> list[Document]:
        return [copy.deepcopy(doc) for doc in self._containers.get(container, {}).values()]

    async def get_document(self, container: str, document_id: str) -> Optional[Document]:
        document = self._containers.get(container, {}).get(document_id)
        return copy.deepcopy(document) if document is not None else None

    async def upsert_document(self, container: str, document: Document) -> Document:
        stored = copy.deepcopy(prepare_document(document))
        self._containers.setdefault(container, {})[stored["id"]] = stored
        return copy.deepcopy(stored)

    def get_backend_name(self) -> str:
        return "memory"
