"""Document store selection."""

from docvault.core.config import settings
from docvault.core.exceptions import ConfigurationError
from docvault.documents.base import DocumentStore
from docvault.documents.gcs import GCSDocumentStore
from docvault.documents.local import LocalDocumentStore
from docvault.documents.memory import InMemoryDocumentStore

_stores: dict[str, DocumentStore] = {}


def get_document_store() -> DocumentStore:
    """Return the document store configured by DOCUMENT_STORE_BACKEND.

    Raises:
        ConfigurationError: If the backend is unknown or misconfigured
    """
    backend = settings.DOCUMENT_STORE_BACKEND
    if backend not in _stores:
        if backend == "memory":
            _stores[backend] = InMemoryDocumentStore()
        elif backend == "local":
            _stores[backend] = LocalDocumentStore()
        elif backend == "gcs":
            _stores[backend] = GCSDocumentStore()
        else:
            raise ConfigurationError(f"Unknown document store backend: {backend}")
    return _stores[backend]
