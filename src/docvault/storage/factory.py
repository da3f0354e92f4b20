"""Object store selection."""

from docvault.core.config import settings
from docvault.core.exceptions import ConfigurationError
from docvault.storage.base import ObjectStore
from docvault.storage.gcs import GCSObjectStore
from docvault.storage.local import LocalObjectStore

_stores: dict[str, ObjectStore] = {}


def get_object_store() -> ObjectStore:
    """Return the object store configured by OBJECT_STORE_BACKEND.

    Raises:
        ConfigurationError: If the backend is unknown or misconfigured
    """
    backend = settings.OBJECT_STORE_BACKEND
    if backend not in _stores:
        if backend == "local":
            _stores[backend] = LocalObjectStore()
        elif backend == "gcs":
            if not settings.GCP_PROJECT_ID:
                raise ConfigurationError("GCP_PROJECT_ID not configured")
            _stores[backend] = GCSObjectStore()
        else:
            raise ConfigurationError(f"Unknown object store backend: {backend}")
    return _stores[backend]
