"""Abstract object store interface."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Optional

# Receives the cumulative number of bytes sent so far
ProgressCallback = Callable[[int], None]

PERMISSION_LEVELS = ("Private", "Org-Wide", "Public")


@dataclass(frozen=True)
class StoredObject:
    """An object already present in a collection."""

    key: str
    size_bytes: int
    last_modified: Optional[datetime]
    url: str
    metadata_tags: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a successful object write."""

    final_url: str


def build_metadata_tags(
    permission: Optional[str] = None,
    doc_type: Optional[str] = None,
    persona: Optional[str] = None,
) -> Dict[str, str]:
    """Build the metadata tags attached to uploaded objects.

    Keys are lower-case ASCII and absent values are omitted, so the tags
    read back the same from every backend.
    """
    tags: Dict[str, str] = {}
    if permission:
        tags["permission"] = permission
    if doc_type:
        tags["doctype"] = doc_type
    if persona:
        tags["persona"] = persona
    return tags


def normalize_collection_name(name: str) -> str:
    """Collections are addressed by trimmed, lower-case names."""
    return name.strip().lower()


def sanitize_key(key: str) -> str:
    """Remove path traversal and dangerous characters from an object key."""
    safe = key.replace("../", "").replace("..\\", "")
    safe = safe.replace("/", "_").replace("\\", "_")
    safe = re.sub(r"[^a-zA-Z0-9._-]", "_", safe)
    return safe[:255]


class ObjectStore(ABC):
    """Abstract base class for object stores holding named collections."""

    @abstractmethod
    async def collection_exists(self, name: str) -> bool:
        """Return True when the named collection exists."""
        pass

    @abstractmethod
    async def create_collection(self, name: str) -> None:
        """Create the named collection.

        Creating a collection that already exists is not an error.

        Raises:
            CollectionError: If the collection cannot be created
        """
        pass

    @abstractmethod
    async def list_objects(self, name: str) -> list[StoredObject]:
        """List every object in a collection with its metadata tags.

        Returns an empty list when the collection does not exist.

        Raises:
            CollectionError: If the collection cannot be read
        """
        pass

    @abstractmethod
    async def write_object(
        self,
        collection: str,
        key: str,
        payload: bytes,
        content_type: str,
        metadata_tags: Optional[Dict[str, str]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WriteResult:
        """Write one object into a collection.

        Args:
            collection: Target collection name
            key: Object key within the collection
            payload: Object content
            content_type: MIME type
            metadata_tags: Optional string tags persisted with the object
            on_progress: Called on the event loop with cumulative bytes sent

        Returns:
            Write result carrying the final object address

        Raises:
            TransferError: If the write fails
        """
        pass

    @abstractmethod
    def collection_url(self, name: str) -> str:
        """Base address every object URL of the collection starts with."""
        pass

    @abstractmethod
    def get_backend_name(self) -> str:
        """Return backend identifier."""
        pass
