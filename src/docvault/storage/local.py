"""Local filesystem object store."""

import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from docvault.core.config import settings
from docvault.core.exceptions import CollectionError, TransferError
from docvault.storage.base import (
    ObjectStore,
    ProgressCallback,
    StoredObject,
    WriteResult,
    sanitize_key,
)

logger = logging.getLogger(__name__)

METADATA_SUFFIX = ".metadata.json"
# In-progress writes are hidden as ".<key>.part" until complete
PARTIAL_PREFIX = "."
PARTIAL_SUFFIX = ".part"


class LocalObjectStore(ObjectStore):
    """Object store keeping each collection in a directory.

    Metadata tags live next to each object in a ``<key>.metadata.json``
    sidecar file.
    """

    def __init__(self, base_path: Optional[Path] = None, chunk_size: Optional[int] = None):
        self.base_path = Path(base_path or settings.LOCAL_OBJECT_STORE_PATH)
        self.chunk_size = chunk_size or settings.upload_chunk_size_bytes

    def _collection_path(self, name: str) -> Path:
        directory = sanitize_key(name)
        if directory in ("", ".", ".."):
            raise CollectionError(f"Invalid collection name: {name!r}")
        return self.base_path / directory

    async def collection_exists(self, name: str) -> bool:
        return self._collection_path(name).is_dir()

    async def create_collection(self, name: str) -> None:
        try:
            self._collection_path(name).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CollectionError(f"Failed to create collection {name}: {e}") from e
        logger.info(f"Created collection {name}", extra={"collection": name})

    async def list_objects(self, name: str) -> list[StoredObject]:
        collection_path = self._collection_path(name)
        if not collection_path.is_dir():
            return []

        objects = []
        for path in sorted(collection_path.iterdir()):
            if not path.is_file() or _is_internal_file(path.name):
                continue
            stat = path.stat()
            objects.append(
                StoredObject(
                    key=path.name,
                    size_bytes=stat.st_size,
                    last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    url=f"{self.collection_url(name)}/{path.name}",
                    metadata_tags=self._read_metadata(path),
                )
            )
        return objects

    async def write_object(
        self,
        collection: str,
        key: str,
        payload: bytes,
        content_type: str,
        metadata_tags: Optional[Dict[str, str]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WriteResult:
        collection_path = self._collection_path(collection)
        if not collection_path.is_dir():
            raise TransferError(f"Collection {collection} does not exist")

        safe_key = sanitize_key(key)
        target_path = collection_path / safe_key
        partial_path = collection_path / f"{PARTIAL_PREFIX}{safe_key}{PARTIAL_SUFFIX}"

        try:
            try:
                # Stream write in chunks, reporting after each one
                with open(partial_path, "wb") as f:
                    sent = 0
                    for offset in range(0, len(payload), self.chunk_size):
                        chunk = payload[offset:offset + self.chunk_size]
                        await asyncio.to_thread(f.write, chunk)
                        sent += len(chunk)
                        if on_progress:
                            on_progress(sent)

                metadata_path = target_path.with_name(safe_key + METADATA_SUFFIX)
                metadata = {"content_type": content_type, "tags": dict(metadata_tags or {})}
                await asyncio.to_thread(metadata_path.write_text, json.dumps(metadata), "utf-8")
                await asyncio.to_thread(os.replace, partial_path, target_path)
            except OSError as e:
                raise TransferError(f"Failed to write {safe_key}: {e.strerror or e}") from e
        finally:
            # Only complete objects are ever visible under their key
            partial_path.unlink(missing_ok=True)

        return WriteResult(final_url=f"{self.collection_url(collection)}/{safe_key}")

    def collection_url(self, name: str) -> str:
        return self._collection_path(name).resolve().as_uri()

    def get_backend_name(self) -> str:
        return "local"

    @staticmethod
    def _read_metadata(path: Path) -> Dict[str, str]:
        metadata_path = path.with_name(path.name + METADATA_SUFFIX)
        if not metadata_path.exists():
            return {}
        try:
            metadata = json.loads(metadata_path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning(f"Unreadable metadata for {path.name}", extra={"path": str(path)})
            return {}
        return {str(k): str(v) for k, v in metadata.get("tags", {}).items()}


def _is_internal_file(name: str) -> bool:
    if name.endswith(METADATA_SUFFIX):
        return True
    return name.startswith(PARTIAL_PREFIX) and name.endswith(PARTIAL_SUFFIX)
