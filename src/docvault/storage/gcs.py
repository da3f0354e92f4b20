"""Google Cloud Storage object store."""

import asyncio
import io
import logging
from typing import Callable, Dict, Optional
from urllib.parse import quote

from google.api_core.exceptions import Conflict, GoogleAPIError, NotFound
from google.cloud import storage

from docvault.core.config import settings
from docvault.core.exceptions import CollectionError, ConfigurationError, TransferError
from docvault.storage.base import ObjectStore, ProgressCallback, StoredObject, WriteResult

logger = logging.getLogger(__name__)

GCS_PUBLIC_ENDPOINT = "https://storage.googleapis.com"
# Resumable upload chunks must be a multiple of 256 KB
GCS_CHUNK_MULTIPLE = 256 * 1024


class _ProgressReader(io.BytesIO):
    """In-memory payload that reports how far it has been read."""

    def __init__(self, payload: bytes, report: Callable[[int], None]):
        super().__init__(payload)
        self._report = report
        self._reported = 0

    def read(self, size: int | None = -1) -> bytes:
        chunk = super().read(size)
        position = self.tell()
        # Retries may seek backwards; only forward progress is reported
        if position > self._reported:
            self._reported = position
            self._report(position)
        return chunk


class GCSObjectStore(ObjectStore):
    """Object store mapping each collection to a GCS bucket."""

    def __init__(self, bucket_prefix: Optional[str] = None, chunk_size: Optional[int] = None):
        self.bucket_prefix = settings.GCS_BUCKET_PREFIX if bucket_prefix is None else bucket_prefix
        size = chunk_size or settings.upload_chunk_size_bytes
        self.chunk_size = max(GCS_CHUNK_MULTIPLE, size - size % GCS_CHUNK_MULTIPLE)
        self._client: Optional[storage.Client] = None

    def _get_client(self) -> storage.Client:
        """Lazy-load and cache the GCS client."""
        if self._client is None:
            if not settings.GCP_PROJECT_ID:
                raise ConfigurationError("GCP_PROJECT_ID not configured")
            self._client = storage.Client(project=settings.GCP_PROJECT_ID)
        return self._client

    def bucket_name(self, collection: str) -> str:
        return f"{self.bucket_prefix}{collection}"

    async def collection_exists(self, name: str) -> bool:
        client = self._get_client()
        try:
            bucket = await asyncio.to_thread(client.lookup_bucket, self.bucket_name(name))
        except GoogleAPIError as e:
            raise CollectionError(f"Failed to look up collection {name}: {e}") from e
        return bucket is not None

    async def create_collection(self, name: str) -> None:
        client = self._get_client()
        bucket_name = self.bucket_name(name)
        try:
            await asyncio.to_thread(
                client.create_bucket, bucket_name, location=settings.GCP_REGION
            )
            logger.info(f"Created bucket {bucket_name}", extra={"collection": name})
        except Conflict:
            logger.debug(f"Bucket {bucket_name} already exists", extra={"collection": name})
        except GoogleAPIError as e:
            raise CollectionError(f"Failed to create collection {name}: {e}") from e

    async def list_objects(self, name: str) -> list[StoredObject]:
        client = self._get_client()
        try:
            blobs = await asyncio.to_thread(
                lambda: list(client.list_blobs(self.bucket_name(name)))
            )
        except NotFound:
            return []
        except GoogleAPIError as e:
            raise CollectionError(f"Failed to list collection {name}: {e}") from e

        return [
            StoredObject(
                key=blob.name,
                size_bytes=blob.size or 0,
                last_modified=blob.updated,
                url=self._object_url(name, blob.name),
                metadata_tags=dict(blob.metadata or {}),
            )
            for blob in blobs
        ]

    async def write_object(
        self,
        collection: str,
        key: str,
        payload: bytes,
        content_type: str,
        metadata_tags: Optional[Dict[str, str]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WriteResult:
        client = self._get_client()
        loop = asyncio.get_running_loop()

        def report(sent: int) -> None:
            if on_progress:
                loop.call_soon_threadsafe(on_progress, sent)

        blob = client.bucket(self.bucket_name(collection)).blob(key, chunk_size=self.chunk_size)
        if metadata_tags:
            blob.metadata = dict(metadata_tags)

        try:
            await asyncio.to_thread(
                blob.upload_from_file,
                _ProgressReader(payload, report),
                size=len(payload),
                content_type=content_type,
            )
        except GoogleAPIError as e:
            raise TransferError(getattr(e, "message", None) or str(e)) from e

        return WriteResult(final_url=self._object_url(collection, key))

    def collection_url(self, name: str) -> str:
        return f"{GCS_PUBLIC_ENDPOINT}/{self.bucket_name(name)}"

    def _object_url(self, collection: str, key: str) -> str:
        return f"{self.collection_url(collection)}/{quote(key, safe='/~')}"

    def get_backend_name(self) -> str:
        return "gcs"
