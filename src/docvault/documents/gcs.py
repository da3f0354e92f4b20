"""Google Cloud Storage document store."""

import asyncio
import json
import logging
from typing import Optional

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.cloud import storage

from docvault.core.config import settings
from docvault.core.exceptions import ConfigurationError, UpstreamError
from docvault.documents.base import Document, DocumentStore, prepare_document

logger = logging.getLogger(__name__)


class GCSDocumentStore(DocumentStore):
    """Keeps each document as a JSON blob ``<container>/<id>.json`` in one bucket."""

    def __init__(self, bucket_name: Optional[str] = None):
        self.bucket_name = bucket_name or settings.DOCUMENT_BUCKET_NAME
        if not self.bucket_name:
            raise ConfigurationError("DOCUMENT_BUCKET_NAME not configured")
        self._client: Optional[storage.Client] = None
        self._bucket: Optional[storage.Bucket] = None

    def _get_bucket(self) -> storage.Bucket:
        """Lazy-load and cache the document bucket."""
        if self._bucket is None:
            self._client = storage.Client(project=settings.GCP_PROJECT_ID or None)
            self._bucket = self._client.bucket(self.bucket_name)
        return self._bucket

    @staticmethod
    def _blob_name(container: str, document_id: str) -> str:
        return f"{container}/{document_id}.json"

    async def list_documents(self, container: str) -> list[Document]:
        bucket = self._get_bucket()
        try:
            blobs = await asyncio.to_thread(
                lambda: [
                    blob for blob in bucket.list_blobs(prefix=f"{container}/")
                    if blob.name.endswith(".json")
                ]
            )
            contents = await asyncio.gather(
                *(asyncio.to_thread(blob.download_as_text) for blob in blobs)
            )
        except NotFound:
            return []
        except GoogleAPIError as e:
            logger.error(f"Failed to list {container}: {e}", extra={"container": container})
            raise UpstreamError(str(e)) from e
        return [json.loads(text) for text in contents]

    async def get_document(self, container: str, document_id: str) -> Optional[Document]:
        blob = self._get_bucket().blob(self._blob_name(container, document_id))
        try:
            text = await asyncio.to_thread(blob.download_as_text)
        except NotFound:
            return None
        except GoogleAPIError as e:
            logger.error(
                f"Failed to read {document_id} from {container}: {e}",
                extra={"container": container, "document_id": document_id},
            )
            raise UpstreamError(str(e)) from e
        return json.loads(text)

    async def upsert_document(self, container: str, document: Document) -> Document:
        prepared = prepare_document(document)
        blob = self._get_bucket().blob(self._blob_name(container, prepared["id"]))
        try:
            await asyncio.to_thread(
                blob.upload_from_string,
                json.dumps(prepared, ensure_ascii=False),
                content_type="application/json",
            )
        except GoogleAPIError as e:
            logger.error(
                f"Failed to upsert {prepared['id']} into {container}: {e}",
                extra={"container": container, "document_id": prepared["id"]},
            )
            raise UpstreamError(str(e)) from e
        return prepared

    def get_backend_name(self) -> str:
        return "gcs"
