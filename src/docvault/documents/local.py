"""Local filesystem document store."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from docvault.core.config import settings
from docvault.core.exceptions import InvalidDocumentError, UpstreamError
from docvault.documents.base import Document, DocumentStore, prepare_document

logger = logging.getLogger(__name__)


class LocalDocumentStore(DocumentStore):
    """Keeps each document as ``<container>/<id>.json`` under a base directory."""

    def __init__(self, base_path: Optional[Path] = None):
        self.base_path = Path(base_path or settings.LOCAL_DOCUMENT_STORE_PATH)

    def _container_path(self, container: str) -> Path:
        directory = quote(container, safe="")
        if directory in ("", ".", ".."):
            raise InvalidDocumentError(f"Invalid container name: {container!r}")
        return self.base_path / directory

    def _document_path(self, container: str, document_id: str) -> Path:
        return self._container_path(container) / f"{quote(document_id, safe='')}.json"

    async def list_documents(self, container: str) -> list[Document]:
        container_path = self._container_path(container)
        if not container_path.is_dir():
            return []
        paths = sorted(container_path.glob("*.json"))
        return [await asyncio.to_thread(self._read, path) for path in paths]

    async def get_document(self, container: str, document_id: str) -> Optional[Document]:
        path = self._document_path(container, document_id)
        if not path.is_file():
            return None
        return await asyncio.to_thread(self._read, path)

    async def upsert_document(self, container: str, document: Document) -> Document:
        prepared = prepare_document(document)
        path = self._document_path(container, prepared["id"])
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(
                path.write_text, json.dumps(prepared, ensure_ascii=False, indent=2), "utf-8"
            )
        except (OSError, TypeError, ValueError) as e:
            raise UpstreamError(f"Failed to write document {prepared['id']}: {e}") from e

        logger.debug(
            f"Upserted document {prepared['id']}",
            extra={"container": container, "document_id": prepared["id"]},
        )
        return prepared

    def get_backend_name(self) -> str:
        return "local"

    @staticmethod
    def _read(path: Path) -> Document:
        try:
            return json.loads(path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            raise UpstreamError(f"Failed to read document {path.name}: {e}") from e
