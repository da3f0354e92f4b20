"""Pytest configuration and shared fixtures."""

import asyncio
from datetime import datetime, timezone
from typing import Dict

import pytest

from docvault.core.exceptions import TransferError
from docvault.storage.base import ObjectStore, StoredObject, WriteResult
from docvault.tracker.guard import collection_guard


class FakeObjectStore(ObjectStore):
    """In-memory object store with hooks for failures and slow collection checks."""

    def __init__(self, progress_steps: int = 4, exists_delay: float = 0.0):
        self.progress_steps = progress_steps
        self.exists_delay = exists_delay
        self.collections: Dict[str, Dict[str, StoredObject]] = {}
        self.failures: Dict[str, BaseException] = {}
        self.delays: Dict[str, float] = {}
        self.exists_calls = 0
        self.create_calls = 0
        self.progress_reports: Dict[str, list[int]] = {}

    async def collection_exists(self, name: str) -> bool:
        self.exists_calls += 1
        if self.exists_delay:
            await asyncio.sleep(self.exists_delay)
        return name in self.collections

    async def create_collection(self, name: str) -> None:
        self.create_calls += 1
        self.collections.setdefault(name, {})

    async def list_objects(self, name: str) -> list[StoredObject]:
        return list(self.collections.get(name, {}).values())

    async def write_object(
        self,
        collection,
        key,
        payload,
        content_type,
        metadata_tags=None,
        on_progress=None,
    ) -> WriteResult:
        if collection not in self.collections:
            raise TransferError(f"Collection {collection} does not exist")

        reports = self.progress_reports.setdefault(key, [])
        step = max(1, len(payload) // self.progress_steps) if payload else 0
        sent = 0
        while step and sent < len(payload):
            await asyncio.sleep(self.delays.get(key, 0))
            sent = min(len(payload), sent + step)
            reports.append(sent)
            if on_progress:
                on_progress(sent)
            if key in self.failures and sent >= len(payload) // 2:
                raise self.failures[key]

        if key in self.failures:
            raise self.failures[key]

        url = f"{self.collection_url(collection)}/{key}"
        self.collections[collection][key] = StoredObject(
            key=key,
            size_bytes=len(payload),
            last_modified=datetime.now(timezone.utc),
            url=url,
            metadata_tags=dict(metadata_tags or {}),
        )
        return WriteResult(final_url=url)

    def collection_url(self, name: str) -> str:
        return f"memory://objects/{name}"

    def get_backend_name(self) -> str:
        return "fake"


@pytest.fixture
def fake_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture(autouse=True)
def reset_collection_guard():
    """The shared guard is process-wide; start every test from a clean memo."""
    collection_guard.reset()
    yield
    collection_guard.reset()


@pytest.fixture
def local_settings(monkeypatch, tmp_path):
    """Point local stores at a temporary directory and reset cached stores."""
    from docvault.core.config import settings
    from docvault.documents import factory as document_factory
    from docvault.storage import factory as object_factory

    monkeypatch.setattr(settings, "OBJECT_STORE_BACKEND", "local")
    monkeypatch.setattr(settings, "LOCAL_OBJECT_STORE_PATH", str(tmp_path / "objects"))
    monkeypatch.setattr(settings, "DOCUMENT_STORE_BACKEND", "memory")
    monkeypatch.setattr(settings, "LOCAL_DOCUMENT_STORE_PATH", str(tmp_path / "documents"))
    monkeypatch.setattr(settings, "MAX_UPLOAD_MB", 10)
    monkeypatch.setattr(settings, "ALLOWED_UPLOAD_MIME_TYPES", "")
    monkeypatch.setattr(settings, "UPLOAD_CHUNK_SIZE_KB", 4)
    monkeypatch.setattr(object_factory, "_stores", {})
    monkeypatch.setattr(document_factory, "_stores", {})
    return settings

