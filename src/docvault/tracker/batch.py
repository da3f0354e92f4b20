"""Batch upload tracker.

Drives a set of file uploads into an object store collection, publishing
an immutable snapshot of the batch after every per-task change so
observers see live progress and never a half-updated task list.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional
from uuid import uuid4

from docvault.core.exceptions import CollectionError
from docvault.storage.base import ObjectStore
from docvault.tracker.guard import CollectionGuard, collection_guard
from docvault.tracker.models import (
    DEFAULT_FAILURE_MESSAGE,
    SUCCESS_MESSAGE,
    LocalFile,
    UploadBatch,
    UploadFailed,
    UploadOutcome,
    UploadStatus,
    UploadSucceeded,
    UploadTask,
)

logger = logging.getLogger(__name__)

BatchObserver = Callable[[UploadBatch], None]


def describe_failure(error: BaseException) -> str:
    """Human-readable reason for a failed transfer."""
    message = getattr(error, "message", None) or str(error)
    if not message:
        code = getattr(error, "code", None)
        message = str(code) if code is not None else ""
    return message or DEFAULT_FAILURE_MESSAGE


class BatchUploadTracker:
    """Uploads batches of files and tracks per-file and aggregate progress."""

    def __init__(self, store: ObjectStore, guard: Optional[CollectionGuard] = None):
        self.store = store
        self.guard = guard or collection_guard
        self._latest = UploadBatch()
        self._latest_id = ""
        self._live: Dict[str, UploadBatch] = {}
        self._observers: List[BatchObserver] = []

    @property
    def snapshot(self) -> UploadBatch:
        """The most recently submitted batch."""
        return self._latest

    @property
    def tasks(self) -> tuple[UploadTask, ...]:
        return self._latest.tasks

    @property
    def uploading(self) -> bool:
        """True while any submitted batch still has unfinished tasks."""
        return bool(self._live)

    def subscribe(self, observer: BatchObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: BatchObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    async def submit(
        self,
        collection: str,
        files: Iterable[LocalFile],
        tags: Optional[Dict[str, str]] = None,
    ) -> UploadBatch:
        """Upload ``files`` into ``collection`` concurrently.

        Every file's outcome is independent: a failed transfer marks only
        its own task as errored. Returns once every task is terminal.
        Empty ``collection`` or ``files`` is a no-op.
        """
        files = list(files)
        if not collection or not files:
            return self._latest

        metadata_tags = dict(tags or {})
        batch = UploadBatch(
            batch_id=uuid4().hex,
            collection=collection,
            tasks=tuple(UploadTask(file=f, metadata_tags=metadata_tags) for f in files),
        )
        self._live[batch.batch_id] = batch
        self._latest_id = batch.batch_id
        self._publish(batch)

        logger.info(
            f"Submitting {len(files)} file(s) to {collection}",
            extra={
                "batch_id": batch.batch_id,
                "collection": collection,
                "total_bytes": batch.total_bytes,
            },
        )

        try:
            try:
                await self.guard.ensure(self.store, collection)
            except CollectionError as e:
                logger.error(
                    f"Collection {collection} unavailable: {e}",
                    extra={"batch_id": batch.batch_id, "collection": collection},
                )
                outcome = UploadFailed(describe_failure(e))
                for index in range(len(files)):
                    self._update(batch.batch_id, index, lambda t: t.started().finished(outcome))
            else:
                await asyncio.gather(
                    *(
                        self._transfer(batch.batch_id, index, collection, f, metadata_tags)
                        for index, f in enumerate(files)
                    )
                )
        finally:
            final = self._live.pop(batch.batch_id)

        logger.info(
            f"Batch finished: {len(final.succeeded)} uploaded, {len(final.failed)} failed",
            extra={
                "batch_id": final.batch_id,
                "collection": collection,
                "succeeded": len(final.succeeded),
                "failed": len(final.failed),
            },
        )
        return final

    async def list_existing(self, collection: str) -> list[UploadTask]:
        """Objects already stored in ``collection`` as finished tasks.

        A collection that does not exist lists as empty.
        """
        if not collection:
            return []
        objects = await self.store.list_objects(collection)
        return [
            UploadTask(
                file=LocalFile(name=obj.key, size=obj.size_bytes),
                status=UploadStatus.SUCCESS,
                progress_percent=100,
                result_url=obj.url,
                message=SUCCESS_MESSAGE,
                metadata_tags=dict(obj.metadata_tags),
                last_modified=obj.last_modified,
            )
            for obj in objects
        ]

    async def _transfer(
        self,
        batch_id: str,
        index: int,
        collection: str,
        file: LocalFile,
        metadata_tags: Dict[str, str],
    ) -> None:
        self._update(batch_id, index, UploadTask.started)

        def on_progress(bytes_sent: int) -> None:
            self._update(batch_id, index, lambda t: t.with_progress(bytes_sent))

        outcome: UploadOutcome
        try:
            result = await self.store.write_object(
                collection,
                file.name,
                file.content,
                file.content_type,
                metadata_tags or None,
                on_progress,
            )
            outcome = UploadSucceeded(result.final_url)
        except Exception as e:
            logger.error(
                f"Upload of {file.name} failed: {e}",
                extra={"batch_id": batch_id, "collection": collection, "file_name": file.name},
                exc_info=True,
            )
            outcome = UploadFailed(describe_failure(e))

        self._update(batch_id, index, lambda t: t.finished(outcome))

    def _update(self, batch_id: str, index: int, change: Callable[[UploadTask], UploadTask]) -> None:
        batch = self._live.get(batch_id)
        if batch is None:
            return
        current = batch.tasks[index]
        updated = change(current)
        if updated is current:
            return
        tasks = list(batch.tasks)
        tasks[index] = updated
        batch = replace(batch, tasks=tuple(tasks))
        self._live[batch_id] = batch
        self._publish(batch)

    def _publish(self, batch: UploadBatch) -> None:
        if batch.batch_id == self._latest_id:
            self._latest = batch
        for observer in list(self._observers):
            try:
                observer(batch)
            except Exception:
                logger.exception("Batch observer failed", extra={"batch_id": batch.batch_id})
