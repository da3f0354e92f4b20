"""Upload data models."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from docvault.tracker.models import UploadBatch, UploadStatus, UploadTask


class UploadTaskResponse(BaseModel):
    """One file's upload state."""

    file_name: str
    size_bytes: int
    content_type: str
    status: UploadStatus
    progress_percent: int
    result_url: Optional[str] = None
    message: Optional[str] = None
    metadata_tags: Dict[str, str] = {}
    last_modified: Optional[datetime] = None

    @classmethod
    def from_task(cls, task: UploadTask) -> "UploadTaskResponse":
        return cls(
            file_name=task.file.name,
            size_bytes=task.file.size,
            content_type=task.file.content_type,
            status=task.status,
            progress_percent=task.progress_percent,
            result_url=task.result_url,
            message=task.message,
            metadata_tags=dict(task.metadata_tags),
            last_modified=task.last_modified,
        )


class UploadBatchResponse(BaseModel):
    """Terminal state of an uploaded batch."""

    batch_id: str
    collection: str
    total_bytes: int
    transferred_bytes: int
    is_complete: bool
    succeeded: int
    failed: int
    tasks: List[UploadTaskResponse]

    @classmethod
    def from_batch(cls, batch: UploadBatch) -> "UploadBatchResponse":
        return cls(
            batch_id=batch.batch_id,
            collection=batch.collection,
            total_bytes=batch.total_bytes,
            transferred_bytes=batch.transferred_bytes,
            is_complete=batch.is_complete,
            succeeded=len(batch.succeeded),
            failed=len(batch.failed),
            tasks=[UploadTaskResponse.from_task(task) for task in batch.tasks],
        )
