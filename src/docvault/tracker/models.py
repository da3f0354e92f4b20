"""Upload task and batch state for the batch upload tracker."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Union

DEFAULT_FAILURE_MESSAGE = "Upload failed"
SUCCESS_MESSAGE = "Uploaded"


class UploadStatus(str, Enum):
    """Upload task status.

    Transitions only move forward: waiting -> uploading -> success | error.
    """

    WAITING = "waiting"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadStatus.SUCCESS, UploadStatus.ERROR)


_ALLOWED_TRANSITIONS = {
    UploadStatus.WAITING: {UploadStatus.UPLOADING},
    UploadStatus.UPLOADING: {UploadStatus.UPLOADING, UploadStatus.SUCCESS, UploadStatus.ERROR},
    UploadStatus.SUCCESS: set(),
    UploadStatus.ERROR: set(),
}


@dataclass(frozen=True)
class LocalFile:
    """A local file selected for upload, or the description of a stored one."""

    name: str
    size: int
    content_type: str = "application/octet-stream"
    content: bytes = field(default=b"", repr=False)

    @classmethod
    def from_bytes(cls, name: str, content: bytes, content_type: Optional[str] = None) -> "LocalFile":
        return cls(
            name=name,
            size=len(content),
            content_type=content_type or "application/octet-stream",
            content=content,
        )


@dataclass(frozen=True)
class UploadSucceeded:
    url: str


@dataclass(frozen=True)
class UploadFailed:
    reason: str


UploadOutcome = Union[UploadSucceeded, UploadFailed]


@dataclass(frozen=True)
class UploadTask:
    """One file's upload attempt and its tracked state.

    Tasks are immutable; every change produces a new task via the
    transition helpers so published snapshots never change under readers.
    """

    file: LocalFile
    status: UploadStatus = UploadStatus.WAITING
    progress_percent: int = 0
    result_url: Optional[str] = None
    message: Optional[str] = None
    metadata_tags: Dict[str, str] = field(default_factory=dict)
    last_modified: Optional[datetime] = None

    def _moved_to(self, status: UploadStatus, **changes) -> "UploadTask":
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise ValueError(f"Invalid upload transition {self.status.value} -> {status.value}")
        return replace(self, status=status, **changes)

    def started(self) -> "UploadTask":
        return self._moved_to(UploadStatus.UPLOADING)

    def with_progress(self, bytes_sent: int) -> "UploadTask":
        """Apply a byte-progress report; percent never decreases."""
        if self.status is not UploadStatus.UPLOADING:
            return self
        if self.file.size <= 0:
            return self
        percent = round(bytes_sent / self.file.size * 100)
        percent = max(self.progress_percent, min(100, max(0, percent)))
        if percent == self.progress_percent:
            return self
        return self._moved_to(UploadStatus.UPLOADING, progress_percent=percent)

    def finished(self, outcome: UploadOutcome) -> "UploadTask":
        if isinstance(outcome, UploadSucceeded):
            return self._moved_to(
                UploadStatus.SUCCESS,
                progress_percent=100,
                result_url=outcome.url,
                message=SUCCESS_MESSAGE,
            )
        return self._moved_to(
            UploadStatus.ERROR,
            message=outcome.reason or DEFAULT_FAILURE_MESSAGE,
        )


@dataclass(frozen=True)
class UploadBatch:
    """Immutable snapshot of the tasks submitted together."""

    batch_id: str = ""
    collection: str = ""
    tasks: tuple[UploadTask, ...] = ()

    @property
    def total_bytes(self) -> int:
        return sum(task.file.size for task in self.tasks)

    @property
    def transferred_bytes(self) -> int:
        return sum(
            round(task.file.size * task.progress_percent / 100) for task in self.tasks
        )

    @property
    def is_complete(self) -> bool:
        return all(task.status.is_terminal for task in self.tasks)

    @property
    def succeeded(self) -> list[UploadTask]:
        return [task for task in self.tasks if task.status is UploadStatus.SUCCESS]

    @property
    def failed(self) -> list[UploadTask]:
        return [task for task in self.tasks if task.status is UploadStatus.ERROR]
