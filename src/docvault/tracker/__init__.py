"""Batch upload tracker.

Uploads a set of local files into an object store collection, tracking
each file through waiting, uploading and a terminal success or error.
"""

from docvault.tracker.batch import BatchUploadTracker, describe_failure
from docvault.tracker.guard import CollectionGuard, collection_guard
from docvault.tracker.models import (
    LocalFile,
    UploadBatch,
    UploadFailed,
    UploadOutcome,
    UploadStatus,
    UploadSucceeded,
    UploadTask,
)

__all__ = [
    "BatchUploadTracker",
    "CollectionGuard",
    "LocalFile",
    "UploadBatch",
    "UploadFailed",
    "UploadOutcome",
    "UploadStatus",
    "UploadSucceeded",
    "UploadTask",
    "collection_guard",
    "describe_failure",
]
