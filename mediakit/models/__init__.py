"""Data models for the mediakit package."""

from mediakit.models.entry import (
    FileEntry,
    LazyMetadata,
    MediaKind,
    MediaMetadata,
    UNKNOWN,
)
from mediakit.models.task import (
    BatchResult,
    Decision,
    Operation,
    TaskDescriptor,
    TaskStatus,
)

__all__ = [
    "FileEntry",
    "LazyMetadata",
    "MediaKind",
    "MediaMetadata",
    "UNKNOWN",
    "BatchResult",
    "Decision",
    "Operation",
    "TaskDescriptor",
    "TaskStatus",
]
