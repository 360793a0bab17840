"""Task building, execution and command orchestration."""

from mediakit.pipeline.builder import (
    ExistsPolicy,
    TaskBuilder,
    compress_destination,
    index_tasks,
    organize_destination,
    rename_destination,
    thumbnail_destination,
    thumbnail_directory,
    transcode_destination,
)
from mediakit.pipeline.executor import BatchExecutor
from mediakit.pipeline.operations import OPERATIONS, encode_image, move, remove, transcode
from mediakit.pipeline.orchestrator import CommandOrchestrator

__all__ = [
    "ExistsPolicy",
    "TaskBuilder",
    "compress_destination",
    "index_tasks",
    "organize_destination",
    "rename_destination",
    "thumbnail_destination",
    "thumbnail_directory",
    "transcode_destination",
    "BatchExecutor",
    "OPERATIONS",
    "encode_image",
    "move",
    "remove",
    "transcode",
    "CommandOrchestrator",
]
