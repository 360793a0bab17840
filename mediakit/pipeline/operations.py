"""Per-task operations run by the batch executor.

Every operation takes a TaskDescriptor and returns the final status with
a short message. Failures raise OSError or a MediaKitError; the executor
isolates them per task.
"""

from pathlib import Path
from typing import Callable, Dict, Tuple

from loguru import logger
from PIL import Image

from mediakit.config.settings import (
    MIN_IMAGE_OUTPUT_SIZE,
    MIN_TRANSCODE_OUTPUT_SIZE,
)
from mediakit.exceptions import TaskExecutionError
from mediakit.filesystem.file_ops import discard, ensure_dir, move_file, purge
from mediakit.models.task import Operation, TaskDescriptor, TaskStatus
from mediakit.processing.imaging import resize_to_jpeg
from mediakit.processing.transcode import build_command, run_ffmpeg, stale_temporaries, temp_output
from mediakit.utils.formatting import human_size

OperationResult = Tuple[TaskStatus, str]
OperationFn = Callable[[TaskDescriptor], OperationResult]


def _output_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError:
        return 0


def remove(task: TaskDescriptor) -> OperationResult:
    """Purge the source, or move it to its holding destination."""
    if task.destination is None:
        purge(task.source)
        return TaskStatus.SUCCESS, "purged"
    if not move_file(task.source, task.destination):
        return TaskStatus.SKIPPED, f"not moved to {task.destination}"
    return TaskStatus.SUCCESS, f"moved to {task.destination}"


def encode_image(task: TaskDescriptor) -> OperationResult:
    """
    Resize and re-encode an image as JPEG (compress and thumbnail).

    An output below the plausible minimum size is deleted and the task
    fails.
    """
    source, destination = task.source, task.destination
    params = task.params
    ensure_dir(destination.parent)
    try:
        width, height = resize_to_jpeg(
            source,
            destination,
            max_side=params["max_side"],
            quality=params["quality"],
        )
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        discard(destination)
        raise TaskExecutionError(f"Cannot encode {source.name}: {e}") from e

    size = _output_size(destination)
    min_size = params.get("min_output_size", MIN_IMAGE_OUTPUT_SIZE)
    if size < min_size:
        discard(destination)
        raise TaskExecutionError(f"Output too small ({human_size(size)}), removed: {destination.name}")

    return TaskStatus.SUCCESS, f"{width}x{height} {human_size(size)}"


def move(task: TaskDescriptor) -> OperationResult:
    """Rename or move a file to its resolved destination."""
    if not move_file(task.source, task.destination):
        return TaskStatus.SKIPPED, "destination exists"
    return TaskStatus.SUCCESS, task.destination.name


def transcode(task: TaskDescriptor) -> OperationResult:
    """
    Transcode a file with ffmpeg through a temporary output.

    Stale temporaries of earlier runs are removed first. The temporary
    file replaces the destination only when it exceeds the plausible
    minimum size; it is deleted in every other case.
    """
    destination = task.destination
    preset = task.params["preset"]
    ffmpeg = task.params["ffmpeg"]

    for stale in stale_temporaries(destination):
        logger.info(f"Removing stale temporary: {stale}")
        discard(stale)

    ensure_dir(destination.parent)
    temp = temp_output(destination)
    try:
        run_ffmpeg(build_command(ffmpeg, task.source, temp, preset))
        size = _output_size(temp)
        if size <= MIN_TRANSCODE_OUTPUT_SIZE:
            raise TaskExecutionError(f"Output too small ({human_size(size)}): {destination.name}")
        if destination.exists():
            return TaskStatus.SKIPPED, "destination exists"
        temp.replace(destination)
    finally:
        discard(temp)

    return TaskStatus.SUCCESS, f"{destination.name} {human_size(size)}"


OPERATIONS: Dict[Operation, OperationFn] = {
    Operation.REMOVE: remove,
    Operation.COMPRESS: encode_image,
    Operation.THUMBNAIL: encode_image,
    Operation.RENAME: move,
    Operation.MOVE: move,
    Operation.TRANSCODE: transcode,
}
