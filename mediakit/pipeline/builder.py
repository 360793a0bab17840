"""Task building: destination naming and collision resolution."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from loguru import logger

from mediakit.config.presets import TranscodePreset
from mediakit.config.settings import (
    COMPRESS_SUFFIX,
    ORGANIZE_SMALL_JPEG_SIZE,
    THUMB_SUFFIX,
)
from mediakit.filesystem.file_ops import ensure_unique_destination
from mediakit.metadata.dates import format_date
from mediakit.models.entry import FileEntry, MediaKind
from mediakit.models.task import Decision, Operation, TaskDescriptor
from mediakit.processing.transcode import output_stem
from mediakit.utils.audit import audit

_THUMB_DIR_PATTERN = re.compile(r"JPEG|Photos", re.IGNORECASE)


class ExistsPolicy(Enum):
    """What to do when a destination is already taken."""

    SKIP = auto()
    OVERWRITE = auto()
    # same size: skip as duplicate, different size: numeric suffix
    DISAMBIGUATE = auto()
    # always numeric suffix
    UNIQUE = auto()


@dataclass
class TaskBuilder:
    """
    Turns selected entries into task descriptors.

    Destinations claimed by earlier tasks of the same batch count as
    taken, so two sources never race for one destination at execution
    time. The builder only checks existence, it never writes.

    Attributes:
        operation: Operation of every task built.
        policy: Collision policy.
        claimed: Destinations reserved so far.
        skipped: Entries not turned into tasks, with the reason.
    """

    operation: Operation
    policy: ExistsPolicy = ExistsPolicy.SKIP
    claimed: Set[Path] = field(default_factory=set)
    skipped: List[Tuple[FileEntry, str]] = field(default_factory=list)

    def build(
        self,
        entry: FileEntry,
        decision: Optional[Decision] = None,
        destination: Optional[Path] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Optional[TaskDescriptor]:
        """
        Build the task for one entry, or None if it is skipped.

        Args:
            entry: Source entry.
            decision: Selection decision; an unselected entry yields None.
            destination: Intended destination, None for permanent removal.
            params: Operation parameters.

        Returns:
            TaskDescriptor, or None when skipped.
        """
        if decision is not None and not decision.selected:
            return None

        if destination is not None:
            if destination == entry.path:
                self.skip(entry, "would overwrite self")
                return None
            destination = self._resolve(entry, destination)
            if destination is None:
                return None
            self.claimed.add(destination)

        return TaskDescriptor(
            operation=self.operation,
            source=entry.path,
            destination=destination,
            params=dict(params or {}),
            entry=entry,
        )

    def skip(self, entry: FileEntry, reason: str) -> None:
        """Record an entry left out of the batch."""
        logger.warning(f"[{entry.progress}] Skipped ({reason}): {entry.path}")
        audit("SKIP", f"{entry.path} ({reason})")
        self.skipped.append((entry, reason))

    def _resolve(self, entry: FileEntry, destination: Path) -> Optional[Path]:
        taken = destination in self.claimed
        exists = destination.exists()
        if not taken and not exists:
            return destination

        if self.policy is ExistsPolicy.SKIP:
            self.skip(entry, f"destination exists: {destination.name}")
            return None

        if self.policy is ExistsPolicy.OVERWRITE:
            if taken:
                self.skip(entry, f"destination claimed by another task: {destination.name}")
                return None
            return destination

        if self.policy is ExistsPolicy.DISAMBIGUATE and exists and not taken:
            try:
                same_size = destination.stat().st_size == entry.size
            except OSError:
                same_size = False
            if same_size:
                self.skip(entry, f"identical destination exists: {destination.name}")
                return None

        unique = ensure_unique_destination(destination, self.claimed, owner=entry.path)
        if unique == entry.path:
            self.skip(entry, "already named")
            return None
        logger.debug(f"Destination taken, using {unique.name} for {entry.name}")
        return unique


def index_tasks(tasks: Sequence[TaskDescriptor]) -> None:
    """Assign ordinal indices once, before preview and dispatch."""
    total = len(tasks)
    for i, task in enumerate(tasks):
        task.index = i
        task.total = total


def compress_destination(path: Path) -> Path:
    """``<stem>_Z4K.jpg`` next to the source."""
    return path.with_name(f"{path.stem}{COMPRESS_SUFFIX}.jpg")


def _mirror(path: Path, root: Path, output: Path) -> Path:
    try:
        return output / path.parent.relative_to(root)
    except ValueError:
        return output


def thumbnail_directory(directory: Path) -> Path:
    """
    Thumbnail folder for a photo folder.

    The first ``JPEG`` or ``Photos`` in the path becomes ``Thumbs``;
    otherwise a ``<dir>_thumbs`` sibling is used.
    """
    text = str(directory)
    replaced = _THUMB_DIR_PATTERN.sub("Thumbs", text, count=1)
    if replaced == text:
        return directory.with_name(f"{directory.name}_thumbs")
    return Path(replaced)


def thumbnail_destination(path: Path, root: Optional[Path] = None, output: Optional[Path] = None) -> Path:
    """
    Destination of a thumbnail.

    Args:
        path: Source image.
        root: Walked root, used to mirror the tree below ``output``.
        output: Output root; when None the folder is derived from the source.

    Returns:
        ``<dir>/<stem>_thumb.jpg``.
    """
    if output is not None and root is not None:
        directory = _mirror(path, root, output)
    else:
        directory = thumbnail_directory(path.parent)
    directory = Path(str(directory).replace("相机照片", "相机小图"))
    return directory / f"{path.stem}{THUMB_SUFFIX}.jpg"


def rename_destination(
    entry: FileEntry,
    kind: MediaKind,
    date: datetime,
    template: str,
    prefixes: Dict[MediaKind, str],
    suffix: str = "",
) -> Path:
    """``<prefix><date><suffix><ext>`` in the source directory."""
    prefix = prefixes.get(kind, prefixes.get(MediaKind.IMAGE, ""))
    return entry.parent / f"{prefix}{format_date(date, template)}{suffix}{entry.extension}"


def organize_destination(entry: FileEntry, kind: MediaKind, output: Path) -> Path:
    """
    Sorting folder for a media file.

    PNG/GIF and small JPEGs go to ``pngs``, videos to ``vids/<YYYYMM>``,
    everything else to ``<YYYYMM>`` by modification time.
    """
    ext = entry.extension
    if ext in (".png", ".gif") or (ext in (".jpg", ".jpeg") and entry.size < ORGANIZE_SMALL_JPEG_SIZE):
        return output / "pngs" / entry.name
    month = entry.modified.strftime("%Y%m")
    if kind is MediaKind.VIDEO:
        return output / "vids" / month / entry.name
    return output / month / entry.name


def transcode_destination(
    path: Path,
    preset: TranscodePreset,
    root: Optional[Path] = None,
    output: Optional[Path] = None,
) -> Path:
    """Transcoded file in the mirrored output tree, or next to the source."""
    if output is not None and root is not None:
        directory = _mirror(path, root, output)
    else:
        directory = path.parent
    return directory / f"{output_stem(path, preset)}{preset.format}"
