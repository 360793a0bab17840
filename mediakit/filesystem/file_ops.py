"""File operations for moving, removing and measuring files."""

import os
import shutil
from pathlib import Path
from typing import AbstractSet, Optional, Tuple

from loguru import logger


def ensure_dir(directory: Path) -> Path:
    """Create a directory (and parents) if missing; idempotent."""
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def ensure_unique_destination(
    destination: Path,
    claimed: AbstractSet[Path] = frozenset(),
    owner: Optional[Path] = None,
) -> Path:
    """
    Ensure destination path is unique by adding counter suffix.

    Args:
        destination: Desired destination path.
        claimed: Paths already reserved by other tasks of the same batch.
        owner: Path of the file being placed; it never counts as taken,
            so a file already carrying a suffixed name keeps it.

    Returns:
        Unique path (original if free, or ``<stem>_<n><ext>``).
    """
    def taken(path: Path) -> bool:
        return path in claimed or (path != owner and path.exists())

    if not taken(destination):
        return destination

    counter = 1
    base_name = destination.stem
    extension = destination.suffix

    while taken(destination):
        destination = destination.parent / f"{base_name}_{counter}{extension}"
        counter += 1

    return destination


def move_file(source: Path, destination: Path) -> bool:
    """
    Move a file to a destination resolved beforehand.

    An existing destination is never overwritten nor renamed here, the
    move is skipped.

    Args:
        source: Source file path.
        destination: Destination file path.

    Returns:
        True if the file was moved, False if skipped.

    Raises:
        OSError: If the move itself fails.
    """
    if not source.exists():
        logger.warning(f"Source file not found: {source}")
        return False

    if destination.exists():
        logger.warning(f"Destination exists, skipping: {destination}")
        return False

    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(destination))
    logger.debug(f"File moved: {source} -> {destination}")
    return True


def holding_path(path: Path, holding_dir: Path, root: Optional[Path] = None) -> Path:
    """
    Where a safe-deleted item is relocated.

    The layout below ``holding_dir`` mirrors the walked root so a removal
    can be undone by moving the tree back.
    """
    if root is not None:
        try:
            relative = path.relative_to(root)
            return holding_dir / root.name / relative
        except ValueError:
            pass
    return holding_dir / path.name


def purge(path: Path) -> None:
    """Delete a file or directory permanently."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def discard(path: Path) -> None:
    """Remove a produced artifact if present, logging instead of raising."""
    try:
        if path.exists():
            path.unlink()
    except OSError as e:
        logger.warning(f"Cannot remove {path}: {e}")


def directory_stats(directory: Path) -> Tuple[int, int]:
    """
    Compute recursive content size and file count of a directory.

    Unreadable sub-entries are skipped.

    Returns:
        Tuple (total_bytes, file_count).
    """
    total = 0
    count = 0
    for dirpath, _dirnames, filenames in os.walk(directory, onerror=lambda e: logger.debug(f"Skipped: {e}")):
        for name in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, name)).st_size
                count += 1
            except OSError as e:
                logger.debug(f"Cannot stat {name} in {dirpath}: {e}")
    return total, count
