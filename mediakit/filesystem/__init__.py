"""Filesystem traversal and file operations."""

from mediakit.filesystem.file_ops import (
    directory_stats,
    discard,
    ensure_dir,
    ensure_unique_destination,
    holding_path,
    move_file,
    purge,
)
from mediakit.filesystem.walker import (
    PathWalker,
    WalkOptions,
    all_of,
    extension_filter,
    name_filter,
    natural_key,
    smart_path_key,
    walk,
)

__all__ = [
    "directory_stats",
    "discard",
    "ensure_dir",
    "ensure_unique_destination",
    "holding_path",
    "move_file",
    "purge",
    "PathWalker",
    "WalkOptions",
    "all_of",
    "extension_filter",
    "name_filter",
    "natural_key",
    "smart_path_key",
    "walk",
]
