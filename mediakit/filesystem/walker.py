"""Recursive filesystem walker producing indexed FileEntry lists."""

import os
import re
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Callable, List, Optional, Pattern, Set, Tuple

from loguru import logger

from mediakit.exceptions import InputError
from mediakit.models.entry import FileEntry

EntryFilter = Callable[[Path, Optional[os.stat_result]], bool]

_DIGITS = re.compile(r"(\d+)")


@dataclass
class WalkOptions:
    """
    Options controlling a walk.

    Attributes:
        with_files: Include regular files.
        with_dirs: Include directories (the root itself is never included).
        need_stats: Stat every entry; size and mtime stay zero otherwise.
        entry_filter: Predicate on (path, stat) deciding inclusion.
            It never prevents descending into a directory.
        with_index: Assign ordinal indices and the total count.
    """

    with_files: bool = True
    with_dirs: bool = False
    need_stats: bool = True
    entry_filter: Optional[EntryFilter] = None
    with_index: bool = True


def name_filter(include: str = "", exclude: str = "", use_regex: bool = True) -> EntryFilter:
    """
    Build an entry filter from include/exclude name patterns.

    Patterns are case-insensitive regular expressions, or plain
    substrings when ``use_regex`` is False.

    Raises:
        InputError: If a pattern is not a valid regular expression.
    """
    def compile_one(pattern: str) -> Optional[Pattern[str]]:
        if not pattern:
            return None
        source = pattern if use_regex else re.escape(pattern)
        try:
            return re.compile(source, re.IGNORECASE)
        except re.error as e:
            raise InputError(f"Invalid pattern '{pattern}': {e}") from e

    include_re = compile_one(include)
    exclude_re = compile_one(exclude)

    def accept(path: Path, st: Optional[os.stat_result]) -> bool:
        name = path.name
        if include_re is not None and not include_re.search(name):
            return False
        if exclude_re is not None and exclude_re.search(name):
            return False
        return True

    return accept


def extension_filter(extensions: AbstractSet[str]) -> EntryFilter:
    """Accept directories and files whose lowercase extension is listed."""
    def accept(path: Path, st: Optional[os.stat_result]) -> bool:
        if st is not None and stat.S_ISDIR(st.st_mode):
            return True
        return path.suffix.lower() in extensions

    return accept


def all_of(*filters: Optional[EntryFilter]) -> Optional[EntryFilter]:
    """Combine entry filters with AND, ignoring None."""
    active = [f for f in filters if f is not None]
    if not active:
        return None
    if len(active) == 1:
        return active[0]
    return lambda path, st: all(f(path, st) for f in active)


def natural_key(text: str) -> List[object]:
    """
    Sort key comparing digit runs numerically and text case-insensitively.

    Examples:
        >>> sorted(["img10", "img2"], key=natural_key)
        ['img2', 'img10']
    """
    return [
        (0, int(part), part) if part.isdigit() else (1, part.casefold(), part)
        for part in _DIGITS.split(text)
        if part
    ]


def smart_path_key(path: Path) -> Tuple[int, int, List[object]]:
    """Order by directory depth, then path length, then natural order."""
    text = str(path)
    return len(path.parts), len(text), natural_key(text)


@dataclass
class PathWalker:
    """
    Walks a directory tree without aborting on individual failures.

    Unreadable directories and entries are logged and collected in
    ``errors``; symbolic links that lead back into an already visited
    directory are skipped.
    """

    options: WalkOptions = field(default_factory=WalkOptions)
    errors: List[Tuple[Path, str]] = field(default_factory=list)

    def walk(self, root: Path) -> List[FileEntry]:
        root = Path(root).resolve()
        entries: List[FileEntry] = []
        visited: Set[Tuple[int, int]] = set()

        try:
            st = root.stat()
        except OSError as e:
            self._record(root, e)
            return entries
        visited.add((st.st_dev, st.st_ino))

        self._scan(root, entries, visited)

        entries.sort(key=lambda e: smart_path_key(e.path))
        if self.options.with_index:
            total = len(entries)
            for i, entry in enumerate(entries):
                entry.index = i
                entry.total = total

        logger.debug(
            f"Walked {root}: {len(entries)} entries, {len(self.errors)} errors"
        )
        return entries

    def _scan(self, directory: Path, entries: List[FileEntry], visited: Set[Tuple[int, int]]) -> None:
        try:
            with os.scandir(directory) as it:
                children = list(it)
        except OSError as e:
            self._record(directory, e)
            return

        for child in children:
            path = Path(child.path)
            try:
                is_dir = child.is_dir()
                is_file = not is_dir and child.is_file()
                st = child.stat() if (self.options.need_stats or is_dir) else None
            except OSError as e:
                self._record(path, e)
                continue

            if is_dir:
                key = (st.st_dev, st.st_ino)
                if key in visited:
                    logger.warning(f"Skipping symlink cycle: {path}")
                    continue
                visited.add(key)

            if self._include(path, is_dir, is_file, st):
                entries.append(self._make_entry(path, is_dir, st))

            if is_dir:
                self._scan(path, entries, visited)

    def _include(self, path: Path, is_dir: bool, is_file: bool, st: Optional[os.stat_result]) -> bool:
        if is_dir and not self.options.with_dirs:
            return False
        if is_file and not self.options.with_files:
            return False
        if not is_dir and not is_file:
            # sockets, fifos, broken links
            return False
        entry_filter = self.options.entry_filter
        if entry_filter is None:
            return True
        return entry_filter(path, st if self.options.need_stats else None)

    def _make_entry(self, path: Path, is_dir: bool, st: Optional[os.stat_result]) -> FileEntry:
        if not self.options.need_stats or st is None:
            return FileEntry(path=path, is_dir=is_dir)
        return FileEntry(
            path=path,
            is_dir=is_dir,
            size=0 if is_dir else st.st_size,
            mtime=st.st_mtime,
        )

    def _record(self, path: Path, error: OSError) -> None:
        logger.warning(f"Cannot read {path}: {error}")
        self.errors.append((path, str(error)))


def walk(root: Path, options: Optional[WalkOptions] = None) -> List[FileEntry]:
    """
    Recursively enumerate entries under root.

    Args:
        root: Directory to walk.
        options: Inclusion and annotation options.

    Returns:
        Entries in smart path order, indexed when requested.
    """
    return PathWalker(options=options or WalkOptions()).walk(root)
