"""Orchestration of the media commands.

Every command follows the same pipeline: walk the root, prepare the
entries concurrently (metadata, rule evaluation), build the frozen task
list sequentially in walk order, then hand it to the batch executor.
"""

import dataclasses
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple, TypeVar

from loguru import logger

from mediakit.config.cli import (
    CommandOptions,
    CompressOptions,
    OrganizeOptions,
    RemoveOptions,
    RenameOptions,
    ThumbsOptions,
    TranscodeOptions,
)
from mediakit.config.context import get_context
from mediakit.config.presets import specialize_preset
from mediakit.config.settings import (
    COMPRESS_EXCLUDE,
    COMPRESS_PREPARE_CONCURRENCY_FACTOR,
    EXT_AUDIO,
    EXT_IMAGE,
    EXT_RAW,
    EXT_VIDEO,
    HEAVY_CONCURRENCY_FACTOR,
    PREPARE_CONCURRENCY_FACTOR,
    RENAME_MIN_SIZE,
    THUMB_EXCLUDE,
    TRANSCODE_EXCLUDE,
)
from mediakit.exceptions import InputError
from mediakit.filesystem.file_ops import directory_stats, holding_path
from mediakit.filesystem.walker import PathWalker, WalkOptions, all_of, extension_filter, name_filter
from mediakit.metadata.dates import resolve_date
from mediakit.metadata.extractor import extract
from mediakit.metadata.kinds import is_lossless_audio, kind_of
from mediakit.models.entry import FileEntry, MediaKind, MediaMetadata
from mediakit.models.task import BatchResult, Decision, Operation, TaskDescriptor
from mediakit.pipeline.builder import (
    ExistsPolicy,
    TaskBuilder,
    compress_destination,
    organize_destination,
    rename_destination,
    thumbnail_destination,
    transcode_destination,
)
from mediakit.pipeline.executor import BatchExecutor
from mediakit.processing.transcode import audio_bitrate_for, find_ffmpeg
from mediakit.rules.evaluator import evaluate
from mediakit.ui.confirmations import ConfirmFn, ask_confirmation
from mediakit.ui.console import console
from mediakit.ui.display import display_summary, display_tree
from mediakit.utils.audit import audit
from mediakit.utils.concurrency import run_bounded, worker_count
from mediakit.utils.formatting import human_size

T = TypeVar("T")

MEDIA_EXTENSIONS = EXT_IMAGE | EXT_RAW | EXT_VIDEO


class CommandOrchestrator:
    """
    Runs the media commands end to end.

    Separates the pipeline from CLI concerns so commands can be driven
    from tests with an injected confirmation prompt.
    """

    def __init__(self, confirm_fn: ConfirmFn = ask_confirmation, cpus: Optional[int] = None):
        """
        Initialize the orchestrator.

        Args:
            confirm_fn: Yes/no prompt used before any mutation.
            cpus: CPU count override for worker pool sizing.
        """
        self.confirm_fn = confirm_fn
        self.cpus = cpus

    def run(self, options: CommandOptions) -> BatchResult:
        """Dispatch to the command selected by the options type."""
        handlers: Dict[type, Callable[..., BatchResult]] = {
            RemoveOptions: self.run_remove,
            CompressOptions: self.run_compress,
            ThumbsOptions: self.run_thumbs,
            RenameOptions: self.run_rename,
            TranscodeOptions: self.run_transcode,
            OrganizeOptions: self.run_organize,
        }
        handler = handlers.get(type(options))
        if handler is None:
            raise InputError(f"Unsupported command options: {type(options).__name__}")
        return handler(options)

    def run_remove(self, options: RemoveOptions) -> BatchResult:
        """Select files or directories by conditions and remove them."""
        root = self._check_root(options.root, "remove")
        conditions = options.conditions
        audit("CONDITIONS", conditions.describe())

        entries = self._walk(root, options, with_files=options.with_files, with_dirs=options.with_dirs)

        def prepare(entry: FileEntry) -> Decision:
            decision = evaluate(entry, None, conditions)
            if decision.selected and entry.is_dir:
                entry.size, entry.item_count = directory_stats(entry.path)
                decision = dataclasses.replace(decision, size=entry.size)
            return decision

        decisions = self._prepare(entries, prepare, PREPARE_CONCURRENCY_FACTOR, "Evaluating")
        selected = _outermost([e for e, d in zip(entries, decisions) if d.selected])
        rationale = {e.path: d.rationale for e, d in zip(entries, decisions)}

        ctx = get_context()
        holding_dir = None if ctx.purge else self._holding_dir(root)
        builder = TaskBuilder(Operation.REMOVE, ExistsPolicy.UNIQUE)
        tasks: List[TaskDescriptor] = []
        for entry in selected:
            logger.info(f"[{entry.progress}] Add {entry.path} ({human_size(entry.size)}) [{rationale[entry.path]}]")
            audit("ADD", f"{entry.path} {human_size(entry.size)} [{rationale[entry.path]}]")
            destination = None if holding_dir is None else holding_path(entry.path, holding_dir, root)
            task = builder.build(entry, destination=destination)
            if task is not None:
                tasks.append(task)

        title = "Remove (purge)" if holding_dir is None else "Remove"
        return self._execute(tasks, Operation.REMOVE, title, options, PREPARE_CONCURRENCY_FACTOR,
                             conditions.describe())

    def run_compress(self, options: CompressOptions) -> BatchResult:
        """Re-encode large images as ``<stem>_Z4K.jpg``."""
        root = self._check_root(options.root, "compress")
        entries = self._walk(root, options, default_extensions=EXT_IMAGE)
        min_bytes = options.min_size_kb * 1024
        candidates = [
            e for e in entries
            if e.size > min_bytes and not COMPRESS_EXCLUDE.search(str(e.path.relative_to(root)))
        ]
        logger.info(f"{len(candidates)} image(s) larger than {options.min_size_kb}KB")

        metadata = self._prepare(
            candidates,
            lambda e: extract(e.path, MediaKind.IMAGE),
            COMPRESS_PREPARE_CONCURRENCY_FACTOR,
            "Measuring",
        )

        policy = ExistsPolicy.OVERWRITE if options.override else ExistsPolicy.SKIP
        builder = TaskBuilder(Operation.COMPRESS, policy)
        params = {"max_side": options.max_width, "quality": options.quality}
        tasks = []
        for entry, meta in zip(candidates, metadata):
            if not meta.has_dimensions:
                builder.skip(entry, "unreadable image")
                continue
            task = builder.build(entry, destination=compress_destination(entry.path), params=params)
            if task is not None:
                tasks.append(task)

        result = self._execute(tasks, Operation.COMPRESS, "Compress", options, HEAVY_CONCURRENCY_FACTOR,
                               f"size>{options.min_size_kb}KB width<={options.max_width} q={options.quality}")

        if options.purge_originals and not result.aborted:
            self._purge_compressed(root, candidates, options)
        return result

    def run_thumbs(self, options: ThumbsOptions) -> BatchResult:
        """Create ``_thumb.jpg`` copies of large images."""
        root = self._check_root(options.root, "thumbs")
        output = options.output.resolve() if options.output is not None else None
        entries = self._walk(root, options, default_extensions=EXT_IMAGE)
        min_bytes = options.min_size_kb * 1024
        candidates = [
            e for e in entries
            if e.size > min_bytes and not THUMB_EXCLUDE.search(str(e.path.relative_to(root)))
        ]

        metadata = self._prepare(
            candidates,
            lambda e: extract(e.path, MediaKind.IMAGE),
            PREPARE_CONCURRENCY_FACTOR,
            "Measuring",
        )

        policy = ExistsPolicy.OVERWRITE if options.force else ExistsPolicy.SKIP
        builder = TaskBuilder(Operation.THUMBNAIL, policy)
        params = {"max_side": options.max_size, "quality": options.quality}
        tasks = []
        for entry, meta in zip(candidates, metadata):
            if not meta.has_dimensions:
                builder.skip(entry, "unreadable image")
                continue
            if meta.width <= options.max_size and meta.height <= options.max_size:
                builder.skip(entry, f"small image {meta.width}x{meta.height}")
                continue
            destination = thumbnail_destination(entry.path, root, output)
            task = builder.build(entry, destination=destination, params=params)
            if task is not None:
                tasks.append(task)

        return self._execute(tasks, Operation.THUMBNAIL, "Thumbs", options, HEAVY_CONCURRENCY_FACTOR,
                             f"size>{options.min_size_kb}KB max={options.max_size} q={options.quality}")

    def run_rename(self, options: RenameOptions) -> BatchResult:
        """Rename media files after their capture date."""
        root = self._check_root(options.root, "rename")
        entries = self._walk(root, options, default_extensions=MEDIA_EXTENSIONS)
        builder = TaskBuilder(Operation.RENAME, ExistsPolicy.DISAMBIGUATE)

        candidates = []
        for entry in entries:
            if entry.size < RENAME_MIN_SIZE:
                builder.skip(entry, "skipped by size")
            else:
                candidates.append(entry)

        def prepare(entry: FileEntry) -> Tuple[MediaKind, Optional[datetime]]:
            kind = kind_of(entry.path)
            if options.fast:
                return kind, resolve_date(entry, MediaMetadata(), fast=True)
            return kind, resolve_date(entry, extract(entry.path, kind, with_date=True))

        dates = self._prepare(candidates, prepare, PREPARE_CONCURRENCY_FACTOR, "Reading dates")

        prefixes = options.prefixes
        tasks = []
        for entry, (kind, date) in zip(candidates, dates):
            if date is None:
                builder.skip(entry, "skipped by date")
                continue
            destination = rename_destination(entry, kind, date, options.template, prefixes, options.suffix)
            task = builder.build(entry, destination=destination)
            if task is not None:
                tasks.append(task)

        return self._execute(tasks, Operation.RENAME, "Rename", options, PREPARE_CONCURRENCY_FACTOR,
                             f"template={options.template}{' fast' if options.fast else ''}")

    def run_transcode(self, options: TranscodeOptions) -> BatchResult:
        """Transcode video (or audio) files with an ffmpeg preset."""
        root = self._check_root(options.root, "transcode")
        ffmpeg = find_ffmpeg()
        preset = options.preset
        output = options.output.resolve() if options.output is not None else None

        default_extensions = EXT_AUDIO if options.audio_mode else EXT_VIDEO
        entries = self._walk(root, options, default_extensions=default_extensions)
        candidates = [e for e in entries if not TRANSCODE_EXCLUDE.search(e.name)]
        logger.info(f"{len(candidates)} file(s) left after excluding shana|tmp names")

        def prepare(entry: FileEntry):
            if not options.auto_audio_bitrate:
                return preset
            meta = extract(entry.path, MediaKind.AUDIO)
            lossless = bool(meta.lossless) or is_lossless_audio(entry.path)
            bitrate = audio_bitrate_for(meta.bit_rate, lossless)
            return specialize_preset(preset, audio_bitrate=bitrate)

        presets = self._prepare(candidates, prepare, PREPARE_CONCURRENCY_FACTOR, "Probing")

        builder = TaskBuilder(Operation.TRANSCODE, ExistsPolicy.SKIP)
        tasks = []
        for entry, file_preset in zip(candidates, presets):
            destination = transcode_destination(entry.path, file_preset, root, output)
            beside = entry.parent / destination.name
            if beside != destination and beside.exists():
                builder.skip(entry, f"destination exists: {beside}")
                continue
            task = builder.build(entry, destination=destination, params={"preset": file_preset, "ffmpeg": ffmpeg})
            if task is not None:
                tasks.append(task)

        mode = "audio" if options.audio_mode else "video"
        return self._execute(tasks, Operation.TRANSCODE, "Transcode", options, HEAVY_CONCURRENCY_FACTOR,
                             f"preset={preset.name} mode={mode}")

    def run_organize(self, options: OrganizeOptions) -> BatchResult:
        """Move media into monthly folders."""
        root = self._check_root(options.root, "organize")
        output = options.output.resolve() if options.output is not None else root
        entries = self._walk(root, options, default_extensions=MEDIA_EXTENSIONS)

        builder = TaskBuilder(Operation.MOVE, ExistsPolicy.SKIP)
        tasks = []
        groups: Dict[str, List[str]] = defaultdict(list)
        for entry in entries:
            destination = organize_destination(entry, kind_of(entry.path), output)
            task = builder.build(entry, destination=destination)
            if task is not None:
                tasks.append(task)
                groups[str(destination.parent.relative_to(output))].append(entry.name)

        if groups:
            display_tree(groups)
        return self._execute(tasks, Operation.MOVE, "Organize", options, PREPARE_CONCURRENCY_FACTOR,
                             f"output={output}")

    def _check_root(self, root: Path, command: str) -> Path:
        root = Path(root).expanduser()
        if not root.is_dir():
            raise InputError(f"Invalid input: '{root}' is not a directory")
        root = root.resolve()
        mode = get_context().mode
        logger.info(f"{command}: input {root} ({mode})")
        audit("INPUT", f"{command} {root} {mode}")
        return root

    def _holding_dir(self, root: Path) -> Path:
        return get_context().holding_dir_for(root)

    def _walk(
        self,
        root: Path,
        options: CommandOptions,
        with_files: bool = True,
        with_dirs: bool = False,
        default_extensions: Optional[Set[str]] = None,
    ) -> List[FileEntry]:
        extensions = options.extensions or default_extensions
        names = name_filter(options.include, options.exclude, options.use_regex) \
            if (options.include or options.exclude) else None
        walker = PathWalker(WalkOptions(
            with_files=with_files,
            with_dirs=with_dirs,
            entry_filter=all_of(names, extension_filter(extensions) if extensions else None),
        ))
        entries = walker.walk(root)
        if walker.errors:
            console.print_warning(f"{len(walker.errors)} unreadable path(s) skipped")
        logger.info(f"Found {len(entries)} entries under {root}")
        return entries

    def _workers(self, options: CommandOptions, factor: float) -> int:
        return options.jobs if options.jobs > 0 else worker_count(factor, self.cpus)

    def _prepare(
        self,
        entries: Sequence[FileEntry],
        func: Callable[[FileEntry], T],
        factor: float,
        desc: str,
    ) -> List[T]:
        workers = worker_count(factor, self.cpus)
        return run_bounded(func, entries, workers, desc=desc)

    def _execute(
        self,
        tasks: List[TaskDescriptor],
        operation: Operation,
        title: str,
        options: CommandOptions,
        factor: float,
        conditions: str = "",
    ) -> BatchResult:
        executor = BatchExecutor(title, conditions, confirm_fn=self.confirm_fn)
        result = executor.execute(tasks, operation, self._workers(options, factor))
        if result.total:
            display_summary(result, title)
        return result

    def _purge_compressed(self, root: Path, candidates: Sequence[FileEntry], options: CompressOptions) -> BatchResult:
        """Move aside originals whose compressed copy exists."""
        holding_dir = self._holding_dir(root)
        builder = TaskBuilder(Operation.REMOVE, ExistsPolicy.UNIQUE)
        tasks = []
        for entry in candidates:
            if not entry.path.exists() or not compress_destination(entry.path).exists():
                continue
            task = builder.build(entry, destination=holding_path(entry.path, holding_dir, root))
            if task is not None:
                tasks.append(task)
        return self._execute(tasks, Operation.REMOVE, "Compress purge", options, PREPARE_CONCURRENCY_FACTOR,
                             "originals with a compressed copy")


def _outermost(entries: Sequence[FileEntry]) -> List[FileEntry]:
    """Drop entries lying inside another selected directory."""
    selected_dirs = {e.path for e in entries if e.is_dir}
    if not selected_dirs:
        return list(entries)
    return [
        e for e in entries
        if not any(parent in selected_dirs for parent in e.path.parents)
    ]
