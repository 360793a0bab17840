"""Command-line interface argument parsing."""

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

from mediakit import __version__
from mediakit.config.conditions import ConditionSet, build_condition_set
from mediakit.config.presets import (
    PRESET_NAMES,
    TranscodePreset,
    check_arguments,
    get_preset,
    specialize_preset,
)
from mediakit.config.settings import (
    COMPRESS_MAX_WIDTH,
    COMPRESS_MIN_SIZE_KB,
    COMPRESS_QUALITY,
    DEFAULT_AUDIO_PRESET,
    DEFAULT_VIDEO_PRESET,
    RENAME_PREFIXES,
    RENAME_TEMPLATE,
    THUMB_MAX_SIZE,
    THUMB_MIN_SIZE_KB,
    THUMB_QUALITY,
)
from mediakit.exceptions import InputError
from mediakit.metadata.dates import validate_template
from mediakit.metadata.kinds import parse_extensions
from mediakit.models.entry import MediaKind

ENTRY_TYPES = ("a", "f", "d")


@dataclass
class CommandOptions:
    """
    Options shared by every command.

    Attributes:
        command: Sub-command name.
        root: Directory to walk.
        doit: If False, run as a dry run.
        debug: Enable debug logging.
        log_dir: Audit log directory override.
        jobs: Worker count override (0 = derived from the CPU count).
        include: Name pattern entries must match.
        exclude: Name pattern entries must not match.
        use_regex: Treat include/exclude as regular expressions.
        extensions: Restrict files to these extensions (empty = all).
    """

    command: str = ""
    root: Path = field(default_factory=Path.cwd)
    doit: bool = False
    debug: bool = False
    log_dir: Optional[Path] = None
    jobs: int = 0
    include: str = ""
    exclude: str = ""
    use_regex: bool = True
    extensions: FrozenSet[str] = frozenset()

    @property
    def dry_run(self) -> bool:
        return not self.doit


@dataclass
class RemoveOptions(CommandOptions):
    """Options of the remove command."""

    conditions: ConditionSet = field(default_factory=ConditionSet)
    entry_type: str = "f"
    purge: bool = False
    holding_dir: Optional[Path] = None

    @property
    def with_files(self) -> bool:
        return self.entry_type in ("a", "f")

    @property
    def with_dirs(self) -> bool:
        return self.entry_type in ("a", "d")


@dataclass
class CompressOptions(CommandOptions):
    """Options of the compress command."""

    quality: int = COMPRESS_QUALITY
    min_size_kb: int = COMPRESS_MIN_SIZE_KB
    max_width: int = COMPRESS_MAX_WIDTH
    override: bool = False
    purge_originals: bool = False
    holding_dir: Optional[Path] = None


@dataclass
class ThumbsOptions(CommandOptions):
    """Options of the thumbs command."""

    output: Optional[Path] = None
    max_size: int = THUMB_MAX_SIZE
    min_size_kb: int = THUMB_MIN_SIZE_KB
    quality: int = THUMB_QUALITY
    force: bool = False


@dataclass
class RenameOptions(CommandOptions):
    """Options of the rename command."""

    template: str = RENAME_TEMPLATE
    prefixes: Dict[MediaKind, str] = field(default_factory=dict)
    suffix: str = ""
    fast: bool = False


@dataclass
class TranscodeOptions(CommandOptions):
    """
    Options of the transcode command.

    Attributes:
        preset: Preset with every override applied.
        audio_mode: Transcode audio files instead of video files.
        auto_audio_bitrate: Pick the audio bitrate per file from the probe.
        output: Output root mirroring the walked tree (None = next to source).
    """

    preset: Optional[TranscodePreset] = None
    audio_mode: bool = False
    auto_audio_bitrate: bool = False
    output: Optional[Path] = None


@dataclass
class OrganizeOptions(CommandOptions):
    """Options of the organize command."""

    output: Optional[Path] = None


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('root', help="root directory to process")
    parser.add_argument(
        '--doit',
        action='store_true',
        help="apply changes (default is a dry run that only reports)"
    )
    parser.add_argument('--debug', action='store_true', help="enable debug logging")
    parser.add_argument('--log-dir', default=None, help="audit log directory")
    parser.add_argument(
        '-j', '--jobs',
        type=int,
        default=0,
        help="number of parallel workers (default: derived from CPU count)"
    )
    parser.add_argument('--include', default="", help="only process names matching this pattern")
    parser.add_argument('--exclude', default="", help="skip names matching this pattern")
    parser.add_argument(
        '--no-regex',
        dest='use_regex',
        action='store_false',
        help="treat --include/--exclude as plain text"
    )
    parser.add_argument('-e', '--extensions', default="", help="only process these extensions (eg. .jpg|.png)")


def _add_holding_dir(parser) -> None:
    parser.add_argument(
        '--holding-dir',
        default=None,
        help="folder receiving items moved aside (default: _deleted next to the root)"
    )


def _add_remove(subparsers) -> None:
    parser = subparsers.add_parser(
        'remove',
        aliases=['rm'],
        help="remove files or directories matching conditions",
        description="Select files by name list, pattern, size, dimension, corruption or "
                    "malformed names and move them to a holding folder (or purge them)."
    )
    _add_common(parser)
    parser.add_argument('-l', '--list', default=None, help="name list file or directory (overrides other conditions)")
    parser.add_argument('-w', '--width', type=int, default=0, help="select images with width <= WIDTH")
    parser.add_argument('--height', type=int, default=0, help="select images with height <= HEIGHT")
    parser.add_argument('-m', '--measure', default="", help="select images within WIDTHxHEIGHT")
    parser.add_argument('-s', '--size', type=int, default=0, help="select files with size <= SIZE KB")
    parser.add_argument('-p', '--pattern', default="", help="select names matching PATTERN")
    parser.add_argument('-n', '--not-match', action='store_true', help="invert the name pattern")
    parser.add_argument('-c', '--corrupted', action='store_true', help="select corrupted media files")
    parser.add_argument('-b', '--badchars', action='store_true', help="select names with malformed characters")
    parser.add_argument('-r', '--reverse', action='store_true', help="select names NOT in the list")
    parser.add_argument(
        '--loose',
        action='store_true',
        help="combine pattern/size/dimension with OR (default: AND over given conditions)"
    )
    parser.add_argument(
        '-t', '--type',
        dest='entry_type',
        default='f',
        help="entries to consider: a(ll), f(iles), d(irectories) (default: f)"
    )
    parser.add_argument('--purge', action='store_true', help="delete permanently instead of moving aside")
    _add_holding_dir(parser)


def _add_compress(subparsers) -> None:
    parser = subparsers.add_parser('compress', aliases=['cs'], help="re-encode large images as JPEG")
    _add_common(parser)
    parser.add_argument('-q', '--quality', type=int, default=COMPRESS_QUALITY,
                        help=f"JPEG quality (default: {COMPRESS_QUALITY})")
    parser.add_argument('-s', '--size', type=int, default=COMPRESS_MIN_SIZE_KB,
                        help=f"only images larger than SIZE KB (default: {COMPRESS_MIN_SIZE_KB})")
    parser.add_argument('-w', '--width', type=int, default=COMPRESS_MAX_WIDTH,
                        help=f"maximum long side in pixels (default: {COMPRESS_MAX_WIDTH})")
    parser.add_argument('--override', action='store_true', help="overwrite existing compressed files")
    parser.add_argument('--purge', action='store_true', help="move originals aside once compressed")
    _add_holding_dir(parser)


def _add_thumbs(subparsers) -> None:
    parser = subparsers.add_parser('thumbs', aliases=['tb'], help="create thumbnails of large images")
    _add_common(parser)
    parser.add_argument('-o', '--output', default=None, help="output root (default: derived from source folders)")
    parser.add_argument('-m', '--max', dest='max_size', type=int, default=THUMB_MAX_SIZE,
                        help=f"thumbnail long side in pixels (default: {THUMB_MAX_SIZE})")
    parser.add_argument('-s', '--size', type=int, default=THUMB_MIN_SIZE_KB,
                        help=f"only images larger than SIZE KB (default: {THUMB_MIN_SIZE_KB})")
    parser.add_argument('-q', '--quality', type=int, default=THUMB_QUALITY,
                        help=f"JPEG quality (default: {THUMB_QUALITY})")
    parser.add_argument('-f', '--force', action='store_true', help="overwrite existing thumbnails")


def _add_rename(subparsers) -> None:
    parser = subparsers.add_parser('rename', aliases=['rn'], help="rename media files by capture date")
    _add_common(parser)
    parser.add_argument('-t', '--template', default=RENAME_TEMPLATE,
                        help=f"date template (default: {RENAME_TEMPLATE})")
    parser.add_argument('-p', '--prefix', default=RENAME_PREFIXES,
                        help=f"prefixes for image/raw/video (default: {RENAME_PREFIXES})")
    parser.add_argument('-s', '--suffix', default="", help="suffix after the date")
    parser.add_argument('--fast', action='store_true', help="use modification time instead of EXIF dates")


def _add_transcode(subparsers) -> None:
    parser = subparsers.add_parser(
        'transcode',
        aliases=['ffmpeg'],
        help="transcode audio/video files with ffmpeg presets"
    )
    _add_common(parser)
    parser.add_argument('-o', '--output', default=None, help="output root (default: next to source)")
    parser.add_argument('-p', '--preset', default=None,
                        help=f"preset name, one of: {', '.join(PRESET_NAMES)}")
    parser.add_argument('--audio-mode', action='store_true', help="transcode audio files to AAC")
    parser.add_argument('--prefix', default=None, help="output name prefix template")
    parser.add_argument('--suffix', default=None, help="output name suffix template")
    parser.add_argument('--dimension', default=None, help="maximum video long side")
    parser.add_argument('--speed', type=float, default=None, help="playback speed factor")
    parser.add_argument('--video-args', default=None, help="ffmpeg video arguments")
    parser.add_argument('--video-bitrate', default=None, help="video bitrate (eg. 4096k)")
    parser.add_argument('--video-quality', type=int, default=None, help="video constant quality")
    parser.add_argument('--audio-args', default=None, help="ffmpeg audio arguments")
    parser.add_argument('--audio-bitrate', default=None, help="audio bitrate (eg. 192k)")
    parser.add_argument('--audio-quality', type=int, default=None, help="audio quality")
    parser.add_argument('--filters', default=None, help="ffmpeg -vf filter chain")
    parser.add_argument('--filter-complex', default=None, help="ffmpeg -filter_complex graph")


def _add_organize(subparsers) -> None:
    parser = subparsers.add_parser('organize', aliases=['om'], help="sort media into monthly folders")
    _add_common(parser)
    parser.add_argument('-o', '--output', default=None, help="output root (default: the input root)")


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog='mediakit',
        description="""
        Batch tools for media collections: remove, compress, thumbnail,
        rename, transcode and organize. Every command is a dry run unless
        --doit is given.
        """
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest='command', required=True)
    _add_remove(subparsers)
    _add_compress(subparsers)
    _add_thumbs(subparsers)
    _add_rename(subparsers)
    _add_transcode(subparsers)
    _add_organize(subparsers)
    return parser


# Sub-command aliases -> canonical names
COMMAND_ALIASES = {
    'rm': 'remove',
    'cs': 'compress',
    'tb': 'thumbs',
    'rn': 'rename',
    'ffmpeg': 'transcode',
    'om': 'organize',
}


def _optional_path(value: Optional[str]) -> Optional[Path]:
    return Path(value).expanduser() if value else None


def _positive(name: str, value: int) -> int:
    if value <= 0:
        raise InputError(f"--{name} must be positive, got {value}")
    return value


def _quality(value: int) -> int:
    if not 1 <= value <= 100:
        raise InputError(f"--quality must be between 1 and 100, got {value}")
    return value


def parse_prefixes(value: str = RENAME_PREFIXES) -> Dict[MediaKind, str]:
    """
    Parse ``IMG_/DSC_/VID_`` into per-kind rename prefixes.

    Missing parts fall back to the image prefix.

    Raises:
        InputError: If more than three prefixes are given.
    """
    parts = value.split("/") if value else [""]
    if len(parts) > 3:
        raise InputError(f"Invalid prefix '{value}', expected IMAGE/RAW/VIDEO")
    image = parts[0]
    raw = parts[1] if len(parts) > 1 else image
    video = parts[2] if len(parts) > 2 else image
    return {MediaKind.IMAGE: image, MediaKind.RAW: raw, MediaKind.VIDEO: video}


def _common_kwargs(args: argparse.Namespace) -> dict:
    if args.jobs < 0:
        raise InputError(f"--jobs must not be negative, got {args.jobs}")
    return {
        'command': COMMAND_ALIASES.get(args.command, args.command),
        'root': Path(args.root).expanduser(),
        'doit': args.doit,
        'debug': args.debug,
        'log_dir': _optional_path(args.log_dir),
        'jobs': args.jobs,
        'include': args.include,
        'exclude': args.exclude,
        'use_regex': args.use_regex,
        'extensions': frozenset(parse_extensions(args.extensions)) if args.extensions else frozenset(),
    }


def _remove_options(args: argparse.Namespace, common: dict) -> RemoveOptions:
    entry_type = (args.entry_type or "f").lower()[:1]
    if entry_type not in ENTRY_TYPES:
        raise InputError(f"Invalid --type '{args.entry_type}', expected a, f or d")
    conditions = build_condition_set(
        width=args.width,
        height=args.height,
        measure=args.measure,
        size_kb=args.size,
        pattern=args.pattern,
        not_match=args.not_match,
        corrupted=args.corrupted,
        badchars=args.badchars,
        name_list=_optional_path(args.list),
        reverse=args.reverse,
        loose=args.loose,
    )
    return RemoveOptions(
        conditions=conditions,
        entry_type=entry_type,
        purge=args.purge,
        holding_dir=_optional_path(args.holding_dir),
        **common,
    )


def _transcode_options(args: argparse.Namespace, common: dict) -> TranscodeOptions:
    default = DEFAULT_AUDIO_PRESET if args.audio_mode else DEFAULT_VIDEO_PRESET
    preset = get_preset(args.preset or default)
    if preset.is_audio != args.audio_mode:
        mode = "audio" if args.audio_mode else "video"
        raise InputError(f"Preset '{preset.name}' cannot be used in {mode} mode")
    preset = specialize_preset(
        preset,
        prefix=args.prefix,
        suffix=args.suffix,
        dimension=args.dimension,
        speed=args.speed,
        video_args=args.video_args,
        video_bitrate=args.video_bitrate,
        video_quality=args.video_quality,
        audio_args=args.audio_args,
        audio_bitrate=args.audio_bitrate,
        audio_quality=args.audio_quality,
        filters=args.filters,
        complex_filter=args.filter_complex,
    )
    check_arguments(preset)
    return TranscodeOptions(
        preset=preset,
        audio_mode=args.audio_mode,
        auto_audio_bitrate=args.audio_mode and not args.audio_bitrate,
        output=_optional_path(args.output),
        **common,
    )


def args_to_options(args: argparse.Namespace) -> CommandOptions:
    """
    Validate parsed arguments once and build the command options.

    Args:
        args: Parsed argparse namespace.

    Returns:
        Options dataclass of the selected command.

    Raises:
        InputError: On any invalid option value.
    """
    common = _common_kwargs(args)
    command = common['command']

    if command == 'remove':
        return _remove_options(args, common)

    if command == 'compress':
        return CompressOptions(
            quality=_quality(args.quality),
            min_size_kb=max(0, args.size),
            max_width=_positive('width', args.width),
            override=args.override,
            purge_originals=args.purge,
            holding_dir=_optional_path(args.holding_dir),
            **common,
        )

    if command == 'thumbs':
        return ThumbsOptions(
            output=_optional_path(args.output),
            max_size=_positive('max', args.max_size),
            min_size_kb=max(0, args.size),
            quality=_quality(args.quality),
            force=args.force,
            **common,
        )

    if command == 'rename':
        return RenameOptions(
            template=validate_template(args.template),
            prefixes=parse_prefixes(args.prefix),
            suffix=args.suffix,
            fast=args.fast,
            **common,
        )

    if command == 'transcode':
        return _transcode_options(args, common)

    if command == 'organize':
        return OrganizeOptions(output=_optional_path(args.output), **common)

    raise InputError(f"Unknown command '{command}'")


def parse_args(argv: Optional[List[str]] = None) -> CommandOptions:
    """
    Parse command-line arguments into validated options.

    Args:
        argv: Argument list (None uses sys.argv).

    Returns:
        Options dataclass of the selected command.
    """
    parser = create_parser()
    return args_to_options(parser.parse_args(argv))
