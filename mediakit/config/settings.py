"""Configuration settings and constants for the mediakit package."""

import re
from pathlib import Path
from typing import Pattern, Set

# File extensions per media kind (lowercase, with leading dot)
EXT_IMAGE: Set[str] = {
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tif", ".tiff", ".heic", ".heif", ".avif",
}

EXT_RAW: Set[str] = {
    ".crw", ".cr2", ".cr3", ".nef", ".nrw", ".arw", ".srf", ".sr2", ".raf", ".rw2",
    ".orf", ".pef", ".dng", ".x3f", ".srw", ".3fr", ".iiq",
}

EXT_VIDEO: Set[str] = {
    ".mp4", ".mov", ".wmv", ".avi", ".mkv", ".m4v", ".ts", ".flv", ".webm",
    ".mpg", ".mpeg", ".3gp", ".mts", ".m2ts", ".rm", ".rmvb",
}

EXT_AUDIO: Set[str] = {
    ".mp3", ".m4a", ".aac", ".flac", ".wav", ".ape", ".ogg", ".opus", ".wma", ".alac", ".aiff", ".dsf",
}

EXT_AUDIO_LOSSLESS: Set[str] = {".flac", ".wav", ".ape", ".alac", ".aiff", ".dsf"}

EXT_ARCHIVE: Set[str] = {".zip", ".rar", ".7z", ".tar", ".gz", ".bz2", ".xz", ".cbz", ".cbr"}

# Corruption heuristic: files below this size are presumed damaged
CORRUPTED_SIZE_THRESHOLD: int = 5 * 1024

# Output post-checks: smaller artifacts are treated as failed conversions
MIN_IMAGE_OUTPUT_SIZE: int = 200 * 1024
MIN_TRANSCODE_OUTPUT_SIZE: int = 1024

# Compress command defaults
COMPRESS_QUALITY: int = 86
COMPRESS_MIN_SIZE_KB: int = 2048
COMPRESS_MAX_WIDTH: int = 6000
COMPRESS_SUFFIX: str = "_Z4K"
COMPRESS_EXCLUDE: Pattern[str] = re.compile(r"Z4K|feature|web|thumb", re.IGNORECASE)

# Thumbs command defaults
THUMB_MAX_SIZE: int = 3000
THUMB_MIN_SIZE_KB: int = 500
THUMB_QUALITY: int = 85
THUMB_SUFFIX: str = "_thumb"
THUMB_EXCLUDE: Pattern[str] = re.compile(r"小图|精选|feature|web|thumb", re.IGNORECASE)
CHROMA_SUBSAMPLING: str = "4:4:4"

# Rename command defaults
RENAME_TEMPLATE: str = "YYYYMMDD_HHmmss"
RENAME_PREFIXES: str = "IMG_/DSC_/VID_"
RENAME_MIN_SIZE: int = 1024

# Transcode command defaults
TRANSCODE_EXCLUDE: Pattern[str] = re.compile(r"shana|tmp", re.IGNORECASE)
DEFAULT_VIDEO_PRESET: str = "hevc_2k"
DEFAULT_AUDIO_PRESET: str = "aac_medium"

# Organize command thresholds
ORGANIZE_SMALL_JPEG_SIZE: int = 1000 * 1024

# Remove command: items worth highlighting in the preview
LARGE_ITEM_SIZE: int = 200 * 1024 * 1024
LARGE_DIR_COUNT: int = 100

# Concurrency factors relative to the CPU count
PREPARE_CONCURRENCY_FACTOR: int = 2
COMPRESS_PREPARE_CONCURRENCY_FACTOR: int = 4
HEAVY_CONCURRENCY_FACTOR: float = 0.5

# Safe delete moves items under this directory, next to the walked root
HOLDING_DIR_NAME: str = "_deleted"

# Audit log location (MEDIAKIT_LOG_DIR overrides)
DEFAULT_LOG_DIR: Path = Path.home() / ".mediakit" / "logs"
LOG_DIR_ENV: str = "MEDIAKIT_LOG_DIR"

# Number of sample tasks shown before confirmation
PREVIEW_SAMPLE_SIZE: int = 5
