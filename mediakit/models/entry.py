"""File entry and media metadata models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional


class MediaKind(Enum):
    """Declared kind of a file, derived from its extension."""

    IMAGE = "image"
    RAW = "raw"
    AUDIO = "audio"
    VIDEO = "video"
    ARCHIVE = "archive"
    OTHER = "other"

    @property
    def is_visual(self) -> bool:
        """True for kinds that carry pixel dimensions."""
        return self in (MediaKind.IMAGE, MediaKind.RAW)

    @property
    def is_av(self) -> bool:
        """True for audio and video."""
        return self in (MediaKind.AUDIO, MediaKind.VIDEO)


@dataclass
class FileEntry:
    """
    One filesystem item under consideration.

    Size and mtime are a snapshot taken by the walker and never
    re-read implicitly. Later stages only add to the entry
    (``item_count`` for directories).

    Attributes:
        path: Absolute path.
        is_dir: True for directories.
        size: Size in bytes (recursive content size for directories
            once measured).
        mtime: Modification time as a POSIX timestamp.
        index: Ordinal index within the walk.
        total: Number of entries in the walk.
        item_count: Number of files below a directory (0 for files).
    """

    path: Path
    is_dir: bool = False
    size: int = 0
    mtime: float = 0.0
    index: int = 0
    total: int = 0
    item_count: int = 0

    @property
    def parent(self) -> Path:
        return self.path.parent

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def extension(self) -> str:
        """Lowercase extension with leading dot (empty for directories)."""
        return "" if self.is_dir else self.path.suffix.lower()

    @property
    def modified(self) -> datetime:
        return datetime.fromtimestamp(self.mtime)

    @property
    def progress(self) -> str:
        """``index/total`` label used in log lines."""
        return f"{self.index}/{self.total}"


@dataclass(frozen=True)
class MediaMetadata:
    """
    Result of probing a media file.

    Every measured field is Optional: ``None`` means "not measured",
    which is different from a measured zero.

    Attributes:
        width: Pixel width (images).
        height: Pixel height (images).
        duration: Duration in seconds (audio/video).
        bit_rate: Overall bit rate in bits per second (audio/video).
        codec: Codec or format identifier.
        lossless: True if the audio stream is lossless.
        captured_at: Capture timestamp from EXIF or container tags.
        mime: MIME type reported by file-type sniffing.
        valid: True if extraction succeeded.
    """

    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[float] = None
    bit_rate: Optional[int] = None
    codec: Optional[str] = None
    lossless: Optional[bool] = None
    captured_at: Optional[datetime] = None
    mime: Optional[str] = None
    valid: bool = True

    @property
    def is_unknown(self) -> bool:
        return not self.valid

    @property
    def has_dimensions(self) -> bool:
        return self.valid and self.width is not None and self.height is not None

    @property
    def has_stream_info(self) -> bool:
        """True if the probe returned usable duration and bit rate."""
        return self.valid and bool(self.duration) and bool(self.bit_rate)


# Shared sentinel for failed or skipped extraction
UNKNOWN = MediaMetadata(valid=False)


@dataclass
class LazyMetadata:
    """
    Metadata computed on first access, at most once per entry.

    Attributes:
        loader: Zero-argument callable returning MediaMetadata.
    """

    loader: Callable[[], MediaMetadata]
    _value: Optional[MediaMetadata] = field(default=None, init=False, repr=False)
    _loaded: bool = field(default=False, init=False, repr=False)

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get(self) -> MediaMetadata:
        if not self._loaded:
            self._value = self.loader()
            self._loaded = True
        return self._value if self._value is not None else UNKNOWN

    @classmethod
    def of(cls, metadata: MediaMetadata) -> "LazyMetadata":
        """Wrap already-known metadata."""
        return cls(loader=lambda: metadata)
