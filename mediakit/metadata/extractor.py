"""Metadata extraction through external probing libraries.

Each collaborator sits behind a small function so tests can patch it:

- Pillow for image pixel dimensions
- pymediainfo for audio/video duration, bit rate and codec
- exifread for capture dates (and raw image dimensions)
- python-magic for file-type sniffing

Every probe failure is converted to ``UNKNOWN`` here; nothing raised by
a probe ever reaches the batch.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Tuple

from loguru import logger

from mediakit.config.settings import CORRUPTED_SIZE_THRESHOLD
from mediakit.exceptions import ExtractionError
from mediakit.metadata.dates import parse_container_datetime, parse_exif_datetime
from mediakit.models.entry import MediaKind, MediaMetadata, UNKNOWN

# libmagic answers for content it does not recognize
_UNRECOGNIZED_MIME = {"application/octet-stream", "inode/x-empty", "application/x-empty"}


def read_image_size(path: Path) -> Tuple[int, int]:
    """
    Read pixel dimensions from the image header.

    Raises:
        ExtractionError: If the header cannot be decoded.
    """
    from PIL import Image, UnidentifiedImageError

    try:
        with Image.open(path) as img:
            return img.size
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError, ValueError) as e:
        raise ExtractionError(f"Cannot read image header of {path}: {e}") from e


def read_exif_tags(path: Path) -> dict:
    """
    Read EXIF tags with exifread.

    Raises:
        ExtractionError: If the file cannot be read.
    """
    import exifread

    try:
        with open(path, "rb") as f:
            return exifread.process_file(f, details=False) or {}
    except (OSError, ValueError, KeyError, IndexError) as e:
        raise ExtractionError(f"Cannot read EXIF of {path}: {e}") from e


def _capture_date(tags: dict) -> Optional[datetime]:
    # DateTimeOriginal, then DateTimeDigitized, then DateTime
    for key in ("EXIF DateTimeOriginal", "EXIF DateTimeDigitized", "Image DateTime"):
        value = parse_exif_datetime(tags.get(key))
        if value is not None:
            return value
    return None


def read_exif_date(path: Path) -> Optional[datetime]:
    """Capture date from EXIF tags, or None."""
    return _capture_date(read_exif_tags(path))


def _int_or_none(value) -> Optional[int]:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def probe_media(path: Path, kind: MediaKind) -> MediaMetadata:
    """
    Probe an audio or video container with MediaInfo.

    Raises:
        ExtractionError: If MediaInfo cannot parse the file.
    """
    try:
        from pymediainfo import MediaInfo
        mi = MediaInfo.parse(str(path))
    except (OSError, RuntimeError, ValueError) as e:
        raise ExtractionError(f"MediaInfo error for {path}: {e}") from e

    if not mi.general_tracks:
        raise ExtractionError(f"MediaInfo found no tracks in {path}")

    general = mi.general_tracks[0]
    duration_ms = _int_or_none(general.duration)
    bit_rate = _int_or_none(general.overall_bit_rate)

    codec = general.format
    lossless = None
    width = height = None
    if kind is MediaKind.VIDEO and mi.video_tracks:
        video = mi.video_tracks[0]
        codec = video.format or codec
        width = _int_or_none(video.width)
        height = _int_or_none(video.height)
    if mi.audio_tracks:
        audio = mi.audio_tracks[0]
        if kind is MediaKind.AUDIO:
            codec = audio.format or codec
            bit_rate = bit_rate or _int_or_none(audio.bit_rate)
        lossless = (audio.compression_mode or "").lower() == "lossless"

    captured_at = (
        parse_container_datetime(general.recorded_date)
        or parse_container_datetime(general.encoded_date)
        or parse_container_datetime(general.tagged_date)
    )

    return MediaMetadata(
        width=width,
        height=height,
        duration=duration_ms / 1000 if duration_ms is not None else None,
        bit_rate=bit_rate,
        codec=codec,
        lossless=lossless,
        captured_at=captured_at,
    )


def sniff_mime(path: Path) -> Optional[str]:
    """
    Detect the MIME type from file content.

    Returns:
        MIME string, or None when the content is not recognized.
    """
    import magic

    try:
        mime = magic.from_file(str(path), mime=True)
    except (OSError, magic.MagicException) as e:
        logger.debug(f"MIME detection failed for {path}: {e}")
        return None
    if not mime or mime in _UNRECOGNIZED_MIME:
        return None
    return mime


def _extract_visual(path: Path, kind: MediaKind, with_date: bool) -> MediaMetadata:
    # Header and EXIF are read independently; only a file where neither
    # can be read is unknown
    width = height = None
    header_error = None
    if kind is MediaKind.IMAGE:
        try:
            width, height = read_image_size(path)
        except ExtractionError as e:
            if not with_date:
                raise
            header_error = e

    captured_at = None
    if with_date or kind is MediaKind.RAW:
        try:
            tags = read_exif_tags(path)
        except ExtractionError as e:
            if kind is MediaKind.RAW or header_error is not None:
                raise
            logger.debug(f"No EXIF date for {path.name}: {e}")
            tags = {}
        if header_error is not None:
            logger.debug(f"No dimensions for {path.name}: {header_error}")
        captured_at = _capture_date(tags)
        if kind is MediaKind.RAW:
            width = _int_or_none(str(tags.get("EXIF ExifImageWidth", ""))) or _int_or_none(
                str(tags.get("Image ImageWidth", ""))
            )
            height = _int_or_none(str(tags.get("EXIF ExifImageLength", ""))) or _int_or_none(
                str(tags.get("Image ImageLength", ""))
            )

    return MediaMetadata(width=width, height=height, captured_at=captured_at)


def extract(path: Path, kind: MediaKind, with_date: bool = False) -> MediaMetadata:
    """
    Extract metadata for a file of a declared kind.

    Args:
        path: File to probe.
        kind: Declared media kind (selects the collaborator).
        with_date: Also read the EXIF capture date of images. An image
            Pillow cannot decode then still yields its date, without
            dimensions.

    Returns:
        MediaMetadata, or ``UNKNOWN`` if the probe failed or the kind
        has nothing to probe.
    """
    try:
        if kind.is_visual:
            return _extract_visual(path, kind, with_date)
        if kind.is_av:
            return probe_media(path, kind)
    except ExtractionError as e:
        logger.debug(f"Metadata unknown for {path.name}: {e}")
        return UNKNOWN
    return UNKNOWN


def check_corrupted(
    path: Path,
    size: int,
    kind: MediaKind,
    probe: Optional[Callable[[], MediaMetadata]] = None,
) -> Tuple[bool, str]:
    """
    Apply the corruption heuristic to one file.

    Files under the size threshold are corrupted without probing. Audio
    and video are corrupted when MediaInfo reports no duration or bit
    rate; images, raw images and archives when content sniffing does
    not recognize the type. Other kinds are never flagged.

    Args:
        path: File to check.
        size: File size snapshot.
        kind: Declared media kind.
        probe: Memoized metadata loader to reuse instead of probing again.

    Returns:
        Tuple (corrupted, reason).
    """
    if kind.is_av:
        if size < CORRUPTED_SIZE_THRESHOLD:
            return True, "BadSizeM"
        metadata = probe() if probe is not None else extract(path, kind)
        if not metadata.has_stream_info:
            return True, "CorruptedMedia"
        return False, ""

    if kind.is_visual or kind is MediaKind.ARCHIVE:
        if size < CORRUPTED_SIZE_THRESHOLD:
            return True, "BadSizeF"
        if sniff_mime(path) is None:
            return True, "CorruptedFormat"
        return False, ""

    return False, ""
