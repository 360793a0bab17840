"""Metadata extraction, media kinds and name checks."""

from mediakit.metadata.badchars import (
    has_bad_chars,
    has_bad_cjk,
    has_bad_unicode,
    looks_double_encoded,
)
from mediakit.metadata.dates import (
    format_date,
    parse_container_datetime,
    parse_exif_datetime,
    resolve_date,
    validate_template,
)
from mediakit.metadata.extractor import (
    check_corrupted,
    extract,
    probe_media,
    read_exif_date,
    read_image_size,
    sniff_mime,
)
from mediakit.metadata.kinds import (
    is_audio,
    is_image,
    is_lossless_audio,
    is_media,
    is_video,
    kind_of,
    parse_extensions,
)

__all__ = [
    "has_bad_chars",
    "has_bad_cjk",
    "has_bad_unicode",
    "looks_double_encoded",
    "format_date",
    "parse_container_datetime",
    "parse_exif_datetime",
    "resolve_date",
    "validate_template",
    "check_corrupted",
    "extract",
    "probe_media",
    "read_exif_date",
    "read_image_size",
    "sniff_mime",
    "is_audio",
    "is_image",
    "is_lossless_audio",
    "is_media",
    "is_video",
    "kind_of",
    "parse_extensions",
]
