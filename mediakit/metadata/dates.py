"""Capture date parsing and filename date templates."""

import re
from datetime import datetime
from typing import Optional

from mediakit.exceptions import InputError
from mediakit.models.entry import FileEntry, MediaMetadata

# YYYY YY MM DD HH mm ss SSS, longest tokens first
TEMPLATE_TOKENS = re.compile(r"YYYY|YY|MM|DD|HH|mm|ss|SSS")

_EXIF_FORMATS = ("%Y:%m:%d %H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y:%m:%d %H:%M")
_CONTAINER_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d")

# Cameras write zeros when the clock was never set
_EPOCH_FLOOR = datetime(1971, 1, 1)


def _plausible(value: datetime) -> Optional[datetime]:
    return value if value >= _EPOCH_FLOOR else None


def parse_exif_datetime(value: object) -> Optional[datetime]:
    """
    Parse an EXIF ``DateTimeOriginal`` value such as ``2023:05:01 10:20:30``.

    Returns None for empty, zeroed or malformed values.
    """
    if value is None:
        return None
    text = str(value).strip().rstrip("\x00")
    if not text or text.startswith("0000"):
        return None
    for fmt in _EXIF_FORMATS:
        try:
            return _plausible(datetime.strptime(text[:19], fmt))
        except ValueError:
            continue
    return None


def parse_container_datetime(value: object) -> Optional[datetime]:
    """
    Parse a container date tag (``UTC 2023-05-01 10:20:30`` or
    ``2023-05-01 10:20:30 UTC``).
    """
    if value is None:
        return None
    text = str(value).replace("UTC", "").strip()
    # mediainfo may join several dates with " / "
    text = text.split(" / ")[0].strip()
    if not text:
        return None
    for fmt in _CONTAINER_FORMATS:
        try:
            return _plausible(datetime.strptime(text[:19], fmt))
        except ValueError:
            continue
    return None


def validate_template(template: str) -> str:
    """
    Check that a date template contains at least one date token.

    Raises:
        InputError: If the template has no recognized token.
    """
    if not TEMPLATE_TOKENS.search(template):
        raise InputError(f"Date template '{template}' has no YYYY/MM/DD/HH/mm/ss token")
    return template


def format_date(value: datetime, template: str) -> str:
    """
    Render a datetime with a day.js style template.

    Examples:
        >>> format_date(datetime(2023, 5, 1, 10, 20, 30), "YYYYMMDD_HHmmss")
        '20230501_102030'
    """
    replacements = {
        "YYYY": f"{value.year:04d}",
        "YY": f"{value.year % 100:02d}",
        "MM": f"{value.month:02d}",
        "DD": f"{value.day:02d}",
        "HH": f"{value.hour:02d}",
        "mm": f"{value.minute:02d}",
        "ss": f"{value.second:02d}",
        "SSS": f"{value.microsecond // 1000:03d}",
    }
    return TEMPLATE_TOKENS.sub(lambda m: replacements[m.group(0)], template)


def resolve_date(entry: FileEntry, metadata: MediaMetadata, fast: bool = False) -> Optional[datetime]:
    """
    Pick the date used to rename a file.

    Fast mode uses the modification time without probing; otherwise
    only the embedded capture date counts.
    """
    if fast:
        return entry.modified if entry.mtime > 0 else None
    if metadata.valid and metadata.captured_at is not None:
        return metadata.captured_at
    return None
