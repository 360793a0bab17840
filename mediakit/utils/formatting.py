"""Human-readable formatting helpers."""

from pathlib import Path
from typing import Union

_UNITS = ("B", "KB", "MB", "GB", "TB")


def human_size(size: Union[int, float]) -> str:
    """
    Format a byte count with a binary unit.

    Examples:
        >>> human_size(1536)
        '1.5KB'
        >>> human_size(0)
        '0B'
    """
    value = float(size)
    for unit in _UNITS:
        if abs(value) < 1024 or unit == _UNITS[-1]:
            if unit == "B":
                return f"{int(value)}B"
            return f"{value:.1f}{unit}"
        value /= 1024
    return f"{value:.1f}{_UNITS[-1]}"


def human_time(seconds: float) -> str:
    """Format an elapsed duration (``850ms``, ``12.3s``, ``2m05s``)."""
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m{secs:02d}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes:02d}m"


def short_path(path: Path, parts: int = 3) -> str:
    """Keep only the last few components of a path for display."""
    path = Path(path)
    if len(path.parts) <= parts:
        return str(path)
    return str(Path("…", *path.parts[-parts:]))
