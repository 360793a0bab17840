"""Selection conditions shared by the rule-driven commands."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Tuple

from loguru import logger

from mediakit.exceptions import InputError

# 1200x1600, 1200*1600, 1200,1600, 1200|1600
MEASURE_PATTERN = re.compile(r"^(\d+)[x*,|](\d+)$", re.IGNORECASE)


@dataclass(frozen=True)
class ConditionSet:
    """
    Immutable bundle of selection conditions for one command invocation.

    Attributes:
        width: Maximum image width selected (0 = not configured).
        height: Maximum image height selected (0 = not configured).
        max_size: Maximum file size in bytes selected (0 = not configured).
        pattern: Name pattern, plain text or regular expression.
        not_match: Invert the name pattern result.
        corrupted: Select corrupted media files unconditionally.
        badchars: Select items whose name has malformed characters.
        names: Explicit name list (file stems); overrides everything else.
        reverse: Select names NOT in the list instead.
        loose: Combine name/size/dimension with OR instead of AND.
    """

    width: int = 0
    height: int = 0
    max_size: int = 0
    pattern: str = ""
    not_match: bool = False
    corrupted: bool = False
    badchars: bool = False
    names: FrozenSet[str] = field(default_factory=frozenset)
    reverse: bool = False
    loose: bool = False

    @property
    def has_list(self) -> bool:
        return len(self.names) > 0

    @property
    def has_pattern(self) -> bool:
        return len(self.pattern) > 0

    @property
    def has_size(self) -> bool:
        return self.max_size > 0

    @property
    def has_dimension(self) -> bool:
        return self.width > 0 or self.height > 0

    @property
    def is_active(self) -> bool:
        """True if at least one condition is configured."""
        return (
            self.has_list
            or self.has_pattern
            or self.has_size
            or self.has_dimension
            or self.corrupted
            or self.badchars
        )

    def describe(self) -> str:
        """Render the active conditions on a single line."""
        parts: List[str] = []
        if self.has_list:
            sample = ",".join(sorted(self.names)[-5:])
            parts.append(f"list={len(self.names)} ({sample})")
            parts.append(f"reverse={self.reverse}")
            return " ".join(parts)
        parts.append(f"mode={'loose' if self.loose else 'strict'}")
        if self.corrupted:
            parts.append("corrupted")
        if self.badchars:
            parts.append("badchars")
        if self.has_dimension:
            parts.append(f"width={self.width} height={self.height}")
        if self.has_size:
            parts.append(f"size={self.max_size // 1024}k")
        if self.has_pattern:
            parts.append(f"pattern={self.pattern}" + (" (not)" if self.not_match else ""))
        return " ".join(parts)


def parse_measure(measure: str) -> Tuple[int, int]:
    """
    Parse a ``WIDTHxHEIGHT`` dimension string.

    Args:
        measure: String like ``1200x1600`` (``*``, ``,`` and ``|`` also accepted).

    Returns:
        Tuple (width, height).

    Raises:
        InputError: If the string is malformed or a side is zero.
    """
    match = MEASURE_PATTERN.match(measure.strip())
    if not match:
        raise InputError(f"Invalid measure '{measure}', expected e.g. 1200x1600")
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise InputError(f"Invalid measure '{measure}', sides must be positive")
    return width, height


def _stems(lines: Iterable[str]) -> FrozenSet[str]:
    names = set()
    for line in lines:
        line = line.strip()
        if not line:
            continue
        stem = Path(line).stem.strip()
        if stem:
            names.add(stem)
    return frozenset(names)


def load_name_list(source: Path) -> FrozenSet[str]:
    """
    Load an explicit name list.

    Args:
        source: Text file with one name per line, or a directory whose
            entries provide the names.

    Returns:
        Set of file stems (extension removed, whitespace trimmed).

    Raises:
        InputError: If the source does not exist or yields no names.
    """
    if not source.exists():
        raise InputError(f"Name list not found: {source}")

    try:
        if source.is_dir():
            names = _stems(entry.name for entry in source.iterdir())
        else:
            names = _stems(source.read_text(encoding="utf-8").splitlines())
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Cannot read name list {source}: {e}") from e

    if not names:
        raise InputError(f"Name list is empty: {source}")

    logger.debug(f"Loaded {len(names)} names from {source}")
    return names


def build_condition_set(
    width: int = 0,
    height: int = 0,
    measure: str = "",
    size_kb: int = 0,
    pattern: str = "",
    not_match: bool = False,
    corrupted: bool = False,
    badchars: bool = False,
    name_list: Optional[Path] = None,
    reverse: bool = False,
    loose: bool = False,
) -> ConditionSet:
    """
    Validate raw options and build the ConditionSet.

    A measure string, when given, supplies both width and height.

    Raises:
        InputError: On negative values, malformed measure, unreadable
            name list, or when no condition is active.
    """
    if width < 0 or height < 0 or size_kb < 0:
        raise InputError("width, height and size must not be negative")

    if measure:
        width, height = parse_measure(measure)

    names: FrozenSet[str] = frozenset()
    if name_list is not None:
        names = load_name_list(name_list)

    conditions = ConditionSet(
        width=width,
        height=height,
        max_size=size_kb * 1024,
        pattern=(pattern or "").strip(),
        not_match=not_match,
        corrupted=corrupted,
        badchars=badchars,
        names=names,
        reverse=reverse,
        loose=loose,
    )

    if not conditions.is_active:
        raise InputError(
            "No condition supplied: use at least one of "
            "--width/--height/--measure/--size/--pattern/--list/--corrupted/--badchars"
        )
    return conditions
