"""Named selection predicates.

Each predicate looks at one aspect of an entry and reports whether it
matched together with a short rationale fragment. Predicates never
combine with each other; see :mod:`mediakit.rules.combinator`.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable, Pattern, Tuple

from loguru import logger

from mediakit.config.conditions import ConditionSet
from mediakit.metadata.badchars import has_bad_chars
from mediakit.metadata.extractor import check_corrupted
from mediakit.models.entry import FileEntry, LazyMetadata, MediaKind
from mediakit.utils.formatting import human_size


@dataclass(frozen=True)
class Subject:
    """What a predicate evaluates: the entry, its kind and lazy metadata."""

    entry: FileEntry
    kind: MediaKind
    metadata: LazyMetadata


@dataclass(frozen=True)
class Outcome:
    """Result of one predicate."""

    name: str
    matched: bool
    fragment: str


Predicate = Callable[[Subject, ConditionSet], Outcome]


class Role(Enum):
    """How a rule's outcome takes part in the final decision."""

    EXCLUSIVE = "exclusive"  # decides alone, nothing else is evaluated
    OVERRIDE = "override"  # selects unconditionally when matched
    COMBINABLE = "combinable"  # combined with AND (strict) or OR (loose)


@dataclass(frozen=True)
class Rule:
    """A named predicate, when it is enabled and its role."""

    name: str
    role: Role
    enabled: Callable[[ConditionSet], bool]
    predicate: Predicate


@lru_cache(maxsize=32)
def compile_pattern(pattern: str) -> Pattern[str]:
    """
    Compile a name pattern case-insensitively.

    A pattern that is not a valid regular expression is matched literally.
    """
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error:
        logger.debug(f"Pattern '{pattern}' is not a valid regex, matching literally")
        return re.compile(re.escape(pattern), re.IGNORECASE)


def in_name_list(subject: Subject, conditions: ConditionSet) -> Outcome:
    entry = subject.entry
    key = entry.name if entry.is_dir else entry.stem
    listed = key.strip() in conditions.names
    matched = not listed if conditions.reverse else listed
    fragment = f"L={'in' if listed else 'out'}" + (" (reverse)" if conditions.reverse else "")
    return Outcome("list", matched, fragment)


def is_corrupted(subject: Subject, conditions: ConditionSet) -> Outcome:
    entry = subject.entry
    if entry.is_dir:
        return Outcome("corrupted", False, "C=dir")
    corrupted, reason = check_corrupted(entry.path, entry.size, subject.kind, probe=subject.metadata.get)
    if corrupted:
        logger.debug(f"Corrupted[{reason}]: {entry.progress} {entry.path}")
    return Outcome("corrupted", corrupted, reason or "C=ok")


def has_malformed_name(subject: Subject, conditions: ConditionSet) -> Outcome:
    matched = has_bad_chars(subject.entry.name)
    return Outcome("badchars", matched, "BadChars" if matched else "B=ok")


def matches_pattern(subject: Subject, conditions: ConditionSet) -> Outcome:
    name = subject.entry.name.lower()
    pattern = conditions.pattern
    lowered = pattern.lower()
    found = (
        name.startswith(lowered)
        or name.endswith(lowered)
        or compile_pattern(pattern).search(name) is not None
    )
    matched = not found if conditions.not_match else found
    suffix = " (not)" if conditions.not_match else ""
    return Outcome("name", matched, f"P={pattern}{suffix}")


def within_size(subject: Subject, conditions: ConditionSet) -> Outcome:
    entry = subject.entry
    if entry.is_dir:
        return Outcome("size", False, "S=dir")
    matched = 0 < entry.size <= conditions.max_size
    return Outcome("size", matched, f"S={human_size(entry.size)}")


def _dimension_fits(width: int, height: int, conditions: ConditionSet) -> bool:
    if conditions.width > 0 and conditions.height > 0:
        return width <= conditions.width and height <= conditions.height
    if conditions.width > 0:
        return width <= conditions.width
    return height <= conditions.height


def within_dimension(subject: Subject, conditions: ConditionSet) -> Outcome:
    entry = subject.entry
    if entry.is_dir or subject.kind is not MediaKind.IMAGE:
        return Outcome("dimension", False, "M=n/a")

    metadata = subject.metadata.get()
    if not metadata.has_dimensions:
        # Unreadable header: not corrupted, the check is just skipped
        logger.debug(f"Cannot measure {entry.progress} {entry.path}")
        return Outcome("dimension", False, "M=?")

    matched = _dimension_fits(metadata.width, metadata.height, conditions)
    return Outcome("dimension", matched, f"M={metadata.width}x{metadata.height}")


# Priority order
RULES: Tuple[Rule, ...] = (
    Rule("list", Role.EXCLUSIVE, lambda c: c.has_list, in_name_list),
    Rule("corrupted", Role.OVERRIDE, lambda c: c.corrupted, is_corrupted),
    Rule("badchars", Role.OVERRIDE, lambda c: c.badchars, has_malformed_name),
    Rule("name", Role.COMBINABLE, lambda c: c.has_pattern, matches_pattern),
    Rule("size", Role.COMBINABLE, lambda c: c.has_size, within_size),
    Rule("dimension", Role.COMBINABLE, lambda c: c.has_dimension, within_dimension),
)
