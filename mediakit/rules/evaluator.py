"""Rule evaluation for one file entry."""

from typing import List, Optional, Sequence, Union

from loguru import logger

from mediakit.config.conditions import ConditionSet
from mediakit.metadata.extractor import extract
from mediakit.metadata.kinds import kind_of
from mediakit.models.entry import UNKNOWN, FileEntry, LazyMetadata, MediaKind, MediaMetadata
from mediakit.models.task import Decision
from mediakit.rules.combinator import combine
from mediakit.rules.predicates import RULES, Outcome, Role, Rule, Subject


def lazy_metadata(entry: FileEntry, kind: MediaKind) -> LazyMetadata:
    """Metadata for an entry, probed only if a rule asks for it."""
    if entry.is_dir:
        return LazyMetadata.of(UNKNOWN)
    return LazyMetadata(loader=lambda: extract(entry.path, kind))


def _rationale(outcomes: Sequence[Outcome]) -> str:
    return " ".join(o.fragment for o in outcomes)


def evaluate(
    entry: FileEntry,
    metadata: Optional[Union[LazyMetadata, MediaMetadata]],
    conditions: ConditionSet,
    rules: Sequence[Rule] = RULES,
) -> Decision:
    """
    Decide whether an entry is selected.

    Priority: a name list decides alone; otherwise corrupted/badchars
    select unconditionally, and name/size/dimension are combined with
    AND (strict) or OR (loose) over the configured ones only. A corrupted
    file is not measured further.

    Args:
        entry: Entry to evaluate.
        metadata: Lazy or already-known metadata; None probes on demand.
        conditions: Active condition set.
        rules: Rules in priority order.

    Returns:
        Decision with the rationale of every evaluated rule.
    """
    kind = MediaKind.OTHER if entry.is_dir else kind_of(entry.path)
    if metadata is None:
        metadata = lazy_metadata(entry, kind)
    elif isinstance(metadata, MediaMetadata):
        metadata = LazyMetadata.of(metadata)
    subject = Subject(entry=entry, kind=kind, metadata=metadata)

    active = [rule for rule in rules if rule.enabled(conditions)]

    exclusive = [rule for rule in active if rule.role is Role.EXCLUSIVE]
    if exclusive:
        outcome = exclusive[0].predicate(subject, conditions)
        return Decision(entry.index, outcome.matched, outcome.fragment, entry.size)

    overrides: List[Outcome] = []
    for rule in active:
        if rule.role is Role.OVERRIDE:
            overrides.append(rule.predicate(subject, conditions))

    # Only a corrupted file skips the remaining checks; a malformed name
    # still traces them
    combinable: List[Outcome] = []
    if not any(o.matched and o.name == "corrupted" for o in overrides):
        for rule in active:
            if rule.role is Role.COMBINABLE:
                combinable.append(rule.predicate(subject, conditions))

    selected = combine(overrides, combinable, conditions.loose)
    outcomes = overrides + combinable
    rationale = _rationale(outcomes)
    logger.debug(f"Evaluate {entry.progress} {entry.name}: {selected} [{rationale}]")
    return Decision(entry.index, selected, rationale, entry.size)
