"""Combination of predicate outcomes into a single decision.

Kept free of any predicate so the combination policy can be tested on
plain outcome lists.
"""

from typing import Sequence

from mediakit.rules.predicates import Outcome


def all_configured(outcomes: Sequence[Outcome]) -> bool:
    """AND over the configured conditions; nothing configured selects nothing."""
    return len(outcomes) > 0 and all(o.matched for o in outcomes)


def any_configured(outcomes: Sequence[Outcome]) -> bool:
    """OR over the configured conditions."""
    return any(o.matched for o in outcomes)


def absolute_override(outcomes: Sequence[Outcome]) -> bool:
    """True if any override condition fired."""
    return any(o.matched for o in outcomes)


def combine(
    overrides: Sequence[Outcome],
    combinable: Sequence[Outcome],
    loose: bool,
) -> bool:
    """
    Decide from override and combinable outcomes.

    Args:
        overrides: Outcomes of override conditions (corrupted, badchars).
        combinable: Outcomes of the configured name/size/dimension
            conditions only; unconfigured ones must not be passed.
        loose: OR instead of AND.

    Returns:
        Final selection.
    """
    if absolute_override(overrides):
        return True
    if loose:
        return any_configured(combinable)
    return all_configured(combinable)
