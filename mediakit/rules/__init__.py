"""Rule evaluation: predicates, combinator and evaluator."""

from mediakit.rules.combinator import (
    absolute_override,
    all_configured,
    any_configured,
    combine,
)
from mediakit.rules.evaluator import evaluate, lazy_metadata
from mediakit.rules.predicates import (
    RULES,
    Outcome,
    Role,
    Rule,
    Subject,
    compile_pattern,
)

__all__ = [
    "absolute_override",
    "all_configured",
    "any_configured",
    "combine",
    "evaluate",
    "lazy_metadata",
    "RULES",
    "Outcome",
    "Role",
    "Rule",
    "Subject",
    "compile_pattern",
]
