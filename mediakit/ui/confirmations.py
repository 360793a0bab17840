"""Operator confirmation before destructive actions."""

from enum import Enum, auto
from typing import Callable, Optional

from mediakit.ui.console import console

ConfirmFn = Callable[[str], bool]


class ConfirmationResult(Enum):
    """Result of a user confirmation prompt."""
    ACCEPT = auto()
    REJECT = auto()
    UNKNOWN = auto()


def parse_user_response(
    response: str,
    default: ConfirmationResult = ConfirmationResult.REJECT,
) -> ConfirmationResult:
    """
    Parse user response string into a ConfirmationResult.

    Args:
        response: Raw user input string.
        default: Result for an empty answer (reject, since every
            prompt guards a destructive action).

    Returns:
        ConfirmationResult enum value.
    """
    response = response.strip().lower()

    if not response:
        return default

    if response in ('y', 'yes'):
        return ConfirmationResult.ACCEPT

    if response in ('n', 'no'):
        return ConfirmationResult.REJECT

    return ConfirmationResult.UNKNOWN


def ask_confirmation(
    message: str,
    input_fn: Optional[Callable[[str], str]] = None,
    attempts: int = 3,
) -> bool:
    """
    Ask a yes/no question, defaulting to no.

    Args:
        message: Question shown to the operator.
        input_fn: Line reader (the rich console by default).
        attempts: Unrecognized answers tolerated before giving up.

    Returns:
        True only on an explicit yes.
    """
    read = input_fn or console.input
    prompt = f"[bold red]{message}[/bold red] [dim](y/N)[/dim] "
    for _ in range(attempts):
        try:
            answer = read(prompt)
        except EOFError:
            return False
        result = parse_user_response(answer)
        if result is ConfirmationResult.ACCEPT:
            return True
        if result is ConfirmationResult.REJECT:
            return False
        console.print_warning("Please answer y or n")
    return False
