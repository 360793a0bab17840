"""User interface modules for console output and confirmations."""

from mediakit.ui.confirmations import (
    ConfirmationResult,
    ConfirmFn,
    ask_confirmation,
    parse_user_response,
)
from mediakit.ui.console import ConsoleUI, console
from mediakit.ui.display import (
    display_preview,
    display_summary,
    display_tree,
    format_file_count,
    is_large,
)

__all__ = [
    "ConfirmationResult",
    "ConfirmFn",
    "ask_confirmation",
    "parse_user_response",
    "ConsoleUI",
    "console",
    "display_preview",
    "display_summary",
    "display_tree",
    "format_file_count",
    "is_large",
]
