"""Styled terminal output for previews, prompts and summaries."""

from typing import Dict, List, Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Message kind -> (rich style, leading marker)
MESSAGE_STYLES: Dict[str, Tuple[str, str]] = {
    "info": ("blue", "ℹ️ "),
    "warning": ("yellow", "⚠️ "),
    "error": ("red", "❌"),
    "dry_run": ("dim", "🔍 DRY RUN -"),
}

# Table columns holding counts or sizes
NUMERIC_COLUMNS = frozenset({"#", "Size", "Count"})


class ConsoleUI:
    """
    Rich console shared by the batch commands.

    Every message kind has one style, so a preview or a summary looks
    the same whichever command produced it. Tests pass their own
    recording Console.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(highlight=False)

    def print(self, *args, **kwargs) -> None:
        self.console.print(*args, **kwargs)

    def rule(self, title: str = "", **kwargs) -> None:
        self.console.rule(title, **kwargs)

    def input(self, prompt: str) -> str:
        """Read one answer after a markup prompt."""
        return self.console.input(prompt)

    def message(self, kind: str, text: str) -> None:
        """Print a one-line message styled after its kind."""
        style, marker = MESSAGE_STYLES[kind]
        self.console.print(f"[{style}]{marker} {text}[/{style}]")

    def print_info(self, message: str) -> None:
        self.message("info", message)

    def print_warning(self, message: str) -> None:
        self.message("warning", message)

    def print_error(self, message: str) -> None:
        self.message("error", message)

    def print_simulation(self, message: str) -> None:
        self.message("dry_run", message)

    def print_panel(self, content: str, title: str = "", border_style: str = "blue") -> None:
        """Boxed block, used for run configuration and batch previews."""
        self.console.print(Panel(content, title=title, border_style=border_style))

    def create_table(self, title: str, columns: Optional[List[str]] = None) -> Table:
        """
        Table with a header row; count and size columns are right-aligned.

        Args:
            title: Table title (empty for none).
            columns: Column headers.
        """
        table = Table(title=title or None, show_header=True, header_style="bold magenta")
        for column in columns or []:
            table.add_column(column, justify="right" if column in NUMERIC_COLUMNS else "left")
        return table

    def print_table(self, table: Table) -> None:
        self.console.print(table)


console = ConsoleUI()
