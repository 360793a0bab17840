"""Preview and summary display for batch runs."""

from typing import Dict, List, Sequence

from rich.tree import Tree

from mediakit.config.settings import LARGE_DIR_COUNT, LARGE_ITEM_SIZE, PREVIEW_SAMPLE_SIZE
from mediakit.models.task import BatchResult, TaskDescriptor
from mediakit.ui.console import console
from mediakit.utils.formatting import human_size, human_time, short_path


def is_large(task: TaskDescriptor) -> bool:
    """Items worth a second look before removal."""
    entry = task.entry
    if entry is None:
        return False
    return entry.size > LARGE_ITEM_SIZE or (entry.is_dir and entry.item_count > LARGE_DIR_COUNT)


def format_file_count(count: int) -> str:
    """
    Format file count with proper pluralization.

    Examples:
        >>> format_file_count(1)
        '1 file'
    """
    return f"{count} file{'s' if count != 1 else ''}"


def display_preview(
    tasks: Sequence[TaskDescriptor],
    title: str,
    conditions: str = "",
    dry_run: bool = True,
    sample_size: int = PREVIEW_SAMPLE_SIZE,
) -> None:
    """
    Show what a batch is about to do.

    Args:
        tasks: Frozen, indexed task list.
        title: Command title.
        conditions: Active conditions, rendered on one line.
        dry_run: Whether the run is a dry run.
        sample_size: Number of sample tasks listed.
    """
    total_bytes = sum(t.size for t in tasks)
    mode = "[yellow]DRY RUN[/yellow]" if dry_run else "[red]LIVE[/red]"

    lines = [
        f"Tasks: [bold]{len(tasks)}[/bold] ({human_size(total_bytes)})",
        f"Mode: {mode}",
    ]
    if conditions:
        lines.append(f"Conditions: [cyan]{conditions}[/cyan]")
    console.print_panel("\n".join(lines), title=title)

    table = console.create_table("Sample tasks", ["#", "Source", "Destination", "Size"])
    for task in tasks[-sample_size:]:
        table.add_row(
            str(task.index),
            short_path(task.source),
            short_path(task.destination) if task.destination else "-",
            human_size(task.size),
        )
    console.print_table(table)

    large = [t for t in tasks if is_large(t)]
    if large:
        console.print_warning(f"{len(large)} large item(s) selected:")
        for task in large:
            entry = task.entry
            count = f", {entry.item_count} files" if entry.is_dir else ""
            console.print(f"  [yellow]{task.index}[/yellow] {task.source} ({human_size(entry.size)}{count})")


def display_tree(groups: Dict[str, List[str]], max_files_per_folder: int = 5) -> None:
    """
    Display planned destination folders and a few of their files.

    Args:
        groups: Folder label -> file names.
        max_files_per_folder: Maximum files to show per folder.
    """
    root_tree = Tree("📁 [bold cyan]Planned structure[/bold cyan]")

    for folder in sorted(groups):
        files = groups[folder]
        node = root_tree.add(
            f"📁 [bold cyan]{folder}[/bold cyan] [dim]({format_file_count(len(files))})[/dim]"
        )
        for name in files[:max_files_per_folder]:
            node.add(f"[dim]{name}[/dim]")
        remaining = len(files) - max_files_per_folder
        if remaining > 0:
            node.add(f"[dim]... and {remaining} more[/dim]")

    console.print(root_tree)


def display_summary(result: BatchResult, title: str = "Summary") -> None:
    """
    Display final batch summary.

    Args:
        result: Outcome of the batch.
        title: Rule title.
    """
    mode_text = "[dim](DRY RUN)[/dim]" if result.dry_run else ""
    console.rule(f"[bold green]{title} {mode_text}[/bold green]")

    if result.aborted:
        console.print_warning("Aborted by user, nothing was changed")
        return

    table = console.create_table("", ["Outcome", "Count"])
    table.add_row("[green]Succeeded[/green]", str(result.succeeded))
    table.add_row("[yellow]Skipped[/yellow]", str(result.skipped))
    table.add_row("[red]Failed[/red]", str(result.failed))
    table.add_row("Total", f"{result.total} ({human_size(result.total_bytes)})")
    table.add_row("Elapsed", human_time(result.elapsed))
    console.print_table(table)

    for task in result.failures:
        console.print_error(f"{task.index} {task.source}: {task.message}")

    if result.log_path is not None:
        console.print_info(f"Audit log: {result.log_path}")
