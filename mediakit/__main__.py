"""Entry point for the mediakit package.

Run with: python -m mediakit <command> <root> [options]
"""

import sys
from typing import List, Optional

from loguru import logger

from mediakit.config.cli import CommandOptions, RemoveOptions, parse_args
from mediakit.config.context import execution_context
from mediakit.exceptions import InputError
from mediakit.pipeline.orchestrator import CommandOrchestrator
from mediakit.ui.console import console
from mediakit.utils.audit import close_audit_log, setup_audit_log

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"


def _not_audit(record) -> bool:
    return not record["extra"].get("audit", False)


def setup_logging(debug: bool = False) -> None:
    """
    Configure loguru logging.

    Args:
        debug: If True, enable debug-level logging.
    """
    logger.remove()
    level = "DEBUG" if debug else "INFO"
    logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        filter=_not_audit,
    )


def display_configuration(options: CommandOptions) -> None:
    """
    Display the command configuration to the user.

    Args:
        options: Validated command options.
    """
    mode = "[yellow]DRY RUN[/yellow]" if options.dry_run else "[red]LIVE[/red]"
    lines = [
        f"Command: [bold]{options.command}[/bold]",
        f"Root: [cyan]{options.root}[/cyan]",
        f"Mode: {mode}",
    ]
    if isinstance(options, RemoveOptions):
        lines.append(f"Conditions: [cyan]{options.conditions.describe()}[/cyan]")
        if options.purge:
            lines.append("Deletion: [red]purge[/red]")
        else:
            holding = options.holding_dir or "_deleted next to the root"
            lines.append(f"Deletion: safe (holding folder: [cyan]{holding}[/cyan])")
    console.print_panel("\n".join(lines), title="mediakit")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the media tools.

    Args:
        argv: Argument list (None uses sys.argv).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        options = parse_args(argv)
    except InputError as e:
        console.print_error(str(e))
        return 1

    setup_logging(options.debug)

    try:
        setup_audit_log(options.log_dir)
    except OSError as e:
        console.print_error(f"Cannot open audit log: {e}")
        return 1

    if options.dry_run:
        console.print_warning(
            "DRY RUN\n\n"
            "• No file will be changed\n"
            "• Every task is logged as 'would be processed'\n"
            "• Add --doit to apply"
        )
    display_configuration(options)

    try:
        with execution_context(
            dry_run=options.dry_run,
            purge=getattr(options, "purge", False),
            holding_dir=getattr(options, "holding_dir", None),
            debug=options.debug,
            root=options.root,
            log_dir=options.log_dir,
        ):
            result = CommandOrchestrator().run(options)
    except InputError as e:
        console.print_error(str(e))
        return 1
    except KeyboardInterrupt:
        console.print_warning("Interrupted")
        return 130
    finally:
        close_audit_log()

    if result.aborted:
        logger.info("Aborted, nothing was changed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
