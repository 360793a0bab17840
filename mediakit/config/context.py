"""Run-wide settings read by every pipeline stage.

The CLI installs one :class:`ExecutionContext` around a command; stages
read it through :func:`get_context` instead of receiving the dry-run and
purge flags as parameters.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from mediakit.config.settings import HOLDING_DIR_NAME

_active: Optional["ExecutionContext"] = None


@dataclass(frozen=True)
class ExecutionContext:
    """
    Mode and locations of the current command run.

    Attributes:
        dry_run: Log intended actions without touching files.
        purge: Delete permanently instead of moving items aside.
        debug: Debug logging is enabled.
        root: Root directory given on the command line.
        holding_dir: Explicit folder for safe-deleted items.
        log_dir: Audit log directory override.
    """

    dry_run: bool = True
    purge: bool = False
    debug: bool = False
    root: Optional[Path] = None
    holding_dir: Optional[Path] = None
    log_dir: Optional[Path] = None

    @property
    def mode(self) -> str:
        """``DRY RUN`` or ``LIVE``, as shown in logs and the audit trail."""
        return "DRY RUN" if self.dry_run else "LIVE"

    def holding_dir_for(self, root: Optional[Path] = None) -> Path:
        """
        Folder receiving safe-deleted items of a walk.

        A ``_deleted`` folder beside the walked root, so a later walk of
        the same root never sees its own removals.

        Args:
            root: Walked root; defaults to the context root.
        """
        if self.holding_dir is not None:
            return self.holding_dir
        root = root if root is not None else self.root
        if root is None:
            return Path.cwd() / HOLDING_DIR_NAME
        return root.parent / HOLDING_DIR_NAME


def get_context() -> ExecutionContext:
    """Active context, or a dry-run default outside any command."""
    return _active if _active is not None else ExecutionContext()


def set_context(ctx: Optional[ExecutionContext]) -> None:
    """Install a context; None restores the dry-run default."""
    global _active
    _active = ctx


@contextmanager
def execution_context(**settings) -> Iterator[ExecutionContext]:
    """
    Run a block under a new context, restoring the previous one after.

    Args:
        **settings: ExecutionContext fields.

    Example:
        with execution_context(dry_run=False, root=root):
            orchestrator.run(options)
    """
    previous = _active
    ctx = ExecutionContext(**settings)
    set_context(ctx)
    try:
        yield ctx
    finally:
        set_context(previous)
