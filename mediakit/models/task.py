"""Decision, task and batch result models."""

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict, List, Optional

from mediakit.models.entry import FileEntry


@dataclass(frozen=True)
class Decision:
    """
    Output of a selection rule for one entry.

    Attributes:
        index: Ordinal index of the entry.
        selected: Boolean outcome.
        rationale: Trace of every evaluated sub-condition.
        size: Size used for reporting.
    """

    index: int
    selected: bool
    rationale: str = ""
    size: int = 0


class Operation(Enum):
    """Kind of work a task performs."""

    REMOVE = "remove"
    COMPRESS = "compress"
    THUMBNAIL = "thumbnail"
    RENAME = "rename"
    MOVE = "move"
    TRANSCODE = "transcode"


class TaskStatus(Enum):
    """Lifecycle state of a task."""

    PENDING = auto()
    RUNNING = auto()
    SUCCESS = auto()
    FAILURE = auto()
    SKIPPED = auto()

    @property
    def is_final(self) -> bool:
        return self in (TaskStatus.SUCCESS, TaskStatus.FAILURE, TaskStatus.SKIPPED)


@dataclass
class TaskDescriptor:
    """
    A unit of work for the batch executor.

    Attributes:
        operation: What to do with the source.
        source: Source path.
        destination: Destination path (None for purge removal).
        params: Operation parameters (quality, dimensions, ffmpeg args...).
        index: Ordinal index, assigned once before dispatch.
        total: Number of tasks in the batch.
        entry: Entry the task was built from.
        status: Current lifecycle state.
        message: Failure or skip reason.
    """

    operation: Operation
    source: Path
    destination: Optional[Path] = None
    params: Dict[str, Any] = field(default_factory=dict)
    index: int = 0
    total: int = 0
    entry: Optional[FileEntry] = None
    status: TaskStatus = TaskStatus.PENDING
    message: str = ""

    @property
    def size(self) -> int:
        return self.entry.size if self.entry is not None else 0

    @property
    def progress(self) -> str:
        return f"{self.index}/{self.total}"

    def start(self) -> None:
        """Mark the task running; a task is dispatched at most once."""
        if self.status is not TaskStatus.PENDING:
            raise RuntimeError(f"Task {self.progress} already dispatched ({self.status.name})")
        self.status = TaskStatus.RUNNING

    def finish(self, status: TaskStatus, message: str = "") -> None:
        self.status = status
        self.message = message

    def describe(self) -> str:
        if self.destination is None:
            return f"{self.operation.value}: {self.source}"
        return f"{self.operation.value}: {self.source} -> {self.destination}"


@dataclass
class BatchResult:
    """Aggregated outcome of one batch run."""

    tasks: List[TaskDescriptor] = field(default_factory=list)
    dry_run: bool = True
    aborted: bool = False
    elapsed: float = 0.0
    log_path: Optional[Path] = None

    def _count(self, status: TaskStatus) -> int:
        return sum(1 for t in self.tasks if t.status is status)

    @property
    def succeeded(self) -> int:
        return self._count(TaskStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return self._count(TaskStatus.FAILURE)

    @property
    def skipped(self) -> int:
        return self._count(TaskStatus.SKIPPED)

    @property
    def total(self) -> int:
        return len(self.tasks)

    @property
    def total_bytes(self) -> int:
        return sum(t.size for t in self.tasks)

    @property
    def failures(self) -> List[TaskDescriptor]:
        return [t for t in self.tasks if t.status is TaskStatus.FAILURE]

    @classmethod
    def empty(cls, dry_run: bool = True) -> "BatchResult":
        return cls(tasks=[], dry_run=dry_run)
