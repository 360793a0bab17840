"""Batch executor: dry-run gate, confirmation, bounded dispatch."""

import time
from typing import Mapping, Optional, Sequence

from loguru import logger

from mediakit.config.context import get_context
from mediakit.config.settings import PREVIEW_SAMPLE_SIZE
from mediakit.exceptions import MediaKitError
from mediakit.models.task import BatchResult, Operation, TaskDescriptor, TaskStatus
from mediakit.pipeline.builder import index_tasks
from mediakit.pipeline.operations import OPERATIONS, OperationFn
from mediakit.ui.confirmations import ConfirmFn, ask_confirmation
from mediakit.ui.console import console
from mediakit.ui.display import display_preview
from mediakit.utils.audit import audit, audit_log_path
from mediakit.utils.concurrency import run_bounded
from mediakit.utils.formatting import human_size, human_time


class BatchExecutor:
    """
    Runs a frozen task list.

    The dry-run flag is read once per batch: either every task is only
    logged, or the operator confirms and every task is dispatched. Task
    failures are recorded on the task and never cancel siblings.
    """

    def __init__(
        self,
        title: str,
        conditions: str = "",
        confirm_fn: ConfirmFn = ask_confirmation,
        operations: Mapping[Operation, OperationFn] = OPERATIONS,
        sample_size: int = PREVIEW_SAMPLE_SIZE,
    ):
        """
        Initialize the executor.

        Args:
            title: Command title used in the preview and progress bar.
            conditions: Rendered condition set shown before confirmation.
            confirm_fn: Yes/no prompt; injectable for tests.
            operations: Operation table.
            sample_size: Number of sample tasks previewed.
        """
        self.title = title
        self.conditions = conditions
        self.confirm_fn = confirm_fn
        self.operations = operations
        self.sample_size = sample_size

    def execute(
        self,
        tasks: Sequence[TaskDescriptor],
        operation: Operation,
        workers: int,
        dry_run: Optional[bool] = None,
    ) -> BatchResult:
        """
        Preview, confirm and run a batch.

        Args:
            tasks: Tasks to run; indexed here, before the preview.
            operation: Operation applied to every task.
            workers: Maximum tasks in flight.
            dry_run: Overrides the execution context flag.

        Returns:
            BatchResult with every task in a final state.
        """
        dry_run = get_context().dry_run if dry_run is None else dry_run
        tasks = list(tasks)
        if not tasks:
            console.print_info(f"{self.title}: nothing to do")
            return BatchResult.empty(dry_run)

        index_tasks(tasks)
        display_preview(tasks, self.title, self.conditions, dry_run, self.sample_size)

        if dry_run:
            for task in tasks:
                logger.info(f"[{task.progress}] would be processed: {task.describe()}")
                task.finish(TaskStatus.SKIPPED, "dry run")
            console.print_simulation(f"{len(tasks)} task(s) not executed, add --doit to apply")
            return BatchResult(tasks=tasks, dry_run=True, log_path=audit_log_path())

        total_bytes = sum(t.size for t in tasks)
        question = f"{self.title}: {operation.value} {len(tasks)} item(s) ({human_size(total_bytes)})?"
        if not self.confirm_fn(question):
            logger.info(f"{self.title}: aborted by user")
            audit("ABORT", f"{self.title}: {len(tasks)} task(s) declined")
            return BatchResult(tasks=tasks, dry_run=False, aborted=True, log_path=audit_log_path())

        func = self.operations[operation]
        audit("START", f"{self.title}: {len(tasks)} task(s) {human_size(total_bytes)} {self.conditions}")
        started = time.monotonic()

        run_bounded(lambda task: self._run_one(func, task), tasks, workers, desc=self.title, unit="task")

        elapsed = time.monotonic() - started
        result = BatchResult(tasks=tasks, dry_run=False, elapsed=elapsed, log_path=audit_log_path())
        audit(
            "END",
            f"{self.title}: {result.succeeded} ok, {result.skipped} skipped, "
            f"{result.failed} failed in {human_time(elapsed)}",
        )
        return result

    def _run_one(self, func: OperationFn, task: TaskDescriptor) -> TaskDescriptor:
        task.start()
        try:
            status, message = func(task)
        except (OSError, MediaKitError) as e:
            logger.error(f"[{task.progress}] Failed {task.source}: {e}")
            audit("ERROR", f"{task.progress} {task.source}: {e}")
            task.finish(TaskStatus.FAILURE, str(e))
            return task

        task.finish(status, message)
        if status is TaskStatus.SUCCESS:
            logger.info(f"[{task.progress}] {task.operation.value} {task.source.name}: {message}")
            audit(task.operation.value.upper(), f"{task.progress} {task.describe()}")
        else:
            logger.warning(f"[{task.progress}] Skipped {task.source}: {message}")
            audit("SKIP", f"{task.progress} {task.source} ({message})")
        return task
