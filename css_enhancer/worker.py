"""Background enhancement worker.

Runs enhancement tasks on a thread pool so a front end can stay
responsive while a large design tree is processed. Each task reports
progress at 20%, 50% and 100% through an optional callback, and every
outcome, failures included, is delivered as a TaskResult rather than
raised.
"""

import asyncio
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from .config import EnhancementOptions
from .design import DesignNode
from .enhancer import CSSEnhancer
from .enhancer_logging import LogCategory, get_category_logger
from .errors import EnhancerError
from .models import EnhancementResult

logger = get_category_logger(LogCategory.WORKER)

PROGRESS_STARTED = 20
PROGRESS_PREPARED = 50
PROGRESS_DONE = 100


@dataclass
class EnhancementTask:
    """One enhancement request submitted to the worker."""

    task_id: str
    tree: DesignNode | dict[str, Any] | None
    style_text: str | bytes | None
    options: EnhancementOptions | None = None


@dataclass
class TaskResult:
    """Progress update or final outcome of an enhancement task."""

    task_id: str
    success: bool
    result: EnhancementResult | None = None
    error: str | None = None
    progress: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "taskId": self.task_id,
            "success": self.success,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error,
            "progress": self.progress,
        }


ProgressCallback = Callable[[TaskResult], None]


class EnhancementWorker:
    """Thread-pool boundary for running enhancement tasks.

    Example:
        >>> with EnhancementWorker() as worker:
        ...     future = worker.submit(EnhancementTask("t1", tree, css))
        ...     outcome = future.result()
    """

    def __init__(self, max_workers: int = 2):
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="css-enhancer"
        )

    def submit(
        self,
        task: EnhancementTask,
        progress_callback: ProgressCallback | None = None,
    ) -> "Future[TaskResult]":
        """Queue a task; the future resolves to its final TaskResult."""
        logger.debug(f"Submitting enhancement task {task.task_id}")
        return self._executor.submit(self.process, task, progress_callback)

    async def run(
        self,
        task: EnhancementTask,
        progress_callback: ProgressCallback | None = None,
    ) -> TaskResult:
        """Run a task on the pool and await its final TaskResult."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, self.process, task, progress_callback
        )

    def process(
        self,
        task: EnhancementTask,
        progress_callback: ProgressCallback | None = None,
    ) -> TaskResult:
        """Run one task synchronously in the calling thread."""

        def report(progress: int) -> None:
            if progress_callback is not None:
                progress_callback(
                    TaskResult(task_id=task.task_id, success=True, progress=progress)
                )

        try:
            report(PROGRESS_STARTED)
            enhancer = CSSEnhancer(task.options)
            report(PROGRESS_PREPARED)
            result = enhancer.enhance(task.tree, task.style_text)
        except EnhancerError as e:
            logger.warning(f"Enhancement task {task.task_id} failed: {e.message}")
            return TaskResult(task_id=task.task_id, success=False, error=e.message)
        except Exception as e:
            logger.exception(f"Enhancement task {task.task_id} crashed")
            return TaskResult(
                task_id=task.task_id,
                success=False,
                error=str(e) or "CSS enhancement failed",
            )

        outcome = TaskResult(
            task_id=task.task_id,
            success=True,
            result=result,
            progress=PROGRESS_DONE,
        )
        if progress_callback is not None:
            progress_callback(outcome)
        return outcome

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks and release the pool threads."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "EnhancementWorker":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
