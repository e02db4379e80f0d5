"""
Status polling for generation tasks.

Queries task status at a fixed interval until the generator reports a
terminal state, the attempt budget runs out, or the consumer cancels.
Queries for one task are strictly sequential.
"""

import structlog

from printforge.generators.base_integration import BaseGenerationService
from printforge.generators.enums import TaskState

from .cancellation import CancellationToken
from .progress import ProgressReporter
from .scheduler import AsyncioScheduler, Scheduler
from .task import GenerationTask, PollerState

logger = structlog.get_logger(__name__)

TIMEOUT_MESSAGE = "Generation timeout - please try again"
FAILED_MESSAGE = "Generation failed"

PENDING_PROGRESS_BASE = 30
PENDING_PROGRESS_STEP = 2
PENDING_PROGRESS_CEILING = 80


def pending_progress(attempt: int) -> int:
    """Cosmetic progress estimate after ``attempt`` earlier pending responses."""
    return min(PENDING_PROGRESS_BASE + attempt * PENDING_PROGRESS_STEP, PENDING_PROGRESS_CEILING)


class StatusPoller:
    """Drives a GenerationTask from SUBMITTED to a terminal state."""

    def __init__(
        self,
        service: BaseGenerationService,
        scheduler: Scheduler | None = None,
        interval_seconds: float = 2.0,
        max_attempts: int = 30,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.service = service
        self.scheduler = scheduler or AsyncioScheduler()
        self.interval_seconds = interval_seconds
        self.max_attempts = max_attempts

    async def poll(
        self,
        task: GenerationTask,
        token: CancellationToken,
        reporter: ProgressReporter | None = None,
    ) -> GenerationTask:
        """
        Poll until the task reaches a terminal state.

        Status query errors propagate to the caller. The task is left in
        SUCCEEDED, FAILED, TIMED_OUT or CANCELLED otherwise.
        """
        while not task.is_terminal:
            if token.cancelled:
                task.transition_to(PollerState.CANCELLED)
                break

            attempt = task.attempts_made
            task.attempts_made += 1
            status = await self.service.get_status(task.task_id)

            # A cancel that arrived while the query was in flight wins over its result
            if token.cancelled:
                task.transition_to(PollerState.CANCELLED)
                break

            task.status = status.status

            if status.status == TaskState.SUCCEED:
                task.result = status
                task.transition_to(PollerState.SUCCEEDED)
                if reporter:
                    reporter.report(100, "Generation complete!", complete=True)

            elif status.status == TaskState.FAILED:
                task.error_message = status.error or None
                task.transition_to(PollerState.FAILED)
                logger.warning("Generator reported failure", task_id=task.task_id, error=status.error)

            else:
                task.transition_to(PollerState.POLLING)
                if reporter:
                    reporter.report(pending_progress(attempt), "Generating your 3D model...")

                if task.attempts_made >= self.max_attempts:
                    task.error_message = TIMEOUT_MESSAGE
                    task.transition_to(PollerState.TIMED_OUT)
                    logger.warning("Polling budget exhausted", task_id=task.task_id, attempts=task.attempts_made)
                    break

                if token.cancelled:
                    continue
                await self.scheduler.sleep(self.interval_seconds, token)

        return task
