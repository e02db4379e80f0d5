"""
Generation flow orchestration.

A GenerationFlow runs one request through submission, polling and
materialization against a caller-owned GenerationSession, and reports the
outcome through callbacks. Every failure is funnelled through the
FailureHandler; cancellation ends the flow without any callback.
"""

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from printforge.generators.base import (
    GenerationError,
    GenerationTimeoutError,
    ServerReportedFailure,
)
from printforge.generators.base_integration import BaseGenerationService
from printforge.generators.configs import GenerationConfig
from printforge.generators.models import GenerationRequest
from printforge.models.model_record import ModelMeta

from .cancellation import CancellationToken
from .failure_handler import FailureHandler
from .materializer import ResultMaterializer
from .poller import TIMEOUT_MESSAGE, StatusPoller
from .progress import ProgressReporter
from .scheduler import AsyncioScheduler, Scheduler
from .session import GenerationSession
from .submitter import TaskSubmitter
from .task import GenerationTask, PollerState

logger = structlog.get_logger(__name__)


@dataclass
class GenerationCallbacks:
    """Hooks the caller receives outcomes and progress through."""

    on_generation_complete: Callable[[ModelMeta], None] | None = None
    on_generation_error: Callable[[str], None] | None = None
    on_progress: Callable[[int], None] | None = None
    on_status: Callable[[str], None] | None = None


class GenerationFlow:
    """Runs a single generation request to completion."""

    def __init__(
        self,
        service: BaseGenerationService,
        session: GenerationSession,
        config: GenerationConfig | None = None,
        scheduler: Scheduler | None = None,
        callbacks: GenerationCallbacks | None = None,
        materializer: ResultMaterializer | None = None,
    ):
        self.service = service
        self.session = session
        self.config = config or GenerationConfig()
        self.scheduler = scheduler or AsyncioScheduler()
        self.callbacks = callbacks or GenerationCallbacks()
        self.materializer = materializer or ResultMaterializer(
            density_g_cm3=self.config.material_density_g_cm3,
            name_max_length=self.config.name_max_length,
        )

        self.submitter = TaskSubmitter(service)
        self.poller = StatusPoller(
            service,
            scheduler=self.scheduler,
            interval_seconds=self.config.poll_interval_seconds,
            max_attempts=self.config.max_poll_attempts,
        )
        self.token = CancellationToken()
        self.task: GenerationTask | None = None
        self.record: ModelMeta | None = None
        self.error_message: str | None = None
        self.finished = False
        self._run_id: int | None = None
        self._poll_started = 0.0

    @property
    def state(self) -> PollerState | None:
        if self.task is not None:
            return self.task.state
        if self.token.cancelled:
            return PollerState.CANCELLED
        return None

    @property
    def task_id(self) -> str | None:
        return self.task.task_id if self.task else None

    def cancel(self, reason: str = "consumer cancelled") -> bool:
        """
        Stop the flow. No status query is issued afterwards and neither
        completion nor error callback fires.
        """
        if self.finished:
            return False
        return self.token.cancel(reason)

    async def run(self, request: GenerationRequest) -> GenerationTask | None:
        """
        Execute the flow.

        Returns the task (None if submission never produced one).

        Raises:
            GenerationInProgressError: If the session already has an active generation
        """
        self._run_id = self.session.begin()
        reporter = ProgressReporter(
            self.session,
            self._run_id,
            on_progress=self.callbacks.on_progress,
            on_status=self.callbacks.on_status,
        )
        failures = FailureHandler(self.session, self._run_id, self.callbacks.on_generation_error)

        if self.token.cancelled:
            await self._finish_cancelled()
            return None

        try:
            task_id = await self.submitter.submit(request, reporter)
            self.task = GenerationTask(task_id=task_id)
            self._poll_started = self.scheduler.now()
            await self.poller.poll(self.task, self.token, reporter)
        except Exception as e:
            if self.token.cancelled:
                logger.info("Error after cancellation ignored", error=str(e), task_id=self.task_id)
                await self._finish_cancelled()
            else:
                self.error_message = failures.handle(e)
                if self.task is not None and not self.task.is_terminal:
                    self.task.error_message = self.error_message
                    self.task.transition_to(PollerState.FAILED)
                self.finished = True
            return self.task

        if self.task.state == PollerState.SUCCEEDED:
            await self._finish_succeeded(request, failures)
        elif self.task.state == PollerState.FAILED:
            self.error_message = failures.handle(
                ServerReportedFailure(self.task.error_message, task_id=self.task.task_id)
            )
            self.finished = True
        elif self.task.state == PollerState.TIMED_OUT:
            self.error_message = failures.handle(
                GenerationTimeoutError(
                    TIMEOUT_MESSAGE,
                    task_id=self.task.task_id,
                    attempts=self.task.attempts_made,
                    timeout_duration=self.scheduler.now() - self._poll_started,
                )
            )
            self.finished = True
            await self._release_external_task()
        else:
            await self._finish_cancelled()

        return self.task

    async def _finish_succeeded(self, request: GenerationRequest, failures: FailureHandler) -> None:
        try:
            self.record = self.materializer.materialize(self.task.result, request)
        except Exception as e:
            self.error_message = failures.handle(
                GenerationError("Generation failed", original_exception=e)
            )
            self.finished = True
            return

        self.task.record = self.record
        self.session.record_result(self.record)
        self.finished = True
        logger.info(
            "Generation completed",
            task_id=self.task.task_id,
            model_id=self.record.id,
            attempts=self.task.attempts_made,
        )

        if self.callbacks.on_generation_complete:
            try:
                self.callbacks.on_generation_complete(self.record)
            except Exception as e:
                logger.error("Completion callback failed", error=str(e), task_id=self.task.task_id)

        # Keep the "complete" state visible briefly before going idle
        if self.config.success_reset_delay_seconds > 0:
            await self.scheduler.sleep(self.config.success_reset_delay_seconds)
        self.session.reset_to_idle(self._run_id)

    async def _finish_cancelled(self) -> None:
        if self.task is not None and not self.task.is_terminal:
            self.task.transition_to(PollerState.CANCELLED)
        self.finished = True
        self.session.reset_to_idle(self._run_id)
        logger.info("Generation cancelled", task_id=self.task_id, reason=self.token.reason)
        await self._release_external_task()

    async def _release_external_task(self) -> None:
        """Stop the task on the generator side, if the generator allows it."""
        if self.task is None:
            return
        if not self.service.supports_cancellation:
            logger.warning(
                "Generator task left running; the generator has no cancellation capability",
                task_id=self.task.task_id,
                state=self.task.state.value,
            )
            return
        try:
            await self.service.cancel(self.task.task_id)
        except Exception as e:
            logger.warning("Failed to cancel generator task", task_id=self.task.task_id, error=str(e))
