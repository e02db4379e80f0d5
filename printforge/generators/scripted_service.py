"""
Scripted generation service.

Replays a fixed sequence of task statuses instead of calling a real
generator. Used in tests and as the demo backend when no generator URL is
configured.
"""

import time
import uuid
from collections.abc import Callable, Iterable

import structlog

from .base import SubmissionError
from .base_integration import BaseGenerationService
from .configs import ServiceConfig
from .enums import ServiceProvider
from .models import GenerationRequest, TaskStatus

logger = structlog.get_logger(__name__)


class ScriptedGenerationService(BaseGenerationService):
    """Generator fake that answers status queries from a script.

    Every task replays the script from the start. Once the script is
    exhausted the last status is repeated, so a short script of pending
    statuses models a task that never finishes.
    """

    provider = ServiceProvider.SCRIPTED

    def __init__(
        self,
        statuses: Iterable[TaskStatus],
        submit_error: Exception | None = None,
        status_errors: dict[int, Exception] | None = None,
        on_query: Callable[[str, int], None] | None = None,
        config: ServiceConfig | None = None,
        history_limit: int = 500,
    ) -> None:
        super().__init__(config or ServiceConfig(base_url="scripted://local"))
        self.statuses = list(statuses)
        if not self.statuses:
            raise ValueError("A scripted service needs at least one status")
        self.submit_error = submit_error
        self.status_errors = status_errors or {}
        self.on_query = on_query
        self.history_limit = history_limit

        self.submitted_requests: list[GenerationRequest] = []
        self.status_queries: list[str] = []
        self.cancelled_tasks: list[str] = []
        self._queries_per_task: dict[str, int] = {}

    @classmethod
    def demo(cls, pending_polls: int = 3) -> "ScriptedGenerationService":
        """A service that succeeds after a few pending polls."""
        return cls(
            [TaskStatus.pending()] * pending_polls
            + [
                TaskStatus.succeeded(
                    glb_url="/models/generated.glb",
                    stl_url="/models/generated.stl",
                    preview_png="/generated-3d-model.jpg",
                )
            ]
        )

    @property
    def query_count(self) -> int:
        return len(self.status_queries)

    def _record(self, items: list, value) -> None:
        items.append(value)
        # The demo instance serves every session of the process
        del items[: -self.history_limit]

    async def submit(self, request: GenerationRequest) -> str:
        self._record(self.submitted_requests, request)
        if self.submit_error is not None:
            raise self.submit_error
        if not self.can_handle_request(request):
            raise SubmissionError("Image-to-model generation is not supported by this service")

        task_id = f"task-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"
        logger.info("Scripted generation task created", task_id=task_id, mode=request.mode.value)
        return task_id

    async def get_status(self, task_id: str) -> TaskStatus:
        index = self._queries_per_task.get(task_id, 0)
        self._queries_per_task[task_id] = index + 1
        self._record(self.status_queries, task_id)
        if self.on_query is not None:
            self.on_query(task_id, index + 1)
        if index in self.status_errors:
            raise self.status_errors[index]
        status = self.statuses[min(index, len(self.statuses) - 1)]
        if status.is_terminal:
            self._queries_per_task.pop(task_id, None)
        return status

    async def cancel(self, task_id: str) -> None:
        if not self.supports_cancellation:
            await super().cancel(task_id)
        self._record(self.cancelled_tasks, task_id)
