"""
Task submission.

Forwards a validated request to the generator exactly once. Retrying is
left to the caller.
"""

import structlog

from printforge.generators.base import GenerationError, SubmissionError
from printforge.generators.base_integration import BaseGenerationService
from printforge.generators.models import GenerationRequest

from .progress import ProgressReporter

logger = structlog.get_logger(__name__)

START_PROGRESS = 10
SUBMITTED_PROGRESS = 20
SUBMISSION_FAILED_MESSAGE = "Failed to start generation"


class TaskSubmitter:
    """Creates generation tasks at the external generator."""

    def __init__(self, service: BaseGenerationService):
        self.service = service

    async def submit(self, request: GenerationRequest, reporter: ProgressReporter | None = None) -> str:
        """
        Start a generation task.

        Returns:
            A non-empty task identifier

        Raises:
            SubmissionError: If the task could not be created
        """
        if reporter:
            reporter.report(START_PROGRESS, "Starting generation...")

        logger.info("Submitting generation task", mode=request.mode.value, style=request.style.value)
        try:
            task_id = await self.service.submit(request)
        except SubmissionError:
            raise
        except GenerationError as e:
            raise SubmissionError(e.message or SUBMISSION_FAILED_MESSAGE, original_exception=e) from e
        except Exception as e:
            logger.error("Unexpected error while submitting", error=str(e), error_type=type(e).__name__)
            raise SubmissionError(str(e) or SUBMISSION_FAILED_MESSAGE, original_exception=e) from e

        if not task_id:
            raise SubmissionError("Generator returned an empty task id")

        if reporter:
            reporter.session.attach_task(reporter.run_id, task_id)
            reporter.report(SUBMITTED_PROGRESS, "Task created, processing...")

        logger.info("Generation task submitted", task_id=task_id)
        return task_id
