"""
Failure and timeout handling.

All failure paths of a generation flow end here: the handler picks one
user-visible message, resets the session to idle and notifies the caller,
at most once per task no matter how many error sources fire.
"""

from collections.abc import Callable

import structlog

from printforge.generators.base import (
    GenerationError,
    GenerationTimeoutError,
    ServerReportedFailure,
    SubmissionError,
)

from .poller import FAILED_MESSAGE, TIMEOUT_MESSAGE
from .session import GenerationSession
from .submitter import SUBMISSION_FAILED_MESSAGE

logger = structlog.get_logger(__name__)


def resolve_error_message(error: BaseException | None) -> str:
    """Pick the message shown to the user for a failure."""
    if isinstance(error, GenerationTimeoutError):
        return TIMEOUT_MESSAGE
    if isinstance(error, ServerReportedFailure):
        return error.server_message or FAILED_MESSAGE
    if isinstance(error, SubmissionError):
        return error.message or SUBMISSION_FAILED_MESSAGE
    if isinstance(error, GenerationError):
        return error.message or FAILED_MESSAGE
    if error is not None and str(error):
        return str(error)
    return FAILED_MESSAGE


class FailureHandler:
    """Failure sink for one generation run."""

    def __init__(
        self,
        session: GenerationSession,
        run_id: int,
        on_error: Callable[[str], None] | None = None,
    ):
        self.session = session
        self.run_id = run_id
        self.on_error = on_error
        self.handled = False
        self.message: str | None = None

    def handle(self, error: BaseException | None = None) -> str | None:
        """
        Report a failure.

        Returns the user-visible message for the first call and None for
        every later call.
        """
        if self.handled:
            logger.info(
                "Failure already handled",
                session_id=self.session.session_id,
                error=str(error) if error else None,
            )
            return None

        self.handled = True
        self.message = resolve_error_message(error)
        active = self.session.is_active_run(self.run_id)
        task_id = self.session.current_task_id if active else None

        log_context = error.to_dict() if isinstance(error, GenerationError) else {"error": str(error)}
        logger.error("Generation failed", session_id=self.session.session_id, task_id=task_id, **log_context)

        if active:
            self.session.reset_to_idle(self.run_id)
            self.session.last_error = self.message

        if self.on_error:
            try:
                self.on_error(self.message)
            except Exception as e:
                logger.error("Error callback failed", error=str(e), session_id=self.session.session_id)
        return self.message
