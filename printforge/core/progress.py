"""
Progress reporting for generation flows.
"""

from collections.abc import Callable

import structlog

from .session import GenerationSession

logger = structlog.get_logger(__name__)

# Progress stays below this until the generator reports success
MAX_PENDING_PROGRESS = 99


class ProgressReporter:
    """Pushes progress and status phrases into a session and out to callbacks."""

    def __init__(
        self,
        session: GenerationSession,
        run_id: int,
        on_progress: Callable[[int], None] | None = None,
        on_status: Callable[[str], None] | None = None,
    ) -> None:
        self.session = session
        self.run_id = run_id
        self.on_progress = on_progress
        self.on_status = on_status

    def report(self, progress: int, message: str | None = None, complete: bool = False) -> int | None:
        """
        Report progress for the run.

        Only a completed generation may report 100. Returns the effective
        progress, or None if the run is no longer active.
        """
        if not complete:
            progress = min(progress, MAX_PENDING_PROGRESS)

        previous = self.session.progress
        effective = self.session.update_progress(self.run_id, progress, message)
        if effective is None:
            return None

        if effective != previous and self.on_progress:
            self._notify(self.on_progress, effective)
        if message is not None and self.on_status:
            self._notify(self.on_status, message)
        return effective

    def _notify(self, callback: Callable, value) -> None:
        try:
            callback(value)
        except Exception as e:
            logger.error("Progress callback failed", error=str(e), session_id=self.session.session_id)
