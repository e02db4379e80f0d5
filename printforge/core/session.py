"""
Generation session state.

A GenerationSession is the caller-owned replacement for a global UI store:
it holds the busy flag, progress percentage, status phrase and the single
current-task slot for one user.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from printforge.generators.base import GenerationInProgressError
from printforge.models.model_record import ModelMeta

logger = structlog.get_logger(__name__)


class GenerationSession:
    """In-flight generation state for a single user."""

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or str(uuid.uuid4())
        self.created_at = datetime.utcnow()
        self.last_activity = self.created_at

        self.is_generating = False
        self.progress = 0
        self.status_message = ""
        self.current_task_id: Optional[str] = None
        self.last_error: Optional[str] = None
        self.last_record: Optional[ModelMeta] = None
        self.generation_history: List[ModelMeta] = []

        self._run_id = 0
        self._active_run: Optional[int] = None

    def touch(self) -> None:
        self.last_activity = datetime.utcnow()

    def is_active_run(self, run_id: int) -> bool:
        return self._active_run is not None and self._active_run == run_id

    def begin(self) -> int:
        """Claim the session for a new generation and return its run id."""
        if self.is_generating:
            raise GenerationInProgressError(self.session_id, task_id=self.current_task_id)

        self._run_id += 1
        self._active_run = self._run_id
        self.is_generating = True
        self.progress = 0
        self.status_message = ""
        self.current_task_id = None
        self.last_error = None
        self.touch()
        logger.info("Generation started", session_id=self.session_id, run_id=self._run_id)
        return self._run_id

    def attach_task(self, run_id: int, task_id: str) -> None:
        if self.is_active_run(run_id):
            self.current_task_id = task_id
            self.touch()

    def update_progress(self, run_id: int, progress: int, message: Optional[str] = None) -> Optional[int]:
        """
        Raise progress for the active run.

        Progress never decreases within a run. Updates from a run that is no
        longer active are ignored and return None.
        """
        if not self.is_active_run(run_id):
            return None

        self.progress = max(self.progress, max(0, min(100, int(progress))))
        if message is not None:
            self.status_message = message
        self.touch()
        return self.progress

    def reset_to_idle(self, run_id: int) -> bool:
        """
        Clear in-flight state for a run.

        Returns True only for the call that actually performed the reset.
        """
        if not self.is_active_run(run_id):
            return False

        self._active_run = None
        self.is_generating = False
        self.progress = 0
        self.status_message = ""
        self.current_task_id = None
        self.touch()
        logger.info("Generation state reset to idle", session_id=self.session_id, run_id=run_id)
        return True

    def record_result(self, record: ModelMeta) -> None:
        self.last_record = record
        self.generation_history.append(record)
        self.touch()

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data view of the session for status endpoints and the UI."""
        return {
            "session_id": self.session_id,
            "is_generating": self.is_generating,
            "progress": self.progress,
            "status_message": self.status_message,
            "task_id": self.current_task_id,
            "last_error": self.last_error,
            "generation_count": len(self.generation_history),
        }
