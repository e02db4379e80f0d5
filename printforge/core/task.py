"""
Generation task record and its state machine.

    SUBMITTED --(pending)--> POLLING
    POLLING --(pending, attempts < max)--> POLLING
    POLLING --(pending, attempts == max)--> TIMED_OUT
    SUBMITTED/POLLING --(succeed)--> SUCCEEDED
    SUBMITTED/POLLING --(failed)--> FAILED
    any non-terminal --(cancel)--> CANCELLED
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

import structlog

from printforge.generators.base import InvalidStateTransition
from printforge.generators.enums import TaskState
from printforge.generators.models import TaskStatus
from printforge.models.model_record import ModelMeta

logger = structlog.get_logger(__name__)


class PollerState(str, Enum):
    """Lifecycle state of a generation task on the client side."""
    SUBMITTED = "submitted"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({
    PollerState.SUCCEEDED,
    PollerState.FAILED,
    PollerState.TIMED_OUT,
    PollerState.CANCELLED,
})

ALLOWED_TRANSITIONS = {
    PollerState.SUBMITTED: {
        PollerState.POLLING,
        PollerState.SUCCEEDED,
        PollerState.FAILED,
        PollerState.CANCELLED,
    },
    PollerState.POLLING: {
        PollerState.POLLING,
        PollerState.SUCCEEDED,
        PollerState.FAILED,
        PollerState.TIMED_OUT,
        PollerState.CANCELLED,
    },
}


@dataclass
class GenerationTask:
    """One outstanding generation at the external generator."""

    task_id: str
    state: PollerState = PollerState.SUBMITTED
    status: TaskState = TaskState.PENDING
    attempts_made: int = 0
    result: Optional[TaskStatus] = None
    record: Optional[ModelMeta] = None
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    finished_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def transition_to(self, new_state: PollerState) -> None:
        if new_state not in ALLOWED_TRANSITIONS.get(self.state, set()):
            raise InvalidStateTransition(self.state.value, new_state.value)

        if new_state != self.state:
            logger.info(
                "Task state changed",
                task_id=self.task_id,
                from_state=self.state.value,
                to_state=new_state.value,
                attempts=self.attempts_made,
            )
        self.state = new_state
        if new_state.is_terminal:
            self.finished_at = datetime.utcnow()

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "state": self.state.value,
            "status": self.status.value,
            "attempts_made": self.attempts_made,
            "error_message": self.error_message,
            "created_at": self.created_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
