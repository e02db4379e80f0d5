"""
Generation task lifecycle.

Submission, status polling, result materialization and failure handling
for AI model generation, plus the session and task bookkeeping around them.
"""

from .cancellation import CancellationToken
from .failure_handler import FailureHandler, resolve_error_message
from .generation_flow import GenerationCallbacks, GenerationFlow
from .materializer import ResultMaterializer
from .poller import StatusPoller
from .progress import ProgressReporter
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from .session import GenerationSession
from .session_manager import SessionManager
from .submitter import TaskSubmitter
from .task import GenerationTask, PollerState
from .task_manager import TaskManager

__all__ = [
    "AsyncioScheduler",
    "CancellationToken",
    "FailureHandler",
    "GenerationCallbacks",
    "GenerationFlow",
    "GenerationSession",
    "GenerationTask",
    "ManualScheduler",
    "PollerState",
    "ProgressReporter",
    "ResultMaterializer",
    "Scheduler",
    "SessionManager",
    "StatusPoller",
    "TaskManager",
    "TaskSubmitter",
    "resolve_error_message",
]
