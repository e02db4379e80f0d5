"""
Error hierarchy and logging setup for the generation subsystem.

Every failure raised while creating or tracking a generation task derives
from GenerationError, so the flow boundary can funnel all of them through
a single failure handler and turn them into one user-visible message.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

import structlog


class ErrorSeverity(str, Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Error Handling Classes

class GenerationError(Exception):
    """Base exception for all generation-related errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.severity = severity
        self.details = details or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary format."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "severity": self.severity.value,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "original_exception": str(self.original_exception) if self.original_exception else None,
        }


class APIError(GenerationError):
    """API-related errors (network, authentication, service unavailable)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Any] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.response_data = response_data
        self.details.update({
            "status_code": status_code,
            "response_data": response_data,
        })


class SubmissionError(APIError):
    """The generator rejected the request or could not be reached at task creation."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message, **kwargs)


class StatusQueryError(APIError):
    """A status query for an existing task could not be completed."""


class ServerReportedFailure(GenerationError):
    """The generator reported the task as failed."""

    def __init__(self, server_message: Optional[str] = None, task_id: Optional[str] = None, **kwargs):
        super().__init__(server_message or "Generation failed", **kwargs)
        self.server_message = server_message
        self.task_id = task_id
        self.details.update({"task_id": task_id})


class GenerationTimeoutError(GenerationError):
    """The attempt budget ran out while the task was still pending.

    The task may still be running on the generator side.
    """

    def __init__(
        self,
        message: str,
        task_id: Optional[str] = None,
        attempts: Optional[int] = None,
        timeout_duration: Optional[float] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.task_id = task_id
        self.attempts = attempts
        self.timeout_duration = timeout_duration
        self.details.update({
            "task_id": task_id,
            "attempts": attempts,
            "timeout_duration": timeout_duration,
        })


class InvalidStateTransition(GenerationError):
    """A task was asked to move to a state its current state does not allow."""

    def __init__(self, current: str, requested: str, **kwargs):
        super().__init__(
            f"Cannot transition from {current} to {requested}",
            severity=ErrorSeverity.CRITICAL,
            **kwargs,
        )
        self.details.update({"current": current, "requested": requested})


class GenerationInProgressError(GenerationError):
    """A session already has an active generation."""

    def __init__(self, session_id: str, task_id: Optional[str] = None, **kwargs):
        super().__init__(
            "A generation is already in progress",
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.details.update({"session_id": session_id, "task_id": task_id})


# Logging Configuration

def configure_logging(
    level: str = "INFO",
    format_json: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        format_json: Whether to format logs as JSON
        include_timestamp: Whether to include timestamps
    """
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="ISO"))

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )


__all__ = [
    "ErrorSeverity",
    "GenerationError",
    "APIError",
    "SubmissionError",
    "StatusQueryError",
    "ServerReportedFailure",
    "GenerationTimeoutError",
    "InvalidStateTransition",
    "GenerationInProgressError",
    "configure_logging",
]
