"""
Generation service integrations.

This module provides the task-status interface to external 3D generators,
the request and status models exchanged with them, and the error types
raised while talking to them.
"""

from .base import (
    APIError,
    ErrorSeverity,
    GenerationError,
    GenerationInProgressError,
    GenerationTimeoutError,
    InvalidStateTransition,
    ServerReportedFailure,
    StatusQueryError,
    SubmissionError,
    configure_logging,
)
from .base_integration import BaseGenerationService
from .configs import GenerationConfig, ServiceConfig
from .enums import GenerationMode, ServiceProvider, TaskState
from .http_integration import HttpGenerationService
from .models import GenerateResponse, GenerationRequest, TaskStatus
from .scripted_service import ScriptedGenerationService

__all__ = [
    # Error classes
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
    # Service integrations
    "BaseGenerationService",
    "HttpGenerationService",
    "ScriptedGenerationService",
    "ServiceConfig",
    "GenerationConfig",
    # Models and enums
    "GenerationMode",
    "ServiceProvider",
    "TaskState",
    "GenerationRequest",
    "GenerateResponse",
    "TaskStatus",
]
