"""
Base integration for 3D generation services.

This module provides the BaseGenerationService class, the task-status
interface every external generator is driven through.
"""

from abc import ABC, abstractmethod
from typing import Any

from .configs import ServiceConfig
from .enums import GenerationMode, ServiceProvider
from .models import GenerationRequest, TaskStatus


class BaseGenerationService(ABC):
    """Base class for 3D generation service integrations."""

    provider: ServiceProvider = ServiceProvider.NANO_BANANA

    def __init__(self, config: ServiceConfig) -> None:
        self.config = config
        self.session: Any | None = None  # Will be initialized as needed

    async def __aenter__(self) -> "BaseGenerationService":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.cleanup()

    async def initialize(self) -> None:
        """Initialize the service integration."""
        pass

    async def cleanup(self) -> None:
        """Clean up resources."""
        pass

    @property
    def supports_cancellation(self) -> bool:
        """Whether the generator can stop a task that is still running."""
        return self.config.supports_cancellation

    def can_handle_request(self, request: GenerationRequest) -> bool:
        """Check if this service can handle the given request."""
        if request.mode == GenerationMode.IMAGE_TO_MODEL:
            return self.config.supports_image_to_model
        return True

    @abstractmethod
    async def submit(self, request: GenerationRequest) -> str:
        """
        Start a generation task.

        Returns:
            The opaque task identifier assigned by the generator

        Raises:
            SubmissionError: If the generator rejected the request or was unreachable
        """
        pass

    @abstractmethod
    async def get_status(self, task_id: str) -> TaskStatus:
        """
        Query the current status of a task.

        Raises:
            StatusQueryError: If the query itself could not be completed
        """
        pass

    async def cancel(self, task_id: str) -> None:
        """Ask the generator to stop a task."""
        raise NotImplementedError(f"{self.__class__.__name__} does not support cancellation")
