"""
HTTP integration for the external 3D generator.

This module provides the HttpGenerationService class, which creates tasks
and queries their status over the generator's JSON API using aiohttp.
"""

import asyncio

import aiohttp
import structlog
from pydantic import ValidationError

from printforge.generators.base import APIError, StatusQueryError, SubmissionError

from .base_integration import BaseGenerationService
from .enums import ServiceProvider
from .models import GenerateResponse, GenerationRequest, TaskStatus

logger = structlog.get_logger(__name__)


class HttpGenerationService(BaseGenerationService):
    """Generator integration over HTTP."""

    provider = ServiceProvider.NANO_BANANA

    async def initialize(self) -> None:
        """Create the HTTP session in the current event loop."""
        if self.session and not self.session.closed:
            await self.session.close()

        timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
        self.session = aiohttp.ClientSession(timeout=timeout)
        logger.info("Created HTTP session", service=self.__class__.__name__, base_url=self.config.base_url)

    async def cleanup(self) -> None:
        """Clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if not self.session or self.session.closed:
            await self.initialize()
        return self.session

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}{path}"

    async def submit(self, request: GenerationRequest) -> str:
        """Start a generation task and return its identifier."""
        payload = request.to_payload()
        url = self._url(self.config.submit_path)
        logger.info("Submitting generation request", url=url, mode=request.mode.value, style=request.style.value)

        try:
            session = await self._get_session()
            async with session.post(url, headers=self._headers(), json=payload) as response:
                if response.status not in (200, 201, 202):
                    error_text = await response.text()
                    logger.error("Generation request rejected", status=response.status, response=error_text)
                    raise SubmissionError(
                        f"Generation request failed: {response.status}",
                        status_code=response.status,
                        response_data=error_text,
                    )
                data = await response.json(content_type=None)
        except SubmissionError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error("Generation request could not be sent", error=str(e), error_type=type(e).__name__)
            raise SubmissionError(
                "Failed to start generation",
                original_exception=e,
            ) from e

        try:
            task_id = GenerateResponse.model_validate(data).task_id
        except ValidationError as e:
            logger.error("Generator response carried no task id", response=data)
            raise SubmissionError(
                "Generator returned no task id",
                response_data=data,
                original_exception=e,
            ) from e

        logger.info("Generation task created", task_id=task_id)
        return task_id

    async def get_status(self, task_id: str) -> TaskStatus:
        """Query the status of a task."""
        url = self._url(self.config.status_path.format(task_id=task_id))

        try:
            session = await self._get_session()
            async with session.get(url, headers=self._headers()) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error("Status check failed", task_id=task_id, status=response.status, response=error_text)
                    raise StatusQueryError(
                        f"Status check failed: {response.status}",
                        status_code=response.status,
                        response_data=error_text,
                    )
                data = await response.json(content_type=None)
        except StatusQueryError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error("Status check could not be sent", task_id=task_id, error=str(e))
            raise StatusQueryError("Generation failed", original_exception=e) from e

        try:
            status = TaskStatus.model_validate(data)
        except ValidationError as e:
            logger.error("Malformed status payload", task_id=task_id, response=data)
            raise StatusQueryError("Generation failed", response_data=data, original_exception=e) from e

        logger.debug("Task status received", task_id=task_id, status=status.status.value)
        return status

    async def cancel(self, task_id: str) -> None:
        """Ask the generator to stop a task."""
        if not self.supports_cancellation:
            await super().cancel(task_id)

        url = self._url(self.config.status_path.format(task_id=task_id))
        try:
            session = await self._get_session()
            async with session.delete(url, headers=self._headers()) as response:
                if response.status not in (200, 202, 204):
                    error_text = await response.text()
                    raise APIError(
                        f"Task cancellation failed: {response.status}",
                        status_code=response.status,
                        response_data=error_text,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise APIError("Task cancellation could not be sent", original_exception=e) from e

        logger.info("Generation task cancelled on generator", task_id=task_id)
