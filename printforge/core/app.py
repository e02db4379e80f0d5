"""
Application wiring for PrintForge.

ModelStudioApp owns the generator client, the per-user sessions and the
background flows, and is the single entry point the UI talks to.
"""

from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

import structlog

from printforge.factories.service_factory import create_generation_config, create_generation_service
from printforge.generators.base import GenerationInProgressError
from printforge.generators.base_integration import BaseGenerationService
from printforge.generators.models import GenerationRequest
from printforge.models.model_record import ModelMeta
from printforge.utils.env_config import AppSettings, get_settings
from printforge.utils.validators import RequestValidator

from .generation_flow import GenerationCallbacks, GenerationFlow
from .scheduler import Scheduler
from .session_manager import SessionManager
from .task_manager import TaskManager

logger = structlog.get_logger(__name__)


class ModelStudioApp:
    """Main application class for AI model generation."""

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        service: Optional[BaseGenerationService] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        """Initialize the application."""
        try:
            self.settings: AppSettings = settings or get_settings()
            logger.info("Configuration loaded successfully")
        except Exception as e:
            logger.warning(f"Config loading failed, using defaults: {e}")
            self.settings = AppSettings()

        self.generation_config = create_generation_config(self.settings)
        self.scheduler = scheduler

        # Initialize managers
        self.task_manager = TaskManager()
        self.session_manager = SessionManager(
            timedelta(minutes=self.settings.session_timeout_minutes),
            on_session_removed=self._forget_session,
        )

        self.service: Optional[BaseGenerationService] = service
        # session_id -> handle of that session's latest flow
        self.session_flows: Dict[str, str] = {}

        # Application state
        self.is_initialized = False

    def _forget_session(self, session_id: str) -> None:
        self.session_flows.pop(session_id, None)

    async def initialize(self) -> None:
        """Initialize all components asynchronously."""
        if self.is_initialized:
            return

        logger.info("Initializing PrintForge app")
        if self.service is None:
            self.service = create_generation_service(self.settings)
        await self.service.initialize()
        logger.info(
            "Generation service initialized",
            service=self.service.__class__.__name__,
            demo_mode=self.settings.demo_mode,
        )

        self.task_manager.start_cleanup()
        self.is_initialized = True
        logger.info("App initialization completed successfully")

    async def start_generation(
        self,
        request: GenerationRequest,
        session_id: Optional[str] = None,
        callbacks: Optional[GenerationCallbacks] = None,
    ) -> Tuple[str, str]:
        """
        Validate a request and start generating in the background.

        Returns the flow handle and the session id.

        Raises:
            ValidationException: If the request is invalid
            GenerationInProgressError: If the session is already generating
        """
        if not self.is_initialized:
            raise RuntimeError("Application not initialized")

        request = RequestValidator.validate(request)
        self.session_manager.cleanup_expired_sessions()
        session = self.session_manager.get_or_create_session(session_id)
        # A scheduled flow claims the session only once it starts running
        previous = self.task_manager.flows.get(self.session_flows.get(session.session_id, ""))
        pending = previous is not None and not previous.finished and not previous.token.cancelled
        if session.is_generating or pending:
            raise GenerationInProgressError(session.session_id, task_id=session.current_task_id)

        flow = GenerationFlow(
            self.service,
            session,
            config=self.generation_config,
            scheduler=self.scheduler,
            callbacks=callbacks,
        )
        handle = self.task_manager.create_task(flow, request)
        self.session_flows[session.session_id] = handle
        logger.info("Generation scheduled", session_id=session.session_id, handle=handle)
        return handle, session.session_id

    def get_generation_status(self, session_id: str) -> Dict[str, Any]:
        """Get the in-flight generation state of a session."""
        session = self.session_manager.get_session(session_id)
        if session is None:
            return {"session_id": session_id, "state": "not_found"}

        status = session.snapshot()
        handle = self.session_flows.get(session_id)
        if handle:
            status["flow"] = self.task_manager.get_task_status(handle)
        return status

    def cancel_generation(self, session_id: str) -> bool:
        """Cancel the running generation of a session."""
        handle = self.session_flows.get(session_id)
        if handle is None:
            return False
        return self.task_manager.cancel_task(handle)

    def get_session_history(self, session_id: str) -> List[ModelMeta]:
        """Get the generation history for a session."""
        return self.session_manager.get_session_history(session_id)

    async def shutdown(self) -> None:
        """Shutdown the application and clean up resources."""
        logger.info("Shutting down PrintForge app")

        await self.task_manager.shutdown()
        if self.service:
            await self.service.cleanup()

        self.is_initialized = False
        logger.info("Application shutdown completed")
