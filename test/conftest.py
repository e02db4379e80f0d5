from collections.abc import AsyncGenerator, Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
import structlog

from printforge.core.app import ModelStudioApp
from printforge.core.scheduler import ManualScheduler
from printforge.core.session import GenerationSession
from printforge.core.session_manager import SessionManager
from printforge.core.task_manager import TaskManager
from printforge.generators.configs import GenerationConfig, ServiceConfig
from printforge.generators.models import GenerationRequest, TaskStatus
from printforge.generators.scripted_service import ScriptedGenerationService
from printforge.models.model_record import ModelStyle
from printforge.utils.env_config import AppSettings


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def session() -> GenerationSession:
    return GenerationSession("test-session")


@pytest.fixture
def session_manager() -> SessionManager:
    return SessionManager()


@pytest.fixture
def task_manager() -> TaskManager:
    return TaskManager()


@pytest.fixture
def generation_config() -> GenerationConfig:
    return GenerationConfig(success_reset_delay_seconds=0)


@pytest.fixture
def scripted_service() -> Callable[..., ScriptedGenerationService]:
    def factory(*statuses: TaskStatus, supports_cancellation: bool = False, **kwargs: Any) -> ScriptedGenerationService:
        config = ServiceConfig(base_url="scripted://test", supports_cancellation=supports_cancellation)
        return ScriptedGenerationService(statuses or [TaskStatus.pending()], config=config, **kwargs)

    return factory


@pytest.fixture
def text_request() -> GenerationRequest:
    return GenerationRequest(prompt="A medieval dragon figurine", style=ModelStyle.LOW_POLY, scale_mm=50)


@pytest.fixture
def test_settings() -> AppSettings:
    return AppSettings(
        generation_api_url=None,
        generation_poll_interval=0.01,
        generation_max_poll_attempts=5,
        generation_success_reset_delay=0,
    )


@pytest.fixture
async def studio_app(
    test_settings: AppSettings,
    scripted_service: Callable[..., ScriptedGenerationService],
    scheduler: ManualScheduler,
) -> AsyncGenerator[ModelStudioApp]:
    service = scripted_service(TaskStatus.pending(), TaskStatus.succeeded(glb_url="/m.glb", stl_url="/m.stl"))
    app = ModelStudioApp(settings=test_settings, service=service, scheduler=scheduler)
    await app.initialize()
    yield app
    await app.shutdown()


@pytest.fixture(autouse=True)
def mock_logger(mocker: Any) -> MagicMock:
    return mocker.patch.object(structlog, "get_logger", return_value=MagicMock())


# Ensure async cleanup for task manager
@pytest.fixture(autouse=True)
async def cleanup_tasks(task_manager: TaskManager) -> AsyncGenerator[None]:
    yield
    await task_manager.shutdown()
