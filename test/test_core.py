import asyncio
from datetime import datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock

import pytest

from printforge.core.app import ModelStudioApp
from printforge.core.generation_flow import GenerationCallbacks
from printforge.generators.base import GenerationInProgressError
from printforge.generators.models import GenerationRequest
from printforge.generators.scripted_service import ScriptedGenerationService
from printforge.models.model_record import ModelMeta
from printforge.utils.env_config import AppSettings
from printforge.utils.validators import ValidationException


async def _wait_until_idle(app: ModelStudioApp, session_id: str) -> None:
    for _ in range(100):
        if not app.get_generation_status(session_id)["is_generating"]:
            return
        await asyncio.sleep(0)
    raise AssertionError("Generation did not finish")


@pytest.mark.asyncio
async def test_app_initialization(test_settings: AppSettings, mocker: Any) -> None:
    mocker.patch("printforge.core.task_manager.TaskManager.start_cleanup")
    app = ModelStudioApp(settings=test_settings)

    await app.initialize()

    assert app.is_initialized, "App should be initialized"
    assert isinstance(app.service, ScriptedGenerationService), "Demo service expected without a generator URL"
    assert app.generation_config.max_poll_attempts == 5


@pytest.mark.asyncio
async def test_app_shutdown(studio_app: ModelStudioApp, mocker: Any) -> None:
    mock_cleanup = mocker.patch("printforge.core.task_manager.TaskManager.shutdown", AsyncMock())
    service_cleanup = mocker.spy(studio_app.service, "cleanup")

    await studio_app.shutdown()

    mock_cleanup.assert_called_once()
    service_cleanup.assert_called_once()
    assert not studio_app.is_initialized


@pytest.mark.asyncio
async def test_start_generation_uninitialized(test_settings: AppSettings, text_request: GenerationRequest) -> None:
    app = ModelStudioApp(settings=test_settings)
    with pytest.raises(RuntimeError, match="Application not initialized"):
        await app.start_generation(text_request)


@pytest.mark.asyncio
async def test_start_generation_runs_to_completion(
    studio_app: ModelStudioApp, text_request: GenerationRequest
) -> None:
    completed: list[ModelMeta] = []
    handle, session_id = await studio_app.start_generation(
        text_request, callbacks=GenerationCallbacks(on_generation_complete=completed.append)
    )
    await studio_app.task_manager.tasks[handle]

    assert len(completed) == 1
    assert studio_app.get_session_history(session_id) == completed
    status = studio_app.get_generation_status(session_id)
    assert status["is_generating"] is False
    assert status["flow"]["state"] == "succeeded"


@pytest.mark.asyncio
async def test_start_generation_validates_request(studio_app: ModelStudioApp) -> None:
    with pytest.raises(ValidationException):
        await studio_app.start_generation(GenerationRequest(prompt="   "))
    with pytest.raises(ValidationException):
        await studio_app.start_generation(GenerationRequest(prompt="Vase", scale_mm=500))


@pytest.mark.asyncio
async def test_one_generation_per_session(studio_app: ModelStudioApp, text_request: GenerationRequest) -> None:
    handle, session_id = await studio_app.start_generation(text_request)
    await asyncio.sleep(0)

    with pytest.raises(GenerationInProgressError):
        await studio_app.start_generation(text_request, session_id=session_id)

    await studio_app.task_manager.tasks[handle]
    await _wait_until_idle(studio_app, session_id)
    handle, _ = await studio_app.start_generation(text_request, session_id=session_id)
    await studio_app.task_manager.tasks[handle]
    assert len(studio_app.get_session_history(session_id)) == 2


@pytest.mark.asyncio
async def test_cancel_generation(studio_app: ModelStudioApp, text_request: GenerationRequest) -> None:
    handle, session_id = await studio_app.start_generation(text_request)

    assert studio_app.cancel_generation(session_id)
    await studio_app.task_manager.tasks[handle]

    assert studio_app.get_generation_status(session_id)["flow"]["state"] == "cancelled"
    assert studio_app.get_session_history(session_id) == []
    assert not studio_app.cancel_generation("unknown-session")


def test_status_of_unknown_session(test_settings: AppSettings) -> None:
    app = ModelStudioApp(settings=test_settings)
    assert app.get_generation_status("missing") == {"session_id": "missing", "state": "not_found"}


@pytest.mark.asyncio
async def test_expired_session_releases_flow_handle(studio_app: ModelStudioApp, text_request: GenerationRequest) -> None:
    handle, session_id = await studio_app.start_generation(text_request)
    await studio_app.task_manager.tasks[handle]
    await _wait_until_idle(studio_app, session_id)

    studio_app.session_manager.sessions[session_id].last_activity = datetime.utcnow() - timedelta(days=1)
    studio_app.session_manager.cleanup_expired_sessions()

    assert session_id not in studio_app.session_flows
    assert studio_app.get_generation_status(session_id)["state"] == "not_found"
