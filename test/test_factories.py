import pytest

from printforge.factories.service_factory import create_generation_config, create_generation_service
from printforge.generators.enums import TaskState
from printforge.generators.http_integration import HttpGenerationService
from printforge.generators.models import GenerationRequest, TaskStatus
from printforge.generators.scripted_service import ScriptedGenerationService
from printforge.utils.env_config import AppSettings


def test_create_demo_service_without_url() -> None:
    service = create_generation_service(AppSettings(generation_api_url=None))
    assert isinstance(service, ScriptedGenerationService), "Demo service expected without a generator URL"


def test_blank_url_means_demo_service() -> None:
    service = create_generation_service(AppSettings(generation_api_url="   "))
    assert isinstance(service, ScriptedGenerationService)


def test_create_http_service() -> None:
    settings = AppSettings(
        generation_api_url=" https://generator.example.com ",
        generation_api_key="secret",
        generation_request_timeout=15,
        generation_supports_cancel=True,
    )
    service = create_generation_service(settings)

    assert isinstance(service, HttpGenerationService)
    assert service.config.base_url == "https://generator.example.com"
    assert service.config.api_key == "secret"
    assert service.config.timeout_seconds == 15
    assert service.supports_cancellation


def test_create_generation_config() -> None:
    settings = AppSettings(generation_poll_interval=1.5, generation_max_poll_attempts=12, material_density_g_cm3=1.1)
    config = create_generation_config(settings)

    assert config.poll_interval_seconds == 1.5
    assert config.max_poll_attempts == 12
    assert config.material_density_g_cm3 == 1.1


@pytest.mark.asyncio
async def test_demo_service_forgets_finished_tasks() -> None:
    service = ScriptedGenerationService.demo(pending_polls=2)
    task_id = await service.submit(GenerationRequest(prompt="Cable clip"))

    states = [(await service.get_status(task_id)).status for _ in range(3)]

    assert states == [TaskState.PENDING, TaskState.PENDING, TaskState.SUCCEED]
    assert service._queries_per_task == {}


@pytest.mark.asyncio
async def test_scripted_service_history_is_bounded() -> None:
    service = ScriptedGenerationService([TaskStatus.pending()], history_limit=3)

    for _ in range(5):
        await service.submit(GenerationRequest(prompt="Cable clip"))
        await service.get_status("task-1")

    assert len(service.submitted_requests) == 3
    assert service.query_count == 3
