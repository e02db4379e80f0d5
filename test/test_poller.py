from collections.abc import Callable

import pytest

from printforge.core.cancellation import CancellationToken
from printforge.core.poller import StatusPoller, pending_progress
from printforge.core.progress import ProgressReporter
from printforge.core.scheduler import ManualScheduler
from printforge.core.session import GenerationSession
from printforge.core.task import GenerationTask, PollerState
from printforge.generators.base import StatusQueryError
from printforge.generators.models import TaskStatus
from printforge.generators.scripted_service import ScriptedGenerationService


def test_pending_progress_grows_and_caps_at_80() -> None:
    assert pending_progress(0) == 30
    assert pending_progress(5) == 40
    assert pending_progress(25) == 80
    assert pending_progress(100) == 80


def test_max_attempts_must_be_positive(scripted_service: Callable[..., ScriptedGenerationService]) -> None:
    with pytest.raises(ValueError):
        StatusPoller(scripted_service(), max_attempts=0)


@pytest.mark.asyncio
async def test_success_after_29_pending_uses_30_queries(
    scheduler: ManualScheduler, scripted_service: Callable[..., ScriptedGenerationService]
) -> None:
    service = scripted_service(*([TaskStatus.pending()] * 29 + [TaskStatus.succeeded(glb_url="/m.glb")]))
    poller = StatusPoller(service, scheduler=scheduler, interval_seconds=2.0, max_attempts=30)
    task = GenerationTask(task_id="task-1")

    await poller.poll(task, CancellationToken())

    assert task.state == PollerState.SUCCEEDED
    assert task.attempts_made == 30
    assert service.query_count == 30
    assert task.result.glb_url == "/m.glb"
    assert scheduler.delays == [2.0] * 29, "Exactly one delay between consecutive queries"


@pytest.mark.asyncio
async def test_budget_exhausted_gives_timeout_without_extra_query(
    scheduler: ManualScheduler, scripted_service: Callable[..., ScriptedGenerationService]
) -> None:
    service = scripted_service(*([TaskStatus.pending()] * 31))
    poller = StatusPoller(service, scheduler=scheduler, max_attempts=30)
    task = GenerationTask(task_id="task-1")

    await poller.poll(task, CancellationToken())

    assert task.state == PollerState.TIMED_OUT
    assert task.error_message == "Generation timeout - please try again"
    assert service.query_count == 30, "No 31st query after the budget is spent"
    assert len(scheduler.delays) == 29


@pytest.mark.asyncio
async def test_server_failure_keeps_message(
    scheduler: ManualScheduler, scripted_service: Callable[..., ScriptedGenerationService]
) -> None:
    service = scripted_service(TaskStatus.pending(), TaskStatus.failed("bad prompt"))
    task = GenerationTask(task_id="task-1")

    await StatusPoller(service, scheduler=scheduler).poll(task, CancellationToken())

    assert task.state == PollerState.FAILED
    assert task.error_message == "bad prompt"
    assert task.result is None
    assert service.query_count == 2


@pytest.mark.asyncio
async def test_first_query_may_already_be_terminal(
    scheduler: ManualScheduler, scripted_service: Callable[..., ScriptedGenerationService]
) -> None:
    service = scripted_service(TaskStatus.succeeded())
    task = GenerationTask(task_id="task-1")

    await StatusPoller(service, scheduler=scheduler).poll(task, CancellationToken())

    assert task.state == PollerState.SUCCEEDED
    assert scheduler.delays == []


@pytest.mark.asyncio
async def test_progress_is_monotonic_and_below_100_until_success(
    session: GenerationSession,
    scheduler: ManualScheduler,
    scripted_service: Callable[..., ScriptedGenerationService],
) -> None:
    service = scripted_service(*([TaskStatus.pending()] * 40 + [TaskStatus.succeeded()]))
    run_id = session.begin()
    session.update_progress(run_id, 20)
    progress: list[int] = []
    reporter = ProgressReporter(session, run_id, on_progress=progress.append)

    await StatusPoller(service, scheduler=scheduler, max_attempts=50).poll(
        GenerationTask(task_id="task-1"), CancellationToken(), reporter
    )

    assert progress == sorted(progress), "Progress must never decrease"
    assert progress[-1] == 100
    assert all(value < 100 for value in progress[:-1])
    assert max(progress[:-1]) == 80


@pytest.mark.asyncio
async def test_cancel_before_polling_issues_no_query(
    scheduler: ManualScheduler, scripted_service: Callable[..., ScriptedGenerationService]
) -> None:
    service = scripted_service()
    token = CancellationToken()
    token.cancel("test")
    task = GenerationTask(task_id="task-1")

    await StatusPoller(service, scheduler=scheduler).poll(task, token)

    assert task.state == PollerState.CANCELLED
    assert service.query_count == 0


@pytest.mark.asyncio
async def test_cancel_during_query_discards_its_result(
    scheduler: ManualScheduler, scripted_service: Callable[..., ScriptedGenerationService]
) -> None:
    token = CancellationToken()
    service = scripted_service(
        TaskStatus.pending(),
        TaskStatus.succeeded(),
        on_query=lambda task_id, n: token.cancel("user") if n == 2 else None,
    )
    task = GenerationTask(task_id="task-1")

    await StatusPoller(service, scheduler=scheduler).poll(task, token)

    assert task.state == PollerState.CANCELLED
    assert task.result is None
    assert service.query_count == 2


@pytest.mark.asyncio
async def test_status_query_errors_propagate(
    scheduler: ManualScheduler, scripted_service: Callable[..., ScriptedGenerationService]
) -> None:
    service = scripted_service(
        TaskStatus.pending(), status_errors={1: StatusQueryError("Status check failed: 502", status_code=502)}
    )
    task = GenerationTask(task_id="task-1")

    with pytest.raises(StatusQueryError):
        await StatusPoller(service, scheduler=scheduler).poll(task, CancellationToken())
    assert task.state == PollerState.POLLING
    assert task.attempts_made == 2
