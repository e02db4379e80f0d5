import pytest

from printforge.core.failure_handler import FailureHandler, resolve_error_message
from printforge.core.session import GenerationSession
from printforge.generators.base import (
    GenerationTimeoutError,
    ServerReportedFailure,
    StatusQueryError,
    SubmissionError,
)


@pytest.mark.parametrize(
    "error, expected",
    [
        (GenerationTimeoutError("anything"), "Generation timeout - please try again"),
        (ServerReportedFailure("bad prompt"), "bad prompt"),
        (ServerReportedFailure(None), "Generation failed"),
        (SubmissionError("Failed to start generation"), "Failed to start generation"),
        (StatusQueryError("Generation failed"), "Generation failed"),
        (RuntimeError("socket closed"), "socket closed"),
        (RuntimeError(), "Generation failed"),
        (None, "Generation failed"),
    ],
)
def test_resolve_error_message(error: BaseException | None, expected: str) -> None:
    assert resolve_error_message(error) == expected


def test_handler_resets_once_and_notifies_once(session: GenerationSession) -> None:
    run_id = session.begin()
    session.attach_task(run_id, "task-1")
    session.update_progress(run_id, 40)
    messages: list[str] = []
    handler = FailureHandler(session, run_id, on_error=messages.append)

    first = handler.handle(ServerReportedFailure("bad prompt"))
    second = handler.handle(GenerationTimeoutError("late"))

    assert first == "bad prompt"
    assert second is None
    assert messages == ["bad prompt"], "Error callback fires at most once"
    assert not session.is_generating
    assert session.progress == 0
    assert session.current_task_id is None
    assert session.last_error == "bad prompt"


def test_handler_survives_failing_callback(session: GenerationSession) -> None:
    run_id = session.begin()

    def broken(_: str) -> None:
        raise RuntimeError("callback bug")

    handler = FailureHandler(session, run_id, on_error=broken)
    assert handler.handle(SubmissionError("Failed to start generation")) == "Failed to start generation"
    assert not session.is_generating


def test_handler_does_not_reset_a_newer_run(session: GenerationSession) -> None:
    old_run = session.begin()
    session.reset_to_idle(old_run)
    new_run = session.begin()

    FailureHandler(session, old_run).handle(RuntimeError("stale"))

    assert session.is_generating
    assert session.is_active_run(new_run)
