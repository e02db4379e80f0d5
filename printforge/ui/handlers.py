"""
Event handlers for the PrintForge generation panel.

Handlers are plain async methods over ModelStudioApp so they can be driven
directly in tests without launching Gradio. Outcomes reach the panel
through the generation callbacks and are picked up by the progress timer.
"""

from typing import Any

import gradio as gr
import structlog

from printforge.core.app import ModelStudioApp
from printforge.core.generation_flow import GenerationCallbacks
from printforge.core.task import PollerState
from printforge.generators.base import GenerationError, GenerationInProgressError
from printforge.generators.enums import GenerationMode
from printforge.generators.models import GenerationRequest
from printforge.models.model_record import ModelMeta, ModelStyle
from printforge.utils.validators import ErrorMessages, ValidationException, random_seed

from .components import DEFAULT_SCALE_MM, EXAMPLE_PROMPTS
from .utils import UIUtils

logger = structlog.get_logger(__name__)

READY_HTML = UIUtils.format_status_html("success", "Ready to generate")


class UIHandlers:
    """Event handlers for UI interactions."""

    def __init__(self, app: ModelStudioApp):
        self.app = app
        # session_id -> ("complete", ModelMeta) or ("error", message)
        self.outcomes: dict[str, tuple[str, Any]] = {}

    def _callbacks(self, session_id: str) -> GenerationCallbacks:
        def on_complete(record: ModelMeta) -> None:
            self.outcomes[session_id] = ("complete", record)

        def on_error(message: str) -> None:
            self.outcomes[session_id] = ("error", message)

        return GenerationCallbacks(on_generation_complete=on_complete, on_generation_error=on_error)

    def build_request(
        self,
        mode: str,
        prompt: str | None,
        image_url: str | None,
        style: str | None,
        scale_mm: float | None,
        seed: float | None,
    ) -> GenerationRequest:
        """Turn raw form values into a request."""
        generation_mode = GenerationMode(mode or GenerationMode.TEXT.value)
        image_url = (image_url or "").strip() or None
        if generation_mode == GenerationMode.IMAGE_TO_MODEL and not image_url:
            raise ValidationException(ErrorMessages.IMAGE_REQUIRED, field="image_url", code="IMAGE_REQUIRED")

        return GenerationRequest(
            mode=generation_mode,
            prompt=prompt,
            image_url=image_url if generation_mode == GenerationMode.IMAGE_TO_MODEL else None,
            style=ModelStyle(style) if style else ModelStyle.REALISTIC,
            scale_mm=DEFAULT_SCALE_MM if scale_mm is None else scale_mm,
            seed=None if seed is None else int(seed),
        )

    async def start_generation(
        self,
        mode: str,
        prompt: str | None,
        image_url: str | None,
        style: str | None,
        scale_mm: float | None,
        seed: float | None,
        session_id: str | None,
    ) -> tuple:
        """
        Start a generation from the form.

        Returns (session_id, status, progress, result, cancel button, timer).
        """
        try:
            await self.app.initialize()
            request = self.build_request(mode, prompt, image_url, style, scale_mm, seed)

            session_id = self.app.session_manager.get_or_create_session(session_id).session_id
            self.outcomes.pop(session_id, None)
            await self.app.start_generation(request, session_id=session_id, callbacks=self._callbacks(session_id))

            logger.info("Generation requested from UI", session_id=session_id, mode=request.mode.value)
            return (
                session_id,
                UIUtils.format_status_html("success", "Generation started", "AI is working on your 3D model..."),
                gr.update(value=UIUtils.format_progress_html(0, "Starting generation..."), visible=True),
                gr.update(),
                gr.update(visible=True),
                gr.update(active=True),
            )

        except ValidationException as e:
            logger.warning("Validation error in generation form", error=e.message, field=e.field)
            return self._start_failed(session_id, "Invalid input", e.message)

        except GenerationInProgressError as e:
            return self._start_failed(session_id, "Generation in progress", e.message)

        except GenerationError as e:
            return self._start_failed(session_id, "Generation failed", e.message)

        except ValueError as e:
            logger.warning("Value error in generation form", error=str(e))
            return self._start_failed(session_id, "Invalid input", str(e))

    def _start_failed(self, session_id: str | None, title: str, detail: str) -> tuple:
        return (
            session_id,
            UIUtils.format_status_html("error", title, detail),
            gr.update(visible=False),
            gr.update(),
            gr.update(visible=False),
            gr.update(active=False),
        )

    async def check_progress(self, session_id: str | None) -> tuple:
        """
        Refresh the panel from the session state.

        Returns (status, progress, result, cancel button, timer).
        """
        if not session_id:
            return gr.update(), gr.update(), gr.update(), gr.update(visible=False), gr.update(active=False)

        outcome = self.outcomes.pop(session_id, None)
        if outcome is not None:
            kind, value = outcome
            if kind == "complete":
                return (
                    UIUtils.format_status_html("success", "Generation complete!", value.name),
                    gr.update(value=UIUtils.format_progress_html(100, "Generation complete!"), visible=True),
                    UIUtils.format_model_card_html(value),
                    gr.update(visible=False),
                    gr.update(active=False),
                )
            return (
                UIUtils.format_status_html("error", "Generation failed", value),
                gr.update(visible=False),
                gr.update(),
                gr.update(visible=False),
                gr.update(active=False),
            )

        status = self.app.get_generation_status(session_id)
        flow_state = status.get("flow", {}).get("state")
        if flow_state == PollerState.CANCELLED.value:
            return (
                UIUtils.format_status_html("warning", "Generation cancelled", "You can start a new generation anytime."),
                gr.update(visible=False),
                gr.update(),
                gr.update(visible=False),
                gr.update(active=False),
            )

        if status.get("is_generating"):
            return (
                gr.update(),
                gr.update(
                    value=UIUtils.format_progress_html(status["progress"], status["status_message"]),
                    visible=True,
                ),
                gr.update(),
                gr.update(visible=True),
                gr.update(active=True),
            )

        return READY_HTML, gr.update(visible=False), gr.update(), gr.update(visible=False), gr.update(active=False)

    async def cancel_generation(self, session_id: str | None) -> tuple:
        """
        Cancel the session's running generation.

        Returns (status, progress, cancel button, timer).
        """
        if session_id and self.app.cancel_generation(session_id):
            logger.info("Generation cancelled from UI", session_id=session_id)
            return (
                UIUtils.format_status_html("warning", "Generation cancelled", "You can start a new generation anytime."),
                gr.update(visible=False),
                gr.update(visible=False),
                gr.update(active=False),
            )

        return (
            UIUtils.format_status_html("success", "Ready to generate", "No active generation to cancel."),
            gr.update(visible=False),
            gr.update(visible=False),
            gr.update(active=False),
        )

    def use_example_prompt(self, index: int) -> str:
        return EXAMPLE_PROMPTS[index]

    def randomize_seed(self) -> int:
        return random_seed()

    def refresh_history(self, session_id: str | None) -> str:
        """Render every model generated in this session, newest first."""
        if not session_id:
            return UIUtils.format_model_card_html(None)
        history = self.app.get_session_history(session_id)
        if not history:
            return UIUtils.format_model_card_html(None)
        return "".join(UIUtils.format_model_card_html(record) for record in reversed(history))
