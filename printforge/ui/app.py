"""
Main Gradio UI application for PrintForge.

This module assembles the generation panel from components and binds the
handlers to them.
"""

from functools import partial

import gradio as gr
import structlog

from printforge.core.app import ModelStudioApp
from printforge.generators.enums import GenerationMode

from .components import UIComponents
from .handlers import UIHandlers
from .styles import PANEL_CSS

logger = structlog.get_logger(__name__)


class GenerationPanelUI:
    """Main UI class for the generation panel."""

    def __init__(self, app: ModelStudioApp):
        self.app = app
        self.handlers = UIHandlers(app)
        self.components = UIComponents()

    def create_interface(self) -> gr.Blocks:
        """Create the main Gradio interface."""
        with gr.Blocks(css=PANEL_CSS, title=self.app.settings.gradio_title) as interface:
            session_state = gr.State(None)
            mode_state = gr.State(GenerationMode.TEXT.value)

            self.components.create_header()
            with gr.Tabs():
                with gr.Tab("🎨 Generate"):
                    self._create_generation_tab(session_state, mode_state)
                with gr.Tab("📋 History") as history_tab:
                    history_display = gr.HTML()

            history_tab.select(
                fn=self.handlers.refresh_history,
                inputs=[session_state],
                outputs=[history_display],
            )
        return interface

    def _create_generation_tab(self, session_state: gr.State, mode_state: gr.State) -> None:
        with gr.Row():
            with gr.Column(scale=2):
                with gr.Tabs():
                    with gr.Tab("Text to 3D") as text_tab:
                        prompt, example_buttons = self.components.create_text_inputs()
                    with gr.Tab("Image to 3D") as image_tab:
                        image_url, image_prompt = self.components.create_image_inputs()

                style, scale, seed, shuffle_btn = self.components.create_options()
                generate_btn = gr.Button("🚀 Generate Model", variant="primary", size="lg")

            with gr.Column(scale=1):
                status_display, progress_display, cancel_btn = self.components.create_progress_section()
                result_display = self.components.create_result_section()

        text_tab.select(fn=lambda: GenerationMode.TEXT.value, outputs=[mode_state])
        image_tab.select(fn=lambda: GenerationMode.IMAGE_TO_MODEL.value, outputs=[mode_state])

        for index, button in enumerate(example_buttons):
            button.click(fn=partial(self.handlers.use_example_prompt, index), outputs=[prompt])
        shuffle_btn.click(fn=self.handlers.randomize_seed, outputs=[seed])

        timer = self.components.create_timer(self.app.generation_config.poll_interval_seconds)
        start_outputs = [session_state, status_display, progress_display, result_display, cancel_btn, timer]

        generate_btn.click(
            fn=self._start_from_form,
            inputs=[mode_state, prompt, image_prompt, image_url, style, scale, seed, session_state],
            outputs=start_outputs,
        )

        cancel_btn.click(
            fn=self.handlers.cancel_generation,
            inputs=[session_state],
            outputs=[status_display, progress_display, cancel_btn, timer],
        )

        timer.tick(
            fn=self.handlers.check_progress,
            inputs=[session_state],
            outputs=[status_display, progress_display, result_display, cancel_btn, timer],
            show_progress="hidden",
        )

    async def _start_from_form(self, mode, prompt, image_prompt, image_url, style, scale, seed, session_id):
        # Each tab has its own description box
        text = image_prompt if mode == GenerationMode.IMAGE_TO_MODEL.value else prompt
        return await self.handlers.start_generation(mode, text, image_url, style, scale, seed, session_id)


def create_app_interface(app: ModelStudioApp) -> gr.Blocks:
    """Create the main application interface."""
    ui = GenerationPanelUI(app)
    return ui.create_interface()
