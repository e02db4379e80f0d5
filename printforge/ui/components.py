"""
UI components for the PrintForge generation panel.

This module contains methods to create the reusable pieces of the Gradio
interface.
"""

import gradio as gr

from printforge.models.model_record import ModelStyle
from printforge.utils.validators import ValidationConfig

STYLE_OPTIONS = [
    (ModelStyle.LOW_POLY, "Low Poly", "Clean geometric shapes, perfect for gaming"),
    (ModelStyle.REALISTIC, "Realistic", "Detailed and lifelike appearance"),
    (ModelStyle.ORGANIC, "Organic", "Natural, flowing forms"),
    (ModelStyle.HARD_SURFACE, "Hard Surface", "Mechanical and industrial designs"),
]

EXAMPLE_PROMPTS = [
    "A medieval dragon figurine for tabletop gaming",
    "Modern minimalist phone stand",
    "Organic flowing vase with smooth curves",
    "Mechanical gear with precise teeth",
    "Abstract sculpture with geometric patterns",
    "Cute animal figurine for decoration",
]

# Only the first few examples get a button
VISIBLE_EXAMPLES = 3

DEFAULT_SCALE_MM = 50


class UIComponents:
    """Factory class for creating UI components."""

    def create_header(self) -> None:
        gr.HTML("""
            <div class="app-header">
                <h1 class="app-title">🖨️ PrintForge</h1>
                <p class="app-subtitle">Generate 3D printable models from a description or a reference image</p>
            </div>
        """)

    def create_text_inputs(self) -> tuple[gr.Textbox, list[gr.Button]]:
        """Prompt box plus one button per visible example prompt."""
        prompt = gr.Textbox(
            label="Describe your 3D model",
            placeholder="A detailed dragon figurine for tabletop gaming...",
            lines=4,
            max_length=ValidationConfig.MAX_PROMPT_LENGTH,
        )
        gr.HTML("<small>Example prompts:</small>")
        with gr.Row():
            example_buttons = [
                gr.Button(text, size="sm", variant="secondary", elem_classes=["example-prompt"])
                for text in EXAMPLE_PROMPTS[:VISIBLE_EXAMPLES]
            ]
        return prompt, example_buttons

    def create_image_inputs(self) -> tuple[gr.Image, gr.Textbox]:
        """Reference image upload with preview; its file path becomes the image reference."""
        image_url = gr.Image(
            label="Reference Image",
            type="filepath",
            sources=["upload"],
            height=240,
        )
        image_prompt = gr.Textbox(
            label="Additional description (optional)",
            placeholder="Additional details about the model...",
            lines=2,
            max_length=ValidationConfig.MAX_PROMPT_LENGTH,
        )
        return image_url, image_prompt

    def create_options(self) -> tuple[gr.Dropdown, gr.Number, gr.Number, gr.Button]:
        """Style, target size and seed controls shared by both modes."""
        style = gr.Dropdown(
            label="Style",
            choices=[(f"{label} - {description}", style.value) for style, label, description in STYLE_OPTIONS],
            value=ModelStyle.REALISTIC.value,
            allow_custom_value=False,
        )
        with gr.Row():
            scale = gr.Number(
                label="Target Size (mm)",
                value=DEFAULT_SCALE_MM,
                minimum=ValidationConfig.MIN_SCALE_MM,
                maximum=ValidationConfig.MAX_SCALE_MM,
                precision=0,
            )
            seed = gr.Number(label="Seed (optional)", value=None, precision=0, minimum=0)
            shuffle_btn = gr.Button("🎲", size="sm", variant="secondary")
        return style, scale, seed, shuffle_btn

    def create_progress_section(self) -> tuple[gr.HTML, gr.HTML, gr.Button]:
        with gr.Group(elem_classes=["section-card"]):
            status_display = gr.HTML('<div class="status-success">Ready to generate</div>')
            progress_display = gr.HTML(visible=False)
            cancel_btn = gr.Button("❌ Cancel Generation", variant="secondary", visible=False)
        return status_display, progress_display, cancel_btn

    def create_result_section(self) -> gr.HTML:
        with gr.Group(elem_classes=["section-card"]):
            gr.HTML("<h3>✨ Generated Model</h3>")
            return gr.HTML('<div class="no-model">No model generated yet.</div>')

    def create_timer(self, interval_seconds: float) -> gr.Timer:
        """Create a timer for progress monitoring."""
        return gr.Timer(value=interval_seconds, active=False)
