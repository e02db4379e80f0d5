"""
Example: run one generation without the web UI.

This example shows how to:
1. Load settings and build the application
2. Start a generation with progress and outcome callbacks
3. Wait for the flow to finish and inspect the session history

Without GENERATION_API_URL the demo generator answers, so the example runs
offline.
"""

import asyncio
import sys

from printforge.core.app import ModelStudioApp
from printforge.core.generation_flow import GenerationCallbacks
from printforge.generators.base import configure_logging
from printforge.generators.models import GenerationRequest
from printforge.models.model_record import ModelStyle
from printforge.utils.env_config import get_settings


async def main(prompt: str) -> int:
    settings = get_settings()
    configure_logging(level="WARNING", format_json=False)

    app = ModelStudioApp(settings)
    await app.initialize()

    callbacks = GenerationCallbacks(
        on_progress=lambda value: print(f"  progress: {value}%"),
        on_status=lambda phrase: print(f"  {phrase}"),
        on_generation_complete=lambda record: print(f"Created {record.id}: {record.name}"),
        on_generation_error=lambda message: print(f"Failed: {message}"),
    )

    try:
        request = GenerationRequest(prompt=prompt, style=ModelStyle.ORGANIC, scale_mm=80)
        handle, session_id = await app.start_generation(request, callbacks=callbacks)
        await app.task_manager.tasks[handle]

        for record in app.get_session_history(session_id):
            print(f"{record.name}: {record.volume_cm3:.1f} cm³, ~{record.weight_g:.0f} g, preview {record.preview_url}")
        return 0 if app.get_session_history(session_id) else 1
    finally:
        await app.shutdown()


if __name__ == "__main__":
    text = " ".join(sys.argv[1:]) or "Organic flowing vase with smooth curves"
    sys.exit(asyncio.run(main(text)))
