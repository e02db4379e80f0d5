#!/usr/bin/env python3
"""
Main entry point for PrintForge.

Configures logging and launches the Gradio generation panel. The
application itself is initialized lazily by the first request so the
generator client lives on Gradio's event loop.
"""

import sys

import structlog

from printforge.core.app import ModelStudioApp
from printforge.generators.base import configure_logging
from printforge.ui import create_app_interface
from printforge.utils.env_config import get_settings

logger = structlog.get_logger(__name__)


def main():
    """Main entry point for the application."""
    try:
        settings = get_settings()
        configure_logging(level=settings.log_level, format_json=settings.log_json_format)

        app = ModelStudioApp(settings)
        logger.info(
            "Starting PrintForge",
            version=settings.app_version,
            environment=settings.environment,
            demo_mode=settings.demo_mode,
        )

        interface = create_app_interface(app)
        gradio_config = settings.get_gradio_config()
        interface.launch(
            server_name=gradio_config["host"],
            server_port=gradio_config["port"],
            share=gradio_config["share"],
            debug=gradio_config["debug"],
            show_error=gradio_config["show_error"],
            quiet=False,
        )

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except Exception as e:
        logger.error("Application failed to start", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
