"""
UI module for PrintForge.

This module provides the Gradio generation panel.
"""

from .app import create_app_interface

__all__ = [
    "create_app_interface",
]
