"""
Enums for generation services.

This module contains enums for service providers, generation modes and
the task states reported by the external generator.
"""

from enum import Enum


class ServiceProvider(str, Enum):
    """Available 3D generation service providers."""

    NANO_BANANA = "nano-banana"
    SCRIPTED = "scripted"


class GenerationMode(str, Enum):
    """3D generation modes."""

    TEXT = "text"
    IMAGE_TO_MODEL = "image2model"


class TaskState(str, Enum):
    """Task status values as reported by the generator."""

    PENDING = "pending"
    SUCCEED = "succeed"
    FAILED = "failed"
