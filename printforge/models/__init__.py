"""Domain models shared across the application."""

from .model_record import (
    BoundingBox,
    MaterialInfo,
    ModelFileType,
    ModelMeta,
    ModelSource,
    ModelStyle,
    Printability,
)

__all__ = [
    "BoundingBox",
    "MaterialInfo",
    "ModelFileType",
    "ModelMeta",
    "ModelSource",
    "ModelStyle",
    "Printability",
]
