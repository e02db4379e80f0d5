"""
Models for generation services.

This module contains Pydantic models for generation requests and task status
payloads. Field aliases match the camelCase JSON used
by the web client and the generator API.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from printforge.models.model_record import ModelStyle

from .enums import GenerationMode, TaskState


class GenerationRequest(BaseModel):
    """Request model for 3D model generation."""

    model_config = ConfigDict(populate_by_name=True)

    mode: GenerationMode = GenerationMode.TEXT
    prompt: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    style: ModelStyle = ModelStyle.REALISTIC
    scale_mm: float = Field(default=50.0, gt=0, alias="scaleMm")
    seed: int | None = None

    @model_validator(mode="after")
    def check_image_reference(self) -> "GenerationRequest":
        if self.mode == GenerationMode.IMAGE_TO_MODEL and not self.image_url:
            raise ValueError("image2model generation requires an image reference")
        return self

    def to_payload(self) -> dict:
        """Serialize for the generator API."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GenerateResponse(BaseModel):
    """Response returned by the generator when a task is created."""

    model_config = ConfigDict(populate_by_name=True)

    task_id: str = Field(..., min_length=1, alias="taskId")


class TaskStatus(BaseModel):
    """Status payload for a generation task."""

    model_config = ConfigDict(populate_by_name=True)

    status: TaskState
    glb_url: str | None = Field(default=None, alias="glbUrl")
    stl_url: str | None = Field(default=None, alias="stlUrl")
    preview_png: str | None = Field(default=None, alias="previewPng")
    error: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        # Generators report success as either "succeed" or "succeeded"
        if isinstance(value, str) and value.lower() == "succeeded":
            return TaskState.SUCCEED
        return value

    @property
    def is_terminal(self) -> bool:
        return self.status != TaskState.PENDING

    @classmethod
    def pending(cls) -> "TaskStatus":
        return cls(status=TaskState.PENDING)

    @classmethod
    def succeeded(
        cls,
        glb_url: str | None = None,
        stl_url: str | None = None,
        preview_png: str | None = None,
    ) -> "TaskStatus":
        return cls(status=TaskState.SUCCEED, glb_url=glb_url, stl_url=stl_url, preview_png=preview_png)

    @classmethod
    def failed(cls, error: str | None = None) -> "TaskStatus":
        return cls(status=TaskState.FAILED, error=error)

