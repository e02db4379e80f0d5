"""
Pydantic data models for printable 3D model records.

This module defines the model-metadata entity shared by uploads and
AI generations, together with the controlled vocabularies it uses.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Enums for controlled vocabularies

class ModelStyle(str, Enum):
    """Visual styles offered for AI generation."""
    LOW_POLY = "lowpoly"
    REALISTIC = "realistic"
    ORGANIC = "organic"
    HARD_SURFACE = "hardSurface"


class ModelFileType(str, Enum):
    """Kinds of source file a model record can point at."""
    STL = "stl"
    OBJ = "obj"
    GLB = "glb"
    IMAGE = "image"
    GENERATED = "generated"


class Printability(str, Enum):
    """Whether a model can be sliced as-is."""
    PRINTABLE = "printable"
    NEEDS_FIX = "needs-fix"


class ModelSource(str, Enum):
    """Provenance of a model record."""
    UPLOAD = "upload"
    NANO_BANANA = "nano-banana"


# Core Data Models

class BoundingBox(BaseModel):
    """Axis-aligned bounding box in millimetres."""

    x: float = Field(..., ge=0)
    y: float = Field(..., ge=0)
    z: float = Field(..., ge=0)


class MaterialInfo(BaseModel):
    """Print material parameters used for weight estimates."""

    model_config = ConfigDict(populate_by_name=True)

    density_g_cm3: Optional[float] = Field(default=None, gt=0)


class ModelMeta(BaseModel):
    """Metadata for a printable 3D model, uploaded or generated."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)

    id: str
    name: str
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=datetime.utcnow, alias="updatedAt")
    file_type: ModelFileType = Field(..., alias="fileType")
    preview_url: str = Field(..., alias="previewUrl")
    glb_url: Optional[str] = Field(default=None, alias="glbUrl")
    stl_url: Optional[str] = Field(default=None, alias="stlUrl")
    obj_url: Optional[str] = Field(default=None, alias="objUrl")
    printable: Printability = Printability.PRINTABLE
    bbox_mm: Optional[BoundingBox] = Field(default=None, alias="bboxMm")
    volume_cm3: Optional[float] = Field(default=None, ge=0, alias="volumeCm3")
    area_cm2: Optional[float] = Field(default=None, ge=0, alias="areaCm2")
    faces: Optional[int] = Field(default=None, ge=0)
    material: Optional[MaterialInfo] = None
    weight_g: Optional[float] = Field(default=None, ge=0)
    source: ModelSource = ModelSource.UPLOAD
    version: Optional[int] = Field(default=1, ge=1)

    @property
    def is_generated(self) -> bool:
        """Check if the record came out of the AI generator."""
        return self.source == ModelSource.NANO_BANANA

    def to_api_dict(self) -> dict:
        """Serialize with the camelCase keys the web client expects."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
