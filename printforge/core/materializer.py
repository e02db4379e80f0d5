"""
Result materialization.

Turns a succeeded task payload and the request that produced it into a
model record. The generator reports no geometry, so the bounding box is
synthesized from the requested scale and treated as a cube.
"""

import time
from collections.abc import Callable
from datetime import datetime

from printforge.generators.models import GenerationRequest, TaskStatus
from printforge.models.model_record import (
    BoundingBox,
    MaterialInfo,
    ModelFileType,
    ModelMeta,
    ModelSource,
    Printability,
)

DEFAULT_MODEL_NAME = "Generated Model"
DEFAULT_PREVIEW_URL = "/generated-3d-model.jpg"
PLACEHOLDER_FACE_COUNT = 1000
PROVENANCE_TAGS = ("generated", "ai")
MM_PER_CM = 10.0


class ResultMaterializer:
    """Builds ModelMeta records from generation results. Has no side effects."""

    def __init__(
        self,
        density_g_cm3: float = 1.24,
        name_max_length: int = 50,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.density_g_cm3 = density_g_cm3
        self.name_max_length = name_max_length
        self.clock = clock

    def display_name(self, prompt: str | None) -> str:
        if not prompt or not prompt.strip():
            return DEFAULT_MODEL_NAME
        return prompt.strip()[: self.name_max_length]

    def materialize(self, status: TaskStatus, request: GenerationRequest) -> ModelMeta:
        scale = request.scale_mm
        side_cm = scale / MM_PER_CM
        volume_cm3 = side_cm**3
        area_cm2 = 6 * side_cm**2
        style = request.style.value
        now = self.clock()

        return ModelMeta(
            id=f"generated-{int(time.time() * 1000)}",
            name=self.display_name(request.prompt),
            description=f"AI generated {style} model",
            tags=[style, *PROVENANCE_TAGS],
            created_at=now,
            updated_at=now,
            file_type=ModelFileType.GENERATED,
            preview_url=status.preview_png or DEFAULT_PREVIEW_URL,
            glb_url=status.glb_url,
            stl_url=status.stl_url,
            printable=Printability.PRINTABLE,
            bbox_mm=BoundingBox(x=scale, y=scale, z=scale),
            volume_cm3=volume_cm3,
            area_cm2=area_cm2,
            faces=PLACEHOLDER_FACE_COUNT,
            material=MaterialInfo(density_g_cm3=self.density_g_cm3),
            weight_g=volume_cm3 * self.density_g_cm3,
            source=ModelSource.NANO_BANANA,
            version=1,
        )
