"""
Input validation for generation requests.

This module checks what the generation form submits before a request is
handed to the generator: prompt presence and safety, image reference,
target scale and seed.
"""

import random
import re

from printforge.generators.enums import GenerationMode
from printforge.generators.models import GenerationRequest


class ValidationConfig:
    """Configuration for validation parameters."""

    MAX_PROMPT_LENGTH = 2000

    # Bounds of the generation form's size input
    MIN_SCALE_MM = 10
    MAX_SCALE_MM = 200

    MAX_SEED = 2**31 - 1
    RANDOM_SEED_RANGE = 1_000_000

    DANGEROUS_PATTERNS = [
        r"<script[^>]*>.*?</script>",
        r"javascript:",
        r"vbscript:",
        r"on\w+\s*=",
        r"<iframe[^>]*>.*?</iframe>",
        r"eval\s*\(",
    ]


class ValidationException(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, field: str | None = None, code: str | None = None):
        self.message = message
        self.field = field
        self.code = code
        super().__init__(message)


class ErrorMessages:
    """Standardized error messages for consistent user experience."""

    PROMPT_REQUIRED = "Please describe what you want to generate"
    PROMPT_TOO_LONG = "Description cannot exceed {max_length} characters"
    UNSAFE_CONTENT = "Potential security threat detected in input"
    IMAGE_REQUIRED = "Please upload a reference image"
    SCALE_OUT_OF_RANGE = "Target size must be between {min_scale} and {max_scale} mm"
    SEED_OUT_OF_RANGE = "Seed must be between 0 and {max_seed}"


class TextValidator:
    """Prompt text checks."""

    _patterns = [re.compile(p, re.IGNORECASE | re.DOTALL) for p in ValidationConfig.DANGEROUS_PATTERNS]

    @classmethod
    def validate_prompt(cls, prompt: str | None, required: bool = True) -> str | None:
        """Return the stripped prompt, or None for an allowed empty one."""
        text = (prompt or "").strip()
        if not text:
            if required:
                raise ValidationException(ErrorMessages.PROMPT_REQUIRED, field="prompt", code="PROMPT_REQUIRED")
            return None

        if len(text) > ValidationConfig.MAX_PROMPT_LENGTH:
            raise ValidationException(
                ErrorMessages.PROMPT_TOO_LONG.format(max_length=ValidationConfig.MAX_PROMPT_LENGTH),
                field="prompt",
                code="PROMPT_TOO_LONG",
            )

        for pattern in cls._patterns:
            if pattern.search(text):
                raise ValidationException(ErrorMessages.UNSAFE_CONTENT, field="prompt", code="UNSAFE_CONTENT")

        return text


class RequestValidator:
    """Validation of complete generation requests."""

    @staticmethod
    def validate(request: GenerationRequest) -> GenerationRequest:
        """Return a copy of the request with a cleaned prompt, or raise."""
        text_mode = request.mode == GenerationMode.TEXT
        prompt = TextValidator.validate_prompt(request.prompt, required=text_mode)

        if request.mode == GenerationMode.IMAGE_TO_MODEL and not request.image_url:
            raise ValidationException(ErrorMessages.IMAGE_REQUIRED, field="image_url", code="IMAGE_REQUIRED")

        if not ValidationConfig.MIN_SCALE_MM <= request.scale_mm <= ValidationConfig.MAX_SCALE_MM:
            raise ValidationException(
                ErrorMessages.SCALE_OUT_OF_RANGE.format(
                    min_scale=ValidationConfig.MIN_SCALE_MM, max_scale=ValidationConfig.MAX_SCALE_MM
                ),
                field="scale_mm",
                code="SCALE_OUT_OF_RANGE",
            )

        if request.seed is not None and not 0 <= request.seed <= ValidationConfig.MAX_SEED:
            raise ValidationException(
                ErrorMessages.SEED_OUT_OF_RANGE.format(max_seed=ValidationConfig.MAX_SEED),
                field="seed",
                code="SEED_OUT_OF_RANGE",
            )

        return request.model_copy(update={"prompt": prompt})


def random_seed() -> int:
    """Seed for the form's shuffle button."""
    return random.randrange(ValidationConfig.RANDOM_SEED_RANGE)
