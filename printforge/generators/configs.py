"""
Configurations for generation services.

This module contains configuration dataclasses for the external generator
connection and for the polling and materialization policy.
"""

from dataclasses import dataclass


@dataclass
class ServiceConfig:
    """Configuration for an external 3D generation service."""

    base_url: str
    api_key: str | None = None
    timeout_seconds: int = 30
    supports_image_to_model: bool = True
    supports_cancellation: bool = False
    submit_path: str = "/api/generate"
    status_path: str = "/api/tasks/{task_id}"


@dataclass
class GenerationConfig:
    """Polling and result policy for one generation flow."""

    poll_interval_seconds: float = 2.0
    max_poll_attempts: int = 30
    success_reset_delay_seconds: float = 2.0
    material_density_g_cm3: float = 1.24  # PLA
    name_max_length: int = 50

    def __post_init__(self) -> None:
        if self.poll_interval_seconds < 0:
            raise ValueError("poll_interval_seconds cannot be negative")
        if self.max_poll_attempts < 1:
            raise ValueError("max_poll_attempts must be at least 1")
        if self.success_reset_delay_seconds < 0:
            raise ValueError("success_reset_delay_seconds cannot be negative")
        if self.material_density_g_cm3 <= 0:
            raise ValueError("material_density_g_cm3 must be positive")
        if self.name_max_length < 1:
            raise ValueError("name_max_length must be at least 1")
