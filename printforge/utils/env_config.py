"""
Environment-based configuration for PrintForge.

Settings are read from environment variables, optionally seeded from a
.env file at the project root.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from .env file
env_file = Path(__file__).parent.parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file, override=True)
    logger.info(f"Loaded environment variables from: {env_file}")


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key, "").lower()
    return value in ("true", "1", "yes", "on") if value else default


def get_env_int(key: str, default: int = 0) -> int:
    """Get integer value from environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def get_env_float(key: str, default: float = 0.0) -> float:
    """Get float value from environment variable."""
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


@dataclass
class AppSettings:
    """Application settings from environment variables."""

    # Environment
    environment: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))
    debug: bool = field(default_factory=lambda: get_env_bool("DEBUG", True))

    # Application info (constants - not configurable via environment)
    app_name: str = "PrintForge"
    app_version: str = "0.1.0"

    # Generator connection
    generation_api_url: Optional[str] = field(default_factory=lambda: os.getenv("GENERATION_API_URL"))
    generation_api_key: Optional[str] = field(default_factory=lambda: os.getenv("GENERATION_API_KEY"))
    generation_request_timeout: int = field(default_factory=lambda: get_env_int("GENERATION_REQUEST_TIMEOUT", 30))
    generation_supports_cancel: bool = field(default_factory=lambda: get_env_bool("GENERATION_SUPPORTS_CANCEL", False))

    # Polling policy
    generation_poll_interval: float = field(default_factory=lambda: get_env_float("GENERATION_POLL_INTERVAL", 2.0))
    generation_max_poll_attempts: int = field(default_factory=lambda: get_env_int("GENERATION_MAX_POLL_ATTEMPTS", 30))
    generation_success_reset_delay: float = field(
        default_factory=lambda: get_env_float("GENERATION_SUCCESS_RESET_DELAY", 2.0)
    )

    # Result materialization
    material_density_g_cm3: float = field(default_factory=lambda: get_env_float("MATERIAL_DENSITY_G_CM3", 1.24))
    name_max_length: int = field(default_factory=lambda: get_env_int("NAME_MAX_LENGTH", 50))

    # Sessions
    session_timeout_minutes: int = field(default_factory=lambda: get_env_int("SESSION_TIMEOUT_MINUTES", 120))

    # Gradio Configuration
    gradio_host: str = field(default_factory=lambda: os.getenv("GRADIO_HOST", "127.0.0.1"))
    gradio_port: int = field(default_factory=lambda: get_env_int("GRADIO_PORT", 7860))
    gradio_share: bool = field(default_factory=lambda: get_env_bool("GRADIO_SHARE", False))
    gradio_debug: bool = field(default_factory=lambda: get_env_bool("GRADIO_DEBUG"))
    gradio_show_error: bool = field(default_factory=lambda: get_env_bool("GRADIO_SHOW_ERROR", True))
    gradio_title: str = "PrintForge - AI Model Generation"

    # Logging Configuration
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_json_format: bool = field(default_factory=lambda: get_env_bool("LOG_JSON_FORMAT", False))

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.environment == "development" and not os.getenv("DEBUG"):
            self.debug = True
        elif self.environment == "production" and not os.getenv("DEBUG"):
            self.debug = False

        if self.generation_poll_interval < 0:
            logger.warning("GENERATION_POLL_INTERVAL cannot be negative, using 2.0")
            self.generation_poll_interval = 2.0
        if self.generation_max_poll_attempts < 1:
            logger.warning("GENERATION_MAX_POLL_ATTEMPTS must be at least 1, using 30")
            self.generation_max_poll_attempts = 30
        if self.material_density_g_cm3 <= 0:
            logger.warning("MATERIAL_DENSITY_G_CM3 must be positive, using 1.24")
            self.material_density_g_cm3 = 1.24

        if self.environment == "production" and not self.generation_api_url:
            logger.warning("No GENERATION_API_URL provided for production environment, using demo generator")

    @property
    def demo_mode(self) -> bool:
        return not (self.generation_api_url and self.generation_api_url.strip())

    def get_generation_config(self) -> dict:
        """Get generation configuration as a dictionary."""
        return {
            "poll_interval_seconds": self.generation_poll_interval,
            "max_poll_attempts": self.generation_max_poll_attempts,
            "success_reset_delay_seconds": self.generation_success_reset_delay,
            "material_density_g_cm3": self.material_density_g_cm3,
            "name_max_length": self.name_max_length,
        }

    def get_service_config(self) -> dict:
        """Get generator connection configuration as a dictionary."""
        return {
            "base_url": self.generation_api_url,
            "api_key": self.generation_api_key,
            "timeout_seconds": self.generation_request_timeout,
            "supports_cancellation": self.generation_supports_cancel,
        }

    def get_gradio_config(self) -> dict:
        """Get Gradio configuration as a dictionary."""
        return {
            "host": self.gradio_host,
            "port": self.gradio_port,
            "share": self.gradio_share,
            "debug": self.gradio_debug,
            "show_error": self.gradio_show_error,
            "title": self.gradio_title,
        }


# Global settings instance
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get the global application settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
        logger.info(f"Loaded settings for environment: {_settings.environment}")
    return _settings


def reload_settings() -> AppSettings:
    """Reload the global application settings."""
    global _settings
    if env_file.exists():
        load_dotenv(env_file, override=True)
    _settings = AppSettings()
    logger.info(f"Reloaded settings for environment: {_settings.environment}")
    return _settings
