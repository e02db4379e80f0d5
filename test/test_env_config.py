import os
from unittest.mock import patch

from printforge.utils.env_config import AppSettings, get_env_bool, get_env_float, get_env_int, reload_settings

GENERATION_VARS = [
    "GENERATION_API_URL",
    "GENERATION_API_KEY",
    "GENERATION_REQUEST_TIMEOUT",
    "GENERATION_SUPPORTS_CANCEL",
    "GENERATION_POLL_INTERVAL",
    "GENERATION_MAX_POLL_ATTEMPTS",
    "GENERATION_SUCCESS_RESET_DELAY",
    "MATERIAL_DENSITY_G_CM3",
    "NAME_MAX_LENGTH",
    "SESSION_TIMEOUT_MINUTES",
    "LOG_LEVEL",
]


def _clean_env() -> dict[str, str]:
    return {key: value for key, value in os.environ.items() if key not in GENERATION_VARS}


class TestAppSettings:
    """Test suite for AppSettings class."""

    def test_app_settings_default_values(self) -> None:
        with patch.dict(os.environ, _clean_env(), clear=True):
            settings = AppSettings()

        assert settings.generation_api_url is None
        assert settings.generation_request_timeout == 30
        assert settings.generation_supports_cancel is False
        assert settings.generation_poll_interval == 2.0
        assert settings.generation_max_poll_attempts == 30
        assert settings.generation_success_reset_delay == 2.0
        assert settings.material_density_g_cm3 == 1.24
        assert settings.name_max_length == 50
        assert settings.session_timeout_minutes == 120
        assert settings.log_level == "INFO"
        assert settings.demo_mode

    def test_app_settings_from_env_vars(self) -> None:
        env_vars = {
            "GENERATION_API_URL": "https://generator.example.com",
            "GENERATION_API_KEY": "secret",
            "GENERATION_SUPPORTS_CANCEL": "true",
            "GENERATION_POLL_INTERVAL": "0.5",
            "GENERATION_MAX_POLL_ATTEMPTS": "10",
            "MATERIAL_DENSITY_G_CM3": "1.04",
            "LOG_LEVEL": "DEBUG",
        }
        with patch.dict(os.environ, env_vars):
            settings = AppSettings()

        assert not settings.demo_mode
        assert settings.get_service_config() == {
            "base_url": "https://generator.example.com",
            "api_key": "secret",
            "timeout_seconds": 30,
            "supports_cancellation": True,
        }
        generation = settings.get_generation_config()
        assert generation["poll_interval_seconds"] == 0.5
        assert generation["max_poll_attempts"] == 10
        assert generation["material_density_g_cm3"] == 1.04
        assert settings.log_level == "DEBUG"

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        env_vars = {
            "GENERATION_POLL_INTERVAL": "-1",
            "GENERATION_MAX_POLL_ATTEMPTS": "0",
            "MATERIAL_DENSITY_G_CM3": "not-a-number",
        }
        with patch.dict(os.environ, env_vars):
            settings = AppSettings()

        assert settings.generation_poll_interval == 2.0
        assert settings.generation_max_poll_attempts == 30
        assert settings.material_density_g_cm3 == 1.24

    def test_gradio_config(self) -> None:
        with patch.dict(os.environ, {"GRADIO_PORT": "9000", "GRADIO_SHARE": "yes"}):
            config = AppSettings().get_gradio_config()
        assert config["port"] == 9000
        assert config["share"] is True


def test_env_helpers() -> None:
    with patch.dict(os.environ, {"FLAG": "on", "COUNT": "abc", "RATIO": "0.25"}):
        assert get_env_bool("FLAG")
        assert get_env_bool("MISSING_FLAG", True)
        assert get_env_int("COUNT", 7) == 7
        assert get_env_float("RATIO") == 0.25


def test_reload_settings_picks_up_changes() -> None:
    with patch.dict(os.environ, {"GENERATION_MAX_POLL_ATTEMPTS": "12"}):
        assert reload_settings().generation_max_poll_attempts == 12
    reload_settings()
