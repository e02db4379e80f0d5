"""
Factory for creating generation service instances.
"""

from printforge.generators.base_integration import BaseGenerationService
from printforge.generators.configs import GenerationConfig, ServiceConfig
from printforge.generators.http_integration import HttpGenerationService
from printforge.generators.scripted_service import ScriptedGenerationService
from printforge.utils.env_config import AppSettings


def create_generation_service(settings: AppSettings) -> BaseGenerationService:
    """Create the generator client, falling back to the demo service without a URL."""
    config_dict = settings.get_service_config()
    base_url = config_dict["base_url"]

    if base_url and base_url.strip():
        config_dict["base_url"] = base_url.strip()
        return HttpGenerationService(ServiceConfig(**config_dict))
    return ScriptedGenerationService.demo()


def create_generation_config(settings: AppSettings) -> GenerationConfig:
    """Create the polling and materialization policy."""
    return GenerationConfig(**settings.get_generation_config())
