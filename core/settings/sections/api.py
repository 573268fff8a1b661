from typing import List

from pydantic_settings import SettingsConfigDict

from core.settings.base import GarmentFlowBaseSettings


class ApiSettings(GarmentFlowBaseSettings):
    """
    HTTP layer settings.
    Loaded from .env with prefix APP_*
    """

    title: str = "GarmentFlow Orders API"
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="APP_")
