# core/settings/base.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class GarmentFlowBaseSettings(BaseSettings):
    """Common loader config: environment first, then ``.env`` in the working directory."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
