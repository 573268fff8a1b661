from pydantic_settings import SettingsConfigDict

from core.settings.base import GarmentFlowBaseSettings


class DatabaseSettings(GarmentFlowBaseSettings):
    """
    Database connection settings.
    Loaded from .env with prefix DB_*
    """

    database_url: str = "sqlite+aiosqlite:///./garmentflow.db"
    echo_sql: bool = False
    pool_pre_ping: bool = True

    model_config = SettingsConfigDict(env_prefix="DB_")
