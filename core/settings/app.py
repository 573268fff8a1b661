# core/settings/app.py
from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.sections import (
    ApiSettings,
    DatabaseSettings,
    FirebaseSettings,
    OrderSettings,
)


class AppSettings(BaseModel):
    """
    Central application settings aggregator.
    Each section is loaded when get_app_settings() is first called,
    not at import time.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    api: ApiSettings
    database: DatabaseSettings
    firebase: FirebaseSettings
    orders: OrderSettings


@lru_cache()
def get_app_settings() -> AppSettings:
    """Return cached global settings for the entire app."""
    return AppSettings(
        api=ApiSettings(),
        database=DatabaseSettings(),
        firebase=FirebaseSettings(),
        orders=OrderSettings(),
    )
