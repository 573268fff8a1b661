from typing import Optional

from pydantic_settings import SettingsConfigDict

from core.settings.base import GarmentFlowBaseSettings


class FirebaseSettings(GarmentFlowBaseSettings):
    """
    Firebase Admin credentials used to verify ID tokens.
    ``service_key`` is the service-account JSON, base64 encoded.
    Loaded from .env with prefix FIREBASE_*
    """

    enabled: bool = False
    service_key: Optional[str] = None

    model_config = SettingsConfigDict(env_prefix="FIREBASE_")
