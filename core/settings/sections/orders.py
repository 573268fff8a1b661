from pydantic import Field
from pydantic_settings import SettingsConfigDict

from core.settings.base import GarmentFlowBaseSettings


class OrderSettings(GarmentFlowBaseSettings):
    """
    Order ledger settings.
    Loaded from .env with prefix ORDERS_*
    """

    currency: str = Field(default="USD", min_length=3, max_length=3)
    tracking_prefix: str = Field(default="GF", pattern=r"^[A-Za-z0-9]{1,10}$")

    # Compensating stock restore when the order insert fails
    rollback_max_attempts: int = Field(default=3, ge=2)
    rollback_backoff_seconds: float = Field(default=0.05, ge=0.0)

    model_config = SettingsConfigDict(env_prefix="ORDERS_")
