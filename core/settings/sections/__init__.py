from .api import ApiSettings
from .database import DatabaseSettings
from .firebase import FirebaseSettings
from .orders import OrderSettings

__all__ = ["ApiSettings", "DatabaseSettings", "FirebaseSettings", "OrderSettings"]
