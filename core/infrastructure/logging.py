"""
Logging infrastructure.

Provides logging utilities for the application and infrastructure layers.
"""
import logging


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance.

    Attaches a stream handler only when neither the logger nor the root
    logger is configured yet (e.g. when a service is used outside the API).

    Args:
        name: Logger name (usually module name)

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger
