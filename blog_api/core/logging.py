"""
Настройка логирования приложения.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Настроить корневой логгер один раз при старте приложения."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
