"""
Configuración de logging para los scripts y servicios de scoring
"""

import logging

from ufc_scoring.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class ColoredFormatter(logging.Formatter):
    """Formatter con colores para la consola"""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record):
        log_color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset_color = self.COLORS["RESET"]

        # Copia para no ensuciar el record que ven otros handlers
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{log_color}{record.levelname}{reset_color}"

        return super().format(record)


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configura el root logger según settings.log_level

    Limpia handlers previos para no duplicar líneas si se llama dos veces.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)

    if settings.log_colors and settings.app_env != "production":
        console_handler.setFormatter(ColoredFormatter(LOG_FORMAT))
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger.addHandler(console_handler)

    # motor/pymongo son muy verbosos en DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    return root_logger
