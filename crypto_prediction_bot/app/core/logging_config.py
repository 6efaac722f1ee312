"""
Logging configuration
- Structured logging with consistent format
- Log level taken from settings
- Quiet third-party loggers (HTTP clients, scheduler, uvicorn access log)
"""
import logging
import sys
from typing import Optional
from datetime import datetime


class CancelledErrorFilter(logging.Filter):
    """
    Filter to suppress CancelledError records raised by uvicorn/Starlette
    while the health server is being stopped (Ctrl+C, SIGTERM).
    """
    def filter(self, record: logging.LogRecord) -> bool:
        if record.exc_info:
            exc_type = record.exc_info[0]
            if exc_type and exc_type.__name__ == 'CancelledError':
                pathname_lower = str(record.pathname).lower()
                message_lower = str(record.getMessage()).lower()
                if ('starlette' in pathname_lower or
                    'uvicorn' in pathname_lower or
                    'lifespan' in pathname_lower or
                    'lifespan' in message_lower):
                    return False

        message_lower = str(record.getMessage()).lower()
        if ('cancellederror' in message_lower and
            ('lifespan' in message_lower or 'receive' in message_lower)):
            return False

        return True


class StructuredFormatter(logging.Formatter):
    """Structured log formatter: [TIMESTAMP] LEVEL    [module] message"""

    def __init__(self, include_timestamp: bool = True, include_module: bool = True):
        self.include_timestamp = include_timestamp
        self.include_module = include_module
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        parts = []

        if self.include_timestamp:
            timestamp = datetime.fromtimestamp(record.created).isoformat()
            parts.append(f"[{timestamp}]")

        parts.append(f"{record.levelname:8s}")

        if self.include_module and record.name != 'root':
            module = record.name.split('.')[-1]
            parts.append(f"[{module:20s}]")

        parts.append(record.getMessage())

        if record.exc_info:
            parts.append(self.formatException(record.exc_info))

        return " ".join(parts)


def setup_logging(level: Optional[str] = None):
    """
    Setup application logging

    Args:
        level: Optional level name overriding LOG_LEVEL from settings

    Returns:
        Logger for this module
    """
    if level is None:
        from .config import get_settings
        level = get_settings().log_level
    level_name = level.upper()
    log_level = getattr(logging, level_name, logging.INFO)

    formatter = StructuredFormatter(
        include_timestamp=True,
        include_module=(log_level <= logging.DEBUG)
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(CancelledErrorFilter())
    root_logger.addHandler(console_handler)

    # Health checks from the hosting platform would flood the access log
    uvicorn_access_logger = logging.getLogger("uvicorn.access")
    uvicorn_access_logger.setLevel(logging.WARNING)
    uvicorn_access_logger.addFilter(CancelledErrorFilter())

    uvicorn_logger = logging.getLogger("uvicorn")
    uvicorn_logger.setLevel(logging.WARNING)
    uvicorn_logger.addFilter(CancelledErrorFilter())

    logging.getLogger("starlette").addFilter(CancelledErrorFilter())

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging configured: level={level_name}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
