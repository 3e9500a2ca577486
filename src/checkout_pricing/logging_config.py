"""
Logging setup - structlog on top of stdlib logging handlers.

Records go to three places:
- logs/error.log     ERROR and above, JSON lines
- logs/combined.log  everything at the configured level, JSON lines
- console            human-readable
"""
import logging
from typing import Optional

import structlog

from .config.settings import Settings, get_settings


LOGGER_NAME = "checkout_pricing"

_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]

_configured = False


def configure_logging(settings: Optional[Settings] = None, force: bool = False):
    """Attach file and console handlers to the package logger (once)."""
    global _configured
    if _configured and not force:
        return
    settings = settings or get_settings()
    settings.log_dir.mkdir(parents=True, exist_ok=True)

    json_formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )
    console_formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
    )

    error_handler = logging.FileHandler(settings.log_dir / "error.log", encoding="utf-8", delay=True)
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(json_formatter)

    combined_handler = logging.FileHandler(settings.log_dir / "combined.log", encoding="utf-8", delay=True)
    combined_handler.setFormatter(json_formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(console_formatter)

    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.addHandler(error_handler)
    package_logger.addHandler(combined_handler)
    package_logger.addHandler(console_handler)
    package_logger.setLevel(settings.log_level)
    package_logger.propagate = False

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = LOGGER_NAME) -> structlog.stdlib.BoundLogger:
    """Get a logger under the package namespace."""
    return structlog.get_logger(name)
