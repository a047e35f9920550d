"""Logging for the checkout service: structlog over the stdlib root logger.

Production and staging emit one JSON object per line. Every other
environment gets the colored console renderer with rich tracebacks.
Setting ``LOG_DIR`` adds a rotating ``checkout.log`` next to the console.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any

import structlog

from shared.settings import get_settings

_ENV_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_JSON_ENVS = ("production", "staging")
_QUIET_LOGGERS = ("urllib3", "protean", "uvicorn.access")

LOG_FILE_NAME = "checkout.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


def get_log_level() -> str:
    """``LOG_LEVEL`` if set, otherwise the default for ``PROTEAN_ENV``."""
    settings = get_settings()
    if settings.log_level:
        return settings.log_level.upper()
    return _ENV_LEVELS.get(settings.environment.lower(), "INFO")


def _root_handlers(level: str, log_dir: Path | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=log_dir / LOG_FILE_NAME,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def _renderer_chain(environment: str) -> list[Any]:
    if environment.lower() in _JSON_ENVS:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
        )
    ]


def configure_logging(log_dir: Path | None = None) -> None:
    """Install the root handlers and the structlog processor chain."""
    settings = get_settings()
    level = get_log_level()
    if log_dir is None and settings.log_dir:
        log_dir = Path(settings.log_dir)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = _root_handlers(level, log_dir)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            *_renderer_chain(settings.environment),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(**kwargs: Any) -> None:
    """Attach ``kwargs`` to every log line emitted while the request is handled."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
