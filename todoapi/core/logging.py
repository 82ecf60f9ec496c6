import logging
import os
from collections import OrderedDict
from logging import Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import structlog

from todoapi.core.settings import get_todoapi_config

ROOT_LOGGER_NAME = "todoapi"


def default_formatter(fmt: Optional[str] = None) -> logging.Formatter:
    """Returns a logging formatter with a default format if none is specified."""
    default_fmt = "[%(asctime)s] %(levelname)s: %(name)s: %(message)s"
    return logging.Formatter(fmt or default_fmt)


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    *,
    log_dir: Optional[str | Path] = None,
    logger_level: int | str | None = None,
    stream_level: int = logging.ERROR,
    add_stream_handler: bool = True,
    file_level: int = logging.DEBUG,
    add_file_handler: Optional[bool] = None,
    propagate: bool = False,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    use_structlog: Optional[bool] = None,
    structlog_json: bool = True,
    structlog_bind: Optional[dict] = None,
) -> Logger | structlog.stdlib.BoundLogger:
    """Configure and initialize logging for todo service components.

    Sets up a console handler and, unless disabled in settings, a rotating file
    handler on the given logger. The log file defaults to ``{LOG_DIR}/{name}.log``.

    Args:
        name: Logger name, defaults to "todoapi".
        log_dir: Custom directory for the log file. Defaults to settings.LOG_DIR.
        logger_level: Overall logger level. Defaults to settings.LOG_LEVEL.
        stream_level: StreamHandler level.
        add_stream_handler: Whether to add a stream handler.
        file_level: File handler level.
        add_file_handler: Whether to add a file handler. Defaults to settings.LOG_TO_FILE.
        propagate: Whether the logger should propagate messages to ancestor loggers.
        max_bytes: Maximum size in bytes before rotating the log file.
        backup_count: Number of backup files to retain.
        use_structlog: If True, configure and return a structlog BoundLogger. Defaults to settings.USE_STRUCTLOG.
        structlog_json: If True, render JSON; otherwise use the console renderer.
        structlog_bind: Fields to bind on the returned structlog logger.

    Returns:
        Logger | structlog.stdlib.BoundLogger: Configured logger instance.
    """
    settings = get_todoapi_config()
    use_structlog = settings.USE_STRUCTLOG if use_structlog is None else use_structlog
    add_file_handler = settings.LOG_TO_FILE if add_file_handler is None else add_file_handler
    logger_level = settings.LOG_LEVEL if logger_level is None else logger_level

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(logger_level)
    logger.propagate = propagate

    message_format = logging.Formatter("%(message)s") if use_structlog else default_formatter()

    if add_stream_handler:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(stream_level)
        stream_handler.setFormatter(message_format)
        logger.addHandler(stream_handler)

    if add_file_handler:
        log_dir = Path(os.path.expanduser(str(log_dir or settings.LOG_DIR)))
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_dir / f"{name}.log"), maxBytes=max_bytes, backupCount=backup_count, mode="a"
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(message_format)
        logger.addHandler(file_handler)

    if not use_structlog:
        return logger

    renderer = structlog.processors.JSONRenderer() if structlog_json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _enforce_key_order_processor(["timestamp", "event", "service", "duration_ms", "level", "logger"]),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    bound_logger = structlog.get_logger(name)
    if structlog_bind:
        bound_logger = bound_logger.bind(**structlog_bind)
    return bound_logger


def _enforce_key_order_processor(key_order: list[str]):
    def _processor(_logger, _method_name, event_dict):
        ordered = OrderedDict()
        for key in key_order:
            if key in event_dict:
                ordered[key] = event_dict.pop(key)
        for k in sorted(event_dict.keys()):
            ordered[k] = event_dict[k]
        return ordered

    return _processor


def get_logger(
    name: str | None = ROOT_LOGGER_NAME, use_structlog: bool | None = None, **kwargs
) -> Logger | structlog.stdlib.BoundLogger:
    """
    Create or retrieve a named logger under the ``todoapi`` hierarchy.

    Example:
        .. code-block:: python

            from todoapi.core.logging import get_logger

            logger = get_logger("repositories.todo")
            logger.info("todo_created", todo_id="65f0c0ffee")
    """
    if not name:
        name = ROOT_LOGGER_NAME
    full_name = name if name.startswith(ROOT_LOGGER_NAME) else f"{ROOT_LOGGER_NAME}.{name}"
    return setup_logger(full_name, use_structlog=use_structlog, **kwargs)
