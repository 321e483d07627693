"""Logging configuration with console, file and structured handlers.

Service modules get a plain stdlib logger from ``setup_logger``.
Upstream failure events go through structlog, configured once by
``setup_logging`` at application startup.
"""

import logging
import sys
from datetime import date
from pathlib import Path

import structlog

from moodreel.settings import settings

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOG_DATE_FORMAT = "%H:%M:%S"
_LOGGERS_CACHE: dict[str, logging.Logger] = {}
_STRUCTLOG_CONFIGURED = False


def configured_level() -> int:
    """Level from LOG_LEVEL, forced to DEBUG in debug mode."""
    if settings.debug:
        return logging.DEBUG
    return logging.getLevelName(settings.logging.level)


def setup_logger(
    name: str,
    level: int | None = None,
    log_dir: Path | None = None,
) -> logging.Logger:
    """Get a named logger writing to stdout and, if enabled, a daily file.

    Loggers are built once per name and cached.

    Args:
        name: Logger name (e.g., 'services.mood').
        level: Logging level (defaults to LOG_LEVEL).
        log_dir: Directory for log files. If None, uses LOG_DIR.

    Returns:
        Configured logger instance.
    """
    cached = _LOGGERS_CACHE.get(name)
    if cached is not None:
        return cached

    level = configured_level() if level is None else level
    formatter = logging.Formatter(_LOG_FORMAT, _LOG_DATE_FORMAT)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.logging.to_file:
        file_handler = _create_file_handler(name, formatter, level, log_dir)
        if file_handler is not None:
            handlers.append(file_handler)

    for handler in handlers:
        _attach(logger, handler, formatter, level)

    _LOGGERS_CACHE[name] = logger
    return logger


def setup_logging() -> None:
    """Configure structlog once for structured upstream events.

    Events are rendered as JSON lines (LOG_FORMAT=json) or in a
    human readable form (LOG_FORMAT=console) on stdout.
    """
    global _STRUCTLOG_CONFIGURED

    if _STRUCTLOG_CONFIGURED:
        return

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.logging.format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(configured_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    _STRUCTLOG_CONFIGURED = True
    structlog.get_logger().info("logging_configured", format=settings.logging.format)


def _attach(
    logger: logging.Logger,
    handler: logging.Handler,
    formatter: logging.Formatter,
    level: int,
) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _create_file_handler(
    name: str,
    formatter: logging.Formatter,
    level: int,
    log_dir: Path | None,
) -> logging.FileHandler | None:
    """Open the daily log file of a logger.

    The handler is returned formatted and levelled; a directory that
    cannot be written to disables file logging for that logger.
    """
    try:
        handler = logging.FileHandler(_get_log_file_path(name, log_dir), encoding="utf-8")
    except OSError as exc:
        print(f"Warning: file logging disabled for {name}: {exc}", file=sys.stderr)
        return None
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _get_log_file_path(name: str, log_dir: Path | None) -> Path:
    """``<log_dir>/<name with dots as underscores>_<YYYYMMDD>.log``"""
    directory = log_dir or settings.logging.log_path
    directory.mkdir(parents=True, exist_ok=True)
    stem = name.replace(".", "_").replace("/", "_")
    return directory / f"{stem}_{date.today():%Y%m%d}.log"
