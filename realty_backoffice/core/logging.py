"""Structured logging for realty_backoffice.

The package is a library first: importing it or asking for a logger never
touches the host's handlers. ``get_logger`` only sets up the structlog
processor chain; records go to the ``realty_backoffice`` stdlib logger,
which carries a ``NullHandler`` until an entry point (a CLI, a worker, a
test harness) calls ``configure_logging``.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any

import structlog

from .settings import get_settings

PACKAGE_LOGGER = "realty_backoffice"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())

_structlog_ready: bool = False
_handlers: list[logging.Handler] = []


def _setup_structlog(json_output: bool) -> None:
    global _structlog_ready

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False),
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _structlog_ready = True


def configure_logging(
    level: str | None = None,
    json_output: bool | None = None,
    log_file: str | Path | None = None,
) -> structlog.BoundLogger:
    """Install output handlers on the package logger.

    Call once from an application entry point. Handlers are attached to the
    ``realty_backoffice`` logger only, so the root logger and any handlers
    the host installed are left alone. Calling again replaces the handlers
    this function added earlier.

    Args:
        level: Log level name. Defaults to ``settings.log_level``.
        json_output: Render JSON lines instead of console text. Defaults to
            ``settings.json_logs``.
        log_file: Also write to this rotating file. Defaults to
            ``settings.log_file``; no file when unset.

    Returns:
        Logger bound to the package name.
    """
    settings = get_settings()
    if json_output is None:
        json_output = settings.json_logs
    log_file = log_file or settings.log_file
    numeric_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in _handlers:
        package_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    _handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        _handlers.append(
            logging.handlers.RotatingFileHandler(
                str(path), maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
            )
        )
    for handler in _handlers:
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)
    package_logger.setLevel(numeric_level)

    _setup_structlog(json_output)
    return get_logger(PACKAGE_LOGGER)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Structlog logger routed through the stdlib logger ``name``.

    Sets up the processor chain on first use. Adds no handlers.
    """
    if not _structlog_ready:
        _setup_structlog(get_settings().json_logs)

    logger = structlog.get_logger(name or PACKAGE_LOGGER)
    if name:
        return logger.bind(logger_name=name)
    return logger
