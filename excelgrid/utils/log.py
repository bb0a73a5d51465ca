"""Logging helpers for the excelgrid package."""

# Module responsibilities:
# - Configure the ``excelgrid`` logger once: rotating file output plus a quieter console.
# - Append the ``extra={...}`` context passed by call sites to every formatted line.
# - Let the CLI raise or lower console verbosity at runtime.

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

LOGGER_NAMESPACE = "excelgrid"
DEFAULT_LOG_BASE = Path.home() / ".excelgrid" / "logs"
LOG_DIR_ENV = "EXCELGRID_LOG_DIR"
LOG_FILE_NAME = "excelgrid.log"
FILE_HANDLER_NAME = "excelgrid.file"
CONSOLE_HANDLER_NAME = "excelgrid.console"
_LOG_CONFIGURED = False

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime", "taskName"}


class ContextFormatter(logging.Formatter):
    """Formatter that renders ``extra`` fields as trailing ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {
            key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS
        }
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{line} | {pairs}"


def _resolve_log_dir(log_dir: Optional[Path] = None) -> Path:
    """Pick the log directory (argument, then env var, then home) and create it."""
    env_dir = os.environ.get(LOG_DIR_ENV)
    target = log_dir or (Path(env_dir) if env_dir else DEFAULT_LOG_BASE)
    target.mkdir(parents=True, exist_ok=True)
    return target


def _configure_logging(log_dir: Optional[Path] = None) -> None:
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    formatter = ContextFormatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = logging.handlers.RotatingFileHandler(
        _resolve_log_dir(log_dir) / LOG_FILE_NAME,
        maxBytes=2_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.set_name(FILE_HANDLER_NAME)
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.INFO)

    console_handler = logging.StreamHandler()
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING)

    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(file_handler)
    package_logger.addHandler(console_handler)
    package_logger.propagate = False

    _LOG_CONFIGURED = True


def package_handlers() -> list[logging.Handler]:
    """Handlers installed by this module; other tools may attach their own."""

    _configure_logging()
    own = {FILE_HANDLER_NAME, CONSOLE_HANDLER_NAME}
    return [handler for handler in logging.getLogger(LOGGER_NAMESPACE).handlers if handler.get_name() in own]


def set_console_level(level: str | int) -> None:
    """Adjust the console handler threshold (used by the CLI ``--log-level``)."""

    for handler in package_handlers():
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            handler.setLevel(level)


def get_logger(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """Return a logger under the ``excelgrid`` namespace.

    Args:
        name: Suffix appended to the package namespace, e.g. ``"renderer"``.
        log_dir: Optional override for the log directory on first configuration.
    """

    _configure_logging(log_dir)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
