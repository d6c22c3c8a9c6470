"""Logging setup for the debloater process and a context-prefixing logger.

Everything goes to the console and to ``<log_dir>/debloater.log`` (rotated).
adb output can be long, so the file handler rotates at a few megabytes.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOG_FILE_NAME = "debloater.log"

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# NiceGUI / pywebview internals that flood INFO with request and reload noise.
_QUIET_LOGGERS = ("uvicorn.access", "uvicorn.error", "watchfiles", "pywebview")


def setup_logging(
    log_level: str = "INFO",
    log_dir: str | Path = "logs",
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> Path:
    """Install console + rotating-file handlers on the root logger.

    Can be called again (e.g. once config is loaded); previous handlers are
    closed and replaced.

    Returns:
        Path of the log file.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    log_path = Path(log_dir) / LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(),
        RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"),
    ]
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return log_path


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class ContextualLogger:
    """Prefixes every message with ``[key=value]`` pairs.

    Usage::

        log = ContextualLogger(get_logger(__name__), command="LoadPackages", generation=3)
        log.info("Listing packages")
        # => "[command=LoadPackages] [generation=3] Listing packages"
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        self._logger = logger
        self._context = context
        self._prefix = " ".join(f"[{k}={v}]" for k, v in context.items())

    def bind(self, **context: Any) -> ContextualLogger:
        """A logger with *context* added to the current one."""
        return ContextualLogger(self._logger, **{**self._context, **context})

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._prefix:
            msg = f"{self._prefix} {msg}"
        self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self.log(logging.ERROR, msg, *args, **kwargs)
