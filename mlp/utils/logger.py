"""Centralised logging configuration for the perceptron package.

The root logger is configured once, on the first ``get_logger`` call:

- **INFO+** to the console (coloured via StreamHandler)
- **DEBUG+** to a rotating file, only when ``configure_logging`` is given one

Usage::

    from mlp.utils.logger import get_logger
    log = get_logger(__name__)
    log.info("Training started")
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3
_ROOT_NAME = "mlp"
_INITIALISED: bool = False

_CONSOLE_FORMAT = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
_FILE_FORMAT = (
    "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(funcName)s:%(lineno)d │ %(message)s"
)


class _ColourFormatter(logging.Formatter):
    """Formatter that emits ANSI colour codes for the console."""

    _COLOURS: dict[int, str] = {
        logging.DEBUG: "\033[90m",      # grey
        logging.INFO: "\033[32m",       # green
        logging.WARNING: "\033[33m",    # yellow
        logging.ERROR: "\033[31m",      # red
        logging.CRITICAL: "\033[1;31m", # bold red
    }
    _RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:  # noqa: D102
        colour = self._COLOURS.get(record.levelno, "")
        message = super().format(record)
        return f"{colour}{message}{self._RESET}"


def _setup_package_logger() -> None:
    """Attach the console handler to the package logger once (idempotent)."""
    global _INITIALISED  # noqa: PLW0603
    if _INITIALISED:
        return
    _INITIALISED = True

    root = logging.getLogger(_ROOT_NAME)
    root.setLevel(logging.DEBUG)

    # ── Console handler (INFO) ──────────────────────────────────
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.INFO)
    console.setFormatter(_ColourFormatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(console)


def configure_logging(level: str | int = "INFO", log_file: str | Path | None = None) -> None:
    """Set the console level and optionally add a rotating DEBUG file handler.

    Args:
        level: Console threshold, a level name (``"DEBUG"``) or number.
        log_file: Destination of the rotating file log; skipped when ``None``.
    """
    _setup_package_logger()
    root = logging.getLogger(_ROOT_NAME)

    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"unknown log level {level!r}")
        level = numeric

    for handler in root.handlers:
        if not isinstance(handler, RotatingFileHandler):
            handler.setLevel(level)

    if log_file is None:
        return

    # ── File handler (DEBUG, rotating) ──────────────────────────
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )
    root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, initialising the package logger on first call.

    Args:
        name: Typically ``__name__`` of the calling module.

    Returns:
        A ``logging.Logger`` instance.
    """
    _setup_package_logger()
    return logging.getLogger(name)
