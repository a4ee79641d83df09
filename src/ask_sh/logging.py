"""Logging configuration for ask-sh.

Uses Python's standard logging module with support for:
- File logging via config or ASK_SH_LOG environment variable
- A TRACE level below DEBUG for raw wire/pane dumps
- Stderr fallback when no log file is configured
- Compact format with timestamps and lowercase level names

User-facing output (streamed replies, command boxes, approval prompts)
does not go through logging.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ask_sh.config.schema import LoggingConfig

# Custom log level
TRACE = 5

logging.addLevelName(TRACE, "TRACE")

# Module-level logger
logger = logging.getLogger("ask_sh")

_initialized = False

# Map string level names to logging constants
_LEVEL_MAP = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class _LowercaseLevelFormatter(logging.Formatter):
    """Formatter that emits lowercase level names."""

    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        return super().format(record)


def resolve_level(config: LoggingConfig | None, debug: bool = False) -> int:
    """Pick the effective log level.

    Debug mode wins over the configured level. Without either, only
    warnings and errors are logged so the terminal stays quiet.
    """
    if debug:
        return logging.DEBUG
    if config and config.level:
        return _LEVEL_MAP.get(config.level.upper(), logging.WARNING)
    return logging.WARNING


def setup_logging(config: LoggingConfig | None = None, *, debug: bool = False) -> None:
    """Initialize logging based on configuration.

    Call this once at startup. Subsequent calls are no-ops.

    Args:
        config: Optional LoggingConfig with level and file settings.
        debug: Force DEBUG level (``--debug`` / ``ASK_SH_DEBUG``).
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    log_level = resolve_level(config, debug)
    logger.setLevel(log_level)

    # Format: HH:MM:SS level: message
    formatter = _LowercaseLevelFormatter(
        "%(asctime)s %(levelname)s: %(message)s", datefmt="%H:%M:%S"
    )

    # Config already includes ASK_SH_LOG via the loader; fall back to the
    # env var directly when no config was provided
    log_path = config.file if config and config.file else os.environ.get("ASK_SH_LOG")

    if log_path:
        log_path = os.path.expanduser(log_path)
        try:
            file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            if sys.stderr.isatty():
                print(f"[ask-sh] Failed to open log file: {e}", file=sys.stderr)
                _add_stderr_handler(formatter, log_level)
    elif sys.stderr.isatty():
        # Only log to stderr on a real console; the shell function pipes us
        _add_stderr_handler(formatter, log_level)


def _add_stderr_handler(formatter: logging.Formatter, level: int = logging.DEBUG) -> None:
    """Add a stderr handler to the logger."""
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Optional name for a child logger (e.g., "terminal", "llm").
              If None, returns the root ask_sh logger.

    Returns:
        A configured logger instance.
    """
    if name:
        return logger.getChild(name)
    return logger
