"""
recordschema logging utilities.

Session-based logging for the ``recordschema`` package.  The library itself
only attaches a ``NullHandler``; applications (and the CLI) call
:func:`setup_logging` once to get a per-session log file and, optionally,
console output.

Log Location:
-------------
- Default: ~/.recordschema/logs/
- Each session writes recordschema_YYYYMMDD_HHMMSS_<session_id>.log
- A symlink 'recordschema.log' always points to the latest session
- Can be overridden via RECORDSCHEMA_LOG_DIR, RECORDSCHEMA_HOME_DIR or the
  ``log_dir`` argument

Log Levels:
-----------
- DEBUG: definition registration, ref reuse, skipped fields
- INFO: session start, CLI commands
- WARNING/ERROR: conversion failures reported by the CLI

Usage:
------
    from recordschema.utils.logging import get_logger, setup_logging

    log_file = setup_logging(level="DEBUG", console_output=True)
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

# ============================================================================
# Constants
# ============================================================================

ROOT_LOGGER_NAME = "recordschema"
DEFAULT_LOG_LEVEL = "WARNING"
SYMLINK_NAME = "recordschema.log"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# File records also carry line numbers
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s:%(lineno)d | %(message)s"

_log_file_path: Optional[Path] = None
_session_id: Optional[str] = None

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


# ============================================================================
# Session ID Filter / Formatter
# ============================================================================

class SessionIdFilter(logging.Filter):
    """Add session_id to all log records."""

    def __init__(self, session_id: str):
        super().__init__()
        self.session_id = session_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = self.session_id  # type: ignore[attr-defined]
        return True


class SessionFormatter(logging.Formatter):
    """Formatter that adds session_id, defaulting to 'N/A' if not present."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id or "N/A"  # type: ignore[attr-defined]
        return super().format(record)


# ============================================================================
# Setup Functions
# ============================================================================

def generate_session_id() -> str:
    """Generate a short unique session ID (6 characters)."""
    return uuid.uuid4().hex[:6]


def get_log_directory() -> Path:
    """Get the log directory, respecting the RECORDSCHEMA_LOG_DIR environment variable."""
    env_log_dir = os.getenv("RECORDSCHEMA_LOG_DIR")
    if env_log_dir:
        return Path(env_log_dir)
    from ..config import get_config

    return get_config().log_dir


def generate_log_filename(session_id: str) -> str:
    """Generate a timestamped log filename with session ID."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"recordschema_{timestamp}_{session_id}.log"


def setup_logging(
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    console_output: bool = False,
    quiet: bool = False,
) -> Path:
    """
    Initialise recordschema logging with a session log file.

    Parameters
    ----------
    level : str, optional
        DEBUG, INFO, WARNING or ERROR.  Defaults to the configured
        ``log_level`` (RECORDSCHEMA_LOG_LEVEL), then WARNING.
    log_dir : Path, optional
        Directory for log files.  Defaults to :func:`get_log_directory`.
    console_output : bool
        Also log to stderr.
    quiet : bool
        Suppress console output even if ``console_output`` is set.

    Returns
    -------
    Path
        Path to the log file being written to.
    """
    global _log_file_path, _session_id

    _session_id = generate_session_id()

    if level is None:
        from ..config import get_config

        level = get_config().log_level or DEFAULT_LOG_LEVEL
    log_level = getattr(logging, level.upper(), logging.WARNING)

    if log_dir is None:
        log_dir = get_log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / generate_log_filename(_session_id)
    _log_file_path = log_file

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for f in root.filters[:]:
        root.removeFilter(f)

    root.setLevel(log_level)
    root.addFilter(SessionIdFilter(_session_id))

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(SessionFormatter(FILE_LOG_FORMAT, LOG_DATE_FORMAT))
    root.addHandler(file_handler)

    if console_output and not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(SessionFormatter(LOG_FORMAT, LOG_DATE_FORMAT))
        root.addHandler(console_handler)

    root.propagate = False

    symlink_path = log_dir / SYMLINK_NAME
    try:
        if symlink_path.is_symlink() or symlink_path.exists():
            symlink_path.unlink()
        symlink_path.symlink_to(log_file.name)
    except OSError:
        # Symlinks may be unavailable (e.g. Windows without admin)
        pass

    root.info("recordschema logging session %s started (level %s)", _session_id, level.upper())
    return log_file


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the ``recordschema`` namespace.

    Parameters
    ----------
    name : str
        Module name (typically __name__)
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def get_current_log_file() -> Optional[Path]:
    """Return the path to the current log file, if logging is initialised."""
    return _log_file_path


def get_session_id() -> Optional[str]:
    """Return the current session ID, if logging is initialised."""
    return _session_id
