"""
apidescriber logging utilities

Session-based file logging for document builds.  Every module logs through
``logging.getLogger(__name__)``; :func:`setup_logging` attaches handlers to
the ``apidescriber`` package logger only, so applications embedding the
library keep control of the root logger.

Log Location:
-------------
- Default: ``<home_dir>/logs`` from the configuration (``~/.apidescriber/logs``)
- One timestamped file per session: ``apidescriber_YYYYMMDD_HHMMSS_<session_id>.log``
- A symlink ``apidescriber.log`` points to the latest session

Log Levels:
-----------
- DEBUG: model registrations, describer dispatch, withdrawn properties
- INFO: document build summaries
- WARNING: merge keys dropped under the ``"warn"`` policy

Usage:
------
    from apidescriber.utils.logging import setup_logging, get_session_id

    log_file = setup_logging(level="DEBUG", console_output=True)
"""

from __future__ import annotations

import logging
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from apidescriber.config import get_config

# ============================================================================
# Constants
# ============================================================================

LOGGER_NAME = "apidescriber"
SYMLINK_NAME = "apidescriber.log"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s:%(lineno)d | %(message)s"

_log_file_path: Optional[Path] = None
_session_id: Optional[str] = None


# ============================================================================
# Session ID Filter
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
    """Formatter that defaults session_id to 'N/A' for records from other loggers."""

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


def generate_log_filename(session_id: str) -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"apidescriber_{timestamp}_{session_id}.log"


def setup_logging(
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    console_output: bool = False,
    quiet: bool = False,
) -> Path:
    """
    Configure the package logger with a new session.

    Parameters
    ----------
    level : str, optional
        DEBUG, INFO, WARNING or ERROR.  Defaults to the configured
        ``log_level`` (``APIDESCRIBER_LOG_LEVEL``).
    log_dir : Path, optional
        Directory for log files.  Defaults to the configured ``log_dir``.
    console_output : bool
        Also log to stderr.
    quiet : bool
        Suppress console output even when ``console_output`` is set.

    Returns
    -------
    Path
        The session's log file.
    """
    global _log_file_path, _session_id

    config = get_config()
    _session_id = generate_session_id()

    level = (level or config.log_level).upper()
    log_level = getattr(logging, level, logging.INFO)

    log_dir = log_dir or config.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / generate_log_filename(_session_id)
    _log_file_path = log_file

    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    for f in package_logger.filters[:]:
        package_logger.removeFilter(f)

    package_logger.setLevel(log_level)
    package_logger.addFilter(SessionIdFilter(_session_id))

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(SessionFormatter(FILE_LOG_FORMAT, LOG_DATE_FORMAT))
    package_logger.addHandler(file_handler)

    if console_output and not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(SessionFormatter(LOG_FORMAT, LOG_DATE_FORMAT))
        package_logger.addHandler(console_handler)

    package_logger.propagate = False

    symlink_path = log_dir / SYMLINK_NAME
    try:
        if symlink_path.is_symlink() or symlink_path.exists():
            symlink_path.unlink()
        symlink_path.symlink_to(log_file.name)
    except OSError:
        # Symlinks need extra privileges on some platforms.
        pass

    package_logger.info("Logging session %s started (level %s, file %s)", _session_id, level, log_file)
    return log_file


def get_current_log_file() -> Optional[Path]:
    """Return the path to the current log file, if logging is initialised."""
    return _log_file_path


def get_session_id() -> Optional[str]:
    """Return the current session ID, if logging is initialised."""
    return _session_id
