"""
Centralized logging configuration for the remote control server.

Uses a rotating file handler with logs stored next to the config file in
the application data directory. Includes colored console output for debug
mode and an optional in-memory status log for the UI.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


_VERBOSE: bool = False
# Directory the active RotatingFileHandler writes to. Updated by
# setup_logging() so get_log_dir() always points at the effective location.
_LOG_DIR: Optional[Path] = None
_INSTALLED_HANDLERS: list = []

LOG_FILE_NAME = "rcserver.log"
LOG_FORMAT = '%(asctime)s - %(name)-30s - %(levelname)-8s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',       # Cyan
        'INFO': '\033[32m',        # Green
        'WARNING': '\033[33m',     # Yellow
        'ERROR': '\033[31m',       # Red
        'CRITICAL': '\033[35m',    # Magenta
    }
    FALLBACK_COLOR = '\033[38;5;208m'
    RESET = '\033[0m'
    BOLD = '\033[1m'

    def format(self, record):
        original_levelname = record.levelname

        # Defaulted values stand out regardless of level
        if '[FALLBACK]' in str(record.msg):
            color = self.FALLBACK_COLOR
        else:
            color = self.COLORS.get(record.levelname)

        if color is None:
            return super().format(record)

        record.levelname = f"{self.BOLD}{color}{record.levelname}{self.RESET}"
        try:
            message = super().format(record)
        finally:
            record.levelname = original_levelname
        return f"{color}{message}{self.RESET}"


def _default_log_dir() -> Path:
    from rcserver.settings.paths import app_data_directory

    return app_data_directory() / "logs"


def get_log_dir() -> Path:
    """Return the directory used for log files.

    Before setup_logging() has run this is the default location under the
    application data directory.
    """

    if _LOG_DIR is not None:
        return _LOG_DIR
    return _default_log_dir()


def _teardown_handlers() -> None:
    """Flush, close and detach the handlers installed by setup_logging().

    Handlers added to the root logger by anything else are left alone.
    """
    global _INSTALLED_HANDLERS

    root_logger = logging.getLogger()
    for handler in _INSTALLED_HANDLERS:
        try:
            handler.flush()
        except (OSError, ValueError):
            pass
        try:
            handler.close()
        finally:
            root_logger.removeHandler(handler)
    _INSTALLED_HANDLERS = []


def setup_logging(
    debug: bool = False,
    verbose: bool = False,
    log_dir: Optional[Path] = None,
    status_log=None,
) -> None:
    """
    Configure application logging with file rotation.

    Args:
        debug: If True, set log level to DEBUG and enable console output.
        verbose: Enables additional high-volume debug logs (raw document
            dumps, per-entry parse traces). Implies debug-level logging.
        log_dir: Directory for rcserver.log. Defaults to ``logs/`` under the
            application data directory.
        status_log: Optional StatusLog receiving human-readable INFO+ lines
            for the UI log panel.
    """
    global _VERBOSE, _LOG_DIR, _INSTALLED_HANDLERS

    # Repeated setup must not stack handlers or leak file descriptors
    _teardown_handlers()

    debug_enabled = debug or verbose
    level = logging.DEBUG if debug_enabled else logging.INFO

    _LOG_DIR = Path(log_dir) if log_dir is not None else _default_log_dir()
    _LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = _LOG_DIR / LOG_FILE_NAME

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    # File handler with rotation (1MB max, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    _INSTALLED_HANDLERS.append(file_handler)

    if debug_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        if sys.stdout.isatty():
            console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        else:
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)
        _INSTALLED_HANDLERS.append(console_handler)

    if status_log is not None:
        from rcserver.logging.status_log import StatusLogHandler

        status_handler = StatusLogHandler(status_log)
        status_handler.setLevel(logging.INFO)
        root_logger.addHandler(status_handler)
        _INSTALLED_HANDLERS.append(status_handler)

    _VERBOSE = bool(verbose)

    root_logger.info("=" * 60)
    root_logger.info(
        "Remote control server logging initialized (debug=%s, verbose=%s)",
        debug_enabled,
        _VERBOSE,
    )
    root_logger.info("=" * 60)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def is_verbose_logging() -> bool:
    """Return True when verbose debug logging is enabled globally."""

    return _VERBOSE
