"""
Location of the per-user application data directory and config file.

The directory comes from QStandardPaths (AppLocalDataLocation), so it
follows the organization/application names set on QCoreApplication:
    - Windows: %LOCALAPPDATA%/<org>/<app>
    - macOS: ~/Library/Application Support/<org>/<app>
    - Linux: ~/.local/share/<org>/<app>

RCSERVER_CONFIG_DIR overrides the platform location.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from PySide6.QtCore import QStandardPaths

from rcserver.logging.logger import get_logger
from rcserver.logging.tags import TAG_FALLBACK, TAG_IO
from versioning import APP_NAME

logger = get_logger(__name__)

CONFIG_FILE_NAME = "config.xml"
CONFIG_DIR_ENV = "RCSERVER_CONFIG_DIR"


def app_data_directory() -> Path:
    """Return the per-user application data directory (not created)."""
    override = os.getenv(CONFIG_DIR_ENV)
    if override and override.strip():
        return Path(override.strip()).expanduser()

    location = QStandardPaths.writableLocation(
        QStandardPaths.StandardLocation.AppLocalDataLocation
    )
    if not location:
        fallback = Path.home() / f".{APP_NAME}"
        logger.warning("%s No application data location from Qt, using %s", TAG_FALLBACK, fallback)
        return fallback
    return Path(location)


def ensure_directory(directory: Union[str, Path]) -> bool:
    """Create ``directory`` if it is missing.

    Only the last path component is created; parents are expected to exist.
    Failure is logged and reported as False, the subsequent file open will
    fail and be reported by its caller.
    """
    directory = Path(directory)
    if directory.is_dir():
        return True
    try:
        directory.mkdir()
    except FileExistsError:
        return directory.is_dir()
    except OSError as e:
        logger.warning("%s Could not create application data directory %s: %s", TAG_IO, directory, e)
        return False
    logger.info("%s Created application data directory %s", TAG_IO, directory)
    return True


def config_path(directory: Optional[Union[str, Path]] = None) -> Path:
    """Return the absolute path of config.xml, ensuring its directory exists."""
    base = Path(directory) if directory is not None else app_data_directory()
    ensure_directory(base)
    return base / CONFIG_FILE_NAME
