"""
Shared pytest fixtures for settings tests.
"""
import pytest
import sys
from PySide6.QtCore import QCoreApplication


@pytest.fixture(scope='session')
def qt_app():
    """Create QCoreApplication instance for tests."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv[:1])
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture
def config_dir(tmp_path):
    """Application data directory for one test."""
    return tmp_path / "RemoteControlServer"


@pytest.fixture
def settings(qt_app, config_dir):
    """Settings bound to a temporary config directory."""
    from rcserver.settings import Settings
    return Settings(config_dir=config_dir)


@pytest.fixture
def write_config(config_dir):
    """Write raw config.xml text and return its path."""
    def _write(text: str):
        config_dir.mkdir(parents=True, exist_ok=True)
        path = config_dir / "config.xml"
        path.write_text(text, encoding="utf-8")
        return path
    return _write
