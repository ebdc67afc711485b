"""Settings store and config.xml persistence."""

from .settings_manager import LoadResult, Settings

__all__ = ['LoadResult', 'Settings']
