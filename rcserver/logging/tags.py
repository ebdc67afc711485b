"""Standard logging tags for consistent log filtering.

Usage:
    from rcserver.logging.tags import TAG_SETTINGS
    logger.info("%s Settings restored", TAG_SETTINGS)
"""

TAG_SETTINGS = "[SETTINGS]"
"""Settings load/save lifecycle."""

TAG_IO = "[IO]"
"""Config file reads and writes."""

TAG_FALLBACK = "[FALLBACK]"
"""A default was used because persisted data was missing; highlighted on the console."""
