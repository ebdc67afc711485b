"""Centralised version and naming information for RemoteControlServer.

This module is the single source of truth for application version and
the Qt application identity. The runtime imports this so QStandardPaths
resolves the same per-user data directory on every start.
"""
from __future__ import annotations


APP_NAME: str = "RemoteControlServer"
APP_ORGANIZATION: str = "RemoteControlCollection"
APP_VERSION: str = "2.1.0"
APP_DESCRIPTION: str = "Remote Control Server - desktop companion for the Remote Control mobile apps."


__all__ = [
    "APP_NAME",
    "APP_ORGANIZATION",
    "APP_VERSION",
    "APP_DESCRIPTION",
]
