"""Logging setup and the UI-facing status log."""
