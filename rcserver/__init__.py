"""Configuration store for the Remote Control server."""
