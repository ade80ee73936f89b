"""
Configuration management for Backend SOS.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for script, broadcast log and server config.
"""

from backend_sos.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
