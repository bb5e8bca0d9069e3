"""
Configuration module for Thing.

Uses pydantic-settings for environment variable loading.
"""

from thing.config.settings import Settings, get_settings, reset_settings

__all__ = ["Settings", "get_settings", "reset_settings"]
