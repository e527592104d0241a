"""Core: config, service container and application bootstrap."""

from portal.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
