"""Configuration services."""

from .settings import Settings, SettingsStore

__all__ = ["Settings", "SettingsStore"]
