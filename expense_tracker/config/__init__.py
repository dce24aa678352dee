"""Configuration package."""

from expense_tracker.config.settings import (
    ClientSettings,
    ServerSettings,
    Settings,
    get_settings,
)

__all__ = [
    "ClientSettings",
    "ServerSettings",
    "Settings",
    "get_settings",
]
