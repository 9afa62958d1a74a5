"""
Configuration management for the post search system.

Provides storage, environment overrides and validation for search settings.
"""

from .config_manager import ConfigManager, get_config_manager, reset_config_manager
from .validation import SettingsValidator, ValidationResult

__all__ = [
    "ConfigManager",
    "get_config_manager",
    "reset_config_manager",
    "SettingsValidator",
    "ValidationResult"
]
