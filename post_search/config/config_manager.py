"""
Configuration manager for the post search system.

Handles storage and retrieval of search settings as JSON, with
environment variable overrides for deployments.
"""

import os
import json
import time
from typing import Any, Dict, Optional
from pathlib import Path

from post_search.models import SearchSettings, ConfigurationError

import logging
logger = logging.getLogger(__name__)

ENV_SIMILARITY_THRESHOLD = 'POST_SEARCH_SIMILARITY_THRESHOLD'
ENV_ITEMS_PER_PAGE = 'POST_SEARCH_ITEMS_PER_PAGE'


class ConfigManager:
    """
    Manages search settings storage and retrieval.

    Settings live in a single settings.json file; environment variables
    take precedence over the stored values when loading.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_dir: Directory to store configuration files. If None, uses default.
        """
        self.logger = logging.getLogger(f"{__name__}.ConfigManager")

        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = Path.home() / '.post_search' / 'config'

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.settings_file = self.config_dir / 'settings.json'

        self.logger.info(f"Configuration manager initialized with directory: {self.config_dir}")

    def save_search_settings(self, settings: SearchSettings) -> bool:
        """
        Save search settings.

        Args:
            settings: Search settings to save

        Returns:
            True if saved successfully, False otherwise
        """
        try:
            settings_data = settings.to_dict()
            settings_data['updated_at'] = time.time()

            with open(self.settings_file, 'w') as f:
                json.dump(settings_data, f, indent=2)

            self.logger.info("Saved search settings")
            return True

        except (OSError, TypeError) as e:
            self.logger.error(f"Failed to save search settings: {e}")
            return False

    def load_search_settings(self) -> SearchSettings:
        """
        Load search settings, applying environment overrides.

        Returns:
            SearchSettings instance (defaults if no readable file exists)

        Raises:
            ConfigurationError: If an environment override is not a number
        """
        settings = self._load_settings_file()
        return self._apply_env_overrides(settings)

    def get_config_info(self) -> Dict[str, Any]:
        """
        Get information about the current configuration.

        Returns:
            Dictionary with configuration details
        """
        return {
            'config_dir': str(self.config_dir),
            'settings_file': str(self.settings_file),
            'settings_file_exists': self.settings_file.exists(),
            'env_overrides': [
                name for name in (ENV_SIMILARITY_THRESHOLD, ENV_ITEMS_PER_PAGE)
                if os.environ.get(name)
            ]
        }

    def _load_settings_file(self) -> SearchSettings:
        """Load settings from file, falling back to defaults."""
        if not self.settings_file.exists():
            self.logger.info("No search settings file found, using defaults")
            return SearchSettings()

        try:
            with open(self.settings_file, 'r') as f:
                settings_data = json.load(f)

            # Remove metadata
            settings_data.pop('updated_at', None)

            return SearchSettings.from_dict(settings_data)

        except (OSError, ValueError, TypeError, AttributeError) as e:
            self.logger.error(f"Failed to load search settings: {e}")
            return SearchSettings()

    def _apply_env_overrides(self, settings: SearchSettings) -> SearchSettings:
        """Override stored settings with environment variables when set."""
        threshold = os.environ.get(ENV_SIMILARITY_THRESHOLD)
        if threshold:
            try:
                settings.similarity_threshold = float(threshold)
            except ValueError:
                raise ConfigurationError(f"{ENV_SIMILARITY_THRESHOLD} must be a number, got '{threshold}'")

        items_per_page = os.environ.get(ENV_ITEMS_PER_PAGE)
        if items_per_page:
            try:
                settings.items_per_page = int(items_per_page)
            except ValueError:
                raise ConfigurationError(f"{ENV_ITEMS_PER_PAGE} must be an integer, got '{items_per_page}'")

        return settings


# Global configuration manager instance
_global_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """
    Get the global configuration manager instance.

    Returns:
        Global ConfigManager instance
    """
    global _global_config_manager
    if _global_config_manager is None:
        _global_config_manager = ConfigManager(os.environ.get('POST_SEARCH_CONFIG_DIR'))
    return _global_config_manager


def reset_config_manager():
    """Reset the global configuration manager (useful for testing)."""
    global _global_config_manager
    _global_config_manager = None
