"""
Plugin Manager for language plugins.

This module manages plugin registration and selection based on file
extensions, and loads the YAML configuration each plugin ships with.
"""

import logging
from pathlib import Path
from typing import Dict, Optional
import yaml

from plugins.base import LanguagePlugin

logger = logging.getLogger(__name__)


REQUIRED_CONFIG_FIELDS = ['name', 'version', 'file_extensions', 'indent']


class PluginManager:
    """Manages language plugin registration and selection."""

    def __init__(self):
        """Initialize the plugin manager."""
        self._plugins: Dict[str, LanguagePlugin] = {}
        self._extension_map: Dict[str, str] = {}

    def register_plugin(self, plugin: LanguagePlugin) -> None:
        """
        Register a language plugin.

        Args:
            plugin: LanguagePlugin instance to register
        """
        language_name = plugin.language_name

        if language_name in self._plugins:
            logger.warning(f"Plugin for language '{language_name}' already registered, overwriting")

        self._plugins[language_name] = plugin

        for ext in plugin.file_extensions:
            ext = ext.lower()
            if ext in self._extension_map:
                logger.warning(
                    f"Extension '{ext}' already mapped to '{self._extension_map[ext]}', "
                    f"overwriting with '{language_name}'"
                )
            self._extension_map[ext] = language_name

        logger.info(
            f"Registered plugin for language '{language_name}' "
            f"with extensions: {plugin.file_extensions}"
        )

    def get_plugin_for_file(self, file_path: str) -> Optional[LanguagePlugin]:
        """
        Get appropriate plugin based on file extension.

        Args:
            file_path: Path to the file

        Returns:
            LanguagePlugin instance if found, None otherwise
        """
        ext = Path(file_path).suffix.lower()
        language = self._extension_map.get(ext)

        if language:
            return self._plugins.get(language)

        logger.debug(f"No plugin found for file extension '{ext}' (file: {file_path})")
        return None


def load_plugin_config(config_path: Path) -> Dict:
    """
    Load and validate a plugin's config.yaml.

    Args:
        config_path: Path to the configuration file

    Returns:
        Dictionary containing plugin configuration

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a mapping or lacks a required field
        yaml.YAMLError: If the file is malformed
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Plugin configuration not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse plugin configuration {config_path}: {e}")
        raise

    if not isinstance(config, dict):
        raise ValueError(f"Plugin configuration must be a mapping: {config_path}")
    for field in REQUIRED_CONFIG_FIELDS:
        if field not in config:
            raise ValueError(f"Missing required field '{field}' in {config_path}")

    logger.info(f"Loaded plugin configuration from {config_path}")
    return config
