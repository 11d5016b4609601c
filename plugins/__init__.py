"""
Language plugin architecture.

This package provides the plugin system for language-specific tree providers
and rule tables, including the base plugin interface and plugin manager.
"""

from plugins.base import LanguagePlugin
from plugins.manager import PluginManager

__all__ = ['LanguagePlugin', 'PluginManager']
