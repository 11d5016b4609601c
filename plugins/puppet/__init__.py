"""
Puppet language plugin.

This plugin parses Puppet manifests and provides their indentation rules.
"""

from plugins.puppet.plugin import PuppetPlugin

__all__ = ['PuppetPlugin']
