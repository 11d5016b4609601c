"""
Structural indentation for Puppet manifests.

The engine works on a concrete syntax tree produced by a language plugin
and resolves the leading whitespace of each line from an ordered rule
table.
"""

__version__ = "0.1.0"
