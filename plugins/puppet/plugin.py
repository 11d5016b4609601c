"""
Puppet Language Plugin.

This plugin provides Puppet manifest parsing through the tree-sitter Puppet
grammar and the rule table used to indent manifests.
"""

import logging
from pathlib import Path
from typing import List, Optional

import tree_sitter
from pydantic import ValidationError
from tree_sitter_language_pack import get_language

from plugins.base import LanguagePlugin
from plugins.manager import load_plugin_config
from ppindent.engine.errors import RuleSetError
from ppindent.models import RuleSet, SyntaxTree, SyntaxTreeBuilder

logger = logging.getLogger(__name__)


class PuppetPlugin(LanguagePlugin):
    """Puppet language plugin using tree-sitter."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize the Puppet plugin.

        The rule table is loaded and validated immediately; the grammar is
        loaded on the first parse.

        Args:
            config_path: Path to config.yaml file. If None, uses default location.

        Raises:
            RuleSetError: If the rule table in the configuration is invalid
        """
        if config_path is None:
            config_path = Path(__file__).parent / "config.yaml"

        self._config = load_plugin_config(config_path)

        try:
            self._rule_set = RuleSet.model_validate(self._config['indent'])
        except ValidationError as e:
            raise RuleSetError(f"Invalid indentation rules in {config_path}: {e}") from e

        self._parser: Optional[tree_sitter.Parser] = None

        logger.info(
            f"Puppet plugin initialized with {len(self._rule_set.rules)} indentation rules"
        )

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "puppet"

    @property
    def file_extensions(self) -> List[str]:
        """Return supported file extensions."""
        return self._config.get('file_extensions', ['.pp'])

    def get_rule_set(self) -> RuleSet:
        return self._rule_set

    def parse_file(self, file_path: str, content: str) -> SyntaxTree:
        """
        Parse a Puppet manifest with tree-sitter.

        Args:
            file_path: Path to the file being parsed
            content: File content as string

        Returns:
            SyntaxTree snapshot of the manifest

        Raises:
            ValueError: If the grammar yields no tree
        """
        parser = self._get_parser()
        data = content.encode("utf8")
        tree = parser.parse(data)

        if tree.root_node is None:
            raise ValueError(f"Failed to parse Puppet file: {file_path}")

        syntax_tree = self._convert_tree(tree.root_node, content, data)

        logger.debug(f"Parsed Puppet file {file_path} into {len(syntax_tree.nodes)} nodes")
        return syntax_tree

    def _get_parser(self) -> tree_sitter.Parser:
        if self._parser is None:
            grammar = self._config.get('grammar', 'puppet')
            self._parser = tree_sitter.Parser(get_language(grammar))
            logger.info(f"Loaded tree-sitter grammar '{grammar}'")
        return self._parser

    def _convert_tree(
        self,
        ts_root: tree_sitter.Node,
        content: str,
        data: bytes
    ) -> SyntaxTree:
        """
        Copy a tree-sitter tree into the engine's node arena.

        Byte offsets become character offsets. The root is widened to the
        whole document so leading and trailing blank lines have a parent.

        Args:
            ts_root: tree-sitter root node
            content: Original file content
            data: UTF-8 encoding of ``content``

        Returns:
            SyntaxTree snapshot
        """
        char_at = _byte_to_char_offsets(content, data)

        builder = SyntaxTreeBuilder(content)
        root_index = builder.add_node(ts_root.type, 0, len(content))

        stack = [(child, root_index) for child in reversed(ts_root.children)]
        while stack:
            ts_node, parent_index = stack.pop()
            index = builder.add_node(
                ts_node.type,
                char_at(ts_node.start_byte),
                char_at(ts_node.end_byte),
                parent=parent_index,
                named=ts_node.is_named,
                missing=ts_node.is_missing,
            )
            stack.extend((child, index) for child in reversed(ts_node.children))

        return builder.build()


def _byte_to_char_offsets(content: str, data: bytes):
    """Return a function mapping UTF-8 byte offsets to character offsets."""
    if len(data) == len(content):
        return lambda offset: offset

    offsets = [0] * (len(data) + 1)
    position = 0
    for index, ch in enumerate(content):
        width = len(ch.encode("utf8"))
        for k in range(width):
            offsets[position + k] = index
        position += width
    offsets[len(data)] = len(content)
    return lambda offset: offsets[offset]
