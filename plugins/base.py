"""
Base interface for language plugins.

A language plugin is the tree provider for one language: it parses source
text into a ``SyntaxTree`` and owns the static rule table used to indent it.
"""

from abc import ABC, abstractmethod
from typing import List

from ppindent.models import RuleSet, SyntaxTree


class LanguagePlugin(ABC):
    """Base interface for language plugins."""

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the language name (e.g., 'puppet')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> List[str]:
        """Return supported file extensions (e.g., ['.pp'])."""
        pass

    @abstractmethod
    def parse_file(self, file_path: str, content: str) -> SyntaxTree:
        """
        Parse file content into a concrete syntax tree.

        Args:
            file_path: Path to the file being parsed
            content: File content as string

        Returns:
            SyntaxTree snapshot of the content

        Raises:
            ValueError: If the file cannot be parsed
        """
        pass

    @abstractmethod
    def get_rule_set(self) -> RuleSet:
        """
        Return the language's indentation rules.

        The rule set is built once and shared by every request.

        Returns:
            RuleSet for this language
        """
        pass
