"""Data models for the Puppet indentation engine."""

from .error import DiagnosticKind, ParseDiagnostic
from .indent_rule import Anchor, CATCH_ALL_RULE, IndentRule, NodeMatcher, RuleSet
from .indentation import IndentConfig, IndentDecision, ReindentResult
from .syntax_tree import ROOT_INDEX, SyntaxNode, SyntaxTree, SyntaxTreeBuilder

__all__ = [
    # Syntax tree models
    "ROOT_INDEX",
    "SyntaxNode",
    "SyntaxTree",
    "SyntaxTreeBuilder",
    # Rule models
    "Anchor",
    "NodeMatcher",
    "IndentRule",
    "RuleSet",
    "CATCH_ALL_RULE",
    # Indentation models
    "IndentConfig",
    "IndentDecision",
    "ReindentResult",
    # Error models
    "DiagnosticKind",
    "ParseDiagnostic",
]
