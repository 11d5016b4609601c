"""Rule matching and indentation resolution."""

from ppindent.engine.errors import (
    IndentEngineError,
    LineOutOfRangeError,
    NoNodeAtPositionError,
    RuleSetError,
    UnresolvableAnchorError,
)
from ppindent.engine.indentation import IndentationEngine
from ppindent.engine.matcher import MatchContext, RuleMatcher
from ppindent.engine.rewrite import apply_indentation, current_indentation, visual_width

__all__ = [
    "IndentationEngine",
    "RuleMatcher",
    "MatchContext",
    "apply_indentation",
    "current_indentation",
    "visual_width",
    "IndentEngineError",
    "LineOutOfRangeError",
    "NoNodeAtPositionError",
    "RuleSetError",
    "UnresolvableAnchorError",
]
