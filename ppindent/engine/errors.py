"""
Exceptions raised by the indentation engine and rule loading.

Only ``LineOutOfRangeError`` and ``RuleSetError`` ever reach callers.
``NoNodeAtPositionError`` and ``UnresolvableAnchorError`` are resolved
inside the engine.
"""


class IndentEngineError(Exception):
    """Base class for indentation engine errors."""
    pass


class RuleSetError(IndentEngineError):
    """Raised when a rule table cannot be loaded."""
    pass


class LineOutOfRangeError(IndentEngineError, ValueError):
    """Raised when a requested line does not exist in the document."""

    def __init__(self, line_number: int, line_count: int):
        self.line_number = line_number
        self.line_count = line_count
        super().__init__(
            f"Line {line_number} is outside the document (1..{line_count})"
        )


class NoNodeAtPositionError(IndentEngineError):
    """Raised when no node covers a position."""

    def __init__(self, offset: int):
        self.offset = offset
        super().__init__(f"No syntax node covers offset {offset}")


class UnresolvableAnchorError(IndentEngineError):
    """Raised when anchor resolution would walk past the document root."""
    pass
