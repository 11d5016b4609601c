"""
Leading-whitespace helpers.

The engine only computes columns; these helpers measure existing
indentation and rewrite it for callers that want new text back.
"""

from typing import Dict

from ppindent.models.indentation import IndentConfig


WHITESPACE = " \t\f\v"


def visual_width(text: str, tab_width: int, start_column: int = 0) -> int:
    """
    Column reached after rendering ``text`` from ``start_column``.

    Tabs advance to the next multiple of ``tab_width``.
    """
    column = start_column
    for ch in text:
        if ch == "\t":
            column = (column // tab_width + 1) * tab_width
        else:
            column += 1
    return column - start_column


def leading_whitespace(line: str) -> str:
    return line[:len(line) - len(line.lstrip(WHITESPACE))]


def current_indentation(line: str, tab_width: int) -> int:
    """Visual column of the first non-whitespace character of ``line``."""
    return visual_width(leading_whitespace(line), tab_width)


def apply_indentation(source: str, columns: Dict[int, int], config: IndentConfig) -> str:
    """
    Rewrite the leading whitespace of the given lines.

    Lines are split on ``\\n`` only, matching the syntax tree's line
    numbering; a ``\\r`` before the newline is preserved.

    Args:
        source: Document text
        columns: Line number (1-indexed) to target column
        config: Indentation options (tabs or spaces)

    Returns:
        New document text. Lines not in ``columns`` are untouched;
        whitespace-only lines in ``columns`` become empty.
    """
    lines = source.split("\n")

    for line_number, column in columns.items():
        index = line_number - 1
        if not 0 <= index < len(lines):
            continue
        body = lines[index]
        carriage = ""
        if body.endswith("\r"):
            body, carriage = body[:-1], "\r"
        content = body.lstrip(WHITESPACE)
        if not content:
            lines[index] = carriage
        else:
            lines[index] = config.indent_string(column) + content + carriage

    return "\n".join(lines)
