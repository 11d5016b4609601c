"""Parse recovery data models."""

from enum import Enum

from pydantic import BaseModel


class DiagnosticKind(str, Enum):
    """Kind of recovery node found in a syntax tree."""

    ERROR = "error"
    MISSING = "missing"


class ParseDiagnostic(BaseModel):
    """A parser recovery node, flagged for display elsewhere."""

    kind: DiagnosticKind
    node_type: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    message: str
