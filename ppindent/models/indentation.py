"""Indentation configuration and result models."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ppindent.models.error import ParseDiagnostic
from ppindent.models.indent_rule import Anchor


class IndentConfig(BaseModel):
    """Indentation options passed explicitly into every engine call."""

    model_config = ConfigDict(frozen=True)

    indent_width: int = Field(2, ge=1, description="Spaces per indent level")
    use_tabs: bool = Field(False, description="Fill leading whitespace with tabs where possible")
    tab_width: int = Field(8, ge=1, description="Visual width of a tab character")

    def indent_string(self, column: int) -> str:
        """Leading whitespace that reaches ``column``."""
        if column <= 0:
            return ""
        if self.use_tabs:
            tabs, spaces = divmod(column, self.tab_width)
            return "\t" * tabs + " " * spaces
        return " " * column


class IndentDecision(BaseModel):
    """Outcome of rule evaluation for one line."""

    line_number: int = Field(..., description="Line number (1-indexed)")
    column: int = Field(..., description="Resolved indentation column")
    rule_name: str = Field(..., description="Name of the rule that matched")
    anchor: Anchor
    anchor_line: Optional[int] = Field(None, description="Line the anchor resolved to (1-indexed)")
    anchor_column: int = Field(0, description="Indentation of the anchor")
    offset: int = Field(0, description="Rule offset in indent units")


class ReindentResult(BaseModel):
    """Result of re-indenting a document or a region of it."""

    formatted_text: str
    is_changed: bool
    columns: Dict[int, int] = Field(default_factory=dict, description="Line number to column")
    changed_lines: List[int] = Field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = Field(default_factory=list)
