"""
Application configuration management.
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from ppindent.models.indentation import IndentConfig


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix ``PPINDENT_``)."""

    # Indentation
    indent_width: int = Field(2, ge=1)
    use_tabs: bool = False
    tab_width: int = Field(8, ge=1)

    # Logging
    log_level: str = "WARNING"
    json_logs: bool = True

    class Config:
        env_prefix = "PPINDENT_"
        env_file = ".env"
        case_sensitive = False

    def indent_config(self) -> IndentConfig:
        """Explicit indentation options for engine calls."""
        return IndentConfig(
            indent_width=self.indent_width,
            use_tabs=self.use_tabs,
            tab_width=self.tab_width,
        )

