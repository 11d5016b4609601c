"""
Utility modules for the Puppet indentation engine.
"""

from ppindent.utils.logging import (
    get_logger,
    setup_logging,
    LogContext,
    log_indent_decision,
    log_parse_recovery,
    log_error_with_context,
)
from ppindent.utils.metrics import (
    ReindentMetrics,
    emit_metric,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "LogContext",
    "log_indent_decision",
    "log_parse_recovery",
    "log_error_with_context",
    "ReindentMetrics",
    "emit_metric",
]
