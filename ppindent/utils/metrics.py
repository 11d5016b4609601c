"""
Metrics collection and emission for re-indentation runs.

This module provides metrics tracking for:
- Re-indentation time per file
- Lines examined and lines changed
- Which rules decided how many lines
- Parser recovery nodes encountered
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any

from ppindent.utils.logging import get_logger

logger = get_logger(__name__)


class ReindentMetrics:
    """
    Collects metrics while one file is re-indented.

    Tracks:
    - Start/end time
    - Lines examined and changed
    - Rule hit counts
    - Recovery node count
    """

    def __init__(self, file_path: str, language: str):
        """
        Initialize metrics collector.

        Args:
            file_path: File being re-indented
            language: Language plugin handling the file
        """
        self.file_path = file_path
        self.language = language

        # Timing metrics
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.duration_ms: Optional[int] = None

        # Indentation metrics
        self.lines_examined: int = 0
        self.lines_changed: int = 0
        self.rule_hits: Dict[str, int] = {}
        self.recovery_nodes: int = 0

        # Status
        self.status: str = "running"
        self.error_message: Optional[str] = None

    def start(self) -> None:
        """Mark the start of the run."""
        self.start_time = datetime.now(timezone.utc)
        self.status = "running"

    def complete(self, status: str = "completed", error_message: Optional[str] = None) -> None:
        """
        Mark the end of the run.

        Args:
            status: Final status ('completed', 'failed')
            error_message: Error message if failed
        """
        self.end_time = datetime.now(timezone.utc)
        self.status = status
        self.error_message = error_message

        if self.start_time:
            duration = (self.end_time - self.start_time).total_seconds()
            self.duration_ms = int(duration * 1000)

        logger.info(
            f"Re-indentation {self.status} for {self.file_path}",
            extra={
                "file_path": self.file_path,
                "language": self.language,
                "status": self.status,
                "duration_ms": self.duration_ms,
                "lines_examined": self.lines_examined,
                "lines_changed": self.lines_changed,
                "recovery_nodes": self.recovery_nodes,
            }
        )

    def record_rule_hit(self, rule_name: str) -> None:
        """
        Count one line decided by ``rule_name``.

        Args:
            rule_name: Name of the matching rule
        """
        self.lines_examined += 1
        self.rule_hits[rule_name] = self.rule_hits.get(rule_name, 0) + 1

    def record_lines_changed(self, count: int) -> None:
        self.lines_changed = count

    def record_recovery_nodes(self, count: int) -> None:
        self.recovery_nodes = count

    def get_metrics_summary(self) -> Dict[str, Any]:
        """
        Get summary of collected metrics.

        Returns:
            Dictionary of metrics
        """
        summary = {
            "file_path": self.file_path,
            "language": self.language,
            "status": self.status,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_ms": self.duration_ms,
            "lines_examined": self.lines_examined,
            "lines_changed": self.lines_changed,
            "rule_hits": dict(self.rule_hits),
            "recovery_nodes": self.recovery_nodes,
        }

        if self.error_message:
            summary["error_message"] = self.error_message

        return summary


def emit_metric(metric_name: str, value: float, **tags: Any) -> None:
    """
    Emit a metric as a log record.

    Args:
        metric_name: Metric name
        value: Metric value
        **tags: Metric tags/labels
    """
    logger.info(
        f"Metric: {metric_name}",
        extra={
            "metric_name": metric_name,
            "metric_value": value,
            "metric_tags": tags,
        }
    )
