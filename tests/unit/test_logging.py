"""
Unit tests for structured logging utilities.
"""

import json
import logging
from io import StringIO

import pytest

from ppindent.models import Anchor, DiagnosticKind, IndentDecision, ParseDiagnostic
from ppindent.utils.logging import (
    JSONFormatter,
    LogContext,
    get_logger,
    log_error_with_context,
    log_indent_decision,
    log_parse_recovery,
)


@pytest.fixture
def captured():
    """Logger adapter writing JSON records into a buffer."""
    logger = get_logger("test_capture")
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.logger.addHandler(handler)
    logger.logger.setLevel(logging.DEBUG)
    yield logger, stream
    logger.logger.removeHandler(handler)


def test_json_formatter():
    """Test JSON formatter produces valid JSON output."""
    formatter = JSONFormatter()

    logger = logging.getLogger("test")
    logger.setLevel(logging.INFO)

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    try:
        logger.info("Test message", extra={"file_path": "init.pp", "language": "puppet", "column": 4})
    finally:
        logger.removeHandler(handler)

    log_data = json.loads(stream.getvalue())

    assert "timestamp" in log_data
    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test"
    assert log_data["message"] == "Test message"
    assert log_data["file_path"] == "init.pp"
    assert log_data["language"] == "puppet"
    assert log_data["context"]["column"] == 4
    assert "source" in log_data


def test_get_logger_with_context():
    """Test getting logger with context."""
    logger = get_logger("test_module", file_path="init.pp", language="puppet")

    assert logger.extra["file_path"] == "init.pp"
    assert logger.extra["language"] == "puppet"


def test_with_context_does_not_modify_original():
    """Test that with_context returns a new adapter."""
    logger = get_logger("test_module", language="puppet")

    child = logger.with_context(file_path="site.pp")

    assert child.extra == {"language": "puppet", "file_path": "site.pp"}
    assert logger.extra == {"language": "puppet"}


def test_log_context_restores_extra(captured):
    """Test temporary context is removed on exit."""
    logger, stream = captured

    with LogContext(logger, file_path="init.pp"):
        logger.info("inside")
    logger.info("outside")

    inside, outside = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert inside["file_path"] == "init.pp"
    assert "file_path" not in outside


def test_log_indent_decision(captured):
    """Test indentation decision logging."""
    logger, stream = captured
    decision = IndentDecision(
        line_number=3,
        column=4,
        rule_name="container-body",
        anchor=Anchor.PARENT_BOL,
        anchor_line=2,
        anchor_column=2,
        offset=1,
    )

    log_indent_decision(logger, decision)

    log_data = json.loads(stream.getvalue())
    assert log_data["level"] == "DEBUG"
    assert log_data["line_number"] == 3
    assert log_data["rule"] == "container-body"
    assert log_data["context"]["anchor"] == "parent-bol"
    assert log_data["context"]["column"] == 4


def test_log_parse_recovery(captured):
    """Test parse recovery logging."""
    logger, stream = captured
    diagnostics = [
        ParseDiagnostic(kind=DiagnosticKind.ERROR, node_type="ERROR", start_line=5,
                        start_column=2, end_line=5, end_column=8, message="Syntax error"),
        ParseDiagnostic(kind=DiagnosticKind.MISSING, node_type="}", start_line=9,
                        start_column=0, end_line=9, end_column=0, message="Missing '}'"),
    ]

    log_parse_recovery(logger, "init.pp", diagnostics)

    log_data = json.loads(stream.getvalue())
    assert log_data["level"] == "WARNING"
    assert log_data["file_path"] == "init.pp"
    assert log_data["line_number"] == 5
    assert log_data["context"]["recovery_nodes"] == 2
    assert log_data["context"]["kinds"] == ["error", "missing"]


def test_log_parse_recovery_without_diagnostics(captured):
    """Test that a clean parse logs nothing."""
    logger, stream = captured

    log_parse_recovery(logger, "init.pp", [])

    assert stream.getvalue() == ""


def test_log_error_with_context(captured):
    """Test error logging with exception details."""
    logger, stream = captured

    try:
        raise ValueError("Unable to parse")
    except ValueError as e:
        log_error_with_context(logger, "Failed to parse init.pp", e, file_path="init.pp")

    log_data = json.loads(stream.getvalue())
    assert log_data["level"] == "ERROR"
    assert log_data["file_path"] == "init.pp"
    assert log_data["context"]["error_type"] == "ValueError"
    assert log_data["error"]["type"] == "ValueError"
    assert "Unable to parse" in log_data["error"]["message"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
