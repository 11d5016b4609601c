"""
Re-indentation service.

Routes a file to its language plugin by extension, parses it, runs the
indentation engine over a line range and rewrites leading whitespace.
"""

from typing import Dict, Optional

from plugins.manager import PluginManager
from plugins.base import LanguagePlugin
from ppindent.engine import IndentationEngine, apply_indentation
from ppindent.models import Anchor, IndentConfig, ReindentResult
from ppindent.utils.logging import get_logger, log_error_with_context, log_parse_recovery
from ppindent.utils.metrics import ReindentMetrics, emit_metric

logger = get_logger(__name__)


class ReindentError(Exception):
    """Base exception for re-indentation errors."""
    pass


class UnsupportedFileError(ReindentError):
    """Raised when no plugin is registered for a file's extension."""
    pass


class Reindenter:
    """Re-indents documents using the plugin registered for their extension."""

    def __init__(self, plugin_manager: PluginManager):
        """
        Initialize the service.

        Args:
            plugin_manager: Manager holding the language plugins
        """
        self.plugin_manager = plugin_manager
        self._engines: Dict[str, IndentationEngine] = {}

    def engine_for(self, plugin: LanguagePlugin) -> IndentationEngine:
        """Engine bound to ``plugin``'s rule set, built once per language."""
        engine = self._engines.get(plugin.language_name)
        if engine is None:
            engine = IndentationEngine(plugin.get_rule_set())
            self._engines[plugin.language_name] = engine
        return engine

    def reindent(
        self,
        file_path: str,
        content: str,
        config: Optional[IndentConfig] = None,
        start_line: Optional[int] = None,
        end_line: Optional[int] = None,
    ) -> ReindentResult:
        """
        Re-indent ``content`` (or lines ``start_line..end_line`` of it).

        Lines that continue a multi-line token are reported in ``columns``
        but their text is left untouched.

        Args:
            file_path: Path used to select the plugin and for logging
            content: Document text
            config: Indentation options (defaults to IndentConfig())
            start_line: First line to re-indent (1-indexed, default first line)
            end_line: Last line to re-indent (inclusive, default last line)

        Returns:
            ReindentResult with the new text and per-line columns

        Raises:
            UnsupportedFileError: If no plugin handles the file's extension
            ValueError: If the file cannot be parsed or the range is invalid
        """
        plugin = self.plugin_manager.get_plugin_for_file(file_path)
        if plugin is None:
            raise UnsupportedFileError(f"No language plugin for file: {file_path}")

        config = config or IndentConfig()
        file_logger = logger.with_context(file_path=file_path, language=plugin.language_name)
        metrics = ReindentMetrics(file_path, plugin.language_name)
        metrics.start()

        try:
            tree = plugin.parse_file(file_path, content)
        except ValueError as e:
            metrics.complete(status="failed", error_message=str(e))
            log_error_with_context(file_logger, f"Failed to parse {file_path}", e)
            raise

        diagnostics = tree.diagnostics()
        metrics.record_recovery_nodes(len(diagnostics))
        log_parse_recovery(file_logger, file_path, diagnostics)

        first = start_line if start_line is not None else 1
        last = end_line if end_line is not None else tree.line_count

        engine = self.engine_for(plugin)
        columns: Dict[int, int] = {}
        rewrites: Dict[int, int] = {}
        for decision in engine.iter_region(tree, first, last, config):
            metrics.record_rule_hit(decision.rule_name)
            columns[decision.line_number] = decision.column
            if decision.anchor != Anchor.KEEP:
                rewrites[decision.line_number] = decision.column

        formatted_text = apply_indentation(content, rewrites, config)

        old_lines = content.split("\n")
        new_lines = formatted_text.split("\n")
        changed_lines = [
            line_number for line_number in sorted(rewrites)
            if old_lines[line_number - 1] != new_lines[line_number - 1]
        ]

        metrics.record_lines_changed(len(changed_lines))
        metrics.complete(status="completed")
        emit_metric("reindent.lines_changed", len(changed_lines), language=plugin.language_name)

        return ReindentResult(
            formatted_text=formatted_text,
            is_changed=bool(changed_lines),
            columns=columns,
            changed_lines=changed_lines,
            diagnostics=diagnostics,
        )


def get_reindenter(plugin_manager: Optional[PluginManager] = None) -> Reindenter:
    """
    Factory function creating a Reindenter with the bundled plugins.

    Args:
        plugin_manager: Manager to use; a new one with the Puppet plugin
            registered is created when omitted

    Returns:
        Reindenter instance
    """
    if plugin_manager is None:
        from plugins.puppet import PuppetPlugin

        plugin_manager = PluginManager()
        plugin_manager.register_plugin(PuppetPlugin())

    return Reindenter(plugin_manager)
