"""
Unit tests for the Puppet language plugin.

Tests that need the tree-sitter Puppet grammar are skipped when the
language pack does not provide it.
"""

import pytest

from plugins import PluginManager
from plugins.puppet import PuppetPlugin
from plugins.puppet.plugin import _byte_to_char_offsets
from ppindent.engine import IndentationEngine, RuleSetError
from ppindent.models import Anchor, IndentConfig
from ppindent.services import Reindenter


@pytest.fixture(scope="module")
def plugin():
    return PuppetPlugin()


@pytest.fixture(scope="module")
def parse(plugin):
    """Parse helper that skips when the grammar is unavailable."""
    try:
        plugin.parse_file("empty.pp", "")
    except (LookupError, OSError) as e:
        pytest.skip(f"Puppet grammar not available: {e}")

    def _parse(content):
        return plugin.parse_file("test.pp", content)

    return _parse


@pytest.fixture(scope="module")
def reindenter(plugin, parse):
    manager = PluginManager()
    manager.register_plugin(plugin)
    return Reindenter(manager)


def reindent(plugin, tree):
    engine = IndentationEngine(plugin.get_rule_set())
    config = IndentConfig()
    columns = engine.indent_region(tree, 1, tree.line_count, config)
    return columns


def flatten(text):
    """Strip every line's leading whitespace."""
    return "\n".join(line.lstrip() for line in text.split("\n"))


class TestPuppetPluginConfig:
    """Test cases for plugin configuration loading."""

    def test_language_and_extensions(self, plugin):
        assert plugin.language_name == "puppet"
        assert plugin.file_extensions == [".pp"]

    def test_rule_set_is_loaded(self, plugin):
        rule_set = plugin.get_rule_set()

        assert rule_set.language == "puppet"
        assert rule_set.rules[0].name == "top-level"
        assert rule_set.rules[0].anchor == Anchor.COLUMN_0
        assert rule_set.rules[-1].name == "catch-all"
        assert "parameter_list" in rule_set.attached_types
        assert "heredoc" in rule_set.verbatim_types

    def test_rule_set_is_shared(self, plugin):
        assert plugin.get_rule_set() is plugin.get_rule_set()

    def test_invalid_rules_raise_rule_set_error(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("""
name: puppet
version: 1.0.0
file_extensions: [.pp]
indent:
  language: puppet
  rules:
    - name: broken
      anchor: grandparent
""")

        with pytest.raises(RuleSetError):
            PuppetPlugin(config_path)

    def test_missing_indent_section(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("name: puppet\nversion: 1.0.0\nfile_extensions: [.pp]\n")

        with pytest.raises(ValueError, match="indent"):
            PuppetPlugin(config_path)

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PuppetPlugin(tmp_path / "config.yaml")


class TestByteOffsets:
    """Test cases for UTF-8 byte to character offset mapping."""

    def test_ascii_is_identity(self):
        char_at = _byte_to_char_offsets("abc", b"abc")

        assert char_at(2) == 2

    def test_multibyte_characters(self):
        content = "$s = 'é'\n"
        data = content.encode("utf8")
        char_at = _byte_to_char_offsets(content, data)

        assert char_at(data.index(b"'", 6)) == content.index("'", 6)
        assert char_at(len(data)) == len(content)


# Hand-indented manifests that the engine must reproduce exactly
FORMATTED = {
    "nested_hash_in_class": (
        "class foo {\n"
        "  $x = {\n"
        "    'a' => {\n"
        "      'b' => 1,\n"
        "    },\n"
        "  }\n"
        "}\n"
    ),
    "parameter_list_on_own_line": (
        "define foo::bar\n"
        "(\n"
        "  $foo = $title,\n"
        ") {\n"
        "}\n"
    ),
    "elsif_and_else_after_brace": (
        "if $x {\n"
        "  $a = 1\n"
        "} elsif $y {\n"
        "  $b = 2\n"
        "} else {\n"
        "  $c = 3\n"
        "}\n"
    ),
    "else_and_brace_on_own_lines": (
        "if $x {\n"
        "  $a = 1\n"
        "}\n"
        "else\n"
        "{\n"
        "  $c = 3\n"
        "}\n"
    ),
    "resource_attributes": (
        "file { '/tmp/x':\n"
        "  ensure => file,\n"
        "  mode => '0644',\n"
        "}\n"
    ),
    "call_arguments": (
        "$x = foo(\n"
        "  'a',\n"
        "  'b'\n"
        ")\n"
    ),
    "array_in_class": (
        "class foo {\n"
        "  $x = [\n"
        "    1,\n"
        "    2,\n"
        "  ]\n"
        "}\n"
    ),
}


class TestPuppetParsing:
    """Indentation of real parse trees."""

    def test_root_spans_document(self, parse):
        content = "\nclass foo {\n}\n\n"

        tree = parse(content)

        assert tree.root.start == 0
        assert tree.root.end == len(content)

    def test_class_body(self, plugin, parse):
        tree = parse("class foo {\n$bar = 'hello'\n}\n")

        columns = reindent(plugin, tree)

        assert columns[1] == 0
        assert columns[2] == 2
        assert columns[3] == 0

    def test_lone_closing_brace(self, plugin, parse):
        tree = parse("class foo {\n  $bar = 'hello'\n    }\n")

        assert reindent(plugin, tree)[3] == 0

    def test_syntax_error_is_tolerated(self, plugin, parse):
        tree = parse("class foo {\n  $x = \n")

        columns = reindent(plugin, tree)

        assert columns[1] == 0
        assert len(columns) == tree.line_count

    @pytest.mark.parametrize("name", sorted(FORMATTED))
    def test_flattened_manifest_is_restored(self, reindenter, name):
        expected = FORMATTED[name]

        result = reindenter.reindent("init.pp", flatten(expected))

        assert result.formatted_text == expected

    @pytest.mark.parametrize("name", sorted(FORMATTED))
    def test_second_pass_is_unchanged(self, reindenter, name):
        first = reindenter.reindent("init.pp", flatten(FORMATTED[name]))

        second = reindenter.reindent("init.pp", first.formatted_text)

        assert second.is_changed is False
        assert second.formatted_text == first.formatted_text

    def test_nested_hash_entry_column(self, plugin, parse):
        tree = parse(flatten(FORMATTED["nested_hash_in_class"]))

        columns = reindent(plugin, tree)

        assert columns[4] == 6
        assert columns[5] == 4

    def test_define_parameter_list(self, plugin, parse):
        tree = parse("define foo::bar\n(\n$foo = $title,\n) {\n}\n")

        columns = reindent(plugin, tree)

        assert columns[2] == 0
        assert columns[3] == 2
        assert columns[4] == 0
