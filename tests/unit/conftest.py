"""
Shared fixtures for unit tests.

``Outline`` builds syntax trees from a compact description so engine tests
do not depend on a grammar. Leaves carry their exact text and are located
in the source in order; composite nodes span their first to last child.
"""

from collections import namedtuple
from pathlib import Path

import pytest
import yaml

from ppindent.engine import IndentationEngine
from ppindent.models import IndentConfig, RuleSet, SyntaxTreeBuilder


OutlineNode = namedtuple("OutlineNode", "type children text named")

PUPPET_CONFIG = Path(__file__).resolve().parents[2] / "plugins" / "puppet" / "config.yaml"


class Outline:
    """Helpers for writing syntax tree outlines."""

    @staticmethod
    def node(node_type, *children, text=None, named=True):
        return OutlineNode(node_type, children, text, named)

    @staticmethod
    def tok(text):
        return OutlineNode(text, (), text, False)

    @staticmethod
    def build(source, *children, root_type="source_file"):
        builder = SyntaxTreeBuilder(source)
        root = builder.add_node(root_type, 0, len(source))
        placed, _ = _measure_children(source, children, 0)
        _add(builder, root, placed)
        return builder.build()


def _measure(source, item, cursor):
    if item.text is not None:
        start = source.index(item.text, cursor)
        end = start + len(item.text)
        placed, _ = _measure_children(source, item.children, start)
        return start, end, placed
    placed, end = _measure_children(source, item.children, cursor)
    if not placed:
        raise ValueError(f"Outline node '{item.type}' needs text or children")
    return placed[0][1], end, placed


def _measure_children(source, children, cursor):
    placed = []
    for child in children:
        start, end, sub = _measure(source, child, cursor)
        placed.append((child, start, end, sub))
        cursor = end
    return placed, cursor


def _add(builder, parent, placed):
    for item, start, end, sub in placed:
        index = builder.add_node(item.type, start, end, parent=parent, named=item.named)
        _add(builder, index, sub)


@pytest.fixture
def outline():
    """Outline tree builder."""
    return Outline


@pytest.fixture(scope="session")
def puppet_rule_set():
    """Rule set from the bundled Puppet plugin configuration."""
    with open(PUPPET_CONFIG, "r") as f:
        config = yaml.safe_load(f)
    return RuleSet.model_validate(config["indent"])


@pytest.fixture
def engine(puppet_rule_set):
    """Indentation engine bound to the Puppet rules."""
    return IndentationEngine(puppet_rule_set)


@pytest.fixture
def config():
    """Default indentation options (2 spaces)."""
    return IndentConfig()
