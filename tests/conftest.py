# tests/conftest.py
"""
Shared helpers and fixtures for the stateless-lint test suite.

Helpers are plain functions so test modules can import them directly::

    from tests.conftest import verdicts_for, first_definition
"""

import textwrap
from typing import List, Optional

import pytest

from stateless_lint.ast_helper import ParsedModule, parse_module
from stateless_lint.config import Configuration
from stateless_lint.extractor import ComponentDefinition, extract_definitions
from stateless_lint.members import classify_members
from stateless_lint.rules import Verdict, classify_module


def parse(source: str, path: str = "Foo.jsx") -> ParsedModule:
    return parse_module(textwrap.dedent(source), path)


def definitions_for(source: str, config: Optional[Configuration] = None) -> List[ComponentDefinition]:
    return list(extract_definitions(parse(source), config or Configuration()))


def first_definition(source: str, config: Optional[Configuration] = None) -> ComponentDefinition:
    found = definitions_for(source, config)
    assert found, "no component definition extracted"
    return found[0]


def render_of(source: str):
    """Render function node of the first definition in ``source``."""
    return classify_members(first_definition(source)).render_function


def verdicts_for(source: str, **options) -> List[Verdict]:
    config = Configuration(**options)
    return [verdict for _, verdict in classify_module(parse(source), config)]


def single_verdict(source: str, **options) -> Verdict:
    verdicts = verdicts_for(source, **options)
    assert len(verdicts) == 1, f"expected one definition, got {len(verdicts)}"
    return verdicts[0]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

PURE_COMPONENT_SRC = """\
import React from 'react';

class Foo extends React.Component {
  render() {
    return <div>{this.props.foo}</div>;
  }
}
"""

STATEFUL_COMPONENT_SRC = """\
import React from 'react';

class Bar extends React.Component {
  render() {
    return <div>{this.state.bar}</div>;
  }
}
"""


@pytest.fixture
def default_config() -> Configuration:
    return Configuration()


@pytest.fixture
def source_tree(tmp_path):
    """A small project: one flaggable file, one clean file, one ignored dir."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "Foo.jsx").write_text(PURE_COMPONENT_SRC, encoding="utf-8")
    (tmp_path / "src" / "Bar.js").write_text(STATEFUL_COMPONENT_SRC, encoding="utf-8")
    (tmp_path / "src" / "notes.txt").write_text("not javascript", encoding="utf-8")
    modules = tmp_path / "src" / "node_modules" / "dep"
    modules.mkdir(parents=True)
    (modules / "index.js").write_text(PURE_COMPONENT_SRC, encoding="utf-8")
    return tmp_path
