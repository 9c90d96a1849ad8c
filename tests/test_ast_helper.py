# tests/test_ast_helper.py
"""
Tests for parsing and tree-query helpers, and for the package surface.
"""

import pytest

import stateless_lint
from stateless_lint.ast_helper import (
    SourceLocation,
    has_keyword,
    is_literal,
    iter_preorder,
    literal_key,
    parse_file,
    parse_module,
    property_name,
    string_value,
    unwrap_parens,
)


def _expression(source):
    """First expression of a one-statement module."""
    module = parse_module(source)
    statement = module.root.named_children[0]
    return statement.named_children[0]


class TestParsing:

    def test_parse_module(self):
        module = parse_module("const a = 1;", "a.js")
        assert module.path == "a.js"
        assert module.root.type == "program"
        assert not module.has_syntax_errors

    def test_syntax_errors_flagged(self):
        assert parse_module("const = ;").has_syntax_errors

    def test_parse_file(self, tmp_path):
        path = tmp_path / "x.jsx"
        path.write_text("let x = <div />;\n", encoding="utf-8")
        module = parse_file(path)
        assert module.path == str(path)
        assert module.line_text(1) == "let x = <div />;"
        assert module.line_text(5) == ""

    def test_parse_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            parse_file(tmp_path / "missing.js")

    def test_location(self):
        module = parse_module("\n  foo;", "a.js")
        node = module.root.named_children[0]
        assert module.location(node) == SourceLocation("a.js", 2, 3)
        assert str(module.location(node)) == "a.js:2:3"


class TestQueries:

    @pytest.mark.parametrize("source,expected", [
        ("'abc';", "abc"),
        ('"abc";', "abc"),
        ("`abc`;", "abc"),
        ("`a${b}`;", None),
        ("abc;", None),
    ])
    def test_string_value(self, source, expected):
        assert string_value(_expression(source)) == expected

    def test_literal_key(self):
        assert literal_key(_expression("0;")) == "0"
        assert literal_key(_expression("('x');")) == "x"
        assert literal_key(_expression("x;")) is None

    def test_unwrap_parens(self):
        assert unwrap_parens(_expression("((a));")).type == "identifier"
        assert unwrap_parens(None) is None

    @pytest.mark.parametrize("source,expected", [
        ("null;", True),
        ("1;", True),
        ("`x`;", True),
        ("`${x}`;", False),
        ("x;", False),
    ])
    def test_is_literal(self, source, expected):
        assert is_literal(_expression(source)) is expected

    def test_property_names_and_keywords(self):
        module = parse_module("class A { static foo() {} ['bar']() {} get baz() {} }")
        methods = [n for n in iter_preorder(module.root) if n.type == "method_definition"]
        names = [property_name(m.child_by_field_name("name")) for m in methods]
        assert names == ["foo", "bar", "baz"]
        assert [has_keyword(m, "static") for m in methods] == [True, False, False]
        assert [has_keyword(m, "get") for m in methods] == [False, False, True]

    def test_preorder_prune(self):
        module = parse_module("function f() { function g() { h(); } }")
        pruned = [
            n.type for n in iter_preorder(module.root, prune=lambda n: n.type == "statement_block")
        ]
        assert "call_expression" not in pruned
        assert "statement_block" in pruned


class TestPackage:

    def test_exports(self):
        assert stateless_lint.classify_module is not None
        assert "Configuration" in stateless_lint.__all__
        assert "reporter" in stateless_lint.list_submodules()

    def test_package_info(self):
        info = stateless_lint.package_info()
        assert info["version"] == stateless_lint.__version__
        assert info["missing_submodules"] == []
