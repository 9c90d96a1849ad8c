#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
stateless_lint/ast_helper.py
════════════════════════════

Parsing, traversal and querying utilities over the tree-sitter JavaScript
syntax tree.

    ┌─────────────────────────────────────────────────────────────────┐
    │  Parsing                                                        │
    │    • parse_module / parse_file → ParsedModule                   │
    ├─────────────────────────────────────────────────────────────────┤
    │  Traversal                                                      │
    │    • Pre-order iteration with subtree pruning                   │
    │    • Parent chain walking, parenthesis unwrapping               │
    ├─────────────────────────────────────────────────────────────────┤
    │  Querying                                                       │
    │    • Node text, literal strings, property names                 │
    │    • Modifier tokens (static / get / set)                       │
    │    • Source locations                                           │
    └─────────────────────────────────────────────────────────────────┘

Design Principles
─────────────────
1. **Non-invasive**: the tree is never modified; all helpers are
   read-only queries.

2. **Defensive**: helpers accept ``None`` and return ``None``/empty
   results instead of raising, so callers can degrade conservatively.

License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import (
    Callable,
    FrozenSet,
    Iterator,
    List,
    Optional,
    Union,
)

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree


# ═══════════════════════════════════════════════════════════════════════════
#  CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════

JS_LANGUAGE = Language(tree_sitter_javascript.language())

# Nodes that introduce a new function (and parameter) scope.
# ``function`` is the pre-0.21 grammar name of ``function_expression``.
FUNCTION_NODE_TYPES: FrozenSet[str] = frozenset({
    'function_declaration',
    'function_expression',
    'function',
    'generator_function',
    'generator_function_declaration',
    'arrow_function',
    'method_definition',
})

CLASS_NODE_TYPES: FrozenSet[str] = frozenset({
    'class_declaration',
    'class',
})

LITERAL_NODE_TYPES: FrozenSet[str] = frozenset({
    'string',
    'template_string',
    'number',
    'true',
    'false',
    'null',
    'undefined',
    'regex',
})

# Tree-sitter "extras" that may appear anywhere among named children.
_TRIVIA_TYPES: FrozenSet[str] = frozenset({'comment', 'html_comment'})


# ═══════════════════════════════════════════════════════════════════════════
#  SOURCE LOCATIONS
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SourceLocation:
    """A specific point in source code (1-based line and column)."""
    file: str = ""
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.column:
            return f"{self.file}:{self.line}:{self.column}"
        return f"{self.file}:{self.line}"


def node_location(node: Optional[Node], file: str = "") -> SourceLocation:
    """Return the 1-based start location of ``node``."""
    if node is None:
        return SourceLocation(file=file)
    row, column = node.start_point
    return SourceLocation(file=file, line=row + 1, column=column + 1)


# ═══════════════════════════════════════════════════════════════════════════
#  PARSING
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ParsedModule:
    """One parsed source file: its path, raw bytes and syntax tree."""
    path: str
    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def has_syntax_errors(self) -> bool:
        return self.tree.root_node.has_error

    def location(self, node: Optional[Node]) -> SourceLocation:
        return node_location(node, self.path)

    def line_text(self, line: int) -> str:
        """Return source line ``line`` (1-based) without its terminator."""
        lines = self.source.decode('utf-8', errors='replace').splitlines()
        if 1 <= line <= len(lines):
            return lines[line - 1]
        return ""


def make_parser() -> Parser:
    """Create a parser for JavaScript + JSX.

    Parsers hold mutable state; create one per thread.
    """
    return Parser(JS_LANGUAGE)


def parse_module(source: Union[str, bytes], path: str = "<input>") -> ParsedModule:
    """Parse ``source`` into a :class:`ParsedModule`.

    tree-sitter is error tolerant: malformed input still yields a tree
    (with ``ERROR`` nodes) rather than raising.
    """
    if isinstance(source, str):
        source = source.encode('utf-8')
    tree = make_parser().parse(source)
    return ParsedModule(path=path, source=source, tree=tree)


def parse_file(path: Union[str, Path]) -> ParsedModule:
    """Read and parse a file.  ``OSError`` propagates to the caller."""
    p = Path(path)
    return parse_module(p.read_bytes(), str(p))


# ═══════════════════════════════════════════════════════════════════════════
#  TRAVERSAL
# ═══════════════════════════════════════════════════════════════════════════

def iter_preorder(
    node: Optional[Node],
    prune: Optional[Callable[[Node], bool]] = None,
) -> Iterator[Node]:
    """
    Pre-order (node, then children left to right) iteration.

    If ``prune(n)`` is true for a node other than the start node, that
    node is yielded but its subtree is not entered.
    """
    if node is None:
        return
    stack: List[Node] = [node]
    while stack:
        current = stack.pop()
        yield current
        if prune is not None and current is not node and prune(current):
            continue
        stack.extend(reversed(current.children))


def named_children(node: Optional[Node]) -> List[Node]:
    """Named children of ``node`` with comments filtered out."""
    if node is None:
        return []
    return [c for c in node.named_children if c.type not in _TRIVIA_TYPES]


def first_named_child(node: Optional[Node]) -> Optional[Node]:
    children = named_children(node)
    return children[0] if children else None


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    """Strip any number of enclosing ``( ... )``."""
    while node is not None and node.type == 'parenthesized_expression':
        node = first_named_child(node)
    return node


def field(node: Optional[Node], name: str) -> Optional[Node]:
    """``child_by_field_name`` that tolerates ``None``."""
    if node is None:
        return None
    return node.child_by_field_name(name)


def is_field_of(child: Node, parent: Node, name: str) -> bool:
    """True when ``child`` is ``parent``'s ``name`` field."""
    target = parent.child_by_field_name(name)
    return target is not None and target == child


def iter_ancestors(node: Optional[Node]) -> Iterator[Node]:
    """Yield the parent chain of ``node``, nearest first."""
    current = node.parent if node is not None else None
    while current is not None:
        yield current
        current = current.parent


def is_function(node: Optional[Node]) -> bool:
    # keyword tokens share the type names ``function`` and ``class``
    return node is not None and node.is_named and node.type in FUNCTION_NODE_TYPES


def is_class(node: Optional[Node]) -> bool:
    return node is not None and node.is_named and node.type in CLASS_NODE_TYPES


# ═══════════════════════════════════════════════════════════════════════════
#  QUERYING
# ═══════════════════════════════════════════════════════════════════════════

def node_text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode('utf-8', errors='replace')


def string_value(node: Optional[Node]) -> Optional[str]:
    """
    Value of a string literal, or of a template literal without
    substitutions.  Returns ``None`` for anything else.
    """
    node = unwrap_parens(node)
    if node is None:
        return None
    if node.type == 'string':
        return node_text(node)[1:-1]
    if node.type == 'template_string':
        if any(c.type == 'template_substitution' for c in node.named_children):
            return None
        return node_text(node)[1:-1]
    return None


def literal_key(node: Optional[Node]) -> Optional[str]:
    """Key of a computed access ``obj[key]`` when ``key`` is a literal."""
    node = unwrap_parens(node)
    if node is None:
        return None
    value = string_value(node)
    if value is not None:
        return value
    if node.type == 'number':
        return node_text(node)
    return None


def property_name(node: Optional[Node]) -> Optional[str]:
    """
    Static name of a property key node.

    Handles identifiers, string/number keys and computed keys with a
    literal inside (``['render']``).  Returns ``None`` when the name is
    only known at run time.
    """
    if node is None:
        return None
    if node.type in (
        'property_identifier',
        'identifier',
        'private_property_identifier',
        'shorthand_property_identifier',
        'shorthand_property_identifier_pattern',
    ):
        return node_text(node)
    if node.type == 'computed_property_name':
        return literal_key(first_named_child(node))
    return literal_key(node)


def has_keyword(node: Optional[Node], *keywords: str) -> bool:
    """True when an anonymous child token of ``node`` is one of ``keywords``."""
    if node is None:
        return False
    return any(
        not child.is_named and child.type in keywords
        for child in node.children
    )


def is_literal(node: Optional[Node]) -> bool:
    node = unwrap_parens(node)
    if node is None or node.type not in LITERAL_NODE_TYPES:
        return False
    if node.type == 'template_string':
        return string_value(node) is not None
    return True


def function_body(func: Optional[Node]) -> Optional[Node]:
    return field(func, 'body')


def function_parameters(func: Optional[Node]) -> List[Node]:
    """Formal parameters of a function node (arrow ``x => ...`` included)."""
    if func is None:
        return []
    single = func.child_by_field_name('parameter')
    if single is not None:
        return [single]
    return named_children(func.child_by_field_name('parameters'))


__all__ = [
    "JS_LANGUAGE", "FUNCTION_NODE_TYPES", "CLASS_NODE_TYPES",
    "LITERAL_NODE_TYPES", "SourceLocation", "node_location",
    "ParsedModule", "make_parser", "parse_module", "parse_file",
    "iter_preorder", "named_children", "first_named_child",
    "unwrap_parens", "field", "is_field_of", "iter_ancestors",
    "is_function", "is_class", "node_text", "string_value",
    "literal_key", "property_name", "has_keyword", "is_literal",
    "function_body", "function_parameters",
]
