"""
stateless_lint/scope.py
═══════════════════════

Lexical binding lookup over the syntax tree.

Only what the base-type resolver needs is modelled: walking outward from
a reference, the first enclosing block/program or function that declares
the name wins.  Declarations recognised:

  ==================  ==================================================
  import default      ``import React from 'react'``
  import namespace    ``import * as R from 'react'``
  import named        ``import {PureComponent as Pure} from 'react'``
  variable            ``const|let|var X = <value>`` (identifier targets)
  class / function    ``class X {}`` / ``function X() {}``
  parameter           any name bound by a function's formal parameters
  ==================  ==================================================

Destructured variable declarations (``const {Component} = React``) are
reported as :attr:`BindingKind.PATTERN` with no value, which the resolver
treats as opaque.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from tree_sitter import Node

from stateless_lint.ast_helper import (
    FUNCTION_NODE_TYPES,
    field,
    function_parameters,
    iter_preorder,
    named_children,
    node_text,
    string_value,
)


class BindingKind(Enum):
    DEFAULT_IMPORT = auto()
    NAMESPACE_IMPORT = auto()
    NAMED_IMPORT = auto()
    VARIABLE = auto()
    PATTERN = auto()
    CLASS = auto()
    FUNCTION = auto()
    PARAMETER = auto()

    @property
    def is_import(self) -> bool:
        return self in (
            BindingKind.DEFAULT_IMPORT,
            BindingKind.NAMESPACE_IMPORT,
            BindingKind.NAMED_IMPORT,
        )


@dataclass(frozen=True)
class Binding:
    """
    Attributes
    ----------
    name          : bound identifier
    kind          : declaration form
    node          : declaring node (declarator, specifier, declaration)
    value         : initialiser for VARIABLE bindings
    imported_name : exported name for NAMED_IMPORT bindings
    source        : module specifier for import bindings
    """
    name: str
    kind: BindingKind
    node: Node
    value: Optional[Node] = None
    imported_name: Optional[str] = None
    source: Optional[str] = None


_BLOCK_NODE_TYPES = frozenset({'program', 'statement_block', 'class_static_block'})
_DECLARATION_TYPES = frozenset({'lexical_declaration', 'variable_declaration'})


def lookup_binding(name: str, reference: Node) -> Optional[Binding]:
    """Find the binding ``name`` resolves to when referenced at ``reference``."""
    node = reference.parent
    while node is not None:
        if node.type in FUNCTION_NODE_TYPES:
            binding = _parameter_binding(node, name)
            if binding is not None:
                return binding
        elif node.type in _BLOCK_NODE_TYPES:
            binding = _block_binding(node, name)
            if binding is not None:
                return binding
        node = node.parent
    return None


def _block_binding(block: Node, name: str) -> Optional[Binding]:
    for statement in named_children(block):
        for binding in _statement_bindings(statement):
            if binding.name == name:
                return binding
    return None


def _statement_bindings(statement: Node) -> Iterator[Binding]:
    stype = statement.type
    if stype == 'export_statement':
        declaration = field(statement, 'declaration')
        if declaration is not None:
            yield from _statement_bindings(declaration)
    elif stype == 'import_statement':
        yield from _import_bindings(statement)
    elif stype in _DECLARATION_TYPES:
        for declarator in named_children(statement):
            if declarator.type != 'variable_declarator':
                continue
            target = field(declarator, 'name')
            if target is None:
                continue
            if target.type == 'identifier':
                yield Binding(
                    name=node_text(target),
                    kind=BindingKind.VARIABLE,
                    node=declarator,
                    value=field(declarator, 'value'),
                )
            else:
                for ident in _pattern_identifiers(target):
                    yield Binding(
                        name=node_text(ident),
                        kind=BindingKind.PATTERN,
                        node=declarator,
                    )
    elif stype == 'class_declaration':
        ident = field(statement, 'name')
        if ident is not None:
            yield Binding(node_text(ident), BindingKind.CLASS, statement)
    elif stype in ('function_declaration', 'generator_function_declaration'):
        ident = field(statement, 'name')
        if ident is not None:
            yield Binding(node_text(ident), BindingKind.FUNCTION, statement)


def _import_bindings(statement: Node) -> Iterator[Binding]:
    source = string_value(field(statement, 'source'))
    clause = next(
        (c for c in named_children(statement) if c.type == 'import_clause'),
        None,
    )
    for part in named_children(clause):
        if part.type == 'identifier':
            yield Binding(
                node_text(part), BindingKind.DEFAULT_IMPORT, part, source=source,
            )
        elif part.type == 'namespace_import':
            for ident in named_children(part):
                if ident.type == 'identifier':
                    yield Binding(
                        node_text(ident), BindingKind.NAMESPACE_IMPORT, part,
                        source=source,
                    )
        elif part.type == 'named_imports':
            for spec in named_children(part):
                if spec.type != 'import_specifier':
                    continue
                imported = field(spec, 'name')
                alias = field(spec, 'alias') or imported
                if imported is None:
                    continue
                imported_name = string_value(imported) or node_text(imported)
                yield Binding(
                    name=node_text(alias),
                    kind=BindingKind.NAMED_IMPORT,
                    node=spec,
                    imported_name=imported_name,
                    source=source,
                )


def _parameter_binding(func: Node, name: str) -> Optional[Binding]:
    for param in function_parameters(func):
        for ident in _pattern_identifiers(param):
            if node_text(ident) == name:
                return Binding(name, BindingKind.PARAMETER, param)
    return None


def _pattern_identifiers(pattern: Node) -> Iterator[Node]:
    """Identifiers bound by a (possibly destructuring) pattern."""
    if pattern.type in ('identifier', 'shorthand_property_identifier_pattern'):
        yield pattern
        return
    for node in iter_preorder(pattern):
        if node is pattern:
            continue
        if node.type == 'shorthand_property_identifier_pattern':
            yield node
        elif node.type == 'identifier':
            parent = node.parent
            # default values (``{a = b}``, ``x = y``) reference, not bind
            if parent is not None and parent.type in (
                'assignment_pattern', 'object_assignment_pattern',
            ) and field(parent, 'right') == node:
                continue
            yield node


__all__ = ["BindingKind", "Binding", "lookup_binding"]
