"""
stateless_lint/extractor.py
═══════════════════════════

Definition extraction: find every construct in a module that describes a
component, and normalise its body into :class:`Member` records.

Recognised forms
────────────────
  class-like      ``class Foo extends Base { ... }`` and class expressions
                  wherever they occur (variable initialisers, ``export
                  default``, arrow bodies of higher-order factories, ...)

  factory-style   ``createReactClass({ ... })`` or ``React.createClass({ ... })``
                  whose single argument is an object literal

Member normalisation
────────────────────
Methods, accessors and fields can all play the same role (``render() {}``,
``get render() {}``, ``render = () => ...``, ``render: function() {}``).
Each member is mapped once to a :class:`MemberKind` and, where callable,
the function node that implements it.

Extraction is lazy and single pass: :meth:`DefinitionExtractor.__iter__`
is a generator over the tree.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field as dc_field
from enum import Enum, auto
from typing import (
    DefaultDict,
    Dict,
    FrozenSet,
    Iterator,
    List,
    Optional,
    Set,
    Tuple,
)

from tree_sitter import Node

from stateless_lint.ast_helper import (
    ParsedModule,
    SourceLocation,
    field,
    has_keyword,
    is_class,
    is_function,
    iter_preorder,
    named_children,
    node_text,
    property_name,
    unwrap_parens,
)
from stateless_lint.config import Configuration
from stateless_lint.errors import MalformedDefinition

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════════════
#  DATA MODEL
# ═════════════════════════════════════════════════════════════════════════

class DefinitionStyle(Enum):
    CLASS = "class"
    FACTORY = "factory"


class MemberKind(Enum):
    METHOD = auto()
    ACCESSOR = auto()
    FIELD = auto()
    FIELD_WITH_INITIALIZER = auto()


@dataclass(frozen=True)
class Member:
    """
    One entry of a definition's body.

    Attributes
    ----------
    name      : static name, or None for computed keys / spreads / blocks
    is_static : declared ``static`` (class form only)
    kind      : normalised member shape
    node      : the member node itself
    function  : callable implementation (method node, or the function
                expression a field is initialised with), if any
    value     : field initialiser expression, if any
    """
    name: Optional[str]
    is_static: bool
    kind: MemberKind
    node: Node
    function: Optional[Node] = None
    value: Optional[Node] = None

    @property
    def is_callable(self) -> bool:
        return self.function is not None

    @property
    def body(self) -> Optional[Node]:
        return field(self.function, 'body')


@dataclass(frozen=True)
class ComponentDefinition:
    """
    A candidate component, created fresh per analysis pass.

    Attributes
    ----------
    node             : class node or factory call node
    name             : class / variable name, None when anonymous
    style            : class-like or factory-style
    base             : expression after ``extends`` (None for factories)
    members          : body members in source order
    decorators       : decorator nodes applied to the definition
    location         : where the definition starts
    external_statics : names assigned as ``Name.<prop> = ...`` in the module
    """
    node: Node
    name: Optional[str]
    style: DefinitionStyle
    base: Optional[Node]
    members: Tuple[Member, ...]
    decorators: Tuple[Node, ...] = ()
    location: SourceLocation = dc_field(default_factory=SourceLocation)
    external_statics: FrozenSet[str] = frozenset()

    @property
    def path(self) -> str:
        return self.location.file

    @property
    def display_name(self) -> str:
        return self.name or "<anonymous>"


# ═════════════════════════════════════════════════════════════════════════
#  EXTRACTOR
# ═════════════════════════════════════════════════════════════════════════

class DefinitionExtractor:
    """
    Yields :class:`ComponentDefinition` values for one parsed module.

    Usage
    -----
    >>> module = parse_module(source, "Foo.jsx")
    >>> for definition in DefinitionExtractor(module, Configuration()):
    ...     print(definition.display_name)
    """

    def __init__(self, module: ParsedModule, config: Configuration) -> None:
        self.module = module
        self.config = config
        self._statics: Optional[Dict[str, FrozenSet[str]]] = None

    def __iter__(self) -> Iterator[ComponentDefinition]:
        for node in iter_preorder(self.module.root):
            if is_class(node):
                heritage = next(
                    (c for c in named_children(node) if c.type == 'class_heritage'),
                    None,
                )
                if heritage is not None:
                    yield self._class_definition(node, heritage)
            elif node.type == 'call_expression' and self._is_factory_call(node):
                try:
                    yield self._factory_definition(node)
                except MalformedDefinition as exc:
                    logger.debug("Skipping factory call: %s", exc)

    # ── class-like ───────────────────────────────────────────────────

    def _class_definition(self, node: Node, heritage: Node) -> ComponentDefinition:
        name = property_name(field(node, 'name')) or _assigned_name(node)
        base = next(iter(named_children(heritage)), None)
        members = tuple(
            m for m in (self._class_member(c) for c in named_children(field(node, 'body')))
            if m is not None
        )
        return ComponentDefinition(
            node=node,
            name=name,
            style=DefinitionStyle.CLASS,
            base=base,
            members=members,
            decorators=_decorators(node),
            location=self.module.location(node),
            external_statics=self._external_statics(name),
        )

    @staticmethod
    def _class_member(node: Node) -> Optional[Member]:
        ntype = node.type
        if ntype == 'method_definition':
            is_static = has_keyword(node, 'static', 'static get')
            accessor = has_keyword(node, 'get', 'set', 'static get')
            return Member(
                name=property_name(field(node, 'name')),
                is_static=is_static,
                kind=MemberKind.ACCESSOR if accessor else MemberKind.METHOD,
                node=node,
                function=node,
            )
        if ntype in ('field_definition', 'public_field_definition'):
            value = field(node, 'value')
            key = field(node, 'property') or field(node, 'name')
            func = unwrap_parens(value)
            return Member(
                name=property_name(key),
                is_static=has_keyword(node, 'static'),
                kind=(
                    MemberKind.FIELD if value is None
                    else MemberKind.FIELD_WITH_INITIALIZER
                ),
                node=node,
                function=func if is_function(func) else None,
                value=value,
            )
        if ntype == 'class_static_block':
            return Member(None, True, MemberKind.METHOD, node, function=None)
        # stray tokens (``;``) carry no meaning
        return None

    # ── factory-style ────────────────────────────────────────────────

    def _is_factory_call(self, call: Node) -> bool:
        callee = unwrap_parens(field(call, 'function'))
        if callee is None:
            return False
        if callee.type == 'identifier':
            return node_text(callee) == self.config.create_class
        if callee.type == 'member_expression':
            obj = field(callee, 'object')
            return (
                obj is not None
                and node_text(obj) == self.config.pragma
                and node_text(field(callee, 'property')) == 'createClass'
            )
        return False

    def _factory_definition(self, call: Node) -> ComponentDefinition:
        args = named_children(field(call, 'arguments'))
        if len(args) != 1 or args[0].type != 'object':
            raise MalformedDefinition(
                "factory call must take exactly one object literal",
                location=self.module.location(call),
            )
        members = tuple(self._object_member(c) for c in named_children(args[0]))
        name = _assigned_name(call)
        return ComponentDefinition(
            node=call,
            name=name,
            style=DefinitionStyle.FACTORY,
            base=None,
            members=members,
            decorators=(),
            location=self.module.location(call),
            external_statics=self._external_statics(name),
        )

    @staticmethod
    def _object_member(node: Node) -> Member:
        ntype = node.type
        if ntype == 'pair':
            value = field(node, 'value')
            func = unwrap_parens(value)
            callable_ = is_function(func)
            return Member(
                name=property_name(field(node, 'key')),
                is_static=False,
                kind=MemberKind.METHOD if callable_ else MemberKind.FIELD_WITH_INITIALIZER,
                node=node,
                function=func if callable_ else None,
                value=value,
            )
        if ntype == 'method_definition':
            accessor = has_keyword(node, 'get', 'set')
            return Member(
                name=property_name(field(node, 'name')),
                is_static=False,
                kind=MemberKind.ACCESSOR if accessor else MemberKind.METHOD,
                node=node,
                function=node,
            )
        if ntype == 'shorthand_property_identifier':
            return Member(
                name=node_text(node),
                is_static=False,
                kind=MemberKind.FIELD_WITH_INITIALIZER,
                node=node,
                value=node,
            )
        # spread elements and anything unforeseen: unnamed, never matches
        return Member(None, False, MemberKind.FIELD_WITH_INITIALIZER, node, value=node)

    # ── module-level static assignments ──────────────────────────────

    def _external_statics(self, name: Optional[str]) -> FrozenSet[str]:
        if name is None:
            return frozenset()
        if self._statics is None:
            self._statics = _collect_static_assignments(self.module.root)
        return self._statics.get(name, frozenset())


def extract_definitions(
    module: ParsedModule, config: Configuration,
) -> Iterator[ComponentDefinition]:
    """Lazy, single-pass sequence of the module's component definitions."""
    return iter(DefinitionExtractor(module, config))


# ═════════════════════════════════════════════════════════════════════════
#  HELPERS
# ═════════════════════════════════════════════════════════════════════════

def _decorators(node: Node) -> Tuple[Node, ...]:
    found: List[Node] = [c for c in node.children if c.type == 'decorator']
    parent = node.parent
    if parent is not None and parent.type == 'export_statement':
        found.extend(c for c in parent.children if c.type == 'decorator')
    return tuple(found)


def _assigned_name(node: Node) -> Optional[str]:
    """Name a class expression or factory call is bound to, if any."""
    current = node
    parent = node.parent
    while parent is not None and parent.type == 'parenthesized_expression':
        current, parent = parent, parent.parent
    if parent is None:
        return None
    if parent.type == 'variable_declarator' and field(parent, 'value') == current:
        target = field(parent, 'name')
        if target is not None and target.type == 'identifier':
            return node_text(target)
    elif parent.type == 'assignment_expression' and field(parent, 'right') == current:
        target = unwrap_parens(field(parent, 'left'))
        if target is not None and target.type == 'identifier':
            return node_text(target)
        if target is not None and target.type == 'member_expression':
            return node_text(field(target, 'property'))
    elif parent.type == 'pair' and field(parent, 'value') == current:
        return property_name(field(parent, 'key'))
    return None


def _collect_static_assignments(root: Node) -> Dict[str, FrozenSet[str]]:
    """
    Map ``Name`` → properties assigned as ``Name.prop = ...`` anywhere in
    the module.  ``Name.prototype.x = ...`` records ``prototype``.
    """
    found: DefaultDict[str, Set[str]] = defaultdict(set)
    for node in iter_preorder(root):
        if node.type not in ('assignment_expression', 'augmented_assignment_expression'):
            continue
        target = unwrap_parens(field(node, 'left'))
        if target is None or target.type != 'member_expression':
            continue
        obj = unwrap_parens(field(target, 'object'))
        prop = node_text(field(target, 'property'))
        if obj is None:
            continue
        if obj.type == 'identifier':
            found[node_text(obj)].add(prop)
        elif obj.type == 'member_expression':
            inner = unwrap_parens(field(obj, 'object'))
            if (
                inner is not None
                and inner.type == 'identifier'
                and node_text(field(obj, 'property')) == 'prototype'
            ):
                found[node_text(inner)].add('prototype')
    return {name: frozenset(props) for name, props in found.items()}


__all__ = [
    "DefinitionStyle",
    "MemberKind",
    "Member",
    "ComponentDefinition",
    "DefinitionExtractor",
    "extract_definitions",
]
