"""
stateless_lint/members.py
═════════════════════════

Partition a definition's members into semantic buckets.

  ┌────────────────┬──────────────────────────────────────────────────┐
  │ bucket         │ effect on the verdict                            │
  ├────────────────┼──────────────────────────────────────────────────┤
  │ render         │ required; analysed by the access detector        │
  │ lifecycle      │ disqualifying by presence                        │
  │ constructor    │ disqualifying unless trivial                     │
  │ static-metadata│ neutral; ``childContextTypes`` exempts entirely  │
  │ other          │ disqualifying by presence                        │
  └────────────────┴──────────────────────────────────────────────────┘

Methods called from ``render`` are not folded into render's analysis:
every member outside the recognised sets lands in ``other``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from tree_sitter import Node

from stateless_lint.ast_helper import (
    field,
    first_named_child,
    function_parameters,
    is_literal,
    named_children,
    unwrap_parens,
)
from stateless_lint.extractor import (
    ComponentDefinition,
    DefinitionStyle,
    Member,
    MemberKind,
)


LIFECYCLE_MEMBERS: FrozenSet[str] = frozenset({
    'getDefaultProps',
    'getInitialState',
    'getChildContext',
    'getDerivedStateFromProps',
    'getDerivedStateFromError',
    'getSnapshotBeforeUpdate',
    'componentWillMount',
    'UNSAFE_componentWillMount',
    'componentDidMount',
    'componentWillReceiveProps',
    'UNSAFE_componentWillReceiveProps',
    'shouldComponentUpdate',
    'componentWillUpdate',
    'UNSAFE_componentWillUpdate',
    'componentDidUpdate',
    'componentDidCatch',
    'componentWillUnmount',
})

STATIC_METADATA_MEMBERS: FrozenSet[str] = frozenset({
    'displayName',
    'propTypes',
    'contextTypes',
    'childContextTypes',
})

CHILD_CONTEXT_MEMBER = 'childContextTypes'
RENDER_MEMBER = 'render'
CONSTRUCTOR_MEMBER = 'constructor'


@dataclass(frozen=True)
class MemberClassification:
    render: Optional[Member]
    lifecycle: Tuple[Member, ...]
    constructor: Optional[Member]
    constructor_trivial: bool
    static_metadata: Tuple[Member, ...]
    other: Tuple[Member, ...]
    declares_child_context: bool
    prototype_extended: bool

    @property
    def has_nontrivial_constructor(self) -> bool:
        return self.constructor is not None and not self.constructor_trivial

    @property
    def render_function(self) -> Optional[Node]:
        return self.render.function if self.render is not None else None


def classify_members(definition: ComponentDefinition) -> MemberClassification:
    render: Optional[Member] = None
    constructor: Optional[Member] = None
    lifecycle: List[Member] = []
    metadata: List[Member] = []
    other: List[Member] = []

    is_class = definition.style is DefinitionStyle.CLASS
    for member in definition.members:
        name = member.name
        if name is None:
            other.append(member)
        elif name == RENDER_MEMBER and not member.is_static and member.is_callable:
            if render is None:
                render = member
            else:
                other.append(member)
        elif (
            is_class
            and name == CONSTRUCTOR_MEMBER
            and member.kind is MemberKind.METHOD
            and not member.is_static
            and constructor is None
        ):
            constructor = member
        elif name in LIFECYCLE_MEMBERS:
            lifecycle.append(member)
        elif name in STATIC_METADATA_MEMBERS and (member.is_static or not is_class):
            metadata.append(member)
        elif _is_props_declaration(member, is_class):
            metadata.append(member)
        else:
            other.append(member)

    declares_child_context = (
        any(m.name == CHILD_CONTEXT_MEMBER for m in metadata)
        or CHILD_CONTEXT_MEMBER in definition.external_statics
    )
    return MemberClassification(
        render=render,
        lifecycle=tuple(lifecycle),
        constructor=constructor,
        constructor_trivial=constructor is None or is_trivial_constructor(constructor),
        static_metadata=tuple(metadata),
        other=tuple(other),
        declares_child_context=declares_child_context,
        prototype_extended='prototype' in definition.external_statics,
    )


def _is_props_declaration(member: Member, is_class: bool) -> bool:
    """``props;`` with no initialiser declares the props type only."""
    return (
        is_class
        and member.name == 'props'
        and not member.is_static
        and member.kind is MemberKind.FIELD
    )


# ═════════════════════════════════════════════════════════════════════════
#  CONSTRUCTOR TRIVIALITY
# ═════════════════════════════════════════════════════════════════════════

def is_trivial_constructor(member: Member) -> bool:
    """
    True for ``constructor() {}`` and for a body that is exactly one
    ``super(...)`` call passing identifiers/literals straight through,
    with plain (non-defaulted, non-destructured) parameters.
    """
    body = member.body
    if body is None:
        return False
    statements = named_children(body)
    if not statements:
        return True
    if len(statements) != 1 or statements[0].type != 'expression_statement':
        return False
    if not all(_is_simple_parameter(p) for p in function_parameters(member.function)):
        return False
    call = unwrap_parens(first_named_child(statements[0]))
    if call is None or call.type != 'call_expression':
        return False
    callee = field(call, 'function')
    if callee is None or callee.type != 'super':
        return False
    return all(_is_pass_through(arg) for arg in named_children(field(call, 'arguments')))


def _is_simple_parameter(param: Node) -> bool:
    if param.type == 'identifier':
        return True
    if param.type == 'rest_pattern':
        inner = first_named_child(param)
        return inner is not None and inner.type == 'identifier'
    return False


def _is_pass_through(arg: Node) -> bool:
    if arg.type == 'spread_element':
        inner = first_named_child(arg)
        return inner is not None and inner.type == 'identifier'
    arg = unwrap_parens(arg)
    return arg is not None and (arg.type == 'identifier' or is_literal(arg))


__all__ = [
    "LIFECYCLE_MEMBERS",
    "STATIC_METADATA_MEMBERS",
    "MemberClassification",
    "classify_members",
    "is_trivial_constructor",
]
