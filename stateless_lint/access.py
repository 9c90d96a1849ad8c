"""
stateless_lint/access.py
════════════════════════

Instance-access detection: which parts of the running instance does
``render`` touch?

Every ``this`` inside the render function is classified by the syntax it
sits in:

    this.props.x                 member access      → root ``props``
    this['props'].x              literal subscript  → root ``props``
    this[key]                    computed subscript → unresolvable
    const {props: {x}} = this    destructuring      → root of each key
    ({state} = this)             destructuring      → root of each key
    (this).props                 parentheses are transparent
    f(this), const self = this   instance escapes   → unresolvable

Namespace roots map to capability tags:

    props                                  READS_INPUT_DATA
    context                                READS_SHARED_CONTEXT
    state, setState, forceUpdate,
    replaceState                           READS_OR_WRITES_LOCAL_STATE
    refs                                   USES_HOST_HANDLE
    anything else                          USES_UNRESOLVABLE_SELF_MEMBER

A JSX ``ref`` attribute in render also counts as USES_HOST_HANDLE.

The detector is syntactic.  It follows no aliases beyond the direct
self-reference and destructuring from it, descends into nested functions
(a rebound ``this`` there only costs precision), and skips nested classes,
whose ``this`` is their own instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterator, List, Optional, Tuple

from tree_sitter import Node

from stateless_lint.ast_helper import (
    SourceLocation,
    field,
    first_named_child,
    is_class,
    is_field_of,
    iter_preorder,
    literal_key,
    named_children,
    node_location,
    node_text,
    property_name,
)
from stateless_lint.errors import UnrecognizedSelfAccess

logger = logging.getLogger(__name__)


class CapabilityTag(Enum):
    READS_INPUT_DATA = "reads-input-data"
    READS_SHARED_CONTEXT = "reads-shared-context"
    READS_OR_WRITES_LOCAL_STATE = "local-state"
    USES_HOST_HANDLE = "host-handle"
    USES_UNRESOLVABLE_SELF_MEMBER = "unresolvable-self-member"


NAMESPACE_TAGS = {
    'props': CapabilityTag.READS_INPUT_DATA,
    'context': CapabilityTag.READS_SHARED_CONTEXT,
    'state': CapabilityTag.READS_OR_WRITES_LOCAL_STATE,
    'setState': CapabilityTag.READS_OR_WRITES_LOCAL_STATE,
    'forceUpdate': CapabilityTag.READS_OR_WRITES_LOCAL_STATE,
    'replaceState': CapabilityTag.READS_OR_WRITES_LOCAL_STATE,
    'refs': CapabilityTag.USES_HOST_HANDLE,
}

EXTERNAL_DATA_TAGS: FrozenSet[CapabilityTag] = frozenset({
    CapabilityTag.READS_INPUT_DATA,
    CapabilityTag.READS_SHARED_CONTEXT,
})


@dataclass(frozen=True)
class AccessSite:
    """One observed access: its tag, the accessed path and where."""
    tag: CapabilityTag
    path: str
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.path} ({self.tag.value}) at {self.location}"


@dataclass(frozen=True)
class AccessFinding:
    tags: FrozenSet[CapabilityTag]
    sites: Tuple[AccessSite, ...] = ()

    def has(self, tag: CapabilityTag) -> bool:
        return tag in self.tags

    @property
    def reads_external_data(self) -> bool:
        return bool(self.tags & EXTERNAL_DATA_TAGS)

    def sites_for(self, tag: CapabilityTag) -> List[AccessSite]:
        return [s for s in self.sites if s.tag is tag]


EMPTY_FINDING = AccessFinding(tags=frozenset())


class InstanceAccessDetector:
    """
    Scans one render function.

    Usage
    -----
    >>> finding = InstanceAccessDetector("Foo.jsx").detect(render_node)
    >>> finding.has(CapabilityTag.READS_INPUT_DATA)
    True
    """

    def __init__(self, path: str = "") -> None:
        self.path = path

    def detect(self, function: Optional[Node]) -> AccessFinding:
        if function is None:
            return EMPTY_FINDING
        sites: List[AccessSite] = []
        for node in iter_preorder(function, prune=is_class):
            if not node.is_named:
                continue
            if node.type == 'this':
                sites.extend(self._classify_this(node))
            elif node.type == 'jsx_attribute' and _jsx_attribute_name(node) == 'ref':
                sites.append(AccessSite(
                    CapabilityTag.USES_HOST_HANDLE, 'ref', self._loc(node),
                ))
        return AccessFinding(
            tags=frozenset(s.tag for s in sites),
            sites=tuple(sites),
        )

    # ── self-reference contexts ──────────────────────────────────────

    def _classify_this(self, this_node: Node) -> Iterator[AccessSite]:
        node = this_node
        parent = node.parent
        while parent is not None and parent.type == 'parenthesized_expression':
            node, parent = parent, parent.parent
        try:
            yield from self._classify_context(node, parent)
        except UnrecognizedSelfAccess as exc:
            logger.debug("Unresolvable self access: %s", exc)
            yield AccessSite(
                CapabilityTag.USES_UNRESOLVABLE_SELF_MEMBER,
                node_text(parent if parent is not None else node),
                exc.location or self._loc(node),
            )

    def _classify_context(
        self, node: Node, parent: Optional[Node],
    ) -> Iterator[AccessSite]:
        ptype = parent.type if parent is not None else None
        if ptype == 'member_expression' and is_field_of(node, parent, 'object'):
            prop = field(parent, 'property')
            yield self._site(node_text(prop), f"this.{node_text(prop)}", parent)
        elif ptype == 'subscript_expression' and is_field_of(node, parent, 'object'):
            key = literal_key(field(parent, 'index'))
            if key is None:
                raise UnrecognizedSelfAccess(
                    f"computed self access '{node_text(parent)}'",
                    location=self._loc(parent),
                )
            yield self._site(key, f"this[{key!r}]", parent)
        elif ptype == 'variable_declarator' and is_field_of(node, parent, 'value'):
            yield from self._classify_pattern(field(parent, 'name'))
        elif ptype == 'assignment_expression' and is_field_of(node, parent, 'right'):
            yield from self._classify_pattern(field(parent, 'left'))
        else:
            raise UnrecognizedSelfAccess(
                "self reference escapes as a value",
                location=self._loc(node),
            )

    def _classify_pattern(self, pattern: Optional[Node]) -> Iterator[AccessSite]:
        """Destructuring from ``this``: each top-level key is a namespace root."""
        if pattern is None or pattern.type != 'object_pattern':
            raise UnrecognizedSelfAccess(
                "self reference bound without object destructuring",
                location=self._loc(pattern),
            )
        for entry in named_children(pattern):
            etype = entry.type
            if etype == 'shorthand_property_identifier_pattern':
                key = node_text(entry)
            elif etype == 'pair_pattern':
                key = property_name(field(entry, 'key'))
            elif etype == 'object_assignment_pattern':
                left = field(entry, 'left')
                key = (
                    node_text(left)
                    if left is not None
                    and left.type == 'shorthand_property_identifier_pattern'
                    else None
                )
            else:
                key = None
            if key is None:
                raise UnrecognizedSelfAccess(
                    f"unanalysable destructuring entry '{node_text(entry)}'",
                    location=self._loc(entry),
                )
            yield self._site(key, f"{{{key}}} = this", entry)

    def _site(self, root: str, path: str, node: Node) -> AccessSite:
        tag = NAMESPACE_TAGS.get(root, CapabilityTag.USES_UNRESOLVABLE_SELF_MEMBER)
        return AccessSite(tag, path, self._loc(node))

    def _loc(self, node: Optional[Node]) -> SourceLocation:
        return node_location(node, self.path)


def _jsx_attribute_name(attr: Node) -> Optional[str]:
    name = first_named_child(attr)
    if name is None or name.type not in ('property_identifier', 'identifier'):
        return None
    return node_text(name)


def detect_instance_access(function: Optional[Node], path: str = "") -> AccessFinding:
    return InstanceAccessDetector(path).detect(function)


__all__ = [
    "CapabilityTag",
    "NAMESPACE_TAGS",
    "EXTERNAL_DATA_TAGS",
    "AccessSite",
    "AccessFinding",
    "EMPTY_FINDING",
    "InstanceAccessDetector",
    "detect_instance_access",
]
