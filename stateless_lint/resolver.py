"""
stateless_lint/resolver.py
══════════════════════════

Base-type resolution: map the expression after ``extends`` to one of a
closed set of outcomes.

    NONE        no base type (factory-style definition)
    GENERIC     the framework's ``Component``
    RESTRICTED  the framework's ``PureComponent``
    UNKNOWN     anything the resolver cannot prove (never flagged)

Resolution walk
───────────────
    reference ──► identifier? ──► scope binding
                     │               ├─ unbound        → compare the name
                     │               ├─ named import   → compare imported name
                     │               ├─ variable       → resolve initialiser
                     │               │     (identifier → identifier hops are
                     │               │      limited to MAX_INDIRECTION)
                     │               └─ anything else  → UNKNOWN
                     └─ member ``ns.Name`` with ``ns`` the pragma, an
                        import binding or ``require("...")`` → compare ``Name``
    any other expression form                          → UNKNOWN

The walk is bounded; there is no general alias analysis.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from tree_sitter import Node

from stateless_lint.ast_helper import (
    field,
    named_children,
    node_location,
    node_text,
    string_value,
    unwrap_parens,
)
from stateless_lint.config import (
    GENERIC_BASE_NAME,
    RESTRICTED_BASE_NAME,
    Configuration,
)
from stateless_lint.errors import UnresolvedReference
from stateless_lint.extractor import ComponentDefinition
from stateless_lint.scope import BindingKind, lookup_binding

logger = logging.getLogger(__name__)


class BaseTypeResolution(Enum):
    NONE = "none"
    GENERIC = "generic"
    RESTRICTED = "restricted"
    UNKNOWN = "unknown"


_NAME_RESOLUTIONS = {
    GENERIC_BASE_NAME: BaseTypeResolution.GENERIC,
    RESTRICTED_BASE_NAME: BaseTypeResolution.RESTRICTED,
}


class BaseTypeResolver:
    """
    Resolves base-type references for one configuration.

    Parameters
    ----------
    config : Configuration — supplies the framework pragma name
    """

    # identifier → identifier hops followed after the first binding
    MAX_INDIRECTION = 1

    def __init__(self, config: Configuration) -> None:
        self.config = config

    def resolve(self, definition: ComponentDefinition) -> BaseTypeResolution:
        if definition.base is None:
            return BaseTypeResolution.NONE
        return self.resolve_reference(definition.base, definition.path)

    def resolve_reference(self, base: Node, path: str = "") -> BaseTypeResolution:
        try:
            return self._resolve(base, hops=0)
        except UnresolvedReference as exc:
            exc.location = exc.location or node_location(base, path)
            logger.debug("Base type degraded to UNKNOWN: %s", exc)
            return BaseTypeResolution.UNKNOWN

    # ── walk ─────────────────────────────────────────────────────────

    def _resolve(self, node: Optional[Node], hops: int) -> BaseTypeResolution:
        node = unwrap_parens(node)
        if node is None:
            raise UnresolvedReference("empty base-type reference")
        if node.type == 'identifier':
            return self._resolve_identifier(node, hops)
        if node.type == 'member_expression':
            return self._resolve_member(node)
        raise UnresolvedReference(
            f"unsupported base-type expression '{node.type}'",
            location=node_location(node),
        )

    def _resolve_identifier(self, ident: Node, hops: int) -> BaseTypeResolution:
        name = node_text(ident)
        binding = lookup_binding(name, ident)
        if binding is None:
            return self._compare(name)
        if binding.kind is BindingKind.NAMED_IMPORT:
            return self._compare(binding.imported_name or name)
        if binding.kind is BindingKind.VARIABLE and binding.value is not None:
            value = unwrap_parens(binding.value)
            if value is not None and value.type == 'identifier':
                if hops >= self.MAX_INDIRECTION:
                    raise UnresolvedReference(
                        f"'{name}' is bound through too many aliases",
                        location=node_location(ident),
                    )
                return self._resolve_identifier(value, hops + 1)
            return self._resolve(value, hops)
        raise UnresolvedReference(
            f"'{name}' is bound by a {binding.kind.name.lower()} declaration",
            location=node_location(ident),
        )

    def _resolve_member(self, member: Node) -> BaseTypeResolution:
        obj = unwrap_parens(field(member, 'object'))
        prop = field(member, 'property')
        if obj is None or prop is None or obj.type != 'identifier':
            raise UnresolvedReference(
                "base-type member access is not namespace-qualified",
                location=node_location(member),
            )
        namespace = node_text(obj)
        binding = lookup_binding(namespace, obj)
        if binding is None:
            if namespace != self.config.pragma:
                raise UnresolvedReference(
                    f"'{namespace}' is not the framework namespace",
                    location=node_location(obj),
                )
        elif binding.kind not in (
            BindingKind.DEFAULT_IMPORT, BindingKind.NAMESPACE_IMPORT,
        ) and not (
            binding.kind is BindingKind.VARIABLE and is_module_require(binding.value)
        ):
            raise UnresolvedReference(
                f"namespace '{namespace}' is a local {binding.kind.name.lower()}",
                location=node_location(obj),
            )
        return self._compare(node_text(prop))

    @staticmethod
    def _compare(name: str) -> BaseTypeResolution:
        resolution = _NAME_RESOLUTIONS.get(name)
        if resolution is None:
            raise UnresolvedReference(f"'{name}' is not a component base type")
        return resolution


def is_module_require(value: Optional[Node]) -> bool:
    """True for ``require('<module>')``: one string argument, nothing else."""
    value = unwrap_parens(value)
    if value is None or value.type != 'call_expression':
        return False
    callee = field(value, 'function')
    if callee is None or callee.type != 'identifier' or node_text(callee) != 'require':
        return False
    args = named_children(field(value, 'arguments'))
    return len(args) == 1 and string_value(args[0]) is not None


__all__ = ["BaseTypeResolution", "BaseTypeResolver", "is_module_require"]
