"""
stateless_lint/version_gate.py
══════════════════════════════

Framework-version compatibility of "nothing to render" results.

Function components may return ``null`` only from React 15.0.0 on.  The
gate never changes a verdict; when the configured version predates that
threshold and render returns ``null``, it supplies the note that the
diagnostic carries.

Version table
─────────────
    version          null return from a function component
    ───────────────  ─────────────────────────────────────
    absent           supported (assume latest)
    < 15.0.0         unsupported
    >= 15.0.0        supported
    unparseable      supported (logged, assume latest)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from tree_sitter import Node

from stateless_lint.ast_helper import (
    field,
    first_named_child,
    is_class,
    is_function,
    iter_preorder,
    unwrap_parens,
)

logger = logging.getLogger(__name__)


Version = Tuple[int, int, int]

NULL_RETURN_THRESHOLD: Version = (15, 0, 0)

_VERSION_RE = re.compile(r'^\s*v?(\d+)(?:\.(\d+))?(?:\.(\d+))?')


def parse_version(text: Optional[str]) -> Optional[Version]:
    """``"0.14.0"`` → ``(0, 14, 0)``; missing parts are zero."""
    if not text:
        return None
    match = _VERSION_RE.match(text)
    if match is None:
        return None
    major, minor, patch = match.groups()
    return (int(major), int(minor or 0), int(patch or 0))


def format_version(version: Version) -> str:
    return ".".join(str(part) for part in version)


@dataclass(frozen=True)
class GateResult:
    null_returns: Tuple[Node, ...]
    compatible: bool
    note: Optional[str] = None

    @property
    def null_return_observed(self) -> bool:
        return bool(self.null_returns)


class VersionGate:
    """
    Parameters
    ----------
    framework_version : configured version string, or None for latest
    """

    def __init__(self, framework_version: Optional[str] = None) -> None:
        self.configured = framework_version
        self.version = parse_version(framework_version)
        if framework_version and self.version is None:
            logger.warning(
                "Unrecognised React version %r; assuming latest", framework_version,
            )

    @property
    def supports_null_return(self) -> bool:
        return self.version is None or self.version >= NULL_RETURN_THRESHOLD

    def evaluate(self, render_function: Optional[Node]) -> GateResult:
        returns = tuple(find_null_returns(render_function))
        if not returns or self.supports_null_return:
            return GateResult(null_returns=returns, compatible=True)
        note = (
            f"returning null from a function component requires React "
            f"{format_version(NULL_RETURN_THRESHOLD)} or later "
            f"(configured: {self.configured})"
        )
        return GateResult(null_returns=returns, compatible=False, note=note)


def find_null_returns(function: Optional[Node]) -> List[Node]:
    """
    Return statements (or an arrow's expression body) in ``function``
    that can evaluate to ``null``.  Nested functions are not entered.
    """
    if function is None:
        return []
    found: List[Node] = []
    body = field(function, 'body')
    if body is not None and body.type != 'statement_block':
        if _may_be_null(body):
            found.append(body)
        return found
    for node in iter_preorder(body, prune=_is_nested_scope):
        if node.type == 'return_statement' and _may_be_null(first_named_child(node)):
            found.append(node)
    return found


def _is_nested_scope(node: Node) -> bool:
    return is_function(node) or is_class(node)


def _may_be_null(expr: Optional[Node]) -> bool:
    expr = unwrap_parens(expr)
    if expr is None:
        return False
    if expr.type == 'null':
        return True
    if expr.type == 'ternary_expression':
        return (
            _may_be_null(field(expr, 'consequence'))
            or _may_be_null(field(expr, 'alternative'))
        )
    return False


__all__ = [
    "NULL_RETURN_THRESHOLD",
    "parse_version",
    "format_version",
    "GateResult",
    "VersionGate",
    "find_null_returns",
]
