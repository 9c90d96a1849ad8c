"""
stateless_lint/rules.py
═══════════════════════

Disqualification rule engine: combine base-type resolution, member
classification, instance-access findings and the version gate into one
:class:`Verdict` per definition.

Architecture
────────────

    ComponentDefinition ──┬──► BaseTypeResolver ──────► BaseTypeResolution ─┐
                          ├──► classify_members ──────► MemberClassification ┤
                          └──► InstanceAccessDetector ► AccessFinding ───────┤
                                                                             ▼
                          VersionGate ─────────────────────────────────► classify()
                                                                             │
                                                                             ▼
                                                                          Verdict

Reasons are evaluated in a fixed precedence; every matching reason is
kept and the first one is the verdict's ``reason``.  Each definition is
classified independently, with the configuration passed in explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from stateless_lint.access import (
    EMPTY_FINDING,
    AccessFinding,
    CapabilityTag,
    InstanceAccessDetector,
)
from stateless_lint.ast_helper import ParsedModule, SourceLocation
from stateless_lint.config import Configuration
from stateless_lint.extractor import ComponentDefinition, extract_definitions
from stateless_lint.members import MemberClassification, classify_members
from stateless_lint.resolver import BaseTypeResolution, BaseTypeResolver
from stateless_lint.version_gate import GateResult, VersionGate


class VerdictKind(Enum):
    PURE_CANDIDATE = "pure-candidate"
    DISQUALIFIED = "disqualified"


class Reason(Enum):
    """Disqualifying reason categories, in precedence order."""
    CHILD_CONTEXT = "child-context"
    MISSING_RENDER = "missing-render"
    UNKNOWN_BASE_TYPE = "unknown-base-type"
    DECORATED = "decorated"
    LIFECYCLE_MEMBER = "lifecycle-member"
    NON_TRIVIAL_CONSTRUCTOR = "non-trivial-constructor"
    OTHER_MEMBER = "other-member"
    LOCAL_STATE = "local-state"
    HOST_HANDLE = "host-handle"
    UNRESOLVABLE_SELF_MEMBER = "unresolvable-self-member"
    NULL_RETURN_UNSUPPORTED = "null-return-unsupported"


_TAG_REASONS = (
    (CapabilityTag.READS_OR_WRITES_LOCAL_STATE, Reason.LOCAL_STATE),
    (CapabilityTag.USES_HOST_HANDLE, Reason.HOST_HANDLE),
    (CapabilityTag.USES_UNRESOLVABLE_SELF_MEMBER, Reason.UNRESOLVABLE_SELF_MEMBER),
)


@dataclass(frozen=True)
class Verdict:
    """
    Attributes
    ----------
    kind            : PURE_CANDIDATE or DISQUALIFIED
    reasons         : every matching reason, in precedence order
    location        : where the definition starts
    name            : definition name (None when anonymous)
    base_type       : resolver outcome
    finding         : render's instance accesses
    notes           : extra explanation (e.g. version gate rationale)
    """
    kind: VerdictKind
    reasons: Tuple[Reason, ...]
    location: SourceLocation
    name: Optional[str] = None
    base_type: BaseTypeResolution = BaseTypeResolution.NONE
    finding: AccessFinding = EMPTY_FINDING
    notes: Tuple[str, ...] = ()

    @property
    def reason(self) -> Optional[Reason]:
        return self.reasons[0] if self.reasons else None

    @property
    def is_pure_candidate(self) -> bool:
        return self.kind is VerdictKind.PURE_CANDIDATE


def disqualifying_reasons(
    resolution: BaseTypeResolution,
    definition: ComponentDefinition,
    members: MemberClassification,
    finding: AccessFinding,
    gate_result: GateResult,
) -> List[Reason]:
    """
    Every disqualifying reason that applies, in precedence order.

    A restricted base type never disqualifies on its own: with
    ``ignore_pure_components`` off a ``PureComponent`` is judged like a
    ``Component``, and with it on the base type is exempt outright.
    """
    reasons: List[Reason] = []
    if members.declares_child_context:
        reasons.append(Reason.CHILD_CONTEXT)
    if members.render is None:
        reasons.append(Reason.MISSING_RENDER)
    if resolution is BaseTypeResolution.UNKNOWN:
        reasons.append(Reason.UNKNOWN_BASE_TYPE)
    if definition.decorators:
        reasons.append(Reason.DECORATED)
    if members.lifecycle:
        reasons.append(Reason.LIFECYCLE_MEMBER)
    if members.has_nontrivial_constructor:
        reasons.append(Reason.NON_TRIVIAL_CONSTRUCTOR)
    if members.other or members.prototype_extended:
        reasons.append(Reason.OTHER_MEMBER)
    for tag, reason in _TAG_REASONS:
        if finding.has(tag):
            reasons.append(reason)
    if not gate_result.compatible:
        reasons.append(Reason.NULL_RETURN_UNSUPPORTED)
    return reasons


def classify(
    definition: ComponentDefinition,
    config: Configuration,
    resolver: Optional[BaseTypeResolver] = None,
    gate: Optional[VersionGate] = None,
) -> Verdict:
    """Produce the verdict for one definition."""
    resolver = resolver or BaseTypeResolver(config)
    gate = gate or VersionGate(config.react_version)

    resolution = resolver.resolve(definition)
    members = classify_members(definition)
    finding = InstanceAccessDetector(definition.path).detect(members.render_function)
    gate_result = gate.evaluate(members.render_function)
    reasons = disqualifying_reasons(resolution, definition, members, finding, gate_result)
    notes = (gate_result.note,) if gate_result.note else ()

    return Verdict(
        kind=VerdictKind.DISQUALIFIED if reasons else VerdictKind.PURE_CANDIDATE,
        reasons=tuple(reasons),
        location=definition.location,
        name=definition.name,
        base_type=resolution,
        finding=finding,
        notes=notes,
    )


def classify_module(
    module: ParsedModule,
    config: Configuration,
) -> Iterator[Tuple[ComponentDefinition, Verdict]]:
    """Classify every definition in ``module``, in source order."""
    resolver = BaseTypeResolver(config)
    gate = VersionGate(config.react_version)
    for definition in extract_definitions(module, config):
        yield definition, classify(definition, config, resolver, gate)


__all__ = [
    "VerdictKind",
    "Reason",
    "Verdict",
    "disqualifying_reasons",
    "classify",
    "classify_module",
]
