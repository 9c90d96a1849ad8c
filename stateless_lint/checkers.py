"""
stateless_lint/checkers.py
══════════════════════════

Checker framework that turns classification verdicts into diagnostics.

Architecture
────────────

  ┌─────────────────────────────────────────────────────────┐
  │                   CheckerRunner                         │
  │  ┌───────────────────────────────────────────────────┐  │
  │  │        PreferStatelessFunctionChecker             │  │
  │  └─────────────────────────┬─────────────────────────┘  │
  │                            │                            │
  │  ┌─────────────────────────▼─────────────────────────┐  │
  │  │              Evidence Collection                  │  │
  │  │  extractor │ resolver │ members │ access │ gate   │  │
  │  └─────────────────────────┬─────────────────────────┘  │
  │                            │                            │
  │  ┌─────────────────────────▼─────────────────────────┐  │
  │  │           SuppressionManager                      │  │
  │  │  // eslint-disable-line │ file-level │ global     │  │
  │  └─────────────────────────┬─────────────────────────┘  │
  │                            │                            │
  │  ┌─────────────────────────▼─────────────────────────┐  │
  │  │     Diagnostic Formatter (JSON / gcc / reporter)  │  │
  │  └───────────────────────────────────────────────────┘  │
  └─────────────────────────────────────────────────────────┘

Each Checker follows a four-phase lifecycle:

  1. **configure()**        — read the configuration, set up collaborators
  2. **collect_evidence()** — run analyses over the module
  3. **diagnose()**         — turn evidence into Diagnostics
  4. **report()**           — return Diagnostics filtered by suppressions

Files are independent, so :meth:`CheckerRunner.run_paths` may fan out
across a thread pool; nothing mutable is shared between files.
"""

from __future__ import annotations

import json
import logging
import os
import re
import time
from abc import ABC, abstractmethod
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from fnmatch import fnmatch
from pathlib import Path
from typing import (
    Any,
    ClassVar,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
    Type,
    Union,
)

from stateless_lint.ast_helper import (
    ParsedModule,
    SourceLocation,
    iter_preorder,
    node_text,
    parse_file,
)
from stateless_lint.config import Configuration
from stateless_lint.errors import SourceReadError
from stateless_lint.extractor import ComponentDefinition
from stateless_lint.rules import Verdict, classify_module

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — DIAGNOSTIC MODEL
# ═════════════════════════════════════════════════════════════════════════

class DiagnosticSeverity(Enum):
    ERROR = "error"
    WARNING = "warning"
    STYLE = "style"
    INFORMATION = "information"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single diagnostic finding.

    Attributes
    ----------
    error_id     : rule identifier (e.g. "prefer-stateless-function")
    message      : human-readable description
    severity     : DiagnosticSeverity
    location     : primary source location
    checker_name : name of the checker that produced this
    notes        : additional explanation lines
    evidence     : machine-readable evidence for downstream tooling
    """
    error_id: str
    message: str
    severity: DiagnosticSeverity
    location: SourceLocation
    checker_name: str = ""
    notes: Tuple[str, ...] = ()
    evidence: Dict[str, Any] = field(default_factory=dict)

    def to_json_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "filePath": self.location.file,
            "line": self.location.line,
            "column": self.location.column,
            "ruleId": self.error_id,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.notes:
            result["notes"] = list(self.notes)
        if self.evidence:
            result["evidence"] = self.evidence
        return result

    def to_json_str(self) -> str:
        """Single-line JSON string."""
        return json.dumps(self.to_json_dict())

    def to_gcc_format(self) -> str:
        """GCC-style diagnostic string: file:line:col: severity: message."""
        return f"{self.location}: {self.severity.value}: {self.message} [{self.error_id}]"


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — SUPPRESSION MANAGER
# ═════════════════════════════════════════════════════════════════════════

_SUPPRESS_RE = re.compile(
    r'^(?://|/\*)\s*(?:eslint|stateless-lint)-disable'
    r'(?P<scope>-next-line|-line)?(?P<ids>(?:\s[^*]*)?)'
)


class SuppressionManager:
    """
    Manages diagnostic suppressions from multiple sources.

    Sources:
      1. Inline comments: ``// eslint-disable-line [rule]``,
         ``// eslint-disable-next-line [rule]``, ``/* eslint-disable [rule] */``
         (and the same with ``stateless-lint-`` instead of ``eslint-``)
      2. File-level suppressions (passed programmatically)
      3. Global suppressions (command-line or config)

    Rule names may carry the ``react/`` plugin prefix.
    """

    def __init__(self) -> None:
        # {(file, line)} → error_ids suppressed at that line
        self._inline: Dict[Tuple[str, int], Set[str]] = defaultdict(set)
        # file pattern → error_ids
        self._file_level: Dict[str, Set[str]] = defaultdict(set)
        self._global: Set[str] = set()

    def load_inline_suppressions(self, module: ParsedModule) -> None:
        """Scan the module's comments for suppression directives."""
        for node in iter_preorder(module.root):
            if node.type != 'comment':
                continue
            match = _SUPPRESS_RE.match(node_text(node))
            if match is None:
                continue
            ids = _parse_rule_ids(match.group('ids'))
            line = node.start_point[0] + 1
            scope = match.group('scope')
            if scope == '-line':
                self._inline[(module.path, line)].update(ids)
            elif scope == '-next-line':
                self._inline[(module.path, line + 1)].update(ids)
            else:
                self._file_level[module.path].update(ids)

    def add_file_suppression(self, error_id: str, file_pattern: str) -> None:
        self._file_level[file_pattern].add(error_id)

    def add_global_suppression(self, error_id: str) -> None:
        self._global.add(_normalise_rule_id(error_id))

    def is_suppressed(self, diag: Diagnostic) -> bool:
        eid = diag.error_id
        if eid in self._global or "*" in self._global:
            return True

        loc = diag.location
        suppressed_ids = self._inline.get((loc.file, loc.line), set())
        if eid in suppressed_ids or "*" in suppressed_ids:
            return True

        for pattern, ids in self._file_level.items():
            if eid in ids or "*" in ids:
                if pattern == loc.file or fnmatch(loc.file, pattern):
                    return True
        return False

    def filter_diagnostics(
        self, diagnostics: Iterable[Diagnostic]
    ) -> List[Diagnostic]:
        return [d for d in diagnostics if not self.is_suppressed(d)]


def _normalise_rule_id(rule: str) -> str:
    rule = rule.strip()
    if rule.startswith("react/"):
        rule = rule[len("react/"):]
    return rule


def _parse_rule_ids(raw: str) -> Set[str]:
    raw = raw.split("--")[0]
    ids = {_normalise_rule_id(r) for r in re.split(r'[,\s]+', raw) if r.strip()}
    return ids or {"*"}


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — CHECKER BASE CLASS
# ═════════════════════════════════════════════════════════════════════════

@dataclass
class CheckerContext:
    """
    Shared context passed to every checker for one module.

    Attributes
    ----------
    module       : ParsedModule under analysis
    config       : Configuration (read-only)
    suppressions : SuppressionManager
    stats        : mutable dict for timing / counting statistics
    """
    module: ParsedModule
    config: Configuration = field(default_factory=Configuration)
    suppressions: SuppressionManager = field(default_factory=SuppressionManager)
    stats: Dict[str, Any] = field(default_factory=dict)


class Checker(ABC):
    """
    Abstract base class for all checkers.

    Subclass Contract
    ─────────────────
      - Override ``name``, ``description``, ``error_ids``
      - Implement ``collect_evidence()`` and ``diagnose()``
      - Optionally override ``configure()`` for custom setup
    """

    name: ClassVar[str] = "base-checker"
    description: ClassVar[str] = ""
    error_ids: ClassVar[FrozenSet[str]] = frozenset()
    default_severity: ClassVar[DiagnosticSeverity] = DiagnosticSeverity.WARNING

    def __init__(self) -> None:
        self._diagnostics: List[Diagnostic] = []

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    def configure(self, ctx: CheckerContext) -> None:
        """Called before evidence collection.  Default does nothing."""

    @abstractmethod
    def collect_evidence(self, ctx: CheckerContext) -> None:
        ...

    @abstractmethod
    def diagnose(self, ctx: CheckerContext) -> None:
        ...

    def report(self, ctx: CheckerContext) -> List[Diagnostic]:
        return ctx.suppressions.filter_diagnostics(self._diagnostics)

    def _emit(
        self,
        error_id: str,
        message: str,
        location: SourceLocation,
        severity: Optional[DiagnosticSeverity] = None,
        notes: Sequence[str] = (),
        evidence: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._diagnostics.append(Diagnostic(
            error_id=error_id,
            message=message,
            severity=severity or self.default_severity,
            location=location,
            checker_name=self.name,
            notes=tuple(notes),
            evidence=evidence or {},
        ))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} '{self.name}'>"


# ═════════════════════════════════════════════════════════════════════════
#  PART 4 — CHECKER REGISTRY
# ═════════════════════════════════════════════════════════════════════════

class CheckerRegistry:
    """Registry of available checkers with enable/disable filtering."""

    def __init__(self) -> None:
        self._checkers: Dict[str, Type[Checker]] = {}
        self._disabled: Set[str] = set()

    def register(self, checker_cls: Type[Checker]) -> None:
        self._checkers[checker_cls.name] = checker_cls

    def unregister(self, name: str) -> None:
        self._checkers.pop(name, None)

    def disable(self, name: str) -> None:
        self._disabled.add(name)

    def enable(self, name: str) -> None:
        self._disabled.discard(name)

    def get_all(self) -> List[Type[Checker]]:
        return list(self._checkers.values())

    def get_enabled(self) -> List[Type[Checker]]:
        return [
            cls for name, cls in self._checkers.items()
            if name not in self._disabled
        ]

    def get_by_name(self, name: str) -> Optional[Type[Checker]]:
        return self._checkers.get(name)

    @property
    def names(self) -> List[str]:
        return sorted(self._checkers.keys())


# ═════════════════════════════════════════════════════════════════════════
#  PART 5 — PREFER-STATELESS-FUNCTION CHECKER
# ═════════════════════════════════════════════════════════════════════════

class PreferStatelessFunctionChecker(Checker):
    """
    Flags component definitions that use no instance-only capability and
    could be written as plain functions of their props.
    """

    name = "prefer-stateless-function"
    description = "Enforce stateless components to be written as a pure function"
    error_ids = frozenset({"prefer-stateless-function"})
    default_severity = DiagnosticSeverity.STYLE

    MESSAGE = "Component should be written as a pure function"

    def __init__(self) -> None:
        super().__init__()
        self._verdicts: List[Tuple[ComponentDefinition, Verdict]] = []

    @property
    def verdicts(self) -> List[Tuple[ComponentDefinition, Verdict]]:
        return list(self._verdicts)

    def collect_evidence(self, ctx: CheckerContext) -> None:
        self._verdicts = list(classify_module(ctx.module, ctx.config))
        ctx.stats["definitions"] = ctx.stats.get("definitions", 0) + len(self._verdicts)

    def diagnose(self, ctx: CheckerContext) -> None:
        for definition, verdict in self._verdicts:
            if not verdict.is_pure_candidate:
                logger.debug(
                    "%s at %s disqualified: %s",
                    definition.display_name,
                    verdict.location,
                    ", ".join(r.value for r in verdict.reasons),
                )
                continue
            self._emit(
                "prefer-stateless-function",
                self.MESSAGE,
                verdict.location,
                notes=verdict.notes,
                evidence={
                    "component": definition.display_name,
                    "baseType": verdict.base_type.value,
                    "accesses": sorted({s.path for s in verdict.finding.sites}),
                },
            )


# ═════════════════════════════════════════════════════════════════════════
#  PART 6 — DEFAULT REGISTRY
# ═════════════════════════════════════════════════════════════════════════

_DEFAULT_REGISTRY = CheckerRegistry()
_DEFAULT_REGISTRY.register(PreferStatelessFunctionChecker)


def default_registry() -> CheckerRegistry:
    return _DEFAULT_REGISTRY


# ═════════════════════════════════════════════════════════════════════════
#  PART 7 — RUNNER
# ═════════════════════════════════════════════════════════════════════════

SOURCE_SUFFIXES: FrozenSet[str] = frozenset({'.js', '.jsx', '.mjs', '.cjs'})


@dataclass
class CheckerRunResults:
    """
    Aggregate results from running a suite of checkers.

    Attributes
    ----------
    diagnostics            : all diagnostics from all checkers
    diagnostics_by_checker : diagnostics grouped by checker name
    stats                  : timing and counting statistics
    checker_names          : names of checkers that were run
    files                  : files analysed, in order
    """
    diagnostics: List[Diagnostic] = field(default_factory=list)
    diagnostics_by_checker: Dict[str, List[Diagnostic]] = field(
        default_factory=lambda: defaultdict(list)
    )
    stats: Dict[str, Any] = field(default_factory=dict)
    checker_names: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.diagnostics)

    def by_file(self, file: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.location.file == file]

    def by_severity(self, severity: DiagnosticSeverity) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == severity]

    def merge(self, other: CheckerRunResults) -> None:
        self.diagnostics.extend(other.diagnostics)
        for name, diags in other.diagnostics_by_checker.items():
            self.diagnostics_by_checker[name].extend(diags)
        for key, val in other.stats.items():
            if isinstance(val, (int, float)) and key in self.stats:
                self.stats[key] += val
            else:
                self.stats[key] = val
        for name in other.checker_names:
            if name not in self.checker_names:
                self.checker_names.append(name)
        self.files.extend(other.files)

    def to_json_lines(self) -> str:
        return "\n".join(d.to_json_str() for d in self.diagnostics)

    def to_gcc_format(self) -> str:
        return "\n".join(d.to_gcc_format() for d in self.diagnostics)

    def summary(self) -> str:
        lines = [
            f"Checked {len(self.files)} file(s): "
            f"{self.total_count} diagnostic(s)",
        ]
        for name in self.checker_names:
            count = len(self.diagnostics_by_checker.get(name, []))
            elapsed = self.stats.get(f"{name}_elapsed_ms", 0)
            lines.append(f"  {name}: {count} findings ({elapsed:.1f}ms)")
        return "\n".join(lines)


class CheckerRunner:
    """
    Runs a suite of checkers over parsed modules or files.

    Usage
    -----
    >>> runner = CheckerRunner(config=Configuration(react_version="16.0.0"))
    >>> results = runner.run_paths(["src/"], jobs=4)
    >>> print(results.summary())

    Parameters for constructor
    ─────────────────────────
    config      : Configuration passed to every checker
    registry    : CheckerRegistry — source of checker classes
    suppress    : rule ids suppressed globally
    """

    def __init__(
        self,
        config: Optional[Configuration] = None,
        registry: Optional[CheckerRegistry] = None,
        suppress: Sequence[str] = (),
    ) -> None:
        self.config = config or Configuration()
        self.registry = registry or _DEFAULT_REGISTRY
        self.suppress = tuple(suppress)

    def run(
        self,
        module: ParsedModule,
        checkers: Optional[Sequence[str]] = None,
    ) -> CheckerRunResults:
        """Run checkers against a single parsed module."""
        results = CheckerRunResults(files=[module.path])

        suppressions = SuppressionManager()
        for eid in self.suppress:
            suppressions.add_global_suppression(eid)
        suppressions.load_inline_suppressions(module)

        ctx = CheckerContext(
            module=module,
            config=self.config,
            suppressions=suppressions,
        )
        if module.has_syntax_errors:
            logger.info("%s: syntax errors present; analysing recovered tree", module.path)

        for cls in self._select(checkers):
            checker = cls()
            results.checker_names.append(cls.name)
            t0 = time.monotonic()
            try:
                checker.configure(ctx)
                checker.collect_evidence(ctx)
                checker.diagnose(ctx)
                diags = checker.report(ctx)
            except Exception as exc:
                # one checker failing must not abort the run
                logger.exception("Checker %s failed on %s", cls.name, module.path)
                diags = [_internal_error(cls.name, module.path, exc)]
            elapsed_ms = (time.monotonic() - t0) * 1000.0

            results.diagnostics.extend(diags)
            results.diagnostics_by_checker[cls.name].extend(diags)
            results.stats[f"{cls.name}_elapsed_ms"] = elapsed_ms
        results.stats["definitions"] = ctx.stats.get("definitions", 0)
        return results

    def run_file(
        self,
        path: Union[str, Path],
        checkers: Optional[Sequence[str]] = None,
    ) -> CheckerRunResults:
        try:
            module = parse_file(path)
        except OSError as exc:
            error = SourceReadError(f"cannot read {path}: {exc}")
            logger.warning("%s", error)
            results = CheckerRunResults(files=[str(path)])
            results.diagnostics.append(_internal_error("reader", str(path), error))
            return results
        return self.run(module, checkers)

    def run_paths(
        self,
        paths: Sequence[Union[str, Path]],
        checkers: Optional[Sequence[str]] = None,
        jobs: int = 1,
    ) -> CheckerRunResults:
        """Run over files and directories; results keep input order."""
        files = collect_source_files(paths)
        combined = CheckerRunResults()
        if jobs > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as pool:
                partials = list(pool.map(lambda f: self.run_file(f, checkers), files))
        else:
            partials = [self.run_file(f, checkers) for f in files]
        for partial in partials:
            combined.merge(partial)
        return combined

    def _select(self, checkers: Optional[Sequence[str]]) -> List[Type[Checker]]:
        if checkers is None:
            return self.registry.get_enabled()
        selected: List[Type[Checker]] = []
        for name in checkers:
            cls = self.registry.get_by_name(name)
            if cls is None:
                logger.warning("Unknown checker %r ignored", name)
            else:
                selected.append(cls)
        return selected


def collect_source_files(paths: Sequence[Union[str, Path]]) -> List[str]:
    """Expand directories into their JavaScript sources (sorted, deduplicated)."""
    found: List[str] = []
    seen: Set[str] = set()
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            candidates = sorted(
                str(Path(root) / name)
                for root, dirs, names in os.walk(p)
                for name in names
                if Path(name).suffix in SOURCE_SUFFIXES
                and 'node_modules' not in Path(root).parts
            )
        else:
            candidates = [str(p)]
        for candidate in candidates:
            if candidate not in seen:
                seen.add(candidate)
                found.append(candidate)
    return found


def _internal_error(checker_name: str, path: str, exc: Exception) -> Diagnostic:
    return Diagnostic(
        error_id="checkerInternalError",
        message=f"Checker '{checker_name}' failed: {exc}",
        severity=DiagnosticSeverity.INFORMATION,
        location=SourceLocation(file=path),
        checker_name=checker_name,
    )


__all__ = [
    "Diagnostic",
    "DiagnosticSeverity",
    "SuppressionManager",
    "Checker",
    "CheckerContext",
    "CheckerRegistry",
    "PreferStatelessFunctionChecker",
    "default_registry",
    "CheckerRunResults",
    "CheckerRunner",
    "collect_source_files",
    "SOURCE_SUFFIXES",
]
