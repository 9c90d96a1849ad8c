#!/usr/bin/env python3
"""
stateless_lint/reporter.py
══════════════════════════

Rust-style colourful diagnostic reporter.

Output formats
──────────────
  • Terminal : colourful Rust-style rendering (TTY default)
  • Plain    : one GCC-style line per diagnostic (non-TTY / --no-color)
  • SARIF    : SARIF 2.1.0 document, to a stream or to the file named by
               ``$REPORT_GENERATE_SARIF``

Usage
─────
    from stateless_lint.reporter import Reporter

    with Reporter() as rep:
        for diag in results.diagnostics:
            rep.report(diag)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, TextIO, Union

from termcolor import colored, cprint

from stateless_lint.checkers import Diagnostic, DiagnosticSeverity

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════════════
#  SEVERITY PRESENTATION
# ═════════════════════════════════════════════════════════════════════════

#: severity → (termcolor colour, SARIF 2.1.0 ``level``)
SEVERITY_STYLE: Dict[DiagnosticSeverity, tuple] = {
    DiagnosticSeverity.ERROR: ("red", "error"),
    DiagnosticSeverity.WARNING: ("yellow", "warning"),
    DiagnosticSeverity.STYLE: ("cyan", "note"),
    DiagnosticSeverity.INFORMATION: ("white", "note"),
}


def severity_color(severity: DiagnosticSeverity) -> str:
    return SEVERITY_STYLE[severity][0]


def sarif_level(severity: DiagnosticSeverity) -> str:
    return SEVERITY_STYLE[severity][1]


@dataclass
class ReporterStats:
    """Aggregate counts per severity."""
    error: int = 0
    warning: int = 0
    style: int = 0
    information: int = 0

    def record(self, severity: DiagnosticSeverity) -> None:
        attr = severity.value
        setattr(self, attr, getattr(self, attr) + 1)

    @property
    def total(self) -> int:
        return self.error + self.warning + self.style + self.information

    def summary_line(self) -> str:
        parts: List[str] = []
        if self.error:
            parts.append(f"{self.error} error{'s' if self.error != 1 else ''}")
        if self.warning:
            parts.append(f"{self.warning} warning{'s' if self.warning != 1 else ''}")
        if self.style:
            parts.append(f"{self.style} style")
        if self.information:
            parts.append(f"{self.information} info")
        if not parts:
            return "no diagnostics emitted"
        return "; ".join(parts) + f" ({self.total} total)"


# ═════════════════════════════════════════════════════════════════════════
#  TERMINAL RENDERER  (Rust-style colourful output)
# ═════════════════════════════════════════════════════════════════════════

class _TerminalRenderer:
    """Render diagnostics to a terminal with colours."""

    def __init__(self, stream: TextIO = sys.stdout) -> None:
        self._stream = stream
        self._source_cache: Dict[str, List[str]] = {}

    def render(self, diag: Diagnostic) -> None:
        lines: List[str] = []
        color = severity_color(diag.severity)

        # ── header: severity[ruleId]: message ────────────────────────
        sev_str = colored(
            f"{diag.severity.value}[{diag.error_id}]", color, attrs=["bold"],
        )
        lines.append(f"{sev_str}: {colored(diag.message, 'white', attrs=['bold'])}")

        # ── primary location ─────────────────────────────────────────
        loc = diag.location
        arrow = colored("-->", "blue", attrs=["bold"])
        lines.append(f"  {arrow} {loc}")

        # ── source excerpt ───────────────────────────────────────────
        src_text = self._source_line(loc.file, loc.line)
        if src_text:
            gutter_w = len(str(loc.line)) + 1
            pipe = colored("|", "blue", attrs=["bold"])
            line_prefix = colored(str(loc.line).rjust(gutter_w), "blue", attrs=["bold"])
            lines.append(f" {line_prefix} {pipe} {src_text}")
            pad = " " * max(loc.column - 1, 0)
            span_len = max(len(src_text.rstrip()) - len(pad), 1)
            label = diag.evidence.get("component") or ""
            marker = colored("^" * span_len + (f" {label}" if label else ""),
                             color, attrs=["bold"])
            lines.append(f" {' ' * gutter_w} {pipe} {pad}{marker}")

        # ── notes ────────────────────────────────────────────────────
        for note in diag.notes:
            prefix = colored("note", "cyan", attrs=["bold"])
            lines.append(f"  = {prefix}: {note}")

        lines.append("")
        self._stream.write("\n".join(lines) + "\n")
        self._stream.flush()

    def _source_line(self, filepath: str, line: int) -> str:
        if not filepath or filepath.startswith("<"):
            return ""
        if filepath not in self._source_cache:
            try:
                text = Path(filepath).read_text(encoding="utf-8", errors="replace")
            except OSError:
                text = ""
            self._source_cache[filepath] = text.splitlines()
        source = self._source_cache[filepath]
        if 1 <= line <= len(source):
            return source[line - 1]
        return ""


# ═════════════════════════════════════════════════════════════════════════
#  PLAIN RENDERER  (for log files / non-TTY)
# ═════════════════════════════════════════════════════════════════════════

class _PlainRenderer:
    """Non-coloured renderer: one GCC-style line per diagnostic."""

    def __init__(self, stream: TextIO = sys.stdout) -> None:
        self._stream = stream

    def render(self, diag: Diagnostic) -> None:
        self._stream.write(diag.to_gcc_format() + "\n")
        for note in diag.notes:
            self._stream.write(f"  note: {note}\n")
        self._stream.flush()


# ═════════════════════════════════════════════════════════════════════════
#  SARIF 2.1.0 BUILDER
# ═════════════════════════════════════════════════════════════════════════

class SarifBuilder:
    """Accumulates diagnostics and produces a SARIF 2.1.0 document."""

    SARIF_VERSION = "2.1.0"
    SARIF_SCHEMA = (
        "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/"
        "Schemata/sarif-schema-2.1.0.json"
    )

    def __init__(self) -> None:
        self._results: List[Dict[str, Any]] = []
        self._rules: Dict[str, Dict[str, Any]] = {}

    def add(self, diag: Diagnostic) -> None:
        if diag.error_id not in self._rules:
            self._rules[diag.error_id] = {
                "id": diag.error_id,
                "shortDescription": {"text": diag.message},
            }

        loc = diag.location
        region: Dict[str, Any] = {"startLine": max(loc.line, 1)}
        if loc.column:
            region["startColumn"] = loc.column
        result: Dict[str, Any] = {
            "ruleId": diag.error_id,
            "level": sarif_level(diag.severity),
            "message": {"text": diag.message},
            "locations": [{
                "physicalLocation": {
                    "artifactLocation": {"uri": loc.file},
                    "region": region,
                },
            }],
        }
        if diag.notes:
            result["relatedLocations"] = [
                {"id": idx, "message": {"text": note}}
                for idx, note in enumerate(diag.notes)
            ]
        if diag.evidence:
            result["properties"] = dict(diag.evidence)
        self._results.append(result)

    def to_dict(self, tool_name: str, version: str) -> Dict[str, Any]:
        return {
            "$schema": self.SARIF_SCHEMA,
            "version": self.SARIF_VERSION,
            "runs": [
                {
                    "tool": {
                        "driver": {
                            "name": tool_name,
                            "version": version,
                            "rules": list(self._rules.values()),
                        }
                    },
                    "results": self._results,
                }
            ],
        }

    def to_json(self, tool_name: str = "stateless-lint", version: str = "0.0.0") -> str:
        return json.dumps(self.to_dict(tool_name, version), indent=2)

    def write(self, path: str, tool_name: str = "stateless-lint", version: str = "0.0.0") -> None:
        Path(path).write_text(self.to_json(tool_name, version), encoding="utf-8")


# ═════════════════════════════════════════════════════════════════════════
#  REPORTER  (main entry point)
# ═════════════════════════════════════════════════════════════════════════

class Reporter:
    """
    Central diagnostic dispatcher.

    Use as a context manager::

        with Reporter() as rep:
            rep.report_all(results.diagnostics)
        # finish() is called automatically

    Parameters
    ----------
    stream         : where rendered diagnostics go
    colour         : force colour on/off; ``None`` means "if stream is a TTY"
    summary_stream : where the closing summary line goes (None to omit)
    sarif_path     : also write SARIF here (defaults to $REPORT_GENERATE_SARIF)
    """

    def __init__(
        self,
        stream: TextIO = sys.stdout,
        colour: Optional[bool] = None,
        summary_stream: Optional[TextIO] = sys.stderr,
        tool_name: str = "stateless-lint",
        tool_version: str = "0.0.0",
        sarif_path: Optional[str] = None,
    ) -> None:
        self.tool_name = tool_name
        self.tool_version = tool_version
        self.stats = ReporterStats()
        self._summary_stream = summary_stream
        self._diagnostics: List[Diagnostic] = []

        use_colour = colour if colour is not None else hasattr(stream, "isatty") and stream.isatty()
        if use_colour:
            self._renderer: Union[_TerminalRenderer, _PlainRenderer] = _TerminalRenderer(stream)
        else:
            self._renderer = _PlainRenderer(stream)

        self._sarif_path = sarif_path or os.environ.get("REPORT_GENERATE_SARIF", "")
        self._sarif: Optional[SarifBuilder] = SarifBuilder() if self._sarif_path else None

    def __enter__(self) -> Reporter:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.finish()

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    def report(self, diag: Diagnostic) -> None:
        """Route ``diag`` to every active output and count it."""
        self.stats.record(diag.severity)
        self._diagnostics.append(diag)
        self._renderer.render(diag)
        if self._sarif is not None:
            self._sarif.add(diag)

    def report_all(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diag in diagnostics:
            self.report(diag)

    def finish(self) -> ReporterStats:
        """Print the summary line and write SARIF if configured."""
        if self._summary_stream is not None:
            summary = self.stats.summary_line()
            if isinstance(self._renderer, _TerminalRenderer):
                color = "red" if self.stats.error else "yellow" if self.stats.total else "green"
                cprint(f"  ╰─ {summary}", color, attrs=["bold"], file=self._summary_stream)
            else:
                print(f"  {summary}", file=self._summary_stream)

        if self._sarif is not None:
            try:
                self._sarif.write(
                    self._sarif_path,
                    tool_name=self.tool_name,
                    version=self.tool_version,
                )
            except OSError as exc:
                logger.error("failed to write SARIF to %s: %s", self._sarif_path, exc)

        return self.stats


def sarif_document(
    diagnostics: Iterable[Diagnostic],
    tool_name: str = "stateless-lint",
    tool_version: str = "0.0.0",
) -> Dict[str, Any]:
    builder = SarifBuilder()
    for diag in diagnostics:
        builder.add(diag)
    return builder.to_dict(tool_name, tool_version)


__all__ = [
    "SEVERITY_STYLE",
    "severity_color",
    "sarif_level",
    "ReporterStats",
    "SarifBuilder",
    "Reporter",
    "sarif_document",
]
