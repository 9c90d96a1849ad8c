"""
stateless_lint — Pure-Function Component Classifier
===================================================

Static analysis that flags React component definitions which could be
written as plain functions of their props: definitions that hold no local
state, use no lifecycle hooks, touch no host handles and expose nothing
through instance members beyond a render method.

Core modules
------------
ast_helper
    Parsing (tree-sitter) and read-only tree traversal utilities.
config
    The read-only ``Configuration`` record and its loaders.
errors
    Exception hierarchy with structured ``SL-NNNN`` codes.
scope
    Lexical binding lookup (imports, declarations, parameters).
extractor
    Finds class-like and factory-style definitions, normalises members.
resolver
    Classifies what a class-like definition extends.
members
    Buckets members into render / lifecycle / constructor / metadata / other.
access
    Detects which instance namespaces ``render`` touches.
version_gate
    Framework-version compatibility of ``null`` results.
rules
    Combines the above into one ``Verdict`` per definition.
checkers
    Checker framework, suppressions and the multi-file runner.

Addon modules
-------------
reporter
    Terminal / plain / SARIF rendering of diagnostics.

Quick start
-----------
>>> from stateless_lint import Configuration, parse_module, classify_module
>>> module = parse_module("class Foo extends React.Component {"
...                       " render() { return <div>{this.props.x}</div>; } }")
>>> [v.is_pure_candidate for _, v in classify_module(module, Configuration())]
[True]

Package layout
--------------
::

    stateless_lint/
    ├── __init__.py            ← this file
    ├── __main__.py            ← command-line interface
    ├── ast_helper.py
    ├── config.py
    ├── errors.py
    ├── scope.py
    ├── extractor.py
    ├── resolver.py
    ├── members.py
    ├── access.py
    ├── version_gate.py
    ├── rules.py
    ├── checkers.py
    └── reporter.py
"""

from __future__ import annotations

import importlib
import logging
import sys
import warnings
from typing import TYPE_CHECKING, List

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.1.0"
__author__ = "stateless-lint contributors"
__license__ = "MIT"
__all__: List[str] = []          # populated incrementally below

_log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal registry: (module_name, list_of_names_to_import)
#
#   CORE  — always imported; failure is fatal
#   ADDON — imported eagerly but failure only warns (package still usable)
# ---------------------------------------------------------------------------

_CORE_MODULES = {
    "ast_helper": [
        "SourceLocation",
        "ParsedModule",
        "parse_module",
        "parse_file",
    ],
    "errors": [
        "ErrorCode",
        "StatelessLintError",
        "ConfigurationError",
        "SourceReadError",
    ],
    "config": [
        "Configuration",
    ],
    "extractor": [
        "ComponentDefinition",
        "DefinitionStyle",
        "extract_definitions",
    ],
    "resolver": [
        "BaseTypeResolution",
        "BaseTypeResolver",
    ],
    "members": [
        "MemberClassification",
        "classify_members",
    ],
    "access": [
        "CapabilityTag",
        "AccessFinding",
        "detect_instance_access",
    ],
    "version_gate": [
        "VersionGate",
    ],
    "rules": [
        "Verdict",
        "VerdictKind",
        "Reason",
        "classify",
        "classify_module",
    ],
    "checkers": [
        "Diagnostic",
        "DiagnosticSeverity",
        "CheckerRunner",
        "CheckerRunResults",
        "PreferStatelessFunctionChecker",
    ],
}

_ADDON_MODULES = {
    "reporter": [
        "Reporter",
        "ReporterStats",
        "sarif_document",
    ],
}

# ---------------------------------------------------------------------------
# Import helper
# ---------------------------------------------------------------------------

def _import_names(
    module_rel_name: str,
    names: List[str],
    *,
    fatal: bool = True,
) -> None:
    """Import *names* from a submodule and bind them in the package namespace.

    Parameters
    ----------
    module_rel_name:
        Module name relative to this package (e.g. ``"rules"``).
    names:
        Public symbols to re-export.
    fatal:
        If ``True``, an ``ImportError`` propagates.  If ``False``, a warning
        is issued and the names are skipped (addon tier).
    """
    fq_name = f"{__name__}.{module_rel_name}"
    try:
        mod = importlib.import_module(fq_name)
    except ImportError as exc:
        if fatal:
            raise ImportError(
                f"stateless_lint: required submodule '{module_rel_name}' "
                f"failed to import: {exc}"
            ) from exc
        warnings.warn(
            f"stateless_lint: optional submodule '{module_rel_name}' "
            f"could not be imported ({exc}); related symbols will be unavailable.",
            ImportWarning,
            stacklevel=2,
        )
        _log.debug("Skipped optional module %s: %s", module_rel_name, exc)
        return

    current_module = sys.modules[__name__]
    for name in names:
        obj = getattr(mod, name, None)
        if obj is None:
            msg = f"stateless_lint.{module_rel_name} does not export '{name}'"
            if fatal:
                raise AttributeError(msg)
            _log.warning(msg)
            continue
        setattr(current_module, name, obj)
        __all__.append(name)

    setattr(current_module, module_rel_name, mod)
    if module_rel_name not in __all__:
        __all__.append(module_rel_name)


for _mod, _names in _CORE_MODULES.items():
    _import_names(_mod, _names, fatal=True)

for _mod, _names in _ADDON_MODULES.items():
    _import_names(_mod, _names, fatal=False)

del _mod, _names

# ---------------------------------------------------------------------------
# Package-level utilities
# ---------------------------------------------------------------------------

def list_submodules() -> List[str]:
    """Return the names of all submodules in the package (core + addon)."""
    return sorted(set(list(_CORE_MODULES.keys()) + list(_ADDON_MODULES.keys())))


def package_info() -> dict:
    """Return a dict of metadata about the installed package.

    Printed by ``stateless-lint --version -v``.
    """
    loaded = []
    missing = []
    for mod_name in list_submodules():
        fq = f"{__name__}.{mod_name}"
        if fq in sys.modules:
            loaded.append(mod_name)
        else:
            missing.append(mod_name)

    return {
        "package": __name__,
        "version": __version__,
        "python": sys.version,
        "loaded_submodules": loaded,
        "missing_submodules": missing,
    }


__all__ += ["list_submodules", "package_info", "__version__"]

if TYPE_CHECKING:
    from .ast_helper import (
        SourceLocation as SourceLocation,
        ParsedModule as ParsedModule,
        parse_module as parse_module,
        parse_file as parse_file,
    )
    from .errors import (
        ErrorCode as ErrorCode,
        StatelessLintError as StatelessLintError,
        ConfigurationError as ConfigurationError,
        SourceReadError as SourceReadError,
    )
    from .config import Configuration as Configuration
    from .extractor import (
        ComponentDefinition as ComponentDefinition,
        DefinitionStyle as DefinitionStyle,
        extract_definitions as extract_definitions,
    )
    from .resolver import (
        BaseTypeResolution as BaseTypeResolution,
        BaseTypeResolver as BaseTypeResolver,
    )
    from .members import (
        MemberClassification as MemberClassification,
        classify_members as classify_members,
    )
    from .access import (
        CapabilityTag as CapabilityTag,
        AccessFinding as AccessFinding,
        detect_instance_access as detect_instance_access,
    )
    from .version_gate import VersionGate as VersionGate
    from .rules import (
        Verdict as Verdict,
        VerdictKind as VerdictKind,
        Reason as Reason,
        classify as classify,
        classify_module as classify_module,
    )
    from .checkers import (
        Diagnostic as Diagnostic,
        DiagnosticSeverity as DiagnosticSeverity,
        CheckerRunner as CheckerRunner,
        CheckerRunResults as CheckerRunResults,
        PreferStatelessFunctionChecker as PreferStatelessFunctionChecker,
    )
    from .reporter import (
        Reporter as Reporter,
        ReporterStats as ReporterStats,
        sarif_document as sarif_document,
    )
