#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
stateless_lint/__main__.py
==========================

Command-line entry point.

Usage
-----
    stateless-lint [options] <path> [<path> ...]
    python -m stateless_lint [options] <path> [<path> ...]

Directories are searched recursively for ``.js``, ``.jsx``, ``.mjs`` and
``.cjs`` files (``node_modules`` is skipped).

Output formats
--------------
    text    Rust-style colour rendering on a TTY, GCC-style lines otherwise
    json    one JSON array of diagnostics
    gcc     ``file:line:col: severity: message [rule]``
    sarif   SARIF 2.1.0 document

Exit status
-----------
    0   no diagnostics
    1   at least one diagnostic
    2   usage or configuration error
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

from stateless_lint import __version__, package_info
from stateless_lint.checkers import CheckerRunner, default_registry
from stateless_lint.config import Configuration
from stateless_lint.errors import ConfigurationError
from stateless_lint.reporter import Reporter, sarif_document

_log = logging.getLogger("stateless_lint")

EXIT_OK: int = 0
EXIT_DIAGNOSTICS: int = 1
EXIT_USAGE: int = 2


def _configure_logging(verbosity: int) -> None:
    """Set up the ``stateless_lint`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("stateless_lint")
    root.setLevel(level)
    root.handlers[:] = [handler]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stateless-lint",
        description=(
            "Flag React components that could be written as pure functions."
        ),
    )
    parser.add_argument(
        "paths", nargs="*", metavar="PATH",
        help="Files or directories to check.",
    )
    parser.add_argument(
        "--config", metavar="FILE", default=None,
        help="JSON configuration file (ESLint-style or snake_case keys).",
    )
    parser.add_argument(
        "--ignore-pure-components", action="store_true", default=None,
        help="Exempt the PureComponent base type (never disqualifying on its own).",
    )
    parser.add_argument(
        "--react-version", metavar="VERSION", default=None,
        help="React version in use (default: latest).",
    )
    parser.add_argument(
        "--pragma", default=None,
        help='Namespace React is imported as (default: "React").',
    )
    parser.add_argument(
        "--create-class", metavar="NAME", default=None,
        help='Factory function name (default: "createReactClass").',
    )
    parser.add_argument(
        "--format", choices=["text", "json", "gcc", "sarif"], default="text",
        help="Output format (default: text).",
    )
    parser.add_argument(
        "-j", "--jobs", type=int, default=1, metavar="N",
        help="Check files on N worker threads.",
    )
    parser.add_argument(
        "--suppress", action="append", default=[], metavar="ID",
        help="Suppress a rule id globally (repeatable).",
    )
    parser.add_argument(
        "--list-checkers", action="store_true",
        help="List available checkers and exit.",
    )
    parser.add_argument(
        "--no-color", action="store_true",
        help="Disable coloured output.",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "--version", action="store_true",
        help="Print the version and exit.",
    )
    return parser


def _load_config(args: argparse.Namespace) -> Configuration:
    config = Configuration.from_file(args.config) if args.config else Configuration()
    return config.replace(
        ignore_pure_components=args.ignore_pure_components,
        react_version=args.react_version,
        pragma=args.pragma,
        create_class=args.create_class,
    )


def _list_checkers() -> None:
    registry = default_registry()
    for name in registry.names:
        cls = registry.get_by_name(name)
        desc = cls.description if cls else ""
        sys.stdout.write(f"  {name:<32} {desc}\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if args.version:
        sys.stdout.write(f"stateless-lint {__version__}\n")
        if args.verbose:
            sys.stdout.write(json.dumps(package_info(), indent=2) + "\n")
        return EXIT_OK

    if args.list_checkers:
        _list_checkers()
        return EXIT_OK

    if not args.paths:
        parser.print_usage(sys.stderr)
        sys.stderr.write("stateless-lint: error: no input paths given\n")
        return EXIT_USAGE

    if args.jobs < 1:
        sys.stderr.write("stateless-lint: error: --jobs must be at least 1\n")
        return EXIT_USAGE

    try:
        config = _load_config(args)
    except ConfigurationError as exc:
        _log.error("%s", exc)
        return EXIT_USAGE

    runner = CheckerRunner(config=config, suppress=args.suppress)
    try:
        results = runner.run_paths(args.paths, jobs=args.jobs)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130

    _log.info("%s", results.summary())
    _emit(results.diagnostics, args)
    return EXIT_DIAGNOSTICS if results.diagnostics else EXIT_OK


def _emit(diagnostics: List, args: argparse.Namespace) -> None:
    if args.format == "json":
        sys.stdout.write(
            json.dumps([d.to_json_dict() for d in diagnostics], indent=2) + "\n"
        )
    elif args.format == "gcc":
        for diag in diagnostics:
            sys.stdout.write(diag.to_gcc_format() + "\n")
    elif args.format == "sarif":
        document = sarif_document(diagnostics, tool_version=__version__)
        sys.stdout.write(json.dumps(document, indent=2) + "\n")
    else:
        colour = False if args.no_color else None
        with Reporter(
            stream=sys.stdout,
            colour=colour,
            summary_stream=sys.stderr,
            tool_version=__version__,
        ) as rep:
            rep.report_all(diagnostics)


if __name__ == "__main__":
    raise SystemExit(main())
