#!/usr/bin/env python3
"""
globmatcher: gitignore-style glob validation and cascading matching

Common usage:
  globmatcher build/app.o src/main.c
  globmatcher --check .globignore
  globmatcher --list-files .
  globmatcher --list-files --matched .

Ignore files (default name: .globignore) are read from each path's directory
and from all of its ancestors. Settings can also come from .globmatcher.toml,
globmatcher.toml, or [tool.globmatcher] in pyproject.toml.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from globmatcher.check import check, clean
from globmatcher.config import (
    GlobmatcherConfig,
    build_matcher,
    find_config_file,
    load_config,
)
from globmatcher.errors import MatcherError, PatternError
from globmatcher.walker import walk, worker_for


@dataclass
class Options:
    """Command-line options for the globmatcher tool."""

    paths: list[str]
    check: bool
    list_files: bool
    matched: bool
    ignore_file: str | None
    global_patterns: list[str]
    no_config: bool
    verbose: bool
    version: bool


def _parse_args(args: list[str] | None = None) -> Options:
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=str,
        default=[],
        help="Paths to test, ignore files to check (--check), or directories to walk (--list-files)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Validate every line of the given ignore files and report malformed globs",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Walk the given directories and print files that no glob matches",
    )
    parser.add_argument(
        "--matched",
        action="store_true",
        help="With --list-files, print matched paths instead of unmatched files",
    )
    parser.add_argument(
        "--ignore-file",
        type=str,
        default=None,
        dest="ignore_file",
        metavar="NAME",
        help="Basename of the cascading ignore file (default: .globignore)",
    )
    parser.add_argument(
        "--global",
        action="append",
        default=[],
        dest="global_patterns",
        metavar="PATTERN",
        help="Add a global basename glob (e.g., '*.o'). Can be repeated",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        dest="no_config",
        help="Do not look for a globmatcher config file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    return Options(
        paths=opts.paths,
        check=opts.check,
        list_files=opts.list_files,
        matched=opts.matched,
        ignore_file=opts.ignore_file,
        global_patterns=opts.global_patterns,
        no_config=opts.no_config,
        verbose=opts.verbose,
        version=opts.version,
    )


def _load_config(options: Options) -> GlobmatcherConfig:
    """Read the config file, if any, and apply CLI overrides on top of it."""
    config = GlobmatcherConfig()
    if not options.no_config:
        config_path = find_config_file(Path.cwd())
        if config_path:
            config = load_config(config_path)

    if options.ignore_file is not None:
        config.ignore_file = options.ignore_file
    if options.global_patterns:
        config.global_patterns = (config.global_patterns or []) + options.global_patterns
    return config


def _check_file(path: Path) -> list[PatternError]:
    """Every malformed glob in an ignore file, not just the first."""
    errors: list[PatternError] = []
    with open(path, encoding="utf-8") as f:
        for lineno, raw in enumerate(f, start=1):
            glob = clean(raw.removesuffix("\n"))
            if not glob:
                continue
            try:
                check(glob)
            except PatternError as e:
                errors.append(e.with_location(lineno, str(path)))
    return errors


def _run_check(paths: list[str]) -> int:
    found = False
    for p in paths:
        for error in _check_file(Path(p)):
            print(error)
            found = True
    return 1 if found else 0


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the globmatcher CLI.

    Returns:
        Exit code: 0 on success (or when some path matched), 1 when nothing
        matched or an ignore file is malformed, 2 on errors.
    """
    options = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("globmatcher")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if options.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not options.paths:
        print(
            "Error: No input specified. Provide paths to test, or use --check or"
            " --list-files with files or directories. Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    try:
        if options.check:
            return _run_check(options.paths)

        config = _load_config(options)
        matcher = build_matcher(config)

        if options.list_files:
            for root in options.paths:
                for entry in walk(root, matcher, config.effective_exclude_dirs):
                    if entry.matched == options.matched:
                        print(entry.path)
            return 0

        any_matched = False
        for p in options.paths:
            if worker_for(p, matcher).matches(str(Path(p).absolute())):
                print(p)
                any_matched = True
        return 0 if any_matched else 1
    except (MatcherError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
