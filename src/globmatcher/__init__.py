"""
Validation, cleanup and hierarchical matching of gitignore-style globs.

Usage::

    from globmatcher import Matcher

    m = Matcher(".globignore")
    m.add(".globignore", "*.o")
    w = m.new_worker("src")
    w.matches("main.o")
"""

from globmatcher.check import check, clean, is_valid
from globmatcher.errors import (
    ConfigUnsetError,
    ErrorKind,
    GlobContractError,
    MatcherError,
    MissingDirectoryError,
    PatternContainsSeparatorError,
    PatternError,
)
from globmatcher.matcher import Matcher, Worker, discover_ancestor_files

__all__ = [
    "ConfigUnsetError",
    "ErrorKind",
    "GlobContractError",
    "Matcher",
    "MatcherError",
    "MissingDirectoryError",
    "PatternContainsSeparatorError",
    "PatternError",
    "Worker",
    "check",
    "clean",
    "discover_ancestor_files",
    "is_valid",
]
