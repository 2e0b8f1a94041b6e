"""
Error types for pattern validation and pattern-set composition.

Every error carries an `ErrorKind` from a closed set, so callers can branch on
`err.kind` without parsing messages.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    # Grammar errors (from the validator)
    EMPTY_GLOB = "empty_glob"
    UNEXPECTED_RUNE = "unexpected_rune"
    NEGATIVE_RANGE = "negative_range"
    DUAL_STAR = "dual_star"
    EMPTY_CLASS = "empty_class"
    INCOMPLETE_CLASS = "incomplete_class"
    TRAILING_ESCAPE = "trailing_escape"
    TRAILING_WHITESPACE = "trailing_whitespace"
    # Composition errors (from Matcher and Worker)
    MISSING_DIRECTORY = "missing_directory"
    PATTERN_CONTAINS_SEPARATOR = "pattern_contains_separator"
    UNSET_CONFIG_NAME = "unset_config_name"

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def is_grammar(self) -> bool:
        return self in GRAMMAR_KINDS


_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.EMPTY_GLOB: "glob empty",
    ErrorKind.UNEXPECTED_RUNE: "unexpected rune",
    ErrorKind.NEGATIVE_RANGE: "negative range",
    ErrorKind.DUAL_STAR: "dual stars not supported",
    ErrorKind.EMPTY_CLASS: "character class empty",
    ErrorKind.INCOMPLETE_CLASS: "character class incomplete",
    ErrorKind.TRAILING_ESCAPE: "trailing escape character",
    ErrorKind.TRAILING_WHITESPACE: "trailing whitespace",
    ErrorKind.MISSING_DIRECTORY: "need path to current directory for worker",
    ErrorKind.PATTERN_CONTAINS_SEPARATOR: "glob cannot contain path separators",
    ErrorKind.UNSET_CONFIG_NAME: "config is unset",
}

GRAMMAR_KINDS: frozenset[ErrorKind] = frozenset(
    {
        ErrorKind.EMPTY_GLOB,
        ErrorKind.UNEXPECTED_RUNE,
        ErrorKind.NEGATIVE_RANGE,
        ErrorKind.DUAL_STAR,
        ErrorKind.EMPTY_CLASS,
        ErrorKind.INCOMPLETE_CLASS,
        ErrorKind.TRAILING_ESCAPE,
        ErrorKind.TRAILING_WHITESPACE,
    }
)


class MatcherError(Exception):
    """Base class for all errors raised by globmatcher."""

    kind: ErrorKind

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        super().__init__(message if message is not None else kind.message)


class PatternError(MatcherError, ValueError):
    """
    A malformed glob. `column` is the 0-based index of the offending character
    (or one past the end for errors found at end of input). `line` and `source`
    are set only once the pattern has been attributed to a file line, and are
    -1 and "" otherwise.
    """

    def __init__(self, kind: ErrorKind, column: int, line: int = -1, source: str = "") -> None:
        self.column = column
        self.line = line
        self.source = source
        super().__init__(kind, _render(kind, column, line, source))

    def with_location(self, line: int, source: str) -> PatternError:
        """Return a copy of this error attributed to `line` of file `source`."""
        return PatternError(self.kind, self.column, line, source)

    def __repr__(self) -> str:
        return (
            f"PatternError(kind={self.kind.name}, column={self.column}, "
            f"line={self.line}, source={self.source!r})"
        )


def _render(kind: ErrorKind, column: int, line: int, source: str) -> str:
    if line < 0:
        return f"column {column}: {kind.message}"
    return f"{source}:{line}:{column}: {kind.message}"


class MissingDirectoryError(MatcherError, ValueError):
    def __init__(self) -> None:
        super().__init__(ErrorKind.MISSING_DIRECTORY)


class PatternContainsSeparatorError(MatcherError, ValueError):
    """Raised when a glob added directly (not from a file) contains a `/`."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(
            ErrorKind.PATTERN_CONTAINS_SEPARATOR,
            f"{ErrorKind.PATTERN_CONTAINS_SEPARATOR.message}: {pattern!r}",
        )


class ConfigUnsetError(MatcherError):
    def __init__(self) -> None:
        super().__init__(ErrorKind.UNSET_CONFIG_NAME)


class GlobContractError(RuntimeError):
    """
    The glob primitive rejected a pattern that had already passed `check`.

    This is a bug in the validator, not a user error, and is never caught
    inside this package.
    """
