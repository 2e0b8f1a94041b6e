"""
Glob validation and ignore-file line cleanup.

`check()` validates a glob before it is ever handed to the matching primitive,
which has no well-defined behavior on malformed input. `clean()` strips
comments and unescaped trailing whitespace from a raw ignore-file line.

The accepted grammar:

    pattern:
        { term }
    term:
        '*'         matches any sequence of non-separator characters
        '?'         matches any single non-separator character
        '[' [ '^' ] { character-range } ']'
                    character class (must be non-empty)
        c           matches character c (c != '*', '?', '\\', '[')
        '\\' c      matches character c

    character-range:
        c           matches character c (c != '\\', '-', ']')
        '\\' c      matches character c
        lo '-' hi   matches character c for lo <= c <= hi

Two consecutive unescaped stars followed by anything are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from globmatcher.errors import ErrorKind, PatternError

_WHITESPACE = frozenset(" \t\n")


class _Phase(str, Enum):
    INITIAL = "initial"
    REGULAR = "regular"
    CLASS_BEGIN = "class_begin"
    CLASS_MIDDLE = "class_middle"
    CLASS_RANGE = "class_range"
    CLASS_REQUIRE = "class_require"
    STAR = "star"
    DUAL_STAR = "dual_star"
    ESCAPE = "escape"
    WHITESPACE = "whitespace"


@dataclass(frozen=True)
class _State:
    phase: _Phase
    # Most recent unescaped class member: the lower bound of a following range.
    last: str = ""


@dataclass(frozen=True)
class _Escape:
    """Takes any one character, then continues in `resume`."""

    resume: _State
    phase: _Phase = _Phase.ESCAPE


_INITIAL = _State(_Phase.INITIAL)
_REGULAR = _State(_Phase.REGULAR)
_CLASS_BEGIN = _State(_Phase.CLASS_BEGIN)
_STAR = _State(_Phase.STAR)
_DUAL_STAR = _State(_Phase.DUAL_STAR)
_SPACE = _State(_Phase.WHITESPACE)

# Verdict for each phase the input may end in. None means the glob is valid.
_FINAL: dict[_Phase, ErrorKind | None] = {
    _Phase.INITIAL: ErrorKind.EMPTY_GLOB,
    _Phase.REGULAR: None,
    _Phase.CLASS_BEGIN: ErrorKind.INCOMPLETE_CLASS,
    _Phase.CLASS_MIDDLE: ErrorKind.INCOMPLETE_CLASS,
    _Phase.CLASS_RANGE: ErrorKind.INCOMPLETE_CLASS,
    _Phase.CLASS_REQUIRE: None,
    _Phase.STAR: None,
    _Phase.DUAL_STAR: None,
    _Phase.ESCAPE: ErrorKind.TRAILING_ESCAPE,
    _Phase.WHITESPACE: ErrorKind.TRAILING_WHITESPACE,
}

_Transition = tuple[_State | _Escape, ErrorKind | None]


def _escape(resume: _State) -> _Escape:
    return _Escape(resume)


def _regular(ch: str) -> _Transition:
    if ch == "[":
        return _CLASS_BEGIN, None
    if ch == "*":
        return _STAR, None
    if ch == "\\":
        return _escape(_REGULAR), None
    if ch in _WHITESPACE:
        return _SPACE, None
    return _REGULAR, None


def _class_member(state: _State, ch: str) -> _Transition:
    """Shared by CLASS_MIDDLE and by CLASS_REQUIRE once it has ruled out a `-`."""
    if ch == "\\":
        return _escape(_State(_Phase.CLASS_MIDDLE, last=state.last)), None
    if ch == "]":
        return _REGULAR, None
    if ch == "-":
        return _State(_Phase.CLASS_RANGE, last=state.last), None
    return _State(_Phase.CLASS_MIDDLE, last=ch), None


def _step(state: _State | _Escape, ch: str) -> _Transition:
    """Consume one character. Returns the next state, or an error kind."""
    if isinstance(state, _Escape):
        return state.resume, None

    phase = state.phase

    if phase in (_Phase.INITIAL, _Phase.REGULAR):
        return _regular(ch)

    if phase is _Phase.CLASS_BEGIN:
        if ch == "]":
            return state, ErrorKind.EMPTY_CLASS
        if ch == "-":
            return state, ErrorKind.UNEXPECTED_RUNE
        if ch == "\\":
            return _escape(_State(_Phase.CLASS_REQUIRE)), None
        return _State(_Phase.CLASS_MIDDLE, last=ch), None

    if phase is _Phase.CLASS_REQUIRE:
        # A range may not follow another range directly, as in `[a-b-c]`.
        if ch == "-":
            return state, ErrorKind.UNEXPECTED_RUNE
        return _class_member(state, ch)

    if phase is _Phase.CLASS_MIDDLE:
        return _class_member(state, ch)

    if phase is _Phase.CLASS_RANGE:
        if ch in "-\\]":
            return state, ErrorKind.UNEXPECTED_RUNE
        if state.last and ch < state.last:
            return state, ErrorKind.NEGATIVE_RANGE
        return _State(_Phase.CLASS_REQUIRE, last=state.last), None

    if phase is _Phase.STAR:
        if ch == "*":
            return _DUAL_STAR, None
        return _regular(ch)

    if phase is _Phase.DUAL_STAR:
        return state, ErrorKind.DUAL_STAR

    # WHITESPACE: only trailing whitespace is an error, so any other character
    # is classified as if it had appeared in REGULAR.
    if ch in _WHITESPACE:
        return state, None
    return _regular(ch)


def check(glob: str) -> None:
    """
    Validate `glob`, raising `PatternError` if it is malformed.

    The error's `column` is the index of the character that failed, or
    `len(glob)` if the input ended in an incomplete state.
    """
    state: _State | _Escape = _INITIAL
    for column, ch in enumerate(glob):
        state, kind = _step(state, ch)
        if kind is not None:
            raise PatternError(kind, column)

    kind = _FINAL[state.phase]
    if kind is not None:
        raise PatternError(kind, len(glob))


def is_valid(glob: str) -> bool:
    try:
        check(glob)
    except PatternError:
        return False
    return True


def clean(line: str) -> str:
    """
    Strip the parts of an ignore-file line that are not part of the glob.

    A line starting with `#` is a comment and yields "". Unescaped trailing
    whitespace is dropped, as is a lone trailing backslash. Escapes are kept
    as-is so that `check()` still sees them. An empty result means the line
    holds no pattern.
    """
    if line.startswith("#"):
        return ""

    out: list[str] = []
    pending: list[str] = []
    escaped = False
    for ch in line:
        if ch in _WHITESPACE and not escaped:
            pending.append(ch)
            continue
        if ch == "\\" and not escaped:
            # Whitespace before a lone trailing backslash is still trailing,
            # so pending whitespace waits for the escaped character.
            escaped = True
            continue
        if pending:
            out.extend(pending)
            pending.clear()
        out.append("\\" + ch if escaped else ch)
        escaped = False

    return "".join(out)
