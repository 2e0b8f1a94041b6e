"""
Matching paths against global and cascading, per-directory glob lists.

A `Matcher` holds global globs, which only ever apply to a path's basename.
A `Worker` is derived from a `Matcher` for one working directory. It adds the
globs of every ignore file found in that directory and all of its ancestors,
in the spirit of `.gitignore`, though without negation, directory-only
patterns or `**`.

Nothing is matched by default, not even the ignore file itself, so it is
usually worth adding it as a global glob:

    m = Matcher(".globignore")
    m.add(".globignore")
    w = m.new_worker(os.getcwd())
    if w.matches("build/output.o"):
        ...

Ignore file format: one glob per line. A line starting with `#` is a comment;
put a backslash in front of the first hash for globs that begin with one.
Unescaped trailing whitespace is dropped and blank lines are skipped. A glob
without a `/` matches the basename of a path anywhere below the file's
directory. A glob with a `/` is anchored at the file's directory and matched
against the full path.

Classes negate with either `[^...]` or `[!...]`, as in POSIX shells, so
`[!a]` matches any one character except `a` rather than `!` or `a`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable

from wcmatch import glob as wcglob

from globmatcher.check import check, clean
from globmatcher.errors import (
    ConfigUnsetError,
    GlobContractError,
    MissingDirectoryError,
    PatternContainsSeparatorError,
    PatternError,
)

log = logging.getLogger(__name__)

SEPARATOR = "/"

# `*` matches dotfiles; separators, escapes and case follow POSIX on every platform.
_GLOB_FLAGS = wcglob.DOTGLOB | wcglob.FORCEUNIX

ErrorHandler = Callable[[Exception], Exception | None]


def _basename(path: str) -> str:
    stripped = path.rstrip(SEPARATOR)
    if not stripped:
        return SEPARATOR
    return stripped.rsplit(SEPARATOR, 1)[-1]


def _match(pattern: str, candidate: str) -> bool:
    """
    Match one validated glob. Basename globs only see the final path segment.

    Raises `GlobContractError` if the primitive rejects the glob, since that
    means `check()` let a bad pattern through.
    """
    if not pattern:
        return False
    if SEPARATOR not in pattern:
        candidate = _basename(candidate)
    try:
        return wcglob.globmatch(candidate, pattern, flags=_GLOB_FLAGS)
    except ValueError as e:
        raise GlobContractError(f"validated glob {pattern!r} rejected by matcher: {e}") from e


def _match_any(patterns: Iterable[str], candidate: str) -> bool:
    return any(_match(p, candidate) for p in patterns)


def _validated(globs: Iterable[str]) -> tuple[str, ...]:
    """Check a batch of basename globs, raising on the first bad one."""
    accepted: list[str] = []
    for glob in globs:
        check(glob)
        if SEPARATOR in glob:
            raise PatternContainsSeparatorError(glob)
        accepted.append(glob)
    return tuple(accepted)


def _anchor(base: str, glob: str) -> str:
    """
    Anchor a path glob at directory `base`. A leading `/` anchors there too.
    Glob characters in `base` are escaped so they only match themselves.
    """
    escaped = wcglob.escape(base, unix=True)
    return os.path.normpath(os.path.join(escaped, glob.lstrip(SEPARATOR)))


def discover_ancestor_files(directory: str, name: str) -> list[str]:
    """
    Return the candidate ignore-file paths for `directory`: `name` joined to the
    directory itself and to each of its ancestors, ending with the filesystem
    root. Nearest first. The filesystem is not touched.
    """
    paths: list[str] = []
    current = os.path.normpath(directory)
    while True:
        paths.append(os.path.join(current, name))
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return paths


class Matcher:
    """
    Global globs plus the name of the ignore file that workers look for.

    `error_handler` receives errors from loading ignore files while a worker is
    created, other than a missing file. If it returns an exception, worker
    creation raises it; if it returns `None`, the file is skipped. Without a
    handler, such errors are logged and skipped.

    The global list is an immutable tuple, and each worker keeps the tuple that
    was current when it was created. Adding globs later never affects existing
    workers, so a matcher can be shared across threads.
    """

    def __init__(self, config_name: str = "", error_handler: ErrorHandler | None = None) -> None:
        self.config_name: str = config_name
        self.error_handler: ErrorHandler | None = error_handler
        self._global: tuple[str, ...] = ()

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._global

    def add(self, *globs: str) -> None:
        """
        Add global globs. None may contain a `/`. If any glob is rejected,
        none of them are added.
        """
        self._global = self._global + _validated(globs)

    def matches(self, path: str) -> bool:
        """True if any global glob matches the basename of `path`."""
        if not path:
            return False
        return _match_any(self._global, _basename(path))

    def new_worker(self, directory: str | os.PathLike[str], discover: bool = True) -> Worker:
        """
        Create a worker for `directory`. When `discover` is set and the matcher
        has a config name, ignore files are loaded from the directory and all of
        its ancestors.
        """
        worker = Worker(
            directory,
            self._global,
            config_name=self.config_name,
            error_handler=self.error_handler,
        )
        if discover and self.config_name:
            worker.load_ancestors()
        return worker


class Worker:
    """
    Globs for one working directory: a snapshot of the matcher's global globs
    plus local globs, which may be paths if they come from ignore files.

    A worker's local list is not safe to mutate while another thread matches
    against it. Use one worker per concurrent scan.
    """

    def __init__(
        self,
        directory: str | os.PathLike[str],
        global_patterns: Iterable[str] = (),
        config_name: str = "",
        error_handler: ErrorHandler | None = None,
    ) -> None:
        directory = os.fspath(directory)
        if not directory:
            raise MissingDirectoryError()
        self._directory: str = os.path.abspath(directory)
        self._global: tuple[str, ...] = tuple(global_patterns)
        self._local: list[str] = []
        self._config_name: str = config_name
        self._error_handler: ErrorHandler | None = error_handler

    @property
    def directory(self) -> str:
        return self._directory

    @property
    def config_name(self) -> str:
        return self._config_name

    @property
    def global_patterns(self) -> tuple[str, ...]:
        return self._global

    @property
    def local_patterns(self) -> tuple[str, ...]:
        return tuple(self._local)

    def add(self, *globs: str) -> None:
        """
        Add local globs. None may contain a `/`. If any glob is rejected,
        none of them are added.
        """
        self._local.extend(_validated(globs))

    def add_file(self, path: str | os.PathLike[str]) -> None:
        """
        Load globs from an ignore file.

        On a malformed line, raises `PatternError` carrying the 1-based line
        number and `path` as given. Globs from earlier lines of the same file
        stay loaded.
        """
        source = os.fspath(path)
        abs_path = os.path.abspath(source)
        base = os.path.dirname(abs_path)

        count = 0
        with open(abs_path, encoding="utf-8") as f:
            for lineno, raw in enumerate(f, start=1):
                glob = clean(raw.removesuffix("\n"))
                if not glob:
                    continue
                try:
                    check(glob)
                except PatternError as e:
                    raise e.with_location(lineno, source) from None

                if SEPARATOR in glob:
                    glob = _anchor(base, glob)
                self._local.append(glob)
                count += 1

        log.debug("Loaded %d globs from %s", count, abs_path)

    def load_ancestors(self) -> None:
        """
        Load the ignore file from the worker's directory and from every ancestor
        directory up to the filesystem root. Missing files are skipped.
        """
        if not self._config_name:
            raise ConfigUnsetError()

        for path in discover_ancestor_files(self._directory, self._config_name):
            try:
                self.add_file(path)
            except FileNotFoundError:
                continue
            except (OSError, ValueError) as e:
                self._handle_load_error(path, e)

    def _handle_load_error(self, path: str, error: Exception) -> None:
        if self._error_handler is None:
            log.warning("Skipping ignore file %s: %s", path, error)
            return
        result = self._error_handler(error)
        if result is not None:
            raise result

    def reset(self) -> None:
        """Clear the local globs. Global globs are kept."""
        self._local.clear()

    def reload(self) -> None:
        """Clear the local globs and load the ancestor ignore files again."""
        if not self._config_name:
            raise ConfigUnsetError()
        self.reset()
        self.load_ancestors()

    def matches(self, path: str | os.PathLike[str]) -> bool:
        """
        True if any global or local glob matches `path`. Relative paths are
        taken relative to the worker's directory. An empty path never matches.
        """
        path = os.fspath(path)
        if not path:
            return False
        full = os.path.normpath(os.path.join(self._directory, path))
        return _match_any(self._global, full) or _match_any(self._local, full)

    def __repr__(self) -> str:
        return (
            f"Worker(directory={self._directory!r}, global={list(self._global)!r}, "
            f"local={self._local!r})"
        )
