"""
Walk a directory tree, testing every file against the cascading globs of the
directory it lives in.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

import pathspec

from globmatcher.defaults import DEFAULT_EXCLUDE_DIRS
from globmatcher.matcher import Matcher, Worker


@dataclass(frozen=True)
class WalkEntry:
    path: Path
    matched: bool
    is_dir: bool = False


def walk(
    root: str | Path,
    matcher: Matcher,
    exclude_dirs: Sequence[str] | None = None,
) -> Iterator[WalkEntry]:
    """
    Walk `root` with `os.walk()`, creating one worker per visited directory.

    Every file is yielded with its match result. A directory matched by its
    parent's worker is yielded once, as a matched entry, and not entered.
    Directories matching `exclude_dirs` (gitignore syntax, default
    `DEFAULT_EXCLUDE_DIRS`) are pruned silently.
    """
    root = Path(root)
    exclude_spec = pathspec.PathSpec.from_lines(
        "gitignore", DEFAULT_EXCLUDE_DIRS if exclude_dirs is None else exclude_dirs
    )

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rel_to_root = current.relative_to(root)
        worker = matcher.new_worker(current)

        kept: list[str] = []
        for d in sorted(dirnames):
            if _is_dir_excluded(d, rel_to_root / d, exclude_spec):
                continue
            if worker.matches(d):
                yield WalkEntry(current / d, matched=True, is_dir=True)
                continue
            kept.append(d)
        # Prune in-place (prevents descent)
        dirnames[:] = kept

        for filename in sorted(filenames):
            yield WalkEntry(current / filename, matched=worker.matches(filename))


def _is_dir_excluded(dirname: str, rel_path: Path, exclude_spec: pathspec.PathSpec) -> bool:
    if exclude_spec.match_file(dirname + "/"):
        return True
    return exclude_spec.match_file(rel_path.as_posix() + "/")


def matched_files(
    root: str | Path, matcher: Matcher, exclude_dirs: Sequence[str] | None = None
) -> list[Path]:
    """Matched paths under `root`, including directories that were not entered."""
    return [entry.path for entry in walk(root, matcher, exclude_dirs) if entry.matched]


def unmatched_files(
    root: str | Path, matcher: Matcher, exclude_dirs: Sequence[str] | None = None
) -> list[Path]:
    """Files under `root` that no glob matches."""
    return [entry.path for entry in walk(root, matcher, exclude_dirs) if not entry.matched]


def worker_for(path: str | Path, matcher: Matcher) -> Worker:
    """A worker for the directory containing `path`."""
    return matcher.new_worker(Path(path).absolute().parent)
