"""Tests for walking a tree with per-directory workers."""

from __future__ import annotations

from pathlib import Path

from globmatcher.matcher import Matcher
from globmatcher.walker import WalkEntry, matched_files, unmatched_files, walk, worker_for

IGNORE = ".globignore"


def _make_tree(root: Path) -> None:
    (root / "src" / "pkg").mkdir(parents=True)
    (root / "build").mkdir()
    (root / ".git").mkdir()
    (root / "docs").mkdir()

    (root / IGNORE).write_text("*.o\nbuild\n")
    (root / "src" / IGNORE).write_text("pkg/*.gen\n")
    (root / "docs" / IGNORE).write_text("draft*\n")

    (root / "README.md").write_text("# Root")
    (root / "main.o").write_text("")
    (root / "build" / "out.bin").write_text("")
    (root / ".git" / "HEAD").write_text("ref")
    (root / "src" / "main.c").write_text("")
    (root / "src" / "main.o").write_text("")
    (root / "src" / "pkg" / "a.gen").write_text("")
    (root / "src" / "pkg" / "a.c").write_text("")
    (root / "src" / "b.gen").write_text("")
    (root / "docs" / "draft-1.md").write_text("")
    (root / "docs" / "final.md").write_text("")


def _matcher() -> Matcher:
    m = Matcher(IGNORE)
    m.add(IGNORE)
    return m


def test_walk_reports_matches(tmp_path: Path):
    _make_tree(tmp_path)
    entries = {e.path.relative_to(tmp_path).as_posix(): e for e in walk(tmp_path, _matcher())}

    assert entries["main.o"].matched
    assert entries["src/main.o"].matched
    assert entries["src/pkg/a.gen"].matched
    assert entries["docs/draft-1.md"].matched
    assert entries[IGNORE].matched

    assert not entries["README.md"].matched
    assert not entries["src/main.c"].matched
    assert not entries["src/pkg/a.c"].matched
    assert not entries["src/b.gen"].matched
    assert not entries["docs/final.md"].matched


def test_walk_does_not_enter_matched_directories(tmp_path: Path):
    _make_tree(tmp_path)
    entries = list(walk(tmp_path, _matcher()))
    build = [e for e in entries if e.path.name == "build"]
    assert build == [WalkEntry(tmp_path / "build", matched=True, is_dir=True)]
    assert not any(e.path.name == "out.bin" for e in entries)


def test_walk_prunes_default_excludes(tmp_path: Path):
    _make_tree(tmp_path)
    paths = [e.path for e in walk(tmp_path, _matcher())]
    assert tmp_path / ".git" / "HEAD" not in paths
    assert tmp_path / ".git" not in paths


def test_walk_custom_excludes(tmp_path: Path):
    _make_tree(tmp_path)
    paths = [e.path for e in walk(tmp_path, _matcher(), exclude_dirs=["docs/"])]
    assert tmp_path / ".git" / "HEAD" in paths
    assert not any(p.parent.name == "docs" for p in paths)


def test_walk_sibling_globs_stay_in_their_subtree(tmp_path: Path):
    _make_tree(tmp_path)
    (tmp_path / "src" / "draft.c").write_text("")
    unmatched = unmatched_files(tmp_path, _matcher())
    assert tmp_path / "src" / "draft.c" in unmatched


def test_matched_and_unmatched_files(tmp_path: Path):
    _make_tree(tmp_path)
    matched = matched_files(tmp_path, _matcher())
    unmatched = unmatched_files(tmp_path, _matcher())
    assert tmp_path / "build" in matched
    assert tmp_path / "README.md" in unmatched
    assert not set(matched) & set(unmatched)


def test_worker_for_uses_parent_directory(tmp_path: Path):
    _make_tree(tmp_path)
    worker = worker_for(tmp_path / "src" / "pkg" / "a.gen", _matcher())
    assert worker.directory == str(tmp_path / "src" / "pkg")
    assert worker.matches("a.gen")
