"""Tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path

import pytest

from globmatcher.cli import main


def _render_help(capsys: pytest.CaptureFixture[str]) -> str:
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0
    return capsys.readouterr().out


def test_help_includes_tagline_and_usage(capsys: pytest.CaptureFixture[str]) -> None:
    out = _render_help(capsys)
    assert "globmatcher: gitignore-style glob validation and cascading matching" in out
    assert "Common usage:" in out
    assert "globmatcher --check .globignore" in out


def test_no_input_is_an_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "No input specified" in capsys.readouterr().err


def test_check_reports_every_bad_line(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    ignore = tmp_path / ".globignore"
    ignore.write_text("# ok\n*.o\n[z-a]\nfine\nfoo/**/bar\n\\\n")
    assert main(["--check", str(ignore)]) == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        f"{ignore}:3:3: negative range",
        f"{ignore}:5:6: dual stars not supported",
    ]


def test_check_clean_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    ignore = tmp_path / ".globignore"
    ignore.write_text("*.o\nbuild/*\n")
    assert main(["--check", str(ignore)]) == 0
    assert capsys.readouterr().out == ""


def test_check_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--check", str(tmp_path / "nope")]) == 2
    assert "Error:" in capsys.readouterr().err


def test_match_paths(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".globignore").write_text("*.o\n")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / ".globignore").write_text("gen/*\n")

    assert main(["--no-config", "a.o", "a.c", "sub/gen/x", "gen/x"]) == 0
    assert capsys.readouterr().out.splitlines() == ["a.o", "sub/gen/x"]

    assert main(["--no-config", "a.c"]) == 1


def test_match_global_flag_and_ignore_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".custom").write_text("*.tmp\n")
    args = ["--no-config", "--ignore-file", ".custom", "--global", "*.bak", "x.tmp", "y.bak", "z"]
    assert main(args) == 0
    assert capsys.readouterr().out.splitlines() == ["x.tmp", "y.bak"]


def test_match_uses_config_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".globmatcher.toml").write_text('ignore-file = ".myignore"\nglobal = ["*.pyc"]\n')
    (tmp_path / ".myignore").write_text("*.log\n")
    assert main(["a.pyc", "b.log", "c.py"]) == 0
    assert capsys.readouterr().out.splitlines() == ["a.pyc", "b.log"]


def test_bad_global_pattern(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    assert main(["--no-config", "--global", "a/b", "x"]) == 2
    assert "glob cannot contain path separators" in capsys.readouterr().err


def test_bad_config_value(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "globmatcher.toml").write_text('global = "*.o"\n')
    assert main(["x.o"]) == 2
    assert "`global` must be a list of strings" in capsys.readouterr().err


def test_list_files(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".globignore").write_text(".globignore\n*.o\n")
    (tmp_path / "a.c").write_text("")
    (tmp_path / "a.o").write_text("")

    assert main(["--no-config", "--list-files", "."]) == 0
    assert capsys.readouterr().out.splitlines() == ["a.c"]

    assert main(["--no-config", "--list-files", "--matched", "."]) == 0
    assert sorted(capsys.readouterr().out.splitlines()) == [".globignore", "a.o"]
