"""
TOML-based config file loading for globmatcher.

Searches for `.globmatcher.toml`, `globmatcher.toml`, or
`pyproject.toml [tool.globmatcher]` walking up from a start directory. Config
values are merged with CLI flags: explicit CLI flags > config file > built-in
defaults.

All keys live at the top level of the file, or directly inside
`[tool.globmatcher]`; there are no sub-tables.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from globmatcher.defaults import DEFAULT_EXCLUDE_DIRS, DEFAULT_IGNORE_FILE
from globmatcher.matcher import ErrorHandler, Matcher

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = logging.getLogger(__name__)


@dataclass
class GlobmatcherConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    so callers can tell "not configured" from "explicitly set to the default".
    """

    ignore_file: str | None = None
    global_patterns: list[str] | None = None
    exclude_dirs: list[str] | None = None

    @property
    def effective_ignore_file(self) -> str:
        return self.ignore_file if self.ignore_file is not None else DEFAULT_IGNORE_FILE

    @property
    def effective_exclude_dirs(self) -> list[str]:
        if self.exclude_dirs is not None:
            return list(self.exclude_dirs)
        return list(DEFAULT_EXCLUDE_DIRS)


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = (".globmatcher.toml", "globmatcher.toml", "pyproject.toml")

# TOML key -> (field name, expected type). Only top-level keys are read.
_KEYS: dict[str, tuple[str, type]] = {
    "ignore-file": ("ignore_file", str),
    "global": ("global_patterns", list),
    "exclude-dirs": ("exclude_dirs", list),
}


def _candidates(directory: Path) -> Iterator[Path]:
    for filename in _CONFIG_FILENAMES:
        candidate = directory / filename
        if not candidate.is_file():
            continue
        if filename == "pyproject.toml" and _tool_section(candidate) is None:
            continue
        yield candidate


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.globmatcher.toml` >
    `globmatcher.toml` > `pyproject.toml` (only if it has `[tool.globmatcher]`).
    """
    directory = start_dir.resolve()
    for current in (directory, *directory.parents):
        found = next(_candidates(current), None)
        if found is not None:
            return found
    return None


def _tool_section(path: Path) -> dict[str, Any] | None:
    """The `[tool.globmatcher]` table of a pyproject file, if it parses and has one."""
    try:
        data = tomllib.loads(path.read_text())
    except (tomllib.TOMLDecodeError, OSError):
        return None
    section = data.get("tool", {}).get("globmatcher")
    return section if isinstance(section, dict) else None


def load_config(config_path: Path) -> GlobmatcherConfig:
    """
    Load a `GlobmatcherConfig` from a TOML file: a standalone
    `globmatcher.toml` / `.globmatcher.toml`, or the `[tool.globmatcher]`
    table of a `pyproject.toml`. Unknown keys and nested tables are skipped.
    Raises `ValueError` for invalid TOML or a value of the wrong type.
    """
    data: dict[str, Any] = tomllib.loads(config_path.read_text())
    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("globmatcher", {})

    log.debug("Loaded config from %s", config_path)
    return _parse_config_data(data, source=str(config_path))


def _parse_config_data(data: dict[str, Any], source: str = "") -> GlobmatcherConfig:
    config = GlobmatcherConfig()
    for key, value in data.items():
        if key not in _KEYS:
            log.debug("%s: skipping unknown config key %r", source, key)
            continue
        field_name, expected = _KEYS[key]
        if not isinstance(value, expected) or (
            expected is list and not all(isinstance(v, str) for v in value)
        ):
            kind = "a string" if expected is str else "a list of strings"
            raise ValueError(f"{source}: `{key}` must be {kind}")
        setattr(config, field_name, value)
    return config


def build_matcher(
    config: GlobmatcherConfig | None,
    error_handler: ErrorHandler | None = None,
) -> Matcher:
    """
    Create a `Matcher` for the configured ignore file, with the configured
    global globs added. Raises `PatternError` or `PatternContainsSeparatorError`
    if a configured global glob is rejected.
    """
    if config is None:
        config = GlobmatcherConfig()
    matcher = Matcher(config.effective_ignore_file, error_handler=error_handler)
    if config.global_patterns:
        matcher.add(*config.global_patterns)
    return matcher
