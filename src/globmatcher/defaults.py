"""
Defaults for ignore-file discovery and tree walking.

Exclude patterns use gitignore syntax. Directory patterns end with `/`.
"""

from __future__ import annotations

DEFAULT_IGNORE_FILE = ".globignore"

# Directories the walker never enters. These are pruned before any worker is
# created for them, so ignore files inside them are never read.
DEFAULT_EXCLUDE_DIRS: list[str] = [
    # Version control
    ".git/",
    ".hg/",
    ".svn/",
    ".bzr/",
    "_darcs/",
    # Python
    ".venv/",
    "__pycache__/",
    ".tox/",
    ".nox/",
    ".mypy_cache/",
    ".ruff_cache/",
    ".pytest_cache/",
    # JavaScript/Node
    "node_modules/",
]
