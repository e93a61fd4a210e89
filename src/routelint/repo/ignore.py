from __future__ import annotations

from pathlib import Path
from typing import Iterable

DEFAULT_IGNORES = {
    ".git",
    ".venv",
    "venv",
    "__pycache__",
    "node_modules",
    "dist",
    "build",
    ".mypy_cache",
    ".ruff_cache",
    ".pytest_cache",
    ".tox",
}


def should_ignore_dir(dir_path: Path, extra: Iterable[str] = ()) -> bool:
    return dir_path.name in DEFAULT_IGNORES or dir_path.name in set(extra)
