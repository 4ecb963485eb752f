from __future__ import annotations

from pathlib import Path
from typing import Iterable

DEFAULT_IGNORED_DIRS = {
    ".git",
    ".venv",
    "venv",
    "__pycache__",
    "node_modules",
    ".mypy_cache",
    ".ruff_cache",
    ".pytest_cache",
}

# JSON files that commonly sit next to descriptors but never are one.
NON_DESCRIPTOR_FILES = {
    "package.json",
    "package-lock.json",
    "tsconfig.json",
    "composer.json",
    "launch.json",
    "settings.json",
}


def should_ignore_dir(dir_path: Path, extra: Iterable[str] = ()) -> bool:
    return dir_path.name in DEFAULT_IGNORED_DIRS or dir_path.name in set(extra)


def is_descriptor_candidate(file_path: Path) -> bool:
    return file_path.suffix == ".json" and file_path.name not in NON_DESCRIPTOR_FILES
