from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from restsynth.repo.ignore import is_descriptor_candidate, should_ignore_dir


def scan_descriptor_files(
    path: Path,
    max_files: int | None = None,
    exclude_dirs: Iterable[str] = (),
) -> list[str]:
    """
    Return absolute paths (as strings) of descriptor files under ``path``.

    A file argument is returned as-is; a directory is walked for JSON
    descriptors with ignored directories pruned. Sorted for deterministic
    output.
    """
    if path.is_file():
        return [str(path.resolve())]

    exclude = tuple(exclude_dirs)
    out: list[str] = []
    for root, dirs, files in os.walk(path):
        root_p = Path(root)

        # prune ignored dirs
        dirs[:] = sorted(d for d in dirs if not should_ignore_dir(root_p / d, exclude))

        for f in sorted(files):
            if is_descriptor_candidate(root_p / f):
                out.append(str((root_p / f).resolve()))
                if max_files is not None and len(out) >= max_files:
                    return out
    return out
