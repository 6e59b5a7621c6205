"""
File acquisition — turns paths on disk into ``FileSample`` objects.

A single file must be non-empty UTF-8 text; a directory walk keeps only
supported source extensions and skips anything that fails to load.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from config import SUPPORTED_EXTENSIONS
from schemas import FileSample

# Directories to never descend into
_SKIP_DIRS = {
    ".git", "__pycache__", "node_modules", ".venv", "venv", "env",
    "dist", "build", ".eggs", ".mypy_cache", ".tox", ".pytest_cache",
    "site-packages", ".idea", ".vscode", ".next", "target",
}


def load_file(path: str | Path) -> FileSample:
    """
    Read *path* as a ``FileSample``.

    Raises ``FileNotFoundError`` if it does not exist, ``ValueError`` if it
    is empty or not valid UTF-8.
    """
    fpath = Path(path)
    if not fpath.is_file():
        raise FileNotFoundError(f"File not found: {fpath}")

    raw = fpath.read_bytes()
    if not raw:
        raise ValueError(f"File is empty: {fpath}")
    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"File is not UTF-8 text: {fpath}") from exc

    return FileSample(size_bytes=len(raw), file_name=fpath.name, content=content)


def walk_files(root: str | Path) -> List[FileSample]:
    """
    Walk *root* recursively and return a ``FileSample`` per supported
    source file, sorted by path.
    """
    repo = Path(root).resolve()
    if not repo.exists():
        raise FileNotFoundError(f"Path not found: {repo}")

    samples: List[FileSample] = []

    for dirpath, dirs, filenames in os.walk(repo):
        # Prune unwanted directories in-place
        dirs[:] = sorted(d for d in dirs if d not in _SKIP_DIRS)

        for fname in sorted(filenames):
            fpath = Path(dirpath) / fname
            if fpath.suffix.lower() not in SUPPORTED_EXTENSIONS:
                continue
            try:
                samples.append(load_file(fpath))
            except (OSError, ValueError) as exc:
                print(f"[ingestor] Skipping {fpath}: {exc}")

    return samples


def collect(path: str | Path) -> List[FileSample]:
    """One sample for a file path, every supported file for a directory."""
    p = Path(path)
    if p.is_dir():
        return walk_files(p)
    return [load_file(p)]
