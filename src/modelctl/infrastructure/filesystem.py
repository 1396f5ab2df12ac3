"""Filesystem operations for model trees.

INVARIANT: Files are truth. Every run re-reads the tree; nothing is cached
between runs.

All reads go through :func:`read_model_file` so the cancel signal is
checked before each one.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from pathlib import Path

from modelctl.domain.errors import ValidationCancelled


def check_cancelled(cancel: threading.Event | None) -> None:
    """Raise :class:`ValidationCancelled` if *cancel* has been set."""
    if cancel is not None and cancel.is_set():
        raise ValidationCancelled("validation cancelled")


def read_model_file(path: Path, *, cancel: threading.Event | None = None) -> str:
    """Read a model file as UTF-8 text.

    A leading BOM is stripped. ``OSError`` and ``UnicodeDecodeError``
    propagate to the caller, which records them as diagnostics.
    """
    check_cancelled(cancel)
    return path.read_text(encoding="utf-8-sig")


def is_skipped(path: Path, root: Path, skip_dirs: Iterable[str]) -> bool:
    """True when any directory between *root* and *path* is a skipped name."""
    skipped = set(skip_dirs)
    try:
        parts = path.relative_to(root).parts[:-1]
    except ValueError:
        parts = path.parts[:-1]
    return any(part in skipped for part in parts)


def find_model_files(
    root: Path,
    *,
    extensions: Iterable[str],
    skip_dirs: Iterable[str] = (),
) -> list[Path]:
    """Discover model files under *root*, sorted by path.

    Matching on *extensions* is case-insensitive. Directories named in
    *skip_dirs* are pruned at any depth below *root*.
    """
    suffixes = {ext.lower() for ext in extensions}
    skipped = list(skip_dirs)
    results: list[Path] = []
    for path in root.rglob("*"):
        if not path.is_file():
            continue
        if path.suffix.lower() not in suffixes:
            continue
        if is_skipped(path, root, skipped):
            continue
        results.append(path)
    return sorted(results)


def list_subdirectories(directory: Path) -> list[Path]:
    """Immediate child directories of *directory*, sorted."""
    if not directory.is_dir():
        return []
    return sorted(child for child in directory.iterdir() if child.is_dir())
