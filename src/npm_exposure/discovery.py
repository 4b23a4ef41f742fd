"""Project and lock file discovery utilities."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .parsers import LOCK_PARSERS

MANIFEST_NAME = "package.json"
EXCLUDES = frozenset({"node_modules", ".git", ".venv"})


def _walk(root: Path, names: Iterable[str], excludes: Iterable[str]) -> list[Path]:
    targets = set(names)
    skipped = set(excludes)
    found: list[Path] = []

    for path in root.rglob("*"):
        if path.name not in targets or not path.is_file():
            continue
        if skipped.intersection(path.relative_to(root).parts):
            continue
        found.append(path)

    return sorted(found)


def discover_manifests(root: Path, excludes: Iterable[str] = EXCLUDES) -> list[Path]:
    """Find package.json files recursively under root (excluding vendor dirs)."""
    return _walk(root.resolve(), [MANIFEST_NAME], excludes)


def find_lock_files(manifest: Path, lock_names: Iterable[str]) -> list[Path]:
    """Return the lock files beside ``manifest``, in ``lock_names`` order."""
    return [manifest.parent / name for name in lock_names if (manifest.parent / name).is_file()]


def find_orphaned_lock_files(root: Path, excludes: Iterable[str] = EXCLUDES) -> list[Path]:
    """Return lock files whose directory has no package.json to scan them against."""
    locks = _walk(root.resolve(), LOCK_PARSERS.keys(), excludes)
    return [lock for lock in locks if not (lock.parent / MANIFEST_NAME).is_file()]
