"""Manifest and lock file parsers.

Lock parsers are plain ``text -> {package: version}`` functions registered by
lock format tag (the lock file name).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog

from ..models import LockFile
from . import package_lock, pnpm_lock, yarn_lock

log = structlog.get_logger("npm_exposure.parsers")

LockParser = Callable[[str], dict[str, str]]

LOCK_PARSERS: dict[str, LockParser] = {
    "package-lock.json": package_lock.parse,
    "yarn.lock": yarn_lock.parse,
    "pnpm-lock.yaml": pnpm_lock.parse,
}


class UnknownLockFormatError(ValueError):
    """Raised when a lock format tag has no registered parser."""


def get_lock_parser(format_tag: str) -> LockParser:
    """Return the parser for ``format_tag``, or raise UnknownLockFormatError."""
    parser = LOCK_PARSERS.get(format_tag)
    if parser is None:
        known = ", ".join(sorted(LOCK_PARSERS))
        raise UnknownLockFormatError(f"Unknown lock format '{format_tag}'. Known formats: {known}")
    return parser


def extract_locked_versions(lock_files: Iterable[LockFile]) -> dict[str, str]:
    """Merge resolved versions from all lock files, later files winning per package.

    A lock file that cannot be parsed contributes nothing; it never fails the scan.
    """
    merged: dict[str, str] = {}
    for lock_file in lock_files:
        parser = get_lock_parser(lock_file.format)
        if not lock_file.text or not lock_file.text.strip():
            continue
        try:
            versions = parser(lock_file.text)
        except Exception:  # noqa: BLE001
            log.warning("lock.parse_failed", format=lock_file.format, exc_info=True)
            continue
        merged.update(versions)
    return merged


__all__ = [
    "LOCK_PARSERS",
    "LockParser",
    "UnknownLockFormatError",
    "extract_locked_versions",
    "get_lock_parser",
]
