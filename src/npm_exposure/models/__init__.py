"""Data models for known-bad versions, lock inputs and classification results."""

from __future__ import annotations

from .bad_version import BadVersionEntry, flatten, group_by_package
from .findings import DIRECT, TRANSITIVE, AffectedEntry, ClassificationResult, Finding
from .lock_file import LockFile

__all__ = [
    "AffectedEntry",
    "BadVersionEntry",
    "ClassificationResult",
    "DIRECT",
    "Finding",
    "LockFile",
    "TRANSITIVE",
    "flatten",
    "group_by_package",
]
