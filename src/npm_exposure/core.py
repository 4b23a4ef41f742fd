"""Core classification entrypoints.

``classify`` is a pure function over in-memory texts; ``scan_directory`` adds the
local filesystem plumbing around it for the CLI.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from .discovery import EXCLUDES, discover_manifests, find_lock_files, find_orphaned_lock_files
from .models import (
    DIRECT,
    TRANSITIVE,
    AffectedEntry,
    BadVersionEntry,
    ClassificationResult,
    Finding,
    LockFile,
    group_by_package,
)
from .parsers import LOCK_PARSERS, extract_locked_versions
from .parsers.package_json import ManifestParseError
from .parsers.package_json import parse as parse_manifest
from .parsers.semver import InvalidRange, evaluate

log = structlog.get_logger("npm_exposure.core")

DEFAULT_LOCK_NAMES: tuple[str, ...] = tuple(LOCK_PARSERS)


def matches_version(declared: str, malicious_version: str) -> bool:
    """Return whether the declared range admits ``malicious_version``.

    A declaration the range grammar does not recognise (dist-tags, URLs, aliases)
    only matches when it is literally the same string.
    """
    try:
        return evaluate(malicious_version, declared)
    except InvalidRange:
        return declared == malicious_version


def classify(
    manifest_text: str,
    lock_files: Iterable[LockFile] | None = None,
    known_bad: Iterable[BadVersionEntry] = (),
) -> ClassificationResult:
    """Classify a manifest's dependencies against the known-bad versions.

    Params:
        manifest_text: package.json contents
        lock_files: optional lock file texts, merged in order (later wins)
        known_bad: flat (package, version) pairs

    Returns: vulnerabilities and affected packages, each in first-seen order,
        with no package present in both.

    Raises:
        ManifestParseError: If the manifest is not a JSON object.
    """
    declared = parse_manifest(manifest_text).declared()
    bad_versions = group_by_package(known_bad)

    vulnerabilities: dict[tuple[str, str], Finding] = {}
    affected: dict[str, AffectedEntry] = {}
    vulnerable_names: set[str] = set()

    def record(finding: Finding) -> None:
        key = (finding.package, finding.malicious_version)
        if key not in vulnerabilities:
            vulnerabilities[key] = finding
        vulnerable_names.add(finding.package)
        affected.pop(finding.package, None)

    for name, expr in declared.items():
        versions = bad_versions.get(name)
        if not versions:
            continue
        for version in versions:
            if matches_version(expr, version):
                record(Finding(name, expr, version, DIRECT))
        if name not in vulnerable_names:
            affected[name] = AffectedEntry(name, expr, tuple(versions))

    if lock_files:
        locked = extract_locked_versions(lock_files)
        for name, locked_version in locked.items():
            versions = bad_versions.get(name)
            if not versions:
                continue
            match_type = DIRECT if name in declared else TRANSITIVE
            declared_version = declared.get(name, locked_version)
            if locked_version in versions:
                record(Finding(name, declared_version, locked_version, match_type))
            elif name not in vulnerable_names:
                affected[name] = AffectedEntry(
                    name,
                    declared_version,
                    tuple(versions),
                    match_type=match_type,
                    locked_version=locked_version,
                )

    return ClassificationResult(
        vulnerabilities=list(vulnerabilities.values()),
        affected_packages=list(affected.values()),
    )


@dataclass
class ProjectScan:
    """Outcome of classifying one package.json (and its lock files)."""

    path: str
    result: ClassificationResult | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"path": self.path}
        data.update((self.result if self.result is not None else ClassificationResult()).to_dict())
        if self.error is not None:
            data["error"] = self.error
        return data


def _read_lock_files(manifest: Path, lock_names: Sequence[str], root: Path) -> list[LockFile]:
    """Read the lock files beside ``manifest``; unreadable ones are skipped."""
    lock_files: list[LockFile] = []
    for path in find_lock_files(manifest, lock_names):
        try:
            lock_files.append(LockFile.from_path(path))
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("scan.lock_unreadable", path=str(path.relative_to(root)), error=str(exc))
    return lock_files


def scan_directory(
    root: Path,
    known_bad: Sequence[BadVersionEntry],
    lock_names: Sequence[str] = DEFAULT_LOCK_NAMES,
    excludes: Iterable[str] = EXCLUDES,
) -> list[ProjectScan]:
    """Classify every package.json under ``root`` with the lock files beside it.

    A manifest that cannot be read or parsed is reported on its ProjectScan and
    does not stop the other projects. An unreadable lock file is logged and
    left out.
    """
    root = root.resolve()
    excludes = frozenset(excludes)

    for orphan in find_orphaned_lock_files(root, excludes):
        log.warning("scan.orphaned_lock_file", path=str(orphan.relative_to(root)))

    scans: list[ProjectScan] = []
    for manifest in discover_manifests(root, excludes):
        rel = str(manifest.relative_to(root))
        lock_files = _read_lock_files(manifest, lock_names, root)
        try:
            result = classify(manifest.read_text(encoding="utf-8"), lock_files, known_bad)
        except (OSError, UnicodeDecodeError, ManifestParseError) as exc:
            log.warning("scan.project_failed", path=rel, error=str(exc))
            scans.append(ProjectScan(path=rel, error=str(exc)))
            continue

        log.info(
            "scan.project_done",
            path=rel,
            lock_files=[lock.format for lock in lock_files],
            vulnerabilities=len(result.vulnerabilities),
            affected=len(result.affected_packages),
        )
        scans.append(ProjectScan(path=rel, result=result))

    return scans
