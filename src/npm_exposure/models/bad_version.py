"""Known-bad package version model."""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Iterable, Mapping


@dataclass(frozen=True)
class BadVersionEntry:
    """One exact known-bad version of a package."""

    package: str
    version: str

    def __post_init__(self) -> None:
        if not self.package:
            raise ValueError("Package name must be non-empty")
        if not self.version:
            raise ValueError("Version must be non-empty")

    def to_dict(self) -> dict[str, str]:
        return {
            "package": self.package,
            "version": self.version,
        }

    @classmethod
    def expand(cls, package: str, versions: Iterable[str]) -> list[BadVersionEntry]:
        """Return one entry per version of ``package``."""
        return [cls(package=package, version=version) for version in versions]


def group_by_package(entries: Iterable[BadVersionEntry]) -> dict[str, list[str]]:
    """Return package -> known-bad versions, in first-seen order without repeats."""
    grouped: dict[str, list[str]] = {}
    for entry in entries:
        versions = grouped.setdefault(entry.package, [])
        if entry.version not in versions:
            versions.append(entry.version)
    return grouped


def flatten(mapping: Mapping[str, Iterable[str]]) -> list[BadVersionEntry]:
    """Expand a package -> versions mapping into flat entries."""
    entries: list[BadVersionEntry] = []
    for package, versions in mapping.items():
        entries.extend(BadVersionEntry.expand(package, versions))
    return entries
