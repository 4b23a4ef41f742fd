"""Classification result models."""

from __future__ import annotations

from dataclasses import dataclass, field

DIRECT = "direct"
TRANSITIVE = "transitive"

_SEVERITY_BY_MATCH_TYPE = {
    DIRECT: "high",
    TRANSITIVE: "medium",
}


def _check_match_type(match_type: str | None, *, optional: bool = False) -> None:
    if match_type is None and optional:
        return
    if match_type not in _SEVERITY_BY_MATCH_TYPE:
        raise ValueError(f"Invalid match type: {match_type}")


@dataclass(frozen=True)
class Finding:
    """A declared or locked version that resolves to a known-bad version."""

    package: str
    declared_version: str
    malicious_version: str
    match_type: str

    def __post_init__(self) -> None:
        _check_match_type(self.match_type)

    @property
    def severity(self) -> str:
        return _SEVERITY_BY_MATCH_TYPE[self.match_type]

    def to_dict(self) -> dict[str, str]:
        return {
            "package": self.package,
            "declared_version": self.declared_version,
            "malicious_version": self.malicious_version,
            "match_type": self.match_type,
            "severity": self.severity,
        }


@dataclass(frozen=True)
class AffectedEntry:
    """A package with known-bad versions, none of which the project resolves to.

    ``match_type`` and ``locked_version`` are only set when the entry comes from
    a lock file.
    """

    package: str
    declared_version: str
    malicious_versions: tuple[str, ...]
    match_type: str | None = None
    locked_version: str | None = None

    def __post_init__(self) -> None:
        _check_match_type(self.match_type, optional=True)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "package": self.package,
            "declared_version": self.declared_version,
            "malicious_versions": list(self.malicious_versions),
        }
        if self.match_type is not None:
            data["match_type"] = self.match_type
        if self.locked_version is not None:
            data["locked_version"] = self.locked_version
        return data


@dataclass
class ClassificationResult:
    """Findings for one manifest and its lock files."""

    vulnerabilities: list[Finding] = field(default_factory=list)
    affected_packages: list[AffectedEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "vulnerabilities": [finding.to_dict() for finding in self.vulnerabilities],
            "affectedPackages": [entry.to_dict() for entry in self.affected_packages],
        }
