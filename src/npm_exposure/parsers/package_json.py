"""Parse package.json into a read-only view of its dependency declarations."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from collections.abc import Mapping
from types import MappingProxyType

_PRODUCTION_SECTIONS = ("dependencies", "optionalDependencies")
_DEVELOPMENT_SECTIONS = ("devDependencies", "peerDependencies")


class ManifestParseError(ValueError):
    """Raised when package.json text is not a JSON object."""


@dataclass(frozen=True)
class ManifestView:
    """The two dependency groupings the classifier needs, nothing else."""

    dependencies: Mapping[str, str] = field(default_factory=dict)
    dev_dependencies: Mapping[str, str] = field(default_factory=dict)

    def declared(self) -> dict[str, str]:
        """Return every declared (package, range), production first.

        The first declaration of a name wins.
        """
        merged = dict(self.dependencies)
        for name, expr in self.dev_dependencies.items():
            merged.setdefault(name, expr)
        return merged


def _collect(data: dict, sections: tuple[str, ...]) -> Mapping[str, str]:
    group: dict[str, str] = {}
    for section in sections:
        deps = data.get(section)
        if not isinstance(deps, dict):
            continue
        for name, version in deps.items():
            group.setdefault(name, str(version))
    return MappingProxyType(group)


def parse(text: str) -> ManifestView:
    """Return the dependency view of package.json ``text``.

    Production: dependencies, optionalDependencies.
    Development: devDependencies, peerDependencies.

    Raises:
        ManifestParseError: If ``text`` is not valid JSON or not a JSON object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(f"Failed to parse package.json: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestParseError("Failed to parse package.json: top-level value must be an object")

    return ManifestView(
        dependencies=_collect(data, _PRODUCTION_SECTIONS),
        dev_dependencies=_collect(data, _DEVELOPMENT_SECTIONS),
    )
