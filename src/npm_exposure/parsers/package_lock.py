"""Parse npm package-lock.json to capture resolved versions."""

from __future__ import annotations

import json

_NAMESPACE = "node_modules/"


def parse(text: str) -> dict[str, str]:
    """Return mapping of package -> resolved version from lockfile text.

    Supports npm v2+ ("packages" map keyed by install path) and v1
    ("dependencies" map keyed by name). Both sections feed the same mapping.
    Malformed documents yield an empty mapping.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return {}
    if not isinstance(data, dict):
        return {}

    versions: dict[str, str] = {}

    # npm v2+ format; the shallowest install path of a name is the one resolved
    packages = data.get("packages")
    if isinstance(packages, dict):
        depths: dict[str, int] = {}
        for key, meta in packages.items():
            if not isinstance(meta, dict) or _NAMESPACE not in key:
                continue
            # "node_modules/a/node_modules/@scope/b" -> "@scope/b"
            name = key.rsplit(_NAMESPACE, 1)[1]
            version = meta.get("version")
            if not name or not isinstance(version, str):
                continue
            depth = key.count(_NAMESPACE)
            if name in depths and depths[name] <= depth:
                continue
            depths[name] = depth
            versions[name] = version

    # npm v1 format
    deps = data.get("dependencies")
    if isinstance(deps, dict):
        for name, meta in deps.items():
            if isinstance(meta, dict) and isinstance(meta.get("version"), str):
                versions[name] = meta["version"]

    return versions
