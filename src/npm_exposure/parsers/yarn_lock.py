"""Parse yarn.lock to capture resolved versions."""

from __future__ import annotations

import re

# First descriptor of a block header: '"@scope/name@^1.0.0", name@...:' -> '@scope/name'
_HEADER_RE = re.compile(r'^"?(@?[^@,"\s]+)@')
# Classic: '  version "1.2.3"'; Berry: '  version: 1.2.3'
_VERSION_RE = re.compile(r'^\s+version:?\s+"?([^"\s]+)"?\s*$')


def parse(text: str) -> dict[str, str]:
    """Return mapping of package -> resolved version from yarn lock text."""
    versions: dict[str, str] = {}

    current_name: str | None = None
    for raw in text.splitlines():
        line = raw.rstrip()
        if not line or line.lstrip().startswith("#"):
            continue

        if not line[0].isspace():
            match = _HEADER_RE.match(line)
            current_name = match.group(1) if match else None
            continue

        if current_name is None:
            continue
        match = _VERSION_RE.match(line)
        if match:
            versions[current_name] = match.group(1)
            current_name = None

    return versions
