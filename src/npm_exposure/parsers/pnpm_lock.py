"""Parse pnpm-lock.yaml to capture resolved versions."""

from __future__ import annotations

import re

# Keys look like "/name@1.2.3:", "/@scope/name@1.2.3(peer@2.0.0):" or, from
# lockfile v9 on, "'@scope/name@1.2.3':" without the leading slash.
_KEY_RE = re.compile(
    r"""^\s+['"]?/?((?:@[^@/\s'"]+/)?[^@/\s'"]+)@(\d[^(:\s'"]*)(?:\([^:]*\))*['"]?:\s*$"""
)


def parse(text: str) -> dict[str, str]:
    """Return mapping of package -> resolved version from pnpm lock text."""
    versions: dict[str, str] = {}
    for line in text.splitlines():
        match = _KEY_RE.match(line)
        if match:
            name, version = match.groups()
            versions[name] = version
    return versions
