"""Known-bad CSV ingestion (Wiz Research IOC layout).

Rows look like ``Package,Version`` where Version is ``= 1.2.3`` or
``= 1.0.0 || = 1.0.1``; every alternative becomes its own entry.
"""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass
from collections.abc import Iterable

from ..models import BadVersionEntry

_EQUALS_MARKER = re.compile(r"^=\s*")


class KnownBadListError(ValueError):
    """Raised when a known-bad list cannot be loaded or validated."""


@dataclass(slots=True)
class KnownBadAggregation:
    """Flat known-bad entries plus bookkeeping about the source rows."""

    entries: list[BadVersionEntry]
    total_records: int
    skipped_records: list[str]

    @property
    def package_count(self) -> int:
        return len({entry.package for entry in self.entries})


def split_versions(raw: str) -> list[str]:
    """Split a ``||`` alternation into bare versions, dropping ``=`` markers."""
    versions: list[str] = []
    for candidate in raw.split("||"):
        cleaned = _EQUALS_MARKER.sub("", candidate.strip())
        if cleaned:
            versions.append(cleaned)
    return versions


def _iter_rows(text: str) -> Iterable[dict[str, str]]:
    reader = csv.DictReader(io.StringIO(text), skipinitialspace=True)
    if reader.fieldnames is None:
        return
    headers = {(name or "").strip() for name in reader.fieldnames}
    if not {"Package", "Version"}.issubset(headers):
        raise KnownBadListError("Known-bad CSV missing required headers: Package, Version")
    for row in reader:
        yield {(key or "").strip(): value for key, value in row.items()}


def parse_known_bad_csv(text: str) -> KnownBadAggregation:
    """Parse CSV text into flat known-bad entries, in row order."""
    entries: list[BadVersionEntry] = []
    skipped: list[str] = []
    total = 0

    for index, row in enumerate(_iter_rows(text), start=2):
        total += 1
        name = (row.get("Package") or "").strip()
        version_field = (row.get("Version") or "").strip()

        if not name or not version_field:
            skipped.append(f"row {index}: missing package or version")
            continue

        versions = split_versions(version_field)
        if not versions:
            skipped.append(f"row {index}: no versions after normalization")
            continue

        entries.extend(BadVersionEntry.expand(name, versions))

    return KnownBadAggregation(entries=entries, total_records=total, skipped_records=skipped)
