"""Load and validate known-bad package lists from local files."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
from jsonschema import Draft202012Validator

from ..models import BadVersionEntry, flatten
from .known_bad_csv import KnownBadListError, parse_known_bad_csv

log = structlog.get_logger("npm_exposure.ingestion")

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "known-bad-list.schema.json"


def _load_schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def validate_document(document: Any) -> None:
    """Raise KnownBadListError listing every schema violation in ``document``."""
    validator = Draft202012Validator(_load_schema())
    errors = sorted(validator.iter_errors(document), key=lambda e: list(e.path))
    if errors:
        raise KnownBadListError("Known-bad list failed validation:\n" + _format_errors(errors))


def _coerce_document(document: Any) -> list[BadVersionEntry]:
    """Normalise both accepted shapes into flat (package, version) entries."""
    if isinstance(document, list):
        return [BadVersionEntry(package=item["package"], version=item["version"]) for item in document]
    return flatten({entry["name"]: entry["versions"] for entry in document["packages"]})


def parse_known_bad_json(text: str) -> list[BadVersionEntry]:
    """Parse a JSON known-bad list, either flat pairs or a package snapshot."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise KnownBadListError(f"Failed to read JSON: {exc}") from exc
    validate_document(document)
    return _coerce_document(document)


def load_known_bad(path: Path) -> list[BadVersionEntry]:
    """Load a known-bad list from ``path`` (``.csv`` or JSON)."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise KnownBadListError(f"Failed to read known-bad list {path}: {exc}") from exc

    if path.suffix.lower() == ".csv":
        aggregation = parse_known_bad_csv(text)
        for reason in aggregation.skipped_records:
            log.warning("known_bad.row_skipped", path=str(path), reason=reason)
        entries = aggregation.entries
    else:
        entries = parse_known_bad_json(text)

    log.info("known_bad.loaded", path=str(path), entries=len(entries))
    return entries
