"""Utilities for loading known-bad package version lists."""

from .known_bad_csv import (
    KnownBadAggregation,
    KnownBadListError,
    parse_known_bad_csv,
    split_versions,
)
from .known_bad_list import (
    load_known_bad,
    parse_known_bad_json,
    validate_document,
)

__all__ = [
    # CSV lists
    "KnownBadAggregation",
    "KnownBadListError",
    "parse_known_bad_csv",
    "split_versions",
    # JSON lists and file loading
    "load_known_bad",
    "parse_known_bad_json",
    "validate_document",
]
