"""Semver parsing and npm range matching.

Supported expressions:
- exact versions (e.g., "1.2.3") and "=" / ">=" / ">" / "<=" / "<" comparators
- caret ranges ^x.y.z (zero-major ranges pin the minor, ^0.0.z pins the patch)
- tilde ranges ~x.y.z → same major.minor, patch >= z
- wildcards "*", "x", "1.x", "1.x.x", "1.2.x" and bare partials "1", "1.2"
- hyphen ranges "1.0.0 - 2.0.0"
- comparator sets split by spaces, e.g., ">=1.0.0 <2.0.0" (all must hold)

Prerelease precedence is simplified: any prerelease sorts before the release of
the same major.minor.patch, and two prereleases of the same triple compare equal.
"||" alternatives are not supported inside a single range.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from collections.abc import Callable

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-(.+))?$")
_MAJOR_WILDCARD_RE = re.compile(r"^(\d+)(?:\.[xX*](?:\.[xX*])?)?$")
_MINOR_WILDCARD_RE = re.compile(r"^(\d+)\.(\d+)(?:\.[xX*])?$")
_HYPHEN_RE = re.compile(r"^(\S+)\s+-\s+(\S+)$")
_LOOSE_OPERATOR_RE = re.compile(r"(>=|<=|>|<|=|\^|~)\s+")
_COMPARATORS = (">=", "<=", ">", "<", "=")


class InvalidVersion(ValueError):
    """Raised when a string is not a strict major.minor.patch[-pre] version."""


class InvalidRange(ValueError):
    """Raised when a range expression is not recognised by the grammar."""


@dataclass(frozen=True)
class ParsedVersion:
    major: int
    minor: int
    patch: int
    prerelease: str | None = None

    @classmethod
    def parse(cls, text: str) -> ParsedVersion:
        match = _VERSION_RE.match(text)
        if match is None:
            raise InvalidVersion(f"invalid version '{text}'")
        major, minor, patch, prerelease = match.groups()
        return cls(int(major), int(minor), int(patch), prerelease)

    @property
    def release(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-{self.prerelease}" if self.prerelease is not None else base


def compare(a: ParsedVersion, b: ParsedVersion) -> int:
    """Return -1, 0 or 1 comparing ``a`` with ``b``."""
    if a.release != b.release:
        return -1 if a.release < b.release else 1
    a_pre = a.prerelease is not None
    b_pre = b.prerelease is not None
    if a_pre == b_pre:
        return 0
    return -1 if a_pre else 1


def _parse_range_version(text: str) -> ParsedVersion:
    try:
        return ParsedVersion.parse(text)
    except InvalidVersion as exc:
        raise InvalidRange(str(exc)) from exc


# ---- rule handlers -----------------------------------------------------------------
# Each handler receives the candidate version (None when it does not parse) and the
# normalised range text, and raises InvalidRange when the range itself is malformed.

_Handler = Callable[[ParsedVersion | None, str], bool]


def _match_any(v: ParsedVersion | None, expr: str) -> bool:
    return v is not None and v.prerelease is None


def _match_major(v: ParsedVersion | None, expr: str) -> bool:
    major = int(_MAJOR_WILDCARD_RE.match(expr).group(1))
    return v is not None and v.prerelease is None and v.major == major


def _match_minor(v: ParsedVersion | None, expr: str) -> bool:
    match = _MINOR_WILDCARD_RE.match(expr)
    major, minor = int(match.group(1)), int(match.group(2))
    return v is not None and v.prerelease is None and (v.major, v.minor) == (major, minor)


def _match_caret(v: ParsedVersion | None, expr: str) -> bool:
    base = _parse_range_version(expr[1:].strip())
    if v is None or v.prerelease is not None:
        return False
    if base.major == 0 and base.minor == 0:
        return v.release == base.release
    if base.major == 0:
        return v.major == 0 and v.minor == base.minor and v.patch >= base.patch
    return v.major == base.major and compare(v, base) >= 0


def _match_tilde(v: ParsedVersion | None, expr: str) -> bool:
    base = _parse_range_version(expr[1:].strip())
    if v is None or v.prerelease is not None:
        return False
    return v.major == base.major and v.minor == base.minor and v.patch >= base.patch


def _match_hyphen(v: ParsedVersion | None, expr: str) -> bool:
    low, high = _HYPHEN_RE.match(expr).groups()
    return _match_comparator(v, f">={low}") and _match_comparator(v, f"<={high}")


def _match_conjunction(v: ParsedVersion | None, expr: str) -> bool:
    # All clauses are evaluated: a malformed clause raises even after a miss.
    results = [_dispatch(v, clause, nested=True) for clause in expr.split()]
    return all(results)


def _match_comparator(v: ParsedVersion | None, expr: str) -> bool:
    for op in _COMPARATORS:
        if expr.startswith(op):
            base = _parse_range_version(expr[len(op):])
            break
    else:
        op = "="
        base = _parse_range_version(expr)

    if v is None:
        return False
    if op == "=":
        return v == base

    order = compare(v, base)
    if op == ">=":
        return order >= 0
    if op == ">":
        return order > 0
    if op == "<=":
        return order <= 0
    return order < 0


def _has_space(expr: str) -> bool:
    return any(ch.isspace() for ch in expr)


# Ordered (predicate, handler) pairs; the first predicate that accepts the range wins.
# Caret and tilde only claim single-clause ranges; "^5.0.0 <5.12.0" is a conjunction.
_RULES: list[tuple[Callable[[str], bool], _Handler]] = [
    (lambda e: e in ("", "*", "x", "X"), _match_any),
    (lambda e: _MAJOR_WILDCARD_RE.match(e) is not None, _match_major),
    (lambda e: _MINOR_WILDCARD_RE.match(e) is not None, _match_minor),
    (lambda e: e.startswith("^") and not _has_space(e), _match_caret),
    (lambda e: e.startswith("~") and not _has_space(e), _match_tilde),
    (lambda e: _HYPHEN_RE.match(e) is not None, _match_hyphen),
    (_has_space, _match_conjunction),
    (lambda e: True, _match_comparator),
]

_CLAUSE_RULES = [rule for rule in _RULES if rule[1] not in (_match_hyphen, _match_conjunction)]


def _normalise(expr: str) -> str:
    return _LOOSE_OPERATOR_RE.sub(r"\1", expr.strip())


@lru_cache(maxsize=1024)
def _select(expr: str, nested: bool) -> _Handler:
    rules = _CLAUSE_RULES if nested else _RULES
    # The last rule accepts everything, so a handler is always found.
    return next(handler for predicate, handler in rules if predicate(expr))


def _dispatch(v: ParsedVersion | None, expr: str, nested: bool = False) -> bool:
    return _select(expr, nested)(v, expr)


def _try_parse(version: str) -> ParsedVersion | None:
    try:
        return ParsedVersion.parse(version.strip())
    except InvalidVersion:
        return None


def evaluate(version: str, expr: str) -> bool:
    """Return whether ``version`` satisfies ``expr``.

    Raises:
        InvalidRange: If ``expr`` is not a recognised range expression.
    """
    return _dispatch(_try_parse(version), _normalise(expr))


def satisfies(version: str, expr: str) -> bool:
    """Like :func:`evaluate`, but an unrecognised range simply does not match."""
    try:
        return evaluate(version, expr)
    except InvalidRange:
        return False
