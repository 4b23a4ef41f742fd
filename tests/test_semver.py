"""Tests for version parsing, comparison and range matching."""

from __future__ import annotations

import pytest

from npm_exposure.parsers.semver import (
    InvalidRange,
    InvalidVersion,
    ParsedVersion,
    compare,
    evaluate,
    satisfies,
)


# ── ParsedVersion ────────────────────────────────────────────────────────


class TestParsedVersion:
    def test_parse_release(self):
        v = ParsedVersion.parse("5.11.3")
        assert (v.major, v.minor, v.patch, v.prerelease) == (5, 11, 3, None)

    def test_parse_prerelease_keeps_whole_suffix(self):
        v = ParsedVersion.parse("1.0.0-beta.2-rc")
        assert v.prerelease == "beta.2-rc"
        assert str(v) == "1.0.0-beta.2-rc"

    def test_large_components_do_not_wrap(self):
        v = ParsedVersion.parse("18446744073709551617.0.0")
        assert v.major == 18446744073709551617

    @pytest.mark.parametrize("text", ["v1.2.3", "1.2", "1", "1.2.3.4", "1.2.3-", "latest", "", "1.2.x"])
    def test_rejects_non_versions(self, text):
        with pytest.raises(InvalidVersion):
            ParsedVersion.parse(text)

    def test_equality_compares_prerelease_text(self):
        assert ParsedVersion.parse("1.0.0-alpha") == ParsedVersion.parse("1.0.0-alpha")
        assert ParsedVersion.parse("1.0.0-alpha") != ParsedVersion.parse("1.0.0-beta")


# ── compare ──────────────────────────────────────────────────────────────


class TestCompare:
    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("1.0.0", "2.0.0", -1),
            ("1.2.0", "1.1.9", 1),
            ("1.1.10", "1.1.9", 1),
            ("1.0.0-alpha", "1.0.0", -1),
            ("1.0.0", "1.0.0-alpha", 1),
            ("1.0.1-alpha", "1.0.0", 1),
        ],
    )
    def test_ordering(self, a, b, expected):
        assert compare(ParsedVersion.parse(a), ParsedVersion.parse(b)) == expected

    def test_prereleases_of_same_release_compare_equal(self):
        alpha = ParsedVersion.parse("1.0.0-alpha")
        beta = ParsedVersion.parse("1.0.0-beta")
        assert compare(alpha, beta) == 0
        assert compare(beta, alpha) == 0

    @pytest.mark.parametrize("text", ["0.0.0", "5.11.3", "10.20.30", "1.0.0-rc.1"])
    def test_self_compare_is_zero(self, text):
        v = ParsedVersion.parse(text)
        assert compare(v, v) == 0


# ── satisfies ────────────────────────────────────────────────────────────


class TestSatisfies:
    @pytest.mark.parametrize("text", ["0.0.0", "5.11.3", "10.20.30", "0.2.5"])
    def test_exact_self_match(self, text):
        assert satisfies(text, text) is True

    @pytest.mark.parametrize(
        "expr, expected",
        [
            ("^5.0.0", True),
            ("^4.0.0", False),
            ("^5.12.0", False),
            ("~5.11.0", True),
            ("~5.10.0", False),
            (">=5.0.0 <6.0.0", True),
            (">=5.0.0 <5.11.0", False),
            (">5.11.2", True),
            (">5.11.3", False),
            ("<=5.11.3", True),
            ("<5.11.3", False),
            ("=5.11.3", True),
            (">= 5.0.0 < 6.0.0", True),
            ("5.x", True),
            ("5.x.x", True),
            ("4.x", False),
            ("5.11.x", True),
            ("5.12.x", False),
            ("5", True),
            ("5.11", True),
            ("*", True),
            ("", True),
            ("5.0.0 - 5.11.3", True),
            ("5.0.0 - 5.11.2", False),
            ("  ^5.0.0  ", True),
        ],
    )
    def test_ranges_against_release(self, expr, expected):
        assert satisfies("5.11.3", expr) is expected

    def test_caret_zero_major_pins_minor(self):
        assert satisfies("0.2.5", "^0.2.3") is True
        assert satisfies("0.2.2", "^0.2.3") is False
        assert satisfies("0.3.0", "^0.2.3") is False
        assert satisfies("1.2.3", "^0.2.3") is False

    def test_caret_zero_zero_is_pinned(self):
        assert satisfies("0.0.3", "^0.0.3") is True
        assert satisfies("0.0.4", "^0.0.3") is False

    def test_prereleases_excluded_from_caret_tilde_and_wildcards(self):
        for expr in ("^5.11.3", "~5.11.0", "*", "5.x", "5.11.x"):
            assert satisfies("5.11.3-alpha", expr) is False, expr

    def test_bare_prerelease_requires_identical_suffix(self):
        assert satisfies("1.0.0-alpha", "1.0.0-alpha") is True
        assert satisfies("1.0.0-alpha", "1.0.0-beta") is False

    def test_unparseable_range_or_version_never_matches(self):
        assert satisfies("5.11.3", "latest") is False
        assert satisfies("latest", "latest") is False
        assert satisfies("latest", "^5.0.0") is False
        assert satisfies("latest", "*") is False

    def test_or_alternatives_are_not_supported(self):
        assert satisfies("5.11.3", "^4.0.0 || ^5.0.0") is False

    def test_conjunction_with_caret_clause(self):
        assert satisfies("5.11.3", "^5.0.0 <5.12.0") is True
        assert satisfies("5.12.1", "^5.0.0 <5.12.0") is False

    def test_conjunction_with_tilde_clause(self):
        assert satisfies("5.11.3", "~5.11.0 <5.11.5") is True
        assert satisfies("5.11.5", "~5.11.0 <5.11.5") is False
        assert satisfies("5.12.0", "~5.11.0 <5.11.5") is False

    def test_loose_caret_and_tilde_operators(self):
        assert satisfies("5.11.3", "^ 5.0.0") is True
        assert satisfies("5.11.3", "~ 5.11.0") is True
        assert satisfies("5.11.3", "^ 5.0.0 < 5.12.0") is True

    def test_comparators_admit_prereleases(self):
        assert satisfies("5.11.3-alpha", ">=5.0.0 <6.0.0") is True
        assert satisfies("5.11.3-alpha", ">=5.11.3") is False
        assert satisfies("5.11.3-alpha", "<5.11.3") is True


class TestEvaluate:
    @pytest.mark.parametrize(
        "expr",
        ["latest", "^latest", "~5", "github:org/repo", "file:../pkg", "^4.0.0 || ^5.0.0"],
    )
    def test_unrecognised_ranges_raise(self, expr):
        with pytest.raises(InvalidRange):
            evaluate("5.11.3", expr)

    def test_malformed_clause_raises_after_a_miss(self):
        with pytest.raises(InvalidRange):
            evaluate("5.11.3", "<1.0.0 nope")

    def test_unparseable_version_is_a_miss_not_an_error(self):
        assert evaluate("not-a-version", ">=1.0.0") is False
