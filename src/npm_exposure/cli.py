"""Command-line entrypoint.

Usage:
  npm-exposure scan [--root DIR] [--list PATH] [--config PATH] [--warn-only]
  npm-exposure check MANIFEST [--lock FILE ...] [--list PATH] [--warn-only]
  npm-exposure validate-list PATH

Scan output is JSON on stdout. Exit codes: 0 clean, 10 vulnerabilities found,
1 invalid input.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from .config import ConfigError, Settings, load_settings
from .core import classify, scan_directory
from .ingestion import KnownBadListError, load_known_bad
from .logging_config import setup_logging
from .models import BadVersionEntry, LockFile
from .parsers import UnknownLockFormatError
from .parsers.package_json import ManifestParseError

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_FINDINGS = 10

_TRUTHY = {"1", "true", "yes", "y"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="npm-exposure",
        description="Check npm projects against known-bad package versions.",
    )
    parser.add_argument("--log-level", default=None, help="Override NPM_EXPOSURE_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Scan every package.json under a directory")
    scan.add_argument("--root", type=Path, default=Path("."))
    scan.add_argument("--config", type=Path, default=None, help="Path to settings JSON")
    scan.add_argument("--list", dest="list_source", type=Path, default=None)
    scan.add_argument("--warn-only", action="store_true")

    check = sub.add_parser("check", help="Classify one package.json with explicit lock files")
    check.add_argument("manifest", type=Path)
    check.add_argument(
        "--lock",
        dest="locks",
        type=Path,
        action="append",
        default=[],
        help="Lock file to include; repeatable, later files win",
    )
    check.add_argument("--config", type=Path, default=None, help="Path to settings JSON")
    check.add_argument("--list", dest="list_source", type=Path, default=None)
    check.add_argument("--warn-only", action="store_true")

    validate = sub.add_parser("validate-list", help="Validate a known-bad list file")
    validate.add_argument("path", type=Path)

    return parser.parse_args(argv)


def _load_list(list_source: Path | None, settings: Settings) -> list[BadVersionEntry]:
    source = list_source or settings.known_bad_list
    if source is None:
        raise KnownBadListError("No known-bad list given (use --list or 'knownBadList' in settings)")
    return load_known_bad(source)


def _exit_code(has_findings: bool, warn_only: bool) -> int:
    if not has_findings:
        return EXIT_OK
    if warn_only or os.getenv("NPM_EXPOSURE_WARN_ONLY", "").strip().lower() in _TRUTHY:
        return EXIT_OK
    return EXIT_FINDINGS


def _run_scan(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    known_bad = _load_list(args.list_source, settings)
    scans = scan_directory(args.root, known_bad, settings.lock_files, settings.exclude)
    print(json.dumps({"projects": [scan.to_dict() for scan in scans]}, indent=2))
    has_findings = any(scan.result is not None and scan.result.vulnerabilities for scan in scans)
    return _exit_code(has_findings, args.warn_only)


def _run_check(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    known_bad = _load_list(args.list_source, settings)
    try:
        manifest_text = args.manifest.read_text(encoding="utf-8")
        lock_files = [LockFile.from_path(path) for path in args.locks]
    except (OSError, UnicodeDecodeError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_ERROR
    result = classify(manifest_text, lock_files, known_bad)
    print(json.dumps(result.to_dict(), indent=2))
    return _exit_code(bool(result.vulnerabilities), args.warn_only)


def _run_validate(args: argparse.Namespace) -> int:
    entries = load_known_bad(args.path)
    packages = len({entry.package for entry in entries})
    print(f"Known-bad list {args.path} is valid: {packages} packages, {len(entries)} versions")
    return EXIT_OK


_COMMANDS = {
    "scan": _run_scan,
    "check": _run_check,
    "validate-list": _run_validate,
}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    try:
        return _COMMANDS[args.command](args)
    except ConfigError as exc:
        print(f"ERROR: Invalid configuration: {exc}", file=sys.stderr)
    except KnownBadListError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
    except (ManifestParseError, UnknownLockFormatError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
    return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
