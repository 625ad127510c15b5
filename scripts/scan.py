#!/usr/bin/env python3
"""Local CLI entrypoint to extract resolved packages from a repository.

Usage:
  python scripts/scan.py --root . [--config settings.json] [--verbose]

Prints the JSON report and exits 1 when any lockfile failed to parse, or 2
when the configuration or the report itself is invalid.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from lockfile_audit.config import ConfigError, load_settings
from lockfile_audit.core import scan_repository
from lockfile_audit.validators.report_schema import validate_report


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--root", type=Path, default=Path("."))
    parser.add_argument("--config", type=Path, default=None, help="Path to settings JSON")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config)
        report = scan_repository(args.root, settings=settings)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    try:
        validate_report(report)
    except ValueError as exc:
        print(f"ERROR: Report failed validation:{exc}", file=sys.stderr)
        return 2

    print(json.dumps(report, indent=2))

    return 1 if report.get("hasErrors") else 0


if __name__ == "__main__":
    raise SystemExit(main())
