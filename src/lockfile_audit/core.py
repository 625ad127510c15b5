"""Core scanning entrypoints.

This module selects a parser by lockfile name and aggregates the extracted
package descriptors per project. It performs no network access; callers
forward the report to whatever consumes it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .config import Settings, load_settings, validate_lockfile_names
from .discovery import discover_lockfiles
from .errors import LockfileError, UnsupportedLockfileError
from .models.package_descriptor import ECOSYSTEM_NPM, PackageDescriptor
from .parsers.yarn_lock import parse as parse_yarn_lock
from .report import aggregate

logger = logging.getLogger(__name__)

LockfileParser = Callable[[str, str], list[PackageDescriptor]]

# Registry of lockfile parsers, keyed by file name.
LOCKFILE_PARSERS: dict[str, LockfileParser] = {
    "yarn.lock": parse_yarn_lock,
}


def get_lockfile_parser(name: str) -> LockfileParser:
    """Return the parser registered for a lockfile name."""
    parser = LOCKFILE_PARSERS.get(name)
    if parser is None:
        known = ", ".join(sorted(LOCKFILE_PARSERS))
        raise UnsupportedLockfileError(f"Unsupported lockfile '{name}'. Supported: {known}")
    return parser


def parse_lockfile(path: Path, ecosystem: str = ECOSYSTEM_NPM) -> list[PackageDescriptor]:
    """Parse a single lockfile into its unique package descriptors.

    Raises:
        UnsupportedLockfileError: If no parser handles the file name.
        LockfileError: If the contents cannot be parsed.
    """
    parser = get_lockfile_parser(path.name)
    logger.debug("Parsing %s", path)
    return parser(path.read_text(encoding="utf-8"), ecosystem)


def scan_repository(root: Path, settings: Settings | None = None) -> dict[str, Any]:
    """Scan a repository for lockfiles and extract their resolved packages.

    Params:
        root: repository root to scan
        settings: discovery and tagging options; loaded from the environment
            when None

    Returns: dict report (see validators.report_schema)

    A lockfile that fails to parse is reported with its diagnostic under
    ``error`` and contributes no packages; the remaining lockfiles are still
    scanned.
    """
    root = root.resolve()
    settings = settings or load_settings()
    validate_lockfile_names(settings, list(LOCKFILE_PARSERS))

    projects: list[dict[str, Any]] = []
    for path in discover_lockfiles(root, settings.lockfiles, settings.exclude):
        project: dict[str, Any] = {
            "path": str(path.parent.relative_to(root)),
            "lockfile": path.name,
            "packages": [],
        }
        try:
            descriptors = parse_lockfile(path, settings.ecosystem)
        except LockfileError as exc:
            logger.warning("Failed to parse %s: %s", path, exc)
            project["error"] = str(exc)
        else:
            project["packages"] = [descriptor.to_dict() for descriptor in descriptors]
        projects.append(project)

    report = aggregate(projects)
    logger.info(
        "Scanned %d lockfiles: %d packages, %d errors",
        report["totals"]["projects"],
        report["totals"]["packages"],
        report["totals"]["errors"],
    )
    return report
