"""Repository and lockfile discovery utilities."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .config import DEFAULT_EXCLUDES, DEFAULT_LOCKFILES


def discover_lockfiles(
    root: Path,
    names: Iterable[str] = DEFAULT_LOCKFILES,
    excludes: Iterable[str] = DEFAULT_EXCLUDES,
) -> list[Path]:
    """Find lockfiles recursively under root (excluding vendor dirs).

    Returned paths are sorted so scans are reproducible.
    """
    root = root.resolve()
    targets = set(names)
    excluded = set(excludes)
    found: list[Path] = []

    def should_skip(p: Path) -> bool:
        return any(part in excluded for part in p.parts)

    for path in root.rglob("*"):
        if not path.is_file():
            continue
        if path.name not in targets:
            continue
        if should_skip(path.relative_to(root)):
            continue
        found.append(path)

    return sorted(found)
