"""Report aggregation and schema-friendly output."""

from __future__ import annotations

from typing import Any


def aggregate(projects: list[dict[str, Any]]) -> dict[str, Any]:
    """Aggregate per-lockfile results into a single schema-compatible report.

    The input ``projects`` is expected to be a list of dicts with at least
    ``path``, ``lockfile`` and ``packages`` keys, and an ``error`` string when
    the lockfile could not be parsed. ``packages`` is a list of descriptor
    dicts containing ``name``, ``version`` and ``ecosystem``.
    """

    total_packages = sum(len(p.get("packages", [])) for p in projects)
    total_errors = sum(1 for p in projects if p.get("error"))

    report: dict[str, Any] = {
        "version": "1",
        "hasErrors": total_errors > 0,
        "projects": projects,
        "totals": {
            "projects": len(projects),
            "packages": total_packages,
            "errors": total_errors,
        },
    }

    return report
