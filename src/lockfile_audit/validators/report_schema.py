"""JSON Schema validation for scan reports."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from jsonschema import Draft202012Validator

_DESCRIPTOR_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["name", "version", "ecosystem"],
    "additionalProperties": False,
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "version": {"type": "string"},
        "ecosystem": {"type": "string", "minLength": 1},
    },
}

REPORT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["version", "hasErrors", "projects", "totals"],
    "properties": {
        "version": {"type": "string"},
        "hasErrors": {"type": "boolean"},
        "projects": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["path", "lockfile", "packages"],
                "properties": {
                    "path": {"type": "string"},
                    "lockfile": {"type": "string", "minLength": 1},
                    "packages": {"type": "array", "items": _DESCRIPTOR_SCHEMA},
                    "error": {"type": "string", "minLength": 1},
                },
            },
        },
        "totals": {
            "type": "object",
            "required": ["projects", "packages", "errors"],
            "properties": {
                "projects": {"type": "integer", "minimum": 0},
                "packages": {"type": "integer", "minimum": 0},
                "errors": {"type": "integer", "minimum": 0},
            },
        },
    },
}


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def validate_report(report: dict[str, Any], schema: dict[str, Any] | None = None) -> None:
    """Raise ValueError listing every schema violation in ``report``."""
    validator = Draft202012Validator(schema or REPORT_SCHEMA)
    errors = sorted(validator.iter_errors(report), key=lambda e: list(map(str, e.path)))
    if errors:
        raise ValueError("\n" + _format_errors(errors))
