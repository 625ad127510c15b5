"""Parse yarn.lock to capture resolved dependencies."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..errors import LockfileSpecifierError, LockfileStructureError
from ..models.package_descriptor import ECOSYSTEM_NPM, PackageDescriptor
from .yarn_grammar import parse_document
from .yarn_source import SourceString, Value, get_position

logger = logging.getLogger(__name__)


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def split_specifier(specifier: str) -> str:
    """Return the package name of a ``name@range`` specifier.

    A single leading ``@`` marks a scoped package and stays part of the name,
    so ``@scope/pkg@^1.0.0`` yields ``@scope/pkg``.
    """
    prefix = "@" if specifier.startswith("@") else ""
    remainder = specifier[len(prefix):]
    name, sep, _ = remainder.partition("@")
    if not sep:
        raise LockfileSpecifierError(
            f"Unable to parse package specifier {_quote(specifier)}: "
            "missing '@' between package name and range"
        )
    if not name:
        raise LockfileSpecifierError(
            f"Unable to parse package specifier {_quote(specifier)}: empty package name"
        )
    return prefix + name


def _version_of(text: str, specifier: SourceString, details: Value) -> str:
    if isinstance(details, SourceString):
        line, column = get_position(text, details.start)
        raise LockfileStructureError(
            f"Unexpected string at line {line} column {column}: {_quote(details.text)}"
        )

    version = details.get("version")
    if version is None:
        line, column = get_position(text, specifier.start)
        raise LockfileStructureError(
            f"Package {_quote(specifier.text)} at line {line} column {column} has no version"
        )

    if isinstance(version, dict):
        key = next(key for key in details if key == "version")
        line, column = get_position(text, key.start)
        raise LockfileStructureError(
            f"Unexpected map for property {_quote(key.text)} at line {line} column {column}"
        )
    return version.text


def parse(text: str, ecosystem: str = ECOSYSTEM_NPM) -> list[PackageDescriptor]:
    """Return unique package descriptors from yarn lock file contents.

    Order follows the first occurrence of each (name, version) pair; the same
    resolution listed again under another key is dropped.
    """
    root = parse_document(text)

    descriptors: list[PackageDescriptor] = []
    seen: set[tuple[str, str]] = set()

    for specifier, details in root.items():
        name = split_specifier(specifier.text)
        version = _version_of(text, specifier, details)
        if (name, version) in seen:
            continue
        seen.add((name, version))
        descriptors.append(PackageDescriptor(name=name, version=version, ecosystem=ecosystem))

    logger.debug(
        "Extracted %d packages from %d yarn.lock entries", len(descriptors), len(root)
    )
    return descriptors


def parse_file(path: Path, ecosystem: str = ECOSYSTEM_NPM) -> list[PackageDescriptor]:
    """Return unique package descriptors from a yarn lock file on disk."""
    return parse(path.read_text(encoding="utf-8"), ecosystem=ecosystem)
