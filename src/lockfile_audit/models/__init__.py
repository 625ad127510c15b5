"""Data models for extracted lockfile contents."""

from __future__ import annotations

from .package_descriptor import ECOSYSTEM_NPM, PackageDescriptor

__all__ = [
    "ECOSYSTEM_NPM",
    "PackageDescriptor",
]
