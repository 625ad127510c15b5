"""Package descriptor model."""

from __future__ import annotations

from dataclasses import dataclass

ECOSYSTEM_NPM = "npm"

VALID_ECOSYSTEMS = frozenset({ECOSYSTEM_NPM})


@dataclass(frozen=True)
class PackageDescriptor:
    """Represent one resolved package extracted from a lockfile."""

    name: str
    version: str
    ecosystem: str = ECOSYSTEM_NPM

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Package name must be non-empty")
        if self.ecosystem not in VALID_ECOSYSTEMS:
            raise ValueError(f"Invalid ecosystem: {self.ecosystem}")

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "version": self.version,
            "ecosystem": self.ecosystem,
        }
