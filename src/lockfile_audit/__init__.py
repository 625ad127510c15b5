"""lockfile-audit core package.

This package extracts resolved package versions from lockfiles so they can be
submitted for security scoring. The scanning logic is callable from the local
script in ``scripts/scan.py`` or from any other wrapper.
"""

__all__ = [
    "core",
]
