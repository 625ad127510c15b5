"""Exception taxonomy for lockfile parsing and dispatch."""

from __future__ import annotations

from .parsers.yarn_source import format_trace, get_position


class LockfileError(ValueError):
    """Base error for anything a lockfile's contents can cause."""


class LockfileSyntaxError(LockfileError):
    """Raised when the lockfile grammar cannot be matched.

    ``frames`` holds the grammar trace as ``(offset, description)`` pairs,
    innermost first; ``offset``, ``line`` and ``column`` locate the innermost
    one. ``str()`` renders the trace against ``source``.
    """

    def __init__(self, source: str, frames: list[tuple[int, str]]) -> None:
        super().__init__(frames[0][1])
        self.source = source
        self.frames = list(frames)
        self.offset = self.frames[0][0]
        self.line, self.column = get_position(source, self.offset)

    def __str__(self) -> str:
        return format_trace(self.source, self.frames)


class LockfileSpecifierError(LockfileError):
    """Raised when a top-level key is not a ``name@range`` specifier."""


class LockfileStructureError(LockfileError):
    """Raised when the parsed tree does not have the expected shape."""


class UnsupportedLockfileError(LockfileError):
    """Raised when no parser is registered for a lockfile name."""
