"""Source-tracked values produced by the yarn.lock grammar."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias, Union


@dataclass(frozen=True, eq=False)
class SourceString:
    """A decoded literal and the span of input text it was read from.

    Equality and hashing only consider ``text``, so the same literal found at
    two places compares equal. A plain ``str`` with the same text also
    compares equal, which keeps lookups like ``mapping.get("version")``
    working. ``start``/``end`` exist for diagnostics only.
    """

    text: str
    start: int = field(default=0)
    end: int = field(default=0)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SourceString):
            return self.text == other.text
        if isinstance(other, str):
            return self.text == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.text)

    def __str__(self) -> str:
        return self.text


Value: TypeAlias = Union[SourceString, "dict[SourceString, Value]"]


def clone_value(value: Value) -> Value:
    """Return a structural copy of ``value`` that shares no map with it."""
    if isinstance(value, dict):
        return {key: clone_value(child) for key, child in value.items()}
    return value


def get_position(text: str, offset: int) -> tuple[int, int]:
    """Return the 1-based ``(line, column)`` of ``offset`` in ``text``.

    Lines are separated by ``\\n``; the column counts characters from the start
    of the line.
    """
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def line_excerpt(text: str, offset: int) -> str:
    """Return the source line containing ``offset`` without its line break."""
    line_start = text.rfind("\n", 0, offset) + 1
    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)
    return text[line_start:line_end].rstrip("\r")


def format_trace(text: str, frames: list[tuple[int, str]]) -> str:
    """Render grammar trace frames, innermost first, with source excerpts."""
    blocks = []
    for index, (offset, description) in enumerate(frames):
        line, column = get_position(text, offset)
        blocks.append(
            f"{index}: at line {line} column {column}, {description}:\n"
            f"{line_excerpt(text, offset)}\n"
            f"{' ' * (column - 1)}^"
        )
    return "\n\n".join(blocks) + "\n"
