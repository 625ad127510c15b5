"""Recursive-descent grammar for classic (v1) yarn.lock files.

Every production has the shape ``production(text, pos, ...) -> (result, pos)``
and reports one of three outcomes:

- a match, returning the result and the offset just past it;
- a soft mismatch, raising :class:`Mismatch` so the caller can try another
  alternative;
- a hard failure, raising :class:`LockfileSyntaxError` which aborts the parse.

A soft mismatch becomes a hard failure once a production has committed, which
happens after the ``:`` of a map entry and after the opening quote of a
quoted literal. A quoted literal whose escapes do not decode is a soft
mismatch. Both signals carry a trace of ``(offset, description)`` frames
that :class:`LockfileSyntaxError` renders with line/column positions.

Nesting deeper than ``MAX_NESTING`` indentation levels is a hard failure.
"""

from __future__ import annotations

import functools
import json
import re
from collections.abc import Callable
from typing import TypeVar

from ..errors import LockfileSyntaxError
from .yarn_source import SourceString, Value, clone_value

_T = TypeVar("_T")

INDENT_UNIT = "  "
MAX_NESTING = 100

_HSPACE = re.compile(r"[ \t]*")
_LINE_END = re.compile(r"[ \t]*(?:#[^\r\n]*)?(?:\r\n|\n|\Z)")
_QUOTED_BODY = re.compile(r'"(?:\\.|[^"\\])*', re.DOTALL)
_RAW_TAIL = re.compile(r"[^: \n\r,]*")
_RAW_START_CHARS = frozenset("/.-")


class Mismatch(Exception):
    """Soft failure: the production does not apply at this offset."""

    def __init__(self, offset: int, expected: str) -> None:
        super().__init__(expected)
        self.frames: list[tuple[int, str]] = [(offset, f"expected {expected}")]


def _hard_failure(text: str, frames: list[tuple[int, str]]) -> LockfileSyntaxError:
    return LockfileSyntaxError(text, frames)


def context(name: str) -> Callable[[Callable[..., _T]], Callable[..., _T]]:
    """Add an ``in <name>`` frame to any signal leaving the production."""

    def decorate(production: Callable[..., _T]) -> Callable[..., _T]:
        @functools.wraps(production)
        def wrapper(text: str, pos: int, *args: int) -> _T:
            try:
                return production(text, pos, *args)
            except (Mismatch, LockfileSyntaxError) as exc:
                exc.frames.append((pos, f"in {name}"))
                raise

        return wrapper

    return decorate


# ---- Literal parser ---------------------------------------------------------


def _parse_quoted(text: str, pos: int) -> tuple[SourceString, int]:
    end = _QUOTED_BODY.match(text, pos).end()
    if end >= len(text) or text[end] != '"':
        found = repr(text[end]) if end < len(text) else "end of input"
        raise _hard_failure(text, [(end, f"expected '\"', found {found}")])
    end += 1
    raw = text[pos:end]
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise Mismatch(pos + exc.pos, f"valid quoted string ({exc.msg})") from exc
    return SourceString(decoded, pos, end), end


@context("literal")
def parse_literal(text: str, pos: int) -> tuple[SourceString, int]:
    """Parse one quoted or raw scalar starting at ``pos``."""
    if pos < len(text):
        first = text[pos]
        if first == '"':
            return _parse_quoted(text, pos)
        if first.isalpha() or first in _RAW_START_CHARS:
            end = _RAW_TAIL.match(text, pos + 1).end()
            return SourceString(text[pos:end], pos, end), end
    raise Mismatch(pos, "literal")


# ---- Layout parser ----------------------------------------------------------


def skip_hspace(text: str, pos: int) -> int:
    return _HSPACE.match(text, pos).end()


def parse_line_end(text: str, pos: int) -> int:
    """Match trailing space, an optional comment and a line break or EOF."""
    match = _LINE_END.match(text, pos)
    if match is None:
        raise Mismatch(skip_hspace(text, pos), "line ending")
    return match.end()


@context("end of line")
def parse_blank_run(text: str, pos: int) -> tuple[None, int]:
    """Consume one or more blank or comment-only line endings.

    Stops at end of input or at the start of the first line that has content,
    leaving that line's indentation unconsumed.
    """
    pos = parse_line_end(text, pos)
    while pos < len(text):
        match = _LINE_END.match(text, pos)
        if match is None:
            break
        pos = match.end()
    return None, pos


@context("indentation")
def parse_indentation(text: str, pos: int, level: int) -> tuple[None, int]:
    indent = INDENT_UNIT * level
    if not text.startswith(indent, pos):
        raise Mismatch(pos, f"{len(indent)} spaces of indentation")
    return None, pos + len(indent)


# ---- Structural parser ------------------------------------------------------


def parse_keys(text: str, pos: int) -> tuple[list[SourceString], int]:
    """Parse one or more comma separated literals sharing a single value."""
    key, pos = parse_literal(text, pos)
    keys = [key]
    while text.startswith(",", pos):
        try:
            key, after = parse_literal(text, skip_hspace(text, pos + 1))
        except Mismatch:
            break
        keys.append(key)
        pos = after
    return keys, pos


def parse_map(text: str, pos: int, level: int) -> tuple[dict[SourceString, Value], int]:
    """Parse zero or more entries at ``level`` into an ordered mapping."""
    entries: dict[SourceString, Value] = {}
    while True:
        try:
            (keys, value), pos = parse_entry(text, pos, level)
        except Mismatch:
            return entries, pos
        for key in keys:
            entries[key] = clone_value(value)


@context("map entry")
def parse_entry(
    text: str, pos: int, level: int
) -> tuple[tuple[list[SourceString], Value], int]:
    _, pos = parse_indentation(text, pos, level)
    keys, pos = parse_keys(text, pos)
    value, pos = parse_entry_value(text, pos, level)
    return (keys, value), pos


def parse_entry_value(text: str, pos: int, level: int) -> tuple[Value, int]:
    """Parse what follows an entry's keys.

    Alternatives, in order: ``:`` and an indented block (committed once the
    colon matches), an inline scalar, or a bare indented block.
    """
    if text.startswith(":", pos):
        try:
            _, after = parse_blank_run(text, pos + 1)
            return parse_multiline_value(text, after, level + 1)
        except Mismatch as exc:
            raise _hard_failure(text, exc.frames) from None

    try:
        literal, after = parse_literal(text, skip_hspace(text, pos))
        _, after = parse_blank_run(text, after)
        return literal, after
    except Mismatch:
        pass

    _, pos = parse_blank_run(text, pos)
    return parse_multiline_value(text, pos, level + 1)


def parse_multiline_value(text: str, pos: int, level: int) -> tuple[Value, int]:
    """Parse a block scalar on its own line, or a nested map at ``level``."""
    if level > MAX_NESTING:
        raise _hard_failure(text, [(pos, f"nesting deeper than {MAX_NESTING} levels")])
    try:
        _, after = parse_indentation(text, pos, level)
        literal, after = parse_literal(text, after)
        _, after = parse_blank_run(text, after)
        return literal, after
    except Mismatch:
        pass
    return parse_map(text, pos, level)


def parse_document(text: str) -> dict[SourceString, Value]:
    """Parse a whole lockfile into its root mapping.

    Raises :class:`LockfileSyntaxError` on a hard failure or when the grammar
    stops before the end of the input.
    """
    pos = 0
    try:
        _, pos = parse_blank_run(text, pos)
    except Mismatch:
        pass
    root, pos = parse_map(text, pos, 0)
    if pos != len(text):
        raise _hard_failure(text, [(pos, f"expected end of input, found {text[pos]!r}")])
    return root
