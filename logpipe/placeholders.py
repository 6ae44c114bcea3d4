"""Placeholder path resolution and ``{path}`` interpolation for message text.

A path is a list of keys separated by unescaped dots. ``\\.`` is a literal dot
and ``\\\\`` a literal backslash, so ``{a\\.b}`` looks up the key ``"a.b"``
while ``{a.b}`` walks into ``context["a"]["b"]``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from logpipe.dumper import is_stringable, render

_ESCAPABLE = ("\\", ".")


def parse_path(path: str) -> list[str]:
    """Split ``path`` into keys on unescaped dots."""
    segments: list[str] = []
    current: list[str] = []
    index = 0
    length = len(path)
    while index < length:
        char = path[index]
        if char == "\\" and index + 1 < length and path[index + 1] in _ESCAPABLE:
            current.append(path[index + 1])
            index += 2
            continue
        if char == ".":
            segments.append("".join(current))
            current = []
        else:
            current.append(char)
        index += 1
    segments.append("".join(current))
    return segments


def resolve(context: Mapping[str, Any], path: str) -> tuple[bool, Any]:
    """Look up ``path`` in nested mappings, returning ``(found, value)``."""
    node: Any = context
    for key in parse_path(path):
        if not isinstance(node, Mapping) or key not in node:
            return False, None
        node = node[key]
    return True, node


def interpolate(
    text: str,
    context: Mapping[str, Any],
    *,
    renderer: Callable[[Any], str] = render,
) -> str:
    """Replace ``{path}`` spans in ``text`` with values from ``context``.

    Spans are found left to right. An opening brace extends to its balancing
    closing brace, so ``{a{b}c}`` refers to the key ``"a{b}c"``. Unresolved
    spans and unbalanced braces are kept as-is. Substituted values are never
    scanned again.
    """
    if "{" not in text:
        return text
    pairs = _brace_pairs(text)
    out: list[str] = []
    pos = 0
    while True:
        start = text.find("{", pos)
        if start < 0:
            break
        end = pairs.get(start, -1)
        if end < 0:
            out.append(text[pos : start + 1])
            pos = start + 1
            continue
        out.append(text[pos:start])
        found, value = resolve(context, text[start + 1 : end])
        if found:
            out.append(_placeholder_text(value, renderer))
        else:
            out.append(text[start : end + 1])
        pos = end + 1
    out.append(text[pos:])
    return "".join(out)


def _brace_pairs(text: str) -> dict[int, int]:
    """Map each opening brace position to its balancing closing brace."""
    pairs: dict[int, int] = {}
    open_positions: list[int] = []
    for index, char in enumerate(text):
        if char == "{":
            open_positions.append(index)
        elif char == "}" and open_positions:
            pairs[open_positions.pop()] = index
    return pairs


def _placeholder_text(value: Any, renderer: Callable[[Any], str]) -> str:
    if value is None:
        return ""
    if isinstance(value, (str, int, float, bool)) or is_stringable(value):
        return str(value)
    return renderer(value)


__all__ = ["interpolate", "parse_path", "resolve"]
