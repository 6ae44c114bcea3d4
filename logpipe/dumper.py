"""Deterministic, total rendering of arbitrary values for log output."""

from __future__ import annotations

import types
from collections.abc import Mapping, Set
from typing import Any

INDENT = "    "
MAX_DEPTH = 10

_SCALARS = (str, bytes, bytearray, int, float, complex, bool, type(None))
_FUNCTION_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.BuiltinMethodType,
)


def is_stringable(value: object) -> bool:
    """Return True when the value's class defines its own ``__str__``.

    Builtin containers fall back to ``object.__str__`` and are not considered
    stringable; they are rendered structurally instead.
    """
    return type(value).__str__ is not object.__str__


def render(value: Any) -> str:
    """Render ``value`` as readable text. Never raises."""
    try:
        return _render(value, depth=0, seen=set())
    except Exception:  # noqa: BLE001 - rendering must be total
        return f"<unrenderable {_qualname(value)}>"


def _render(value: Any, *, depth: int, seen: set[int]) -> str:
    if isinstance(value, _SCALARS):
        return repr(value)
    if isinstance(value, _FUNCTION_TYPES):
        return f"<function {_qualname_of_callable(value)}>"
    if isinstance(value, type):
        return f"<class {value.__module__}.{value.__qualname__}>"
    if depth >= MAX_DEPTH:
        return f"<{_qualname(value)} ...>"
    marker = id(value)
    if marker in seen:
        return f"<recursion {_qualname(value)}>"
    seen.add(marker)
    try:
        if isinstance(value, Mapping):
            items = [
                f"{_render(key, depth=depth + 1, seen=seen)}: "
                f"{_render(item, depth=depth + 1, seen=seen)}"
                for key, item in value.items()
            ]
            return _block("{", items, "}", depth)
        if isinstance(value, list):
            return _block("[", _render_items(value, depth, seen), "]", depth)
        if isinstance(value, tuple):
            return _block("(", _render_items(value, depth, seen), ")", depth)
        if isinstance(value, Set):
            rendered = sorted(_render_items(value, depth, seen))
            if not rendered:
                return f"{type(value).__name__}()"
            return _block("{", rendered, "}", depth)
        if isinstance(value, BaseException):
            return f"{type(value).__name__}({str(value)!r})"
        return _render_object(value, depth=depth, seen=seen)
    finally:
        seen.discard(marker)


def _render_items(values: Any, depth: int, seen: set[int]) -> list[str]:
    return [_render(item, depth=depth + 1, seen=seen) for item in values]


def _block(opening: str, items: list[str], closing: str, depth: int) -> str:
    if not items:
        return opening + closing
    inner = INDENT * (depth + 1)
    body = ",\n".join(inner + item for item in items)
    return f"{opening}\n{body},\n{INDENT * depth}{closing}"


def _render_object(value: Any, *, depth: int, seen: set[int]) -> str:
    attributes = _attributes(value)
    name = _qualname(value)
    if attributes is None:
        return f"<{name}>"
    items = [
        f"{key}={_render(item, depth=depth + 1, seen=seen)}"
        for key, item in attributes.items()
    ]
    return _block(f"{name}(", items, ")", depth)


def _attributes(value: Any) -> dict[str, Any] | None:
    found: dict[str, Any] = {}
    has_layout = False
    instance_dict = getattr(value, "__dict__", None)
    if isinstance(instance_dict, dict):
        has_layout = True
        found.update((str(key), item) for key, item in instance_dict.items())
    for cls in type(value).__mro__:
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__") or slot in found:
                continue
            has_layout = True
            if hasattr(value, slot):
                found[slot] = getattr(value, slot)
    return found if has_layout else None


def _qualname(value: Any) -> str:
    return type(value).__qualname__


def _qualname_of_callable(value: Any) -> str:
    module = getattr(value, "__module__", None)
    name = getattr(value, "__qualname__", None) or getattr(value, "__name__", "?")
    return f"{module}.{name}" if module else str(name)


__all__ = ["INDENT", "MAX_DEPTH", "is_stringable", "render"]
