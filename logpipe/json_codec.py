"""JSON encoding for structured log output."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import orjson

from logpipe.dumper import render
from logpipe.formatter import convert_to_string
from logpipe.message import DEFAULT_CATEGORY, Message

# orjson rejects integers outside this range and nesting deeper than 254 levels.
_INT_MIN = -(2**63)
_INT_MAX = 2**64 - 1
_MAX_DEPTH = 64


def _default(value: Any) -> Any:
    if isinstance(value, BaseException):
        return convert_to_string(value)
    if isinstance(value, (set, frozenset)):
        return sorted(render(item) for item in value)
    return render(value)


def _encodable(value: Any, *, depth: int = 0, seen: frozenset[int] = frozenset()) -> Any:
    """Copy of ``value`` with leaves orjson rejects outright replaced by rendered text."""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, str):
        return _utf8(value)
    if isinstance(value, int):
        return value if _INT_MIN <= value <= _INT_MAX else render(value)
    if not isinstance(value, (Mapping, list, tuple)):
        return value
    if depth >= _MAX_DEPTH or id(value) in seen:
        return render(value)
    inner = seen | {id(value)}
    if isinstance(value, Mapping):
        return {
            _encodable_key(key): _encodable(item, depth=depth + 1, seen=inner)
            for key, item in value.items()
        }
    return [_encodable(item, depth=depth + 1, seen=inner) for item in value]


def _encodable_key(key: Any) -> Any:
    if isinstance(key, str):
        return _utf8(key)
    if isinstance(key, (bool, float)) or key is None:
        return key
    if isinstance(key, int) and _INT_MIN <= key <= _INT_MAX:
        return key
    return render(key)


def _utf8(text: str) -> str:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return text.encode("utf-8", "backslashreplace").decode("utf-8")
    return text


def dumps_bytes(
    payload: Any,
    *,
    pretty: bool = False,
    sort_keys: bool = False,
) -> bytes:
    """Serialize payload to UTF-8 JSON; values orjson cannot encode are rendered as text.

    Payloads orjson refuses as a whole (oversized integers, cycles, excessive
    nesting) are re-encoded from a copy with the offending parts rendered.
    """
    options = orjson.OPT_NON_STR_KEYS
    if pretty:
        options |= orjson.OPT_INDENT_2
    if sort_keys:
        options |= orjson.OPT_SORT_KEYS
    try:
        return orjson.dumps(payload, default=_default, option=options)
    except orjson.JSONEncodeError:
        options |= orjson.OPT_PASSTHROUGH_DATACLASS
        return orjson.dumps(_encodable(payload), default=_default, option=options)


def dumps_text(
    payload: Any,
    *,
    pretty: bool = False,
    sort_keys: bool = False,
) -> str:
    return dumps_bytes(payload, pretty=pretty, sort_keys=sort_keys).decode("utf-8")


def json_format(message: Message, common_context: Mapping[str, Any]) -> str:
    """Format function rendering one message as a single JSON object.

    Suitable for ``Target.set_format``; the trace is kept as a list of frames.
    """
    payload: dict[str, Any] = {
        "ts": message.time().isoformat(timespec="microseconds"),
        "level": message.level(),
        "category": message.context("category", DEFAULT_CATEGORY),
        "message": message.message(),
        "context": message.context(),
    }
    if common_context:
        payload["common"] = dict(common_context)
    return dumps_text(payload)


__all__ = ["dumps_bytes", "dumps_text", "json_format"]
