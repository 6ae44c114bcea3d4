"""Text rendering of log messages."""

from __future__ import annotations

import traceback
from collections.abc import Callable, Mapping
from typing import Any

from logpipe.dumper import is_stringable, render
from logpipe.errors import FormatContractError, type_name
from logpipe.message import DEFAULT_CATEGORY, Message

DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
TRACE_INDENT = "    "

FormatFunction = Callable[[Message, Mapping[str, Any]], Any]

_PLAIN_TYPES = (str, bytes, bytearray, int, float, complex, bool, type(None))


class Formatter:
    """Formats messages as ``{time} {prefix}[{level}][{category}] {text}`` plus context."""

    def __init__(
        self,
        *,
        format: FormatFunction | None = None,
        prefix: FormatFunction | None = None,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    ) -> None:
        self._format = format
        self._prefix = prefix
        self._timestamp_format = timestamp_format

    @property
    def timestamp_format(self) -> str:
        return self._timestamp_format

    def set_format(self, format: FormatFunction | None) -> None:
        """Replace default rendering with ``format(message, common_context)``."""
        self._format = format

    def set_prefix(self, prefix: FormatFunction | None) -> None:
        """Set a callable returning a string prepended to every message."""
        self._prefix = prefix

    def set_timestamp_format(self, timestamp_format: str) -> None:
        self._timestamp_format = timestamp_format

    def format(self, message: Message, common_context: Mapping[str, Any]) -> str:
        if self._format is None:
            return self._default_format(message, common_context)
        formatted = self._format(message, common_context)
        if not isinstance(formatted, str):
            raise FormatContractError(
                f'The callable "format" must return a string, {type_name(formatted)} received.'
            )
        return self._get_prefix(message, common_context) + formatted

    def _default_format(self, message: Message, common_context: Mapping[str, Any]) -> str:
        time = message.time().strftime(self._timestamp_format)
        prefix = self._get_prefix(message, common_context)
        context = self._get_context(message, common_context)
        category = message.context("category", DEFAULT_CATEGORY)
        return f"{time} {prefix}[{message.level()}][{category}] {message.message()}{context}"

    def _get_prefix(self, message: Message, common_context: Mapping[str, Any]) -> str:
        if self._prefix is None:
            return ""
        prefix = self._prefix(message, common_context)
        if not isinstance(prefix, str):
            raise FormatContractError(
                f'The callable "prefix" must return a string, {type_name(prefix)} received.'
            )
        return prefix

    def _get_context(self, message: Message, common_context: Mapping[str, Any]) -> str:
        lines: list[str] = []
        trace = self._get_trace(message)
        if trace:
            lines.append(trace)
        for name, value in message.context().items():
            if name != "trace":
                lines.append(f"{name}: {convert_to_string(value)}")
        common = [f"{name}: {convert_to_string(value)}" for name, value in common_context.items()]

        out = ""
        if lines:
            out += "\n\nMessage context:\n\n" + "\n".join(lines)
        if common:
            out += "\n\nCommon context:\n\n" + "\n".join(common)
        return out + "\n"

    @staticmethod
    def _get_trace(message: Message) -> str:
        frames = message.trace()
        if not frames:
            return ""
        rendered = [format_frame(frame) for frame in frames]
        return "trace:\n" + TRACE_INDENT + f"\n{TRACE_INDENT}".join(rendered)


def format_frame(frame: Any) -> str:
    """Render one trace frame descriptor."""
    if not isinstance(frame, Mapping):
        return "???"
    file = frame.get("file")
    line = frame.get("line")
    function = frame.get("function")
    cls = frame.get("class")
    if file is not None and line is not None:
        return f"in {file}:{line}"
    if function is not None and cls is not None:
        return f"{cls}:{function}"
    if function is not None:
        return str(function)
    return "???"


def convert_to_string(value: Any) -> str:
    """Stringify a context value for the default text layout."""
    if isinstance(value, BaseException):
        return "".join(traceback.format_exception(value)).rstrip("\n")
    if not isinstance(value, _PLAIN_TYPES) and is_stringable(value):
        return str(value)
    return render(value)


__all__ = [
    "DEFAULT_TIMESTAMP_FORMAT",
    "FormatFunction",
    "Formatter",
    "convert_to_string",
    "format_frame",
]
