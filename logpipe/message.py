"""Immutable log message value object."""

from __future__ import annotations

import time as _time
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from logpipe.errors import InvalidCategoryError, InvalidLevelError, InvalidTimeError, type_name
from logpipe.levels import LEVELS, is_level
from logpipe.placeholders import interpolate

DEFAULT_CATEGORY = "application"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class Message:
    """One log event: level, rendered text and context.

    The text is interpolated once against the context at construction time.
    Conventional context keys are ``category``, ``time``, ``trace`` and
    ``memory``; any other keys are carried through untouched.
    """

    __slots__ = ("_level", "_message", "_context", "_created_at")

    DEFAULT_CATEGORY = DEFAULT_CATEGORY

    def __init__(
        self,
        level: str,
        message: object,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        if not is_level(level):
            supported = '", "'.join(LEVELS)
            raise InvalidLevelError(
                f'Invalid log message level "{level}" provided. '
                f'The following values are supported: "{supported}".'
            )
        self._created_at = _time.time()
        self._level = level
        self._context: dict[str, Any] = dict(context or {})
        self._message = interpolate(
            message if isinstance(message, str) else str(message),
            self._context,
        )

    @classmethod
    def raw(cls, level: str, message: str, context: Mapping[str, Any] | None = None) -> Message:
        """Build a message whose text is stored without placeholder interpolation."""
        instance = cls(level, "", context)
        instance._message = message
        return instance

    @property
    def created_at(self) -> float:
        return self._created_at

    def level(self) -> str:
        return self._level

    def message(self) -> str:
        return self._message

    def context(self, name: str | None = None, default: Any = None) -> Any:
        """Return one context value, or a copy of the whole context when ``name`` is None."""
        if name is None:
            return dict(self._context)
        value = self._context.get(name)
        return default if value is None else value

    def category(self) -> str:
        category = self._context.get("category")
        if category is None:
            return DEFAULT_CATEGORY
        if not isinstance(category, str):
            raise InvalidCategoryError(
                "Invalid category value in log context. "
                f'Expected "str", got "{type_name(category)}".'
            )
        return category

    def trace(self) -> list[Mapping[str, Any]] | None:
        return self._context.get("trace")

    def time(self) -> datetime:
        """Return the message timestamp as an aware UTC datetime."""
        value = self._context.get("time")
        if value is None:
            return datetime.fromtimestamp(self._created_at, tz=UTC)
        if isinstance(value, datetime):
            return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
        if isinstance(value, bool):
            raise _invalid_time(value)
        try:
            if isinstance(value, (int, float)):
                return datetime.fromtimestamp(value, tz=UTC)
            if isinstance(value, str):
                return _parse_numeric_time(value)
        except (OverflowError, ValueError, OSError) as exc:
            raise InvalidTimeError(f"Time value out of range in log context: {value!r}.") from exc
        raise _invalid_time(value)

    def __repr__(self) -> str:
        return f"Message({self._level!r}, {self._message!r})"


def _parse_numeric_time(raw: str) -> datetime:
    try:
        seconds = Decimal(raw.strip().replace(",", "."))
    except InvalidOperation:
        raise InvalidTimeError(f'Invalid time value in log context: "{raw}".') from None
    if not seconds.is_finite():
        raise InvalidTimeError(f'Invalid time value in log context: "{raw}".')
    microseconds = int((seconds * 1_000_000).to_integral_value())
    return _EPOCH + timedelta(microseconds=microseconds)


def _invalid_time(value: object) -> InvalidTimeError:
    return InvalidTimeError(
        "Invalid time value in log context. Expected a number, a numeric string "
        f'or a datetime, got "{type_name(value)}".'
    )


__all__ = ["DEFAULT_CATEGORY", "Message"]
