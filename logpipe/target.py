"""Base class for log targets."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from logpipe.category_filter import CategoryFilter
from logpipe.errors import EnabledContractError, InvalidArgumentError, type_name
from logpipe.formatter import FormatFunction, Formatter
from logpipe.levels import INFO, validate_level
from logpipe.message import DEFAULT_CATEGORY, Message
from logpipe.snapshot import check_specs, process_variables, render_snapshot

EnabledPredicate = Callable[["Target"], Any]
VariablesProvider = Callable[[], Mapping[str, Any]]

DEFAULT_EXPORT_INTERVAL = 1000


class Target(ABC):
    """Filters messages received from a logger and exports them in batches.

    Messages pass through a level whitelist (empty means all levels) and a
    category filter, then accumulate in a buffer. The buffer is exported once
    it reaches ``export_interval`` messages, or on a final flush, and cleared
    after ``export()`` returns. Subclasses implement ``export()`` and read
    ``self.messages`` or ``self.formatted_messages()``.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._categories = CategoryFilter()
        self._formatter = Formatter()
        self._messages: list[Message] = []
        self._levels: tuple[str, ...] = ()
        self._common_context: dict[str, Any] = {}
        self._log_vars: tuple[str, ...] = ()
        self._variables_provider: VariablesProvider = process_variables
        self._export_interval = DEFAULT_EXPORT_INTERVAL
        self._enabled: bool | EnabledPredicate = True

    @abstractmethod
    def export(self) -> None:
        """Write the buffered messages to the destination."""

    def collect(self, messages: Iterable[Message], final: bool) -> None:
        with self._lock:
            self._messages.extend(self._filter(messages))
            count = len(self._messages)
            if count == 0:
                return
            if not (final or (self._export_interval > 0 and count >= self._export_interval)):
                return
            context_message = self.get_context_message()
            if context_message:
                self._messages.append(
                    Message.raw(
                        INFO,
                        context_message,
                        {"category": DEFAULT_CATEGORY, "time": time.time()},
                    )
                )
            # Zero interval keeps a collect() issued from export() from exporting again.
            old_interval = self._export_interval
            self._export_interval = 0
            try:
                self.export()
            finally:
                self._export_interval = old_interval
            self._messages = []

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def format_message(self, message: Message) -> str:
        return self._formatter.format(message, self._common_context)

    def format_messages(self, separator: str = "") -> str:
        """Format all buffered messages, each followed by ``separator``."""
        return "".join(self.format_message(message) + separator for message in self._messages)

    def formatted_messages(self) -> list[str]:
        return [self.format_message(message) for message in self._messages]

    def get_context_message(self) -> str:
        """Return the variables snapshot appended before export, or an empty string."""
        if not self._log_vars:
            return ""
        return render_snapshot(self._variables_provider(), self._log_vars)

    @property
    def levels(self) -> tuple[str, ...]:
        return self._levels

    def set_levels(self, levels: Iterable[str]) -> Target:
        if isinstance(levels, str):
            raise InvalidArgumentError("The log message levels must be a list of strings, str received.")
        checked = tuple(levels)
        for level in checked:
            validate_level(level)
        self._levels = checked
        return self

    @property
    def categories(self) -> tuple[str, ...]:
        return self._categories.included

    def set_categories(self, categories: Iterable[str]) -> Target:
        self._categories.include(categories)
        return self

    @property
    def except_categories(self) -> tuple[str, ...]:
        return self._categories.excluded

    def set_except(self, categories: Iterable[str]) -> Target:
        self._categories.exclude(categories)
        return self

    @property
    def export_interval(self) -> int:
        return self._export_interval

    def set_export_interval(self, export_interval: int) -> Target:
        self._export_interval = int(export_interval)
        return self

    @property
    def common_context(self) -> dict[str, Any]:
        return dict(self._common_context)

    def set_common_context(self, common_context: Mapping[str, Any]) -> Target:
        self._common_context = dict(common_context)
        return self

    @property
    def log_vars(self) -> tuple[str, ...]:
        return self._log_vars

    def set_log_vars(self, log_vars: Iterable[str]) -> Target:
        self._log_vars = check_specs(log_vars)
        return self

    def set_variables_provider(self, provider: VariablesProvider) -> Target:
        self._variables_provider = provider
        return self

    def set_format(self, format: FormatFunction | None) -> Target:
        self._formatter.set_format(format)
        return self

    def set_prefix(self, prefix: FormatFunction | None) -> Target:
        self._formatter.set_prefix(prefix)
        return self

    @property
    def timestamp_format(self) -> str:
        return self._formatter.timestamp_format

    def set_timestamp_format(self, timestamp_format: str) -> Target:
        self._formatter.set_timestamp_format(timestamp_format)
        return self

    def set_enabled(self, value: bool | EnabledPredicate) -> Target:
        if not isinstance(value, bool) and not callable(value):
            raise InvalidArgumentError(
                "The value indicating whether this log target is enabled must be "
                f"a boolean or callable, {type_name(value)} received."
            )
        self._enabled = value
        return self

    def enable(self) -> Target:
        return self.set_enabled(True)

    def disable(self) -> Target:
        return self.set_enabled(False)

    def is_enabled(self) -> bool:
        if isinstance(self._enabled, bool):
            return self._enabled
        enabled = self._enabled(self)
        if not isinstance(enabled, bool):
            raise EnabledContractError(
                f'The callable "enabled" must return a boolean, {type_name(enabled)} received.'
            )
        return enabled

    def _filter(self, messages: Iterable[Message]) -> list[Message]:
        levels = self._levels
        return [
            message
            for message in messages
            if (not levels or message.level() in levels)
            and not self._categories.is_excluded(message.category())
        ]


__all__ = ["DEFAULT_EXPORT_INTERVAL", "Target"]
