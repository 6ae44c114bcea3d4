"""Central logger: buffers messages and dispatches them to targets."""

from __future__ import annotations

import atexit
import logging
import threading
import time
from collections.abc import Iterable, Mapping
from typing import Any

from logpipe.context import ContextProvider, SystemContextProvider
from logpipe.errors import InvalidArgumentError, type_name
from logpipe.levels import ALERT, CRITICAL, DEBUG, EMERGENCY, ERROR, INFO, NOTICE, WARNING
from logpipe.levels import validate_level as _validate_level
from logpipe.message import Message
from logpipe.target import Target

_LOG = logging.getLogger("logpipe")

DEFAULT_FLUSH_INTERVAL = 1000


class Logger:
    """Records messages in memory and sends them to targets.

    Messages are flushed once ``flush_interval`` of them have accumulated
    (0 disables automatic flushing) and on interpreter exit. A target that
    raises while collecting or exporting is disabled and a warning message
    describing the failure is delivered to the remaining targets.

    Flushes are serialized by a re-entrant lock held across the buffer swap
    and dispatch, so batches reach targets in log order even when several
    threads flush at once. Targets may still log through the same logger
    while collecting.

    The exit hook is registered when the logger is created. ``atexit`` runs
    hooks in reverse order, so hooks registered before the logger run after
    its final flush and anything they log is never exported. Code that logs
    from such hooks should create the logger with ``flush_on_exit=False``
    and call ``close()`` from its own last shutdown step.
    """

    def __init__(
        self,
        targets: Iterable[Target] | Mapping[Any, Target] = (),
        context_provider: ContextProvider | None = None,
        *,
        flush_interval: int = DEFAULT_FLUSH_INTERVAL,
        flush_on_exit: bool = True,
    ) -> None:
        self._targets = _checked_targets(targets)
        self._context_provider: ContextProvider = context_provider or SystemContextProvider()
        self._flush_interval = int(flush_interval)
        self._messages: list[Message] = []
        self._lock = threading.Lock()
        self._flush_lock = threading.RLock()
        self._exit_hook_registered = False
        if flush_on_exit:
            atexit.register(self._flush_on_exit)
            self._exit_hook_registered = True

    @staticmethod
    def validate_level(level: object) -> str:
        return _validate_level(level)

    @property
    def targets(self) -> dict[Any, Target]:
        return dict(self._targets)

    @property
    def messages(self) -> tuple[Message, ...]:
        """Messages logged since the last flush."""
        with self._lock:
            return tuple(self._messages)

    @property
    def flush_interval(self) -> int:
        return self._flush_interval

    def set_flush_interval(self, flush_interval: int) -> Logger:
        self._flush_interval = int(flush_interval)
        return self

    def log(self, level: str, message: object, context: Mapping[str, Any] | None = None) -> None:
        merged = dict(self._context_provider.get_context())
        if context:
            merged.update(context)
        record = Message(level, message, merged)

        with self._lock:
            self._messages.append(record)
            should_flush = self._flush_interval > 0 and len(self._messages) >= self._flush_interval
        if should_flush:
            self.flush()

    def emergency(self, message: object, context: Mapping[str, Any] | None = None) -> None:
        self.log(EMERGENCY, message, context)

    def alert(self, message: object, context: Mapping[str, Any] | None = None) -> None:
        self.log(ALERT, message, context)

    def critical(self, message: object, context: Mapping[str, Any] | None = None) -> None:
        self.log(CRITICAL, message, context)

    def error(self, message: object, context: Mapping[str, Any] | None = None) -> None:
        self.log(ERROR, message, context)

    def warning(self, message: object, context: Mapping[str, Any] | None = None) -> None:
        self.log(WARNING, message, context)

    def notice(self, message: object, context: Mapping[str, Any] | None = None) -> None:
        self.log(NOTICE, message, context)

    def info(self, message: object, context: Mapping[str, Any] | None = None) -> None:
        self.log(INFO, message, context)

    def debug(self, message: object, context: Mapping[str, Any] | None = None) -> None:
        self.log(DEBUG, message, context)

    def flush(self, final: bool = False) -> None:
        """Hand all buffered messages to the targets.

        Messages logged while targets are processing go to a fresh buffer and
        are delivered by the next flush.
        """
        with self._flush_lock:
            with self._lock:
                messages, self._messages = self._messages, []
            self.dispatch(messages, final)

    def dispatch(self, messages: list[Message], final: bool) -> None:
        target_errors: list[Message] = []
        for key, target in self._targets.items():
            if not target.is_enabled():
                continue
            try:
                target.collect(messages, final)
            except Exception as exc:
                target.disable()
                _LOG.warning(
                    "target_disabled target=%s error=%s: %s",
                    key,
                    type(exc).__name__,
                    exc,
                )
                target_errors.append(
                    Message.raw(
                        WARNING,
                        f"Unable to send log via {type(target).__name__}: "
                        f"{type(exc).__name__}: {exc}",
                        {"time": time.time(), "exception": exc},
                    )
                )
        if target_errors:
            self.dispatch(target_errors, True)

    def close(self) -> None:
        """Unregister the exit hook and perform the final flush now."""
        if self._exit_hook_registered:
            atexit.unregister(self._flush_on_exit)
            self._exit_hook_registered = False
        self._flush_on_exit()

    def _flush_on_exit(self) -> None:
        # Regular flush first, then a final one so every target exports what it holds.
        self.flush()
        self.flush(final=True)


def _checked_targets(targets: Iterable[Target] | Mapping[Any, Target]) -> dict[Any, Target]:
    items = targets.items() if isinstance(targets, Mapping) else enumerate(targets)
    checked: dict[Any, Target] = {}
    for key, target in items:
        if not isinstance(target, Target):
            raise InvalidArgumentError(
                f"You must provide an instance of Target, {type_name(target)} received."
            )
        checked[key] = target
    return checked


__all__ = ["DEFAULT_FLUSH_INTERVAL", "Logger"]
