"""Context providers that enrich every logged message."""

from __future__ import annotations

import logging
import os
import sys
import time
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol

import psutil

from logpipe.errors import RECOVERABLE_ERRORS, InvalidArgumentError, log_recoverable, type_name
from logpipe.message import DEFAULT_CATEGORY

_LOG = logging.getLogger("logpipe.context")
_PACKAGE_DIR = str(Path(__file__).resolve().parent) + os.sep
_PROCESS: psutil.Process | None = None


class ContextProvider(Protocol):
    """Supplies default context values merged into each message."""

    def get_context(self) -> dict[str, Any]:
        """Return context values; caller-supplied keys take precedence."""


def memory_usage() -> int:
    """Return the resident set size of the current process in bytes, or 0."""
    global _PROCESS
    try:
        if _PROCESS is None:
            _PROCESS = psutil.Process(os.getpid())
        return int(_PROCESS.memory_info().rss)
    except (psutil.Error, *RECOVERABLE_ERRORS):
        _PROCESS = None
        log_recoverable(_LOG, "context_memory_probe_failed")
        return 0


class SystemContextProvider:
    """Provides ``time``, ``trace``, ``memory`` and ``category`` defaults.

    When ``trace_level`` is positive, up to that many caller frames are
    recorded, skipping frames inside this package and frames whose file path
    contains any of ``excluded_trace_paths``.
    """

    def __init__(
        self,
        trace_level: int = 0,
        excluded_trace_paths: Iterable[str] = (),
    ) -> None:
        self._trace_level = int(trace_level)
        self._excluded_trace_paths = _checked_paths(excluded_trace_paths)

    @property
    def trace_level(self) -> int:
        return self._trace_level

    @property
    def excluded_trace_paths(self) -> tuple[str, ...]:
        return self._excluded_trace_paths

    def set_trace_level(self, trace_level: int) -> SystemContextProvider:
        self._trace_level = int(trace_level)
        return self

    def set_excluded_trace_paths(self, paths: Iterable[str]) -> SystemContextProvider:
        self._excluded_trace_paths = _checked_paths(paths)
        return self

    def get_context(self) -> dict[str, Any]:
        return {
            "time": time.time(),
            "trace": self._collect_trace(),
            "memory": memory_usage(),
            "category": DEFAULT_CATEGORY,
        }

    def _collect_trace(self) -> list[dict[str, Any]]:
        if self._trace_level <= 0:
            return []
        traces: list[dict[str, Any]] = []
        frame = sys._getframe(1)
        while frame is not None and len(traces) < self._trace_level:
            code = frame.f_code
            file = code.co_filename
            if not _is_internal(file) and not any(path in file for path in self._excluded_trace_paths):
                traces.append(_describe(frame))
            frame = frame.f_back
        return traces


class CommonContextProvider:
    """Provides a fixed set of context values."""

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = dict(data)

    def get_context(self) -> dict[str, Any]:
        return dict(self._data)


class CompositeContextProvider:
    """Merges several providers; later providers override earlier keys."""

    def __init__(self, *providers: ContextProvider) -> None:
        self._providers = providers

    def get_context(self) -> dict[str, Any]:
        context: dict[str, Any] = {}
        for provider in self._providers:
            context.update(provider.get_context())
        return context


def _describe(frame: Any) -> dict[str, Any]:
    code = frame.f_code
    qualname = getattr(code, "co_qualname", code.co_name)
    entry: dict[str, Any] = {
        "file": code.co_filename,
        "line": frame.f_lineno,
        "function": code.co_name,
    }
    owner, _, _ = qualname.rpartition(".")
    if owner and not owner.endswith("<locals>"):
        entry["class"] = owner
    return entry


def _is_internal(file: str) -> bool:
    return file.startswith(_PACKAGE_DIR)


def _checked_paths(paths: Iterable[str]) -> tuple[str, ...]:
    if isinstance(paths, str):
        raise InvalidArgumentError("The trace paths must be a list of strings, str received.")
    checked = tuple(paths)
    for path in checked:
        if not isinstance(path, str):
            raise InvalidArgumentError(f"The trace path must be a string, {type_name(path)} received.")
    return checked


__all__ = [
    "CommonContextProvider",
    "CompositeContextProvider",
    "ContextProvider",
    "SystemContextProvider",
    "memory_usage",
]
