"""Logger and target configuration sourced from environment."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from logpipe.context import ContextProvider, SystemContextProvider
from logpipe.formatter import DEFAULT_TIMESTAMP_FORMAT
from logpipe.levels import LEVELS
from logpipe.logger import DEFAULT_FLUSH_INTERVAL, Logger
from logpipe.target import DEFAULT_EXPORT_INTERVAL, Target


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    return value if value else default


def _csv(name: str) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return ()
    values = [part.strip() for part in raw.split(",")]
    return tuple(dict.fromkeys(value for value in values if value))


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Immutable logger pipeline configuration."""

    flush_interval: int = DEFAULT_FLUSH_INTERVAL
    export_interval: int = DEFAULT_EXPORT_INTERVAL
    trace_level: int = 0
    excluded_trace_paths: tuple[str, ...] = ()
    levels: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    except_categories: tuple[str, ...] = ()
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    flush_on_exit: bool = True


def load_log_config() -> LogConfig:
    """Load configuration from ``LOGPIPE_*`` environment variables."""
    levels = tuple(dict.fromkeys(item.lower() for item in _csv("LOGPIPE_LEVELS")))
    levels = tuple(level for level in levels if level in LEVELS)
    return LogConfig(
        flush_interval=max(0, _int("LOGPIPE_FLUSH_INTERVAL", DEFAULT_FLUSH_INTERVAL)),
        export_interval=max(0, _int("LOGPIPE_EXPORT_INTERVAL", DEFAULT_EXPORT_INTERVAL)),
        trace_level=max(0, _int("LOGPIPE_TRACE_LEVEL", 0)),
        excluded_trace_paths=_csv("LOGPIPE_EXCLUDED_TRACE_PATHS"),
        levels=levels,
        categories=_csv("LOGPIPE_CATEGORIES"),
        except_categories=_csv("LOGPIPE_EXCEPT"),
        timestamp_format=_str("LOGPIPE_TIMESTAMP_FORMAT", DEFAULT_TIMESTAMP_FORMAT),
        flush_on_exit=_flag("LOGPIPE_FLUSH_ON_EXIT", True),
    )


def configure_target(target: Target, config: LogConfig) -> Target:
    """Apply the filtering and formatting parts of ``config`` to ``target``."""
    return (
        target.set_levels(config.levels)
        .set_categories(config.categories)
        .set_except(config.except_categories)
        .set_export_interval(config.export_interval)
        .set_timestamp_format(config.timestamp_format)
    )


def create_logger(
    targets: Iterable[Target] | Mapping[Any, Target] = (),
    config: LogConfig | None = None,
    context_provider: ContextProvider | None = None,
) -> Logger:
    """Build a logger with every target configured from ``config``.

    Without an explicit ``config`` the environment is read. A system context
    provider honouring the trace settings is used unless one is given.
    """
    cfg = config if config is not None else load_log_config()
    if not isinstance(targets, Mapping):
        targets = list(targets)
    items = targets.values() if isinstance(targets, Mapping) else targets
    for target in items:
        configure_target(target, cfg)
    provider = context_provider or SystemContextProvider(
        trace_level=cfg.trace_level,
        excluded_trace_paths=cfg.excluded_trace_paths,
    )
    return Logger(
        targets,
        provider,
        flush_interval=cfg.flush_interval,
        flush_on_exit=cfg.flush_on_exit,
    )


__all__ = ["LogConfig", "configure_target", "create_logger", "load_log_config"]
