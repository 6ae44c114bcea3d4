"""Structured logging pipeline: buffered messages, filtered targets, text formatting."""

from logpipe.category_filter import CategoryFilter
from logpipe.config import LogConfig, configure_target, create_logger, load_log_config
from logpipe.context import (
    CommonContextProvider,
    CompositeContextProvider,
    ContextProvider,
    SystemContextProvider,
    memory_usage,
)
from logpipe.dumper import render
from logpipe.errors import (
    ContractViolationError,
    EnabledContractError,
    FormatContractError,
    InvalidArgumentError,
    InvalidCategoryError,
    InvalidLevelError,
    InvalidTimeError,
    LogError,
)
from logpipe.formatter import DEFAULT_TIMESTAMP_FORMAT, Formatter
from logpipe.json_codec import json_format
from logpipe.levels import (
    ALERT,
    CRITICAL,
    DEBUG,
    EMERGENCY,
    ERROR,
    INFO,
    LEVELS,
    NOTICE,
    WARNING,
    validate_level,
)
from logpipe.logger import Logger
from logpipe.message import DEFAULT_CATEGORY, Message
from logpipe.placeholders import interpolate, parse_path, resolve
from logpipe.target import Target
from logpipe.targets import MemoryTarget, StdlibTarget, StreamTarget

__all__ = [
    "ALERT",
    "CRITICAL",
    "CategoryFilter",
    "CommonContextProvider",
    "CompositeContextProvider",
    "ContextProvider",
    "ContractViolationError",
    "DEBUG",
    "DEFAULT_CATEGORY",
    "DEFAULT_TIMESTAMP_FORMAT",
    "EMERGENCY",
    "ERROR",
    "EnabledContractError",
    "FormatContractError",
    "Formatter",
    "INFO",
    "InvalidArgumentError",
    "InvalidCategoryError",
    "InvalidLevelError",
    "InvalidTimeError",
    "LEVELS",
    "LogConfig",
    "LogError",
    "Logger",
    "MemoryTarget",
    "Message",
    "NOTICE",
    "StdlibTarget",
    "StreamTarget",
    "SystemContextProvider",
    "Target",
    "WARNING",
    "configure_target",
    "create_logger",
    "interpolate",
    "json_format",
    "load_log_config",
    "memory_usage",
    "parse_path",
    "render",
    "resolve",
    "validate_level",
]
