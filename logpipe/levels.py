"""Log level names and validation."""

from __future__ import annotations

from typing import Final

from logpipe.errors import InvalidArgumentError, type_name

EMERGENCY: Final = "emergency"
ALERT: Final = "alert"
CRITICAL: Final = "critical"
ERROR: Final = "error"
WARNING: Final = "warning"
NOTICE: Final = "notice"
INFO: Final = "info"
DEBUG: Final = "debug"

# Ordered from most to least severe.
LEVELS: Final[tuple[str, ...]] = (
    EMERGENCY,
    ALERT,
    CRITICAL,
    ERROR,
    WARNING,
    NOTICE,
    INFO,
    DEBUG,
)


def is_level(value: object) -> bool:
    return isinstance(value, str) and value in LEVELS


def validate_level(level: object) -> str:
    """Return ``level`` unchanged or raise ``InvalidArgumentError``."""
    if not isinstance(level, str):
        raise InvalidArgumentError(
            f"The log message level must be a string, {type_name(level)} provided."
        )
    if level not in LEVELS:
        supported = '", "'.join(LEVELS)
        raise InvalidArgumentError(
            f'Invalid log message level "{level}" provided. '
            f'The following values are supported: "{supported}".'
        )
    return level


__all__ = [
    "ALERT",
    "CRITICAL",
    "DEBUG",
    "EMERGENCY",
    "ERROR",
    "INFO",
    "LEVELS",
    "NOTICE",
    "WARNING",
    "is_level",
    "validate_level",
]
