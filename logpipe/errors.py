"""Exception taxonomy and recoverable-error policy helpers."""

from __future__ import annotations

import logging
from typing import TypeAlias


class LogError(Exception):
    """Base class for all logpipe errors."""


class InvalidArgumentError(LogError, ValueError):
    """Raised for malformed arguments passed to a logging call or setter."""


class InvalidLevelError(InvalidArgumentError):
    """Raised when a message is built with an unknown level name."""


class InvalidCategoryError(LogError, TypeError):
    """Raised when a message context carries a non-string category."""


class InvalidTimeError(LogError, TypeError):
    """Raised when a message context carries a time value of unsupported type."""


class ContractViolationError(LogError, RuntimeError):
    """Raised when a configured callable returns a value of the wrong type."""


class FormatContractError(ContractViolationError):
    """Custom format or prefix callable did not return a string."""


class EnabledContractError(ContractViolationError):
    """Custom ``enabled`` predicate did not return a boolean."""


# Bounded set of errors tolerated by best-effort probes (memory, stream metadata).
RecoverableErrors: TypeAlias = tuple[type[BaseException], ...]
RECOVERABLE_ERRORS: RecoverableErrors = (
    RuntimeError,
    OSError,
    ValueError,
    TypeError,
    AttributeError,
)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *,
    level: int = logging.DEBUG,
) -> None:
    """Emit observability for a tolerated recoverable exception."""
    logger.log(level, message, exc_info=True)


def type_name(value: object) -> str:
    """Return a short type name used in error messages."""
    if value is None:
        return "None"
    return type(value).__name__


__all__ = [
    "ContractViolationError",
    "EnabledContractError",
    "FormatContractError",
    "InvalidArgumentError",
    "InvalidCategoryError",
    "InvalidLevelError",
    "InvalidTimeError",
    "LogError",
    "RECOVERABLE_ERRORS",
    "log_recoverable",
    "type_name",
]
