"""Target forwarding messages to a standard library logger."""

from __future__ import annotations

import logging
from typing import Final

from logpipe.levels import ALERT, CRITICAL, DEBUG, EMERGENCY, ERROR, INFO, NOTICE, WARNING
from logpipe.target import Target

LEVEL_MAP: Final[dict[str, int]] = {
    EMERGENCY: logging.CRITICAL,
    ALERT: logging.CRITICAL,
    CRITICAL: logging.CRITICAL,
    ERROR: logging.ERROR,
    WARNING: logging.WARNING,
    NOTICE: logging.INFO,
    INFO: logging.INFO,
    DEBUG: logging.DEBUG,
}


class StdlibTarget(Target):
    """Re-emits each message through ``logging.Logger.log``.

    Category and context are attached as ``logpipe_category`` and
    ``logpipe_context`` record attributes so downstream handlers and
    formatters can use them.
    """

    def __init__(self, logger: logging.Logger | str) -> None:
        super().__init__()
        self._logger = logging.getLogger(logger) if isinstance(logger, str) else logger

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def export(self) -> None:
        for message in self.messages:
            self._logger.log(
                LEVEL_MAP[message.level()],
                "%s",
                message.message(),
                extra={
                    "logpipe_category": message.category(),
                    "logpipe_context": message.context(),
                },
            )
