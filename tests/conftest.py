from __future__ import annotations

from collections.abc import Iterable

import pytest

from logpipe import CommonContextProvider, Logger, Message, Target


class RecordingTarget(Target):
    """Target that records every export batch."""

    def __init__(self, *, export_interval: int = 1000) -> None:
        super().__init__()
        self.set_export_interval(export_interval)
        self.batches: list[list[Message]] = []

    def export(self) -> None:
        self.batches.append(list(self.messages))

    @property
    def export_count(self) -> int:
        return len(self.batches)

    @property
    def exported(self) -> list[Message]:
        return [message for batch in self.batches for message in batch]

    def texts(self) -> list[str]:
        return [message.message() for message in self.exported]


class FailingTarget(RecordingTarget):
    """Target whose export always raises."""

    def __init__(self, error: Exception | None = None, **kwargs: int) -> None:
        super().__init__(**kwargs)
        self.error = error or RuntimeError("boom")
        self.attempts = 0

    def export(self) -> None:
        self.attempts += 1
        raise self.error


class RecordingLogger(Logger):
    """Logger capturing every dispatch call."""

    def __init__(self, targets: Iterable[Target] = (), **kwargs: object) -> None:
        super().__init__(
            targets,
            CommonContextProvider({"category": "application"}),
            flush_on_exit=False,
            **kwargs,
        )
        self.dispatched: list[tuple[list[Message], bool]] = []

    def dispatch(self, messages: list[Message], final: bool) -> None:
        self.dispatched.append((list(messages), final))
        super().dispatch(messages, final)


@pytest.fixture
def recording_target() -> RecordingTarget:
    return RecordingTarget()


@pytest.fixture
def logger(recording_target: RecordingTarget) -> Logger:
    return Logger([recording_target], flush_on_exit=False)
