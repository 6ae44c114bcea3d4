"""In-memory target retaining exported messages."""

from __future__ import annotations

from logpipe.message import Message
from logpipe.ring_buffer import RingBuffer
from logpipe.target import Target


class MemoryTarget(Target):
    """Keeps the most recent exported messages in a bounded buffer."""

    def __init__(self, capacity: int = 10_000) -> None:
        super().__init__()
        self._exported = RingBuffer[Message](capacity=capacity)
        self._export_count = 0

    @property
    def export_count(self) -> int:
        return self._export_count

    @property
    def capacity(self) -> int:
        return self._exported.capacity

    def export(self) -> None:
        self._export_count += 1
        self._exported.extend(self.messages)

    def exported(self, *, limit: int | None = None) -> list[Message]:
        return self._exported.snapshot(limit=limit)

    def clear(self) -> None:
        self._exported.clear()
        self._export_count = 0
