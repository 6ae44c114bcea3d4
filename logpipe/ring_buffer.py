"""Fixed-capacity ring buffer for retained log messages."""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """Drop-oldest ring buffer with O(1) append."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._capacity = int(capacity)
        self._items: list[T | None] = [None] * self._capacity
        self._write_index = 0
        self._size = 0
        self._dropped = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return self._size

    @property
    def dropped(self) -> int:
        """Number of items overwritten since creation or the last clear."""
        return self._dropped

    def append(self, value: T) -> None:
        if self._size == self._capacity:
            self._dropped += 1
        self._items[self._write_index] = value
        self._write_index = (self._write_index + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1

    def extend(self, values: list[T] | tuple[T, ...]) -> None:
        for value in values:
            self.append(value)

    def clear(self) -> None:
        self._items = [None] * self._capacity
        self._write_index = 0
        self._size = 0
        self._dropped = 0

    def snapshot(self, *, limit: int | None = None) -> list[T]:
        if self._size == 0:
            return []
        start = 0 if self._size < self._capacity else self._write_index
        out: list[T] = []
        for i in range(self._size):
            item = self._items[(start + i) % self._capacity]
            if item is not None:
                out.append(item)
        if limit is None or limit >= len(out):
            return out
        if limit <= 0:
            return []
        return out[-int(limit) :]
