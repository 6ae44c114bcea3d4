"""Target writing formatted messages to a text stream or file."""

from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import TextIO

from logpipe.errors import InvalidArgumentError, type_name
from logpipe.target import Target


class StreamTarget(Target):
    """Appends formatted messages, one per line, to a stream or file path.

    Paths are opened in append mode for every export so external rotation
    tools can move the file between exports.
    """

    def __init__(self, stream: TextIO | str | Path | None = None) -> None:
        super().__init__()
        if stream is None:
            stream = sys.stdout
        if not isinstance(stream, (str, Path)) and not callable(getattr(stream, "write", None)):
            raise InvalidArgumentError(
                "Invalid stream provided. It must be a path or a writable text stream, "
                f"{type_name(stream)} received."
            )
        self._stream = stream
        self._write_lock = threading.Lock()

    @property
    def stream(self) -> TextIO | str | Path:
        return self._stream

    def export(self) -> None:
        text = self.format_messages("\n")
        with self._write_lock:
            if isinstance(self._stream, (str, Path)):
                path = Path(self._stream)
                path.parent.mkdir(parents=True, exist_ok=True)
                with path.open("a", encoding="utf-8") as out:
                    out.write(text)
                return
            self._stream.write(text)
            flush = getattr(self._stream, "flush", None)
            if callable(flush):
                flush()
