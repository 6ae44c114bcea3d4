"""Reference log targets."""

from logpipe.targets.memory import MemoryTarget
from logpipe.targets.stdlib import LEVEL_MAP, StdlibTarget
from logpipe.targets.stream import StreamTarget

__all__ = ["LEVEL_MAP", "MemoryTarget", "StdlibTarget", "StreamTarget"]
