"""Reusable string builders for script assembly.

Generating a script concatenates many small pieces. Builders are pooled so
repeated `generate()` calls reuse their buffers. The pool is shared by every
caller and is safe to use from several threads at once.
"""

from __future__ import annotations

import io
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from ..constants import POOL_INITIAL_BUILDERS, POOL_MAX_BUILDER_SIZE

__all__ = ["BuilderPool", "build_string", "default_pool"]


class BuilderPool:
    """A thread-safe pool of `io.StringIO` builders.

    Builders that grew beyond `max_size` characters are discarded on release
    instead of being kept, so one oversized script does not pin its memory.
    """

    def __init__(self, initial: int = POOL_INITIAL_BUILDERS, max_size: int = POOL_MAX_BUILDER_SIZE) -> None:
        self.max_size = max_size
        self._lock = threading.Lock()
        self._free: list[io.StringIO] = [io.StringIO() for _ in range(initial)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._free)

    def acquire(self) -> io.StringIO:
        """Take a builder from the pool, or create one if the pool is empty."""
        with self._lock:
            if self._free:
                return self._free.pop()
        return io.StringIO()

    def release(self, builder: io.StringIO) -> bool:
        """Give a builder back.

        Returns:
            True if the builder was kept for reuse, False if it was dropped
        """
        size = builder.seek(0, io.SEEK_END)
        if size > self.max_size:
            return False
        builder.seek(0)
        builder.truncate()
        with self._lock:
            self._free.append(builder)
        return True

    @contextmanager
    def builder(self) -> Iterator[io.StringIO]:
        """Context manager form of acquire/release."""
        buf = self.acquire()
        try:
            yield buf
        finally:
            self.release(buf)


default_pool = BuilderPool()


def build_string(fill: Callable[[io.StringIO], object], pool: BuilderPool | None = None) -> str:
    """Build a string with a pooled builder.

    Args:
        fill: Called with the builder; writes the content
        pool: Pool to use, the module-wide pool by default

    Returns:
        The built string
    """
    with (pool or default_pool).builder() as buf:
        fill(buf)
        return buf.getvalue()
