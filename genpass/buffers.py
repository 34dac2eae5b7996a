#!/usr/bin/env python3
"""
Buffer Pool
===========
Reusable scratch buffers for high-volume batch generation.

Buffers hold raw entropy while indices are selected, so they are zeroed
every time they go back into the pool.

Usage:
    pool = BufferPool(buffer_size=1024)

    with pool.borrow(64) as buf:
        source.fill(buf, 64)
        ...
"""

import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional

from genpass.settings import get_setting

DEFAULT_BUFFER_SIZE = 1024
DEFAULT_MAX_POOLED = 64


def zero_buffer(buf: bytearray) -> None:
    """Overwrite every byte of buf in place."""
    buf[:] = bytes(len(buf))


class BufferPool:
    """
    Thread-safe cache of zeroed bytearrays.

    A borrowed buffer is at least as long as requested; buffers that are
    too small are replaced by one twice the size (or the request, if
    larger), like a growable byte buffer.
    """

    def __init__(self,
                 buffer_size: Optional[int] = None,
                 max_pooled: Optional[int] = None):
        """
        Args:
            buffer_size: Initial size of newly created buffers
            max_pooled: Upper bound on idle buffers kept for reuse
        """
        if buffer_size is None:
            buffer_size = get_setting("buffers.buffer_size", DEFAULT_BUFFER_SIZE)
        if max_pooled is None:
            max_pooled = get_setting("buffers.max_pooled", DEFAULT_MAX_POOLED)
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")

        self.buffer_size = buffer_size
        self.max_pooled = max_pooled
        self._free: List[bytearray] = []
        self._lock = threading.Lock()
        self.created = 0
        self.reused = 0

    def _get(self, n: int) -> bytearray:
        with self._lock:
            buf = self._free.pop() if self._free else None
            if buf is not None:
                self.reused += 1
            else:
                self.created += 1

        if buf is None:
            buf = bytearray(max(self.buffer_size, n))
        elif len(buf) < n:
            buf = bytearray(max(2 * len(buf), n))
        return buf

    def _put(self, buf: bytearray) -> None:
        zero_buffer(buf)
        with self._lock:
            if len(self._free) < self.max_pooled:
                self._free.append(buf)

    @contextmanager
    def borrow(self, n: int) -> Iterator[bytearray]:
        """Lend a buffer of at least n bytes; it is zeroed on every exit path."""
        buf = self._get(n)
        try:
            yield buf
        finally:
            self._put(buf)

    @property
    def idle(self) -> int:
        with self._lock:
            return len(self._free)


__all__ = [
    'BufferPool',
    'zero_buffer',
]
