#!/usr/bin/env python3
"""
Entropy Source
==============
Cryptographically secure random bytes from the operating system.

The source is fail-closed: the first read failure marks it unhealthy for
the rest of its life, and every later call fails without touching the OS
again.

Usage:
    from genpass.entropy import EntropySource

    source = EntropySource()
    value = source.generate_uint64()
    generated, errors = source.stats()
"""

import os
import threading
import logging
from typing import Callable, Tuple

from genpass.errors import EntropyUnavailable

logger = logging.getLogger(__name__)

UINT64_BYTES = 8


class EntropySource:
    """
    Wrapper around the OS random byte source with health tracking.

    One instance is owned by one generator; nothing here is process-wide.
    """

    def __init__(self, reader: Callable[[int], bytes] = os.urandom):
        """
        Args:
            reader: Callable returning n secure random bytes (os.urandom)
        """
        self._reader = reader
        self._healthy = True
        self._generated = 0
        self._errors = 0
        self._counter_lock = threading.Lock()

    @property
    def healthy(self) -> bool:
        return self._healthy

    def _fail(self, reason: str) -> None:
        with self._counter_lock:
            self._errors += 1
        self._healthy = False
        logger.error(f"Entropy source marked unhealthy: {reason}")

    def generate_bytes(self, n: int) -> bytes:
        """
        Return n cryptographically secure random bytes.

        Raises:
            EntropyUnavailable: The source failed now or previously
        """
        if not self._healthy:
            raise EntropyUnavailable("entropy source is unhealthy")

        try:
            data = self._reader(n)
        except Exception as e:
            self._fail(type(e).__name__)
            raise EntropyUnavailable("failed to generate random bytes") from e

        if len(data) != n:
            self._fail("short read")
            raise EntropyUnavailable("failed to generate random bytes")

        with self._counter_lock:
            self._generated += n
        return data

    def generate_uint64(self) -> int:
        """Return 8 random bytes read as an unsigned little-endian integer."""
        return int.from_bytes(self.generate_bytes(UINT64_BYTES), 'little')

    def fill(self, buffer: bytearray, n: int) -> None:
        """Overwrite the first n bytes of buffer with fresh random bytes."""
        buffer[:n] = self.generate_bytes(n)

    def stats(self) -> Tuple[int, int]:
        """Return (bytes generated, errors seen)."""
        with self._counter_lock:
            return self._generated, self._errors


__all__ = [
    'EntropySource',
    'UINT64_BYTES',
]
