#!/usr/bin/env python3
"""
Cancellation
============
Caller-supplied cancellation and deadline signal shared by workers.

Usage:
    token = CancelToken(timeout=30)
    results = generator.generate_batch(config, token=token)

    # From another thread:
    token.cancel()
"""

import threading
import time
from typing import Optional

from genpass.errors import Cancelled
from genpass.settings import get_setting

DEFAULT_POLL_INTERVAL = 0.05


class CancelToken:
    """
    Cancellation flag with an optional deadline.

    A child token is cancelled when its parent is, but cancelling the child
    leaves the parent alone; batches use this to stop their own workers
    without touching the caller's token.
    """

    def __init__(self, timeout: Optional[float] = None,
                 parent: Optional['CancelToken'] = None):
        """
        Args:
            timeout: Seconds until the token counts as cancelled (None/0 = never)
            parent: Token whose cancellation propagates to this one
        """
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout else None
        self._parent = parent

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return True
        return self._parent is not None and self._parent.cancelled

    def remaining(self) -> Optional[float]:
        """Seconds left before the nearest deadline, or None when unbounded."""
        deadlines = []
        token = self
        while token is not None:
            if token._deadline is not None:
                deadlines.append(token._deadline - time.monotonic())
            token = token._parent
        if not deadlines:
            return None
        return max(0.0, min(deadlines))

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise Cancelled("operation cancelled")

    def child(self) -> 'CancelToken':
        return CancelToken(parent=self)


def acquire_slot(semaphore: threading.Semaphore,
                 token: Optional[CancelToken] = None,
                 poll_interval: Optional[float] = None) -> None:
    """
    Block until a worker slot is free or the token is cancelled.

    On return the caller owns one slot and must release it. On Cancelled
    no slot is held.
    """
    if token is None:
        semaphore.acquire()
        return

    if poll_interval is None:
        poll_interval = get_setting("cancel.poll_interval", DEFAULT_POLL_INTERVAL)

    while True:
        token.raise_if_cancelled()
        wait = poll_interval
        remaining = token.remaining()
        if remaining is not None:
            wait = min(wait, remaining)
        if semaphore.acquire(timeout=wait):
            if token.cancelled:
                semaphore.release()
                raise Cancelled("operation cancelled")
            return


__all__ = [
    'CancelToken',
    'acquire_slot',
]
