#!/usr/bin/env python3
"""
Crypto Generator
================
Produces secure random strings from a GeneratorConfig.

Each generator owns its entropy source, buffer pool and worker-slot
semaphore; separate instances share nothing.

Usage:
    from genpass import CryptoGenerator, GeneratorConfig, OutputFormat

    gen = CryptoGenerator()
    token = gen.generate(GeneratorConfig(format=OutputFormat.HYPHENATED))
    batch = gen.generate_batch(GeneratorConfig(format="compact", length=10, count=5))

    for value, error in gen.generate_stream(config):
        ...
"""

import threading
import time
import logging
from typing import Iterator, List, Optional, Tuple

from genpass.buffers import BufferPool
from genpass.cancel import CancelToken, acquire_slot
from genpass.config import (
    GeneratorConfig,
    OutputFormat,
    load_limits,
    GROUP_COUNT,
    GROUP_LENGTH,
    GROUP_SEPARATOR,
)
from genpass.entropy import EntropySource
from genpass.errors import GenpassError
from genpass.parallel import BatchCoordinator
from genpass.sampler import sample_string
from genpass.stats import GeneratorStats

logger = logging.getLogger(__name__)


class CryptoGenerator:
    """
    Cryptographically secure string generator.

    At most `max_concurrent` generations run at once; every call holds one
    slot from a bounded semaphore and gives it back on every exit path.
    """

    def __init__(self,
                 max_concurrent: Optional[int] = None,
                 entropy: Optional[EntropySource] = None,
                 buffer_pool: Optional[BufferPool] = None):
        """
        Args:
            max_concurrent: Worker slots (default: limits.max_concurrent_generators)
            entropy: Entropy source (default: a fresh os.urandom-backed one)
            buffer_pool: Scratch buffer pool (default: a fresh one)
        """
        limits = load_limits()
        if max_concurrent is None:
            max_concurrent = limits.max_concurrent_generators
        if max_concurrent <= 0:
            raise ValueError("max_concurrent must be positive")

        self.entropy = entropy or EntropySource()
        self.buffer_pool = buffer_pool or BufferPool()
        self.max_concurrent = max_concurrent
        self.max_retries = limits.max_rejection_retries
        self._slots = threading.BoundedSemaphore(max_concurrent)

        self._stats_lock = threading.Lock()
        self._generated = 0
        self._errors = 0
        self._duration_ns = 0
        self._busy = 0

    # -------------------------------------------------------------------------
    # Single string
    # -------------------------------------------------------------------------

    def generate(self, config: GeneratorConfig,
                 token: Optional[CancelToken] = None) -> str:
        """
        Generate one string.

        Args:
            config: Generation request; validated before any entropy is used
            token: Cancellation signal (default: one built from config.timeout)

        Raises:
            InvalidConfig, EntropyUnavailable, ExcessiveRejection, Cancelled
        """
        try:
            config = config.validate()
        except GenpassError:
            self._record_error()
            raise
        if token is None:
            token = CancelToken(timeout=config.timeout)
        return self.generate_validated(config, token)

    def generate_validated(self, config: GeneratorConfig,
                           token: Optional[CancelToken] = None) -> str:
        """Generate one string from a config that already went through validate()."""
        start = time.perf_counter_ns()
        acquire_slot(self._slots, token)
        with self._stats_lock:
            self._busy += 1
        try:
            if config.format is OutputFormat.COMPACT:
                result = self._sample(config.length, config, token)
            else:
                result = self._hyphenated(config, token)
        except GenpassError as e:
            self._record_error()
            logger.debug(f"Generation failed: {type(e).__name__}")
            raise
        finally:
            with self._stats_lock:
                self._busy -= 1
                self._duration_ns += time.perf_counter_ns() - start
            self._slots.release()

        with self._stats_lock:
            self._generated += 1
        return result

    def _hyphenated(self, config: GeneratorConfig,
                    token: Optional[CancelToken]) -> str:
        # Groups are always joined 1-2-3
        parts = [self._sample(GROUP_LENGTH, config, token) for _ in range(GROUP_COUNT)]
        return GROUP_SEPARATOR.join(parts)

    def _sample(self, length: int, config: GeneratorConfig,
                token: Optional[CancelToken]) -> str:
        return sample_string(
            self.entropy,
            config.charset,
            length,
            pool=self.buffer_pool,
            token=token,
            max_retries=self.max_retries,
        )

    # -------------------------------------------------------------------------
    # Batches
    # -------------------------------------------------------------------------

    def generate_batch(self, config: GeneratorConfig,
                       token: Optional[CancelToken] = None) -> List[str]:
        """Generate config.count strings in input order; see BatchCoordinator."""
        return BatchCoordinator(self).generate_batch(config, token)

    def generate_stream(self, config: GeneratorConfig,
                        token: Optional[CancelToken] = None
                        ) -> Iterator[Tuple[str, Optional[GenpassError]]]:
        """Lazily yield (string, error) pairs; see BatchCoordinator."""
        return BatchCoordinator(self).generate_stream(config, token)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def _record_error(self) -> None:
        with self._stats_lock:
            self._errors += 1

    def stats(self) -> GeneratorStats:
        """Snapshot of generator and entropy counters."""
        with self._stats_lock:
            generated = self._generated
            errors = self._errors
            duration_ns = self._duration_ns
            busy = self._busy
        entropy_bytes, entropy_errors = self.entropy.stats()

        avg = (duration_ns / generated) / 1e9 if generated else 0.0
        return GeneratorStats(
            generated=generated,
            errors=errors,
            avg_duration=avg,
            entropy_bytes=entropy_bytes,
            entropy_errors=entropy_errors,
            entropy_healthy=self.entropy.healthy,
            workers_busy=busy,
            workers_capacity=self.max_concurrent,
        )


__all__ = [
    'CryptoGenerator',
]
