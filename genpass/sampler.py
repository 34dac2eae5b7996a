#!/usr/bin/env python3
"""
Unbiased Sampler
================
Maps uniformly random 64-bit values onto character set indices without
modulo bias.

Two paths, chosen by a flag precomputed on the CharacterSet:

- Power-of-two alphabets: index = value & (size - 1). Masking a uniform
  bit pattern to k low bits is uniform over [0, 2**k).
- Everything else: rejection sampling. 2**64 is not a multiple of the
  alphabet size, so plain `value % size` over-represents low remainders.
  Values at or above the largest multiple of size that fits are thrown
  away and redrawn; the accepted ones split evenly across all indices.

Redraws are capped per character. Each draw is accepted with probability
above one half for any alphabet of 256 symbols or fewer, so hitting the
cap means the source is misbehaving, not bad luck.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from genpass.buffers import BufferPool, zero_buffer
from genpass.cancel import CancelToken
from genpass.charset import CharacterSet
from genpass.entropy import EntropySource, UINT64_BYTES
from genpass.errors import ExcessiveRejection, InvalidConfig
from genpass.settings import get_setting

logger = logging.getLogger(__name__)

MAX_UINT64 = (1 << 64) - 1
DEFAULT_MAX_RETRIES = 10


def rejection_limit(size: int) -> int:
    """Largest multiple of size not exceeding MAX_UINT64; draws >= this are rejected."""
    return MAX_UINT64 - (MAX_UINT64 % size)


def select_index(value: int,
                 charset: CharacterSet,
                 entropy: EntropySource,
                 max_retries: int = DEFAULT_MAX_RETRIES) -> int:
    """
    Turn one random 64-bit value into an unbiased index into charset.

    Args:
        value: Uniform random integer in [0, 2**64)
        charset: Target alphabet
        entropy: Source for redraws on the rejection path
        max_retries: Redraws allowed before giving up

    Returns:
        Index in [0, len(charset))

    Raises:
        ExcessiveRejection: Every redraw landed in the rejected region
        EntropyUnavailable: A redraw failed
    """
    if charset.is_power_of_two:
        return value & charset.mask

    size = len(charset)
    limit = rejection_limit(size)
    retries = 0
    while value >= limit:
        if retries >= max_retries:
            logger.warning(
                f"Rejection sampling gave up after {retries} redraws; "
                "possible entropy anomaly"
            )
            raise ExcessiveRejection("too many retries in random sampling")
        value = entropy.generate_uint64()
        retries += 1
    return value % size


def sample_string(entropy: EntropySource,
                  charset: CharacterSet,
                  length: int,
                  pool: Optional[BufferPool] = None,
                  token: Optional[CancelToken] = None,
                  max_retries: Optional[int] = None) -> str:
    """
    Draw `length` unbiased symbols from charset.

    One bulk read fills a scratch buffer with a 64-bit value per character;
    redraws on the rejection path come one value at a time. The scratch
    buffer and the index list are zeroed before this returns or raises.
    """
    if length <= 0:
        raise InvalidConfig("length must be positive")
    if max_retries is None:
        max_retries = get_setting("limits.max_rejection_retries", DEFAULT_MAX_RETRIES)

    needed = length * UINT64_BYTES
    indices: List[int] = [0] * length

    if pool is not None:
        borrowed = pool.borrow(needed)
    else:
        borrowed = _scratch(needed)

    try:
        with borrowed as buf:
            if token is not None:
                token.raise_if_cancelled()
            entropy.fill(buf, needed)

            view = memoryview(buf)
            try:
                for i in range(length):
                    if token is not None:
                        token.raise_if_cancelled()
                    start = i * UINT64_BYTES
                    value = int.from_bytes(view[start:start + UINT64_BYTES], 'little')
                    indices[i] = select_index(value, charset, entropy, max_retries)
            finally:
                view.release()

            return "".join(charset.at(idx) for idx in indices)
    finally:
        for i in range(length):
            indices[i] = 0


@contextmanager
def _scratch(n: int) -> Iterator[bytearray]:
    """Single-use zeroing buffer for callers without a pool."""
    buf = bytearray(n)
    try:
        yield buf
    finally:
        zero_buffer(buf)


__all__ = [
    'MAX_UINT64',
    'DEFAULT_MAX_RETRIES',
    'rejection_limit',
    'select_index',
    'sample_string',
]
