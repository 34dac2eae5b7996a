#!/usr/bin/env python3
"""
Error Kinds
===========
Exception hierarchy for string generation.

Messages are deliberately generic: they never carry random values,
selected indices or partial output.
"""

from typing import Optional


class GenpassError(Exception):
    """Base class for all generation failures."""

    def __init__(self, message: str = "", index: Optional[int] = None):
        super().__init__(message)
        # Position in a batch, when the failure came from one
        self.index = index


class InvalidConfig(GenpassError, ValueError):
    """Bad length, count, charset, format or worker bounds."""


class EmptyCharset(InvalidConfig):
    """The charset has no symbols after deduplication."""


class CharsetTooLarge(InvalidConfig):
    """The charset has more than 256 distinct symbols."""


class EntropyUnavailable(GenpassError):
    """The OS entropy source failed, now or earlier."""


class ExcessiveRejection(GenpassError):
    """Rejection sampling exceeded its retry cap."""


class Cancelled(GenpassError):
    """The caller cancelled the operation or its deadline passed."""


__all__ = [
    'GenpassError',
    'InvalidConfig',
    'EmptyCharset',
    'CharsetTooLarge',
    'EntropyUnavailable',
    'ExcessiveRejection',
    'Cancelled',
]
