#!/usr/bin/env python3
"""
Character Sets
==============
Deduplicated, ordered alphabets used for index selection.
"""

from typing import Iterator

from genpass.errors import EmptyCharset, CharsetTooLarge

# =============================================================================
# Standard Alphabets
# =============================================================================

LOWER_CHARS = "abcdefghijklmnopqrstuvwxyz"
UPPER_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
DIGITS = "0123456789"
ALPHANUMERIC_CHARS = LOWER_CHARS + UPPER_CHARS + DIGITS

# Indices are picked from one byte's worth of symbols
MAX_CHARSET_SIZE = 256


# =============================================================================
# CharacterSet
# =============================================================================

class CharacterSet:
    """
    Immutable alphabet with first-seen order preserved.

    When the size is a power of two, `mask` selects an index with a single
    AND; otherwise `at` falls back to modulo.

    Usage:
        cs = CharacterSet("aabbc")   # -> "abc"
        cs.at(7)                     # -> "b"
    """

    __slots__ = ('_chars', '_mask', '_pow2')

    def __init__(self, raw: str):
        """
        Args:
            raw: Raw charset string; duplicates are dropped

        Raises:
            EmptyCharset: No symbols
            CharsetTooLarge: More than 256 distinct symbols
        """
        unique = tuple(dict.fromkeys(raw or ""))

        if not unique:
            raise EmptyCharset("charset cannot be empty")
        if len(unique) > MAX_CHARSET_SIZE:
            raise CharsetTooLarge(f"charset too large (max {MAX_CHARSET_SIZE} characters)")

        size = len(unique)
        self._chars = unique
        self._pow2 = (size & (size - 1)) == 0
        self._mask = size - 1 if self._pow2 else 0

    @property
    def is_power_of_two(self) -> bool:
        return self._pow2

    @property
    def mask(self) -> int:
        return self._mask

    def at(self, index: int) -> str:
        """Symbol for any non-negative index, reduced into range."""
        if self._pow2:
            return self._chars[index & self._mask]
        return self._chars[index % len(self._chars)]

    def __len__(self) -> int:
        return len(self._chars)

    def __iter__(self) -> Iterator[str]:
        return iter(self._chars)

    def __contains__(self, symbol) -> bool:
        return symbol in self._chars

    def __eq__(self, other) -> bool:
        if isinstance(other, CharacterSet):
            return self._chars == other._chars
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._chars)

    def __str__(self) -> str:
        return "".join(self._chars)

    def __repr__(self) -> str:
        return f"CharacterSet({str(self)!r})"


__all__ = [
    'CharacterSet',
    'LOWER_CHARS',
    'UPPER_CHARS',
    'DIGITS',
    'ALPHANUMERIC_CHARS',
    'MAX_CHARSET_SIZE',
]
