#!/usr/bin/env python3
"""
Generator Configuration
=======================
Output formats, limits and the per-request generator configuration.

Fields left as None are filled from the `generator` section of app.yaml,
limits from the `limits` section.

Usage:
    from genpass.config import GeneratorConfig, OutputFormat

    config = GeneratorConfig(format=OutputFormat.COMPACT, length=24, count=5)
    config = config.validate()
"""

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from genpass.charset import CharacterSet
from genpass.errors import InvalidConfig
from genpass.settings import get_setting

# =============================================================================
# Output Formats
# =============================================================================

class OutputFormat(Enum):
    """Shape of a generated string."""
    HYPHENATED = "hyphenated"   # XXXXXX-XXXXXX-XXXXXX
    COMPACT = "compact"         # one run of `length` characters


_FORMAT_ALIASES = {
    "hyphenated": OutputFormat.HYPHENATED,
    "h": OutputFormat.HYPHENATED,
    "compact": OutputFormat.COMPACT,
    "c": OutputFormat.COMPACT,
}

GROUP_COUNT = 3
GROUP_LENGTH = 6
GROUP_SEPARATOR = "-"
HYPHENATED_LENGTH = GROUP_COUNT * GROUP_LENGTH + (GROUP_COUNT - 1) * len(GROUP_SEPARATOR)


def parse_format(value: Union[str, OutputFormat]) -> OutputFormat:
    """Parse 'hyphenated'/'h' or 'compact'/'c' (any case)."""
    if isinstance(value, OutputFormat):
        return value
    fmt = _FORMAT_ALIASES.get(str(value).strip().lower())
    if fmt is None:
        raise InvalidConfig(f"invalid generator type: {value!r}")
    return fmt


# =============================================================================
# Limits
# =============================================================================

@dataclass(frozen=True)
class Limits:
    """Upper bounds applied during validation."""
    max_string_length: int = 1024
    max_batch_size: int = 1000
    max_workers: int = 32
    max_concurrent_generators: int = 32
    max_rejection_retries: int = 10


def load_limits() -> Limits:
    """Limits from app.yaml, falling back to the built-in values."""
    cfg = get_setting("limits", {}) or {}
    defaults = Limits()
    return Limits(
        max_string_length=cfg.get("max_string_length", defaults.max_string_length),
        max_batch_size=cfg.get("max_batch_size", defaults.max_batch_size),
        max_workers=cfg.get("max_workers", defaults.max_workers),
        max_concurrent_generators=cfg.get("max_concurrent_generators",
                                          defaults.max_concurrent_generators),
        max_rejection_retries=cfg.get("max_rejection_retries", defaults.max_rejection_retries),
    )


def default_workers(limits: Optional[Limits] = None) -> int:
    """Host parallelism, capped at the worker limit."""
    limits = limits or load_limits()
    return max(1, min(os.cpu_count() or 1, limits.max_workers))


# =============================================================================
# GeneratorConfig
# =============================================================================

@dataclass
class GeneratorConfig:
    """Configuration for one generation request (single, batch or stream)."""
    format: Optional[Union[OutputFormat, str]] = None
    length: Optional[int] = None                 # Compact length
    count: Optional[int] = None                  # Strings per batch
    charset: Optional[Union[str, CharacterSet]] = None
    parallel: Optional[bool] = None
    workers: Optional[int] = None                # <= 0 means host CPUs
    timeout: Optional[float] = None              # Seconds, 0 = no deadline

    def __post_init__(self):
        cfg = get_setting("generator", {}) or {}
        if self.format is None:
            self.format = cfg.get("type")
        if self.length is None:
            self.length = cfg.get("length")
        if self.count is None:
            self.count = cfg.get("count")
        if self.charset is None:
            self.charset = cfg.get("charset")
        if self.parallel is None:
            self.parallel = cfg.get("parallel")
        if self.workers is None:
            self.workers = cfg.get("workers")
        if self.timeout is None:
            self.timeout = cfg.get("timeout")

        missing = [
            name for name, value in (
                ("type", self.format),
                ("length", self.length),
                ("count", self.count),
                ("charset", self.charset),
                ("parallel", self.parallel),
                ("workers", self.workers),
                ("timeout", self.timeout),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"generator settings missing in app.yaml: {', '.join(missing)}")

    def validate(self, limits: Optional[Limits] = None) -> 'GeneratorConfig':
        """
        Check bounds and return a normalized copy.

        The copy has an OutputFormat, a CharacterSet and a resolved worker
        count. Nothing here touches the entropy source.

        Raises:
            EmptyCharset: Charset has no symbols
            CharsetTooLarge: Charset has more than 256 distinct symbols
            InvalidConfig: Any other bound is violated (all reported at once)
        """
        limits = limits or load_limits()

        fmt = parse_format(self.format)
        if isinstance(self.charset, CharacterSet):
            charset = self.charset
        else:
            charset = CharacterSet(self.charset)

        errs = []
        if not _is_int(self.length) or not 1 <= self.length <= limits.max_string_length:
            errs.append(f"invalid length: {self.length} (must be 1-{limits.max_string_length})")
        if not _is_int(self.count) or not 1 <= self.count <= limits.max_batch_size:
            errs.append(f"invalid count: {self.count} (must be 1-{limits.max_batch_size})")
        if not isinstance(self.timeout, (int, float)) or self.timeout < 0:
            errs.append(f"invalid timeout: {self.timeout} (must be >= 0)")
        if not _is_int(self.workers):
            errs.append(f"invalid workers: {self.workers}")
        if errs:
            raise InvalidConfig("; ".join(errs))

        workers = self.workers
        if workers <= 0:
            workers = default_workers(limits)
        elif workers > limits.max_workers:
            workers = limits.max_workers

        return replace(self, format=fmt, charset=charset, workers=workers,
                       parallel=bool(self.parallel))

    @property
    def output_length(self) -> int:
        """Length of each generated string."""
        if parse_format(self.format) is OutputFormat.HYPHENATED:
            return HYPHENATED_LENGTH
        return self.length


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


__all__ = [
    'OutputFormat',
    'parse_format',
    'Limits',
    'load_limits',
    'default_workers',
    'GeneratorConfig',
    'GROUP_COUNT',
    'GROUP_LENGTH',
    'GROUP_SEPARATOR',
    'HYPHENATED_LENGTH',
]
