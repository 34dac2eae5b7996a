#!/usr/bin/env python3
"""
genpass - Secure Password Generator
===================================

Cryptographically secure random strings drawn from the OS entropy source
and mapped onto a character set without modulo bias.

Quick Start
-----------
    from genpass import CryptoGenerator, GeneratorConfig, OutputFormat

    gen = CryptoGenerator()

    # One hyphenated password: XXXXXX-XXXXXX-XXXXXX
    password = gen.generate(GeneratorConfig(format=OutputFormat.HYPHENATED))

    # Five 24-character passwords, in parallel
    batch = gen.generate_batch(
        GeneratorConfig(format=OutputFormat.COMPACT, length=24, count=5)
    )

Modules
-------
    genpass.entropy   - OS entropy source with fail-closed health tracking
    genpass.charset   - Deduplicated alphabets
    genpass.sampler   - Unbiased index selection (mask / rejection sampling)
    genpass.generator - Single-string generation
    genpass.parallel  - Batch and streaming generation
    genpass.config    - Formats, limits and GeneratorConfig

CLI Usage
---------
    python -m genpass -t compact -l 24 -c 5
"""

__version__ = "0.0.2"

from .errors import (
    GenpassError,
    InvalidConfig,
    EmptyCharset,
    CharsetTooLarge,
    EntropyUnavailable,
    ExcessiveRejection,
    Cancelled,
)
from .charset import (
    CharacterSet,
    LOWER_CHARS,
    UPPER_CHARS,
    DIGITS,
    ALPHANUMERIC_CHARS,
)
from .entropy import EntropySource
from .buffers import BufferPool
from .cancel import CancelToken
from .config import GeneratorConfig, OutputFormat, parse_format
from .sampler import select_index, sample_string
from .generator import CryptoGenerator
from .parallel import BatchCoordinator
from .stats import GeneratorStats

__all__ = [
    '__version__',
    # Errors
    'GenpassError',
    'InvalidConfig',
    'EmptyCharset',
    'CharsetTooLarge',
    'EntropyUnavailable',
    'ExcessiveRejection',
    'Cancelled',
    # Building blocks
    'CharacterSet',
    'LOWER_CHARS',
    'UPPER_CHARS',
    'DIGITS',
    'ALPHANUMERIC_CHARS',
    'EntropySource',
    'BufferPool',
    'CancelToken',
    'select_index',
    'sample_string',
    # Generation
    'GeneratorConfig',
    'OutputFormat',
    'parse_format',
    'CryptoGenerator',
    'BatchCoordinator',
    'GeneratorStats',
]
