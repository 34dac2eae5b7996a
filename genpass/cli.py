#!/usr/bin/env python3
"""
genpass CLI
===========
Command-line interface for secure password generation.

Usage:
    genpass                          # one hyphenated password
    genpass -t compact -l 24 -c 5    # five 24-character passwords
    genpass -c 100 --stream --stats
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from genpass import __version__
from genpass.cancel import CancelToken
from genpass.config import GeneratorConfig, parse_format
from genpass.errors import GenpassError
from genpass.generator import CryptoGenerator
from genpass.settings import get_setting
from genpass.stats import render_stats

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Writes generated strings and error lines."""

    def __init__(self, stream=None, err_stream=None):
        self.stream = stream or sys.stdout
        self.err_stream = err_stream or sys.stderr

    def line(self, value: str):
        print(value, file=self.stream)

    def error(self, msg: str):
        print(f"Error: {msg}", file=self.err_stream)


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; stdout carries only generated strings."""
    if verbose:
        level = logging.DEBUG
    else:
        name = str(get_setting("logging.level", "WARNING")).upper()
        level = getattr(logging, name, logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def build_config(args) -> GeneratorConfig:
    """Translate parsed arguments into a GeneratorConfig."""
    return GeneratorConfig(
        format=parse_format(args.type),
        length=args.length,
        count=args.count,
        charset=args.charset,
        parallel=args.parallel,
        workers=args.workers,
        timeout=args.timeout,
    )


# =============================================================================
# Commands
# =============================================================================

def run_batch(generator: CryptoGenerator, config: GeneratorConfig,
              token: CancelToken, out: Output) -> int:
    results = generator.generate_batch(config, token)
    for value in results:
        out.line(value)
    return len(results)


def run_stream(generator: CryptoGenerator, config: GeneratorConfig,
               token: CancelToken, out: Output) -> int:
    generated = 0
    for value, error in generator.generate_stream(config, token):
        if error is not None:
            raise error
        out.line(value)
        generated += 1
    return generated


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    cfg = get_setting("generator", {}) or {}

    parser = argparse.ArgumentParser(
        prog='genpass',
        description='Generate cryptographically secure passwords.',
        epilog=(
            "Formats:\n"
            "  hyphenated  6char-6char-6char (default)\n"
            "  compact     custom length string"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--version', action='version', version=f'genpass {__version__}')
    parser.add_argument('-t', '--type', default=cfg.get('type', 'hyphenated'),
                        help='Output format (hyphenated|compact)')
    parser.add_argument('-l', '--length', type=int, default=cfg.get('length', 15),
                        help='Length for compact format')
    parser.add_argument('-c', '--count', type=int, default=cfg.get('count', 1),
                        help='Number of passwords')
    parser.add_argument('-s', '--charset', default=cfg.get('charset'),
                        help='Character set')
    parser.add_argument('-p', '--parallel', action=argparse.BooleanOptionalAction,
                        default=cfg.get('parallel', True), help='Parallel generation')
    parser.add_argument('-w', '--workers', type=int, default=cfg.get('workers', 0),
                        help='Worker threads (0 = number of CPUs)')
    parser.add_argument('--stats', action='store_true', help='Show statistics')
    parser.add_argument('--stream', action='store_true', help='Stream output')
    parser.add_argument('--timeout', type=float, default=cfg.get('timeout', 30.0),
                        help='Timeout in seconds (0 = none)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    out = Output()

    try:
        config = build_config(args).validate()
    except ValueError as e:
        out.error(f"invalid configuration: {e}")
        return 1

    logger.debug(
        f"Generating {config.count} {config.format.value} string(s) "
        f"of length {config.output_length}, "
        f"parallel={config.parallel}, workers={config.workers}"
    )
    generator = CryptoGenerator()
    token = CancelToken(timeout=config.timeout)
    start = time.perf_counter()

    try:
        if args.stream:
            produced = run_stream(generator, config, token, out)
        else:
            produced = run_batch(generator, config, token, out)
    except KeyboardInterrupt:
        token.cancel()
        out.error("cancelled")
        return 130
    except GenpassError as e:
        out.error(f"generation failed: {e}")
        return 1
    except Exception as e:
        out.error(str(e))
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    if args.stats:
        render_stats(generator.stats(), time.perf_counter() - start, produced)

    return 0


if __name__ == '__main__':
    sys.exit(main())
