#!/usr/bin/env python3
"""
Batch Coordination
==================
Runs many independent generations, sequentially or across a bounded
thread pool, and a lazy streaming variant.

Features:
- Results always come back in input order
- First error aborts the whole batch; no partial results are returned
- Outstanding work is cancelled once a worker fails or the caller cancels
- Streaming mode yields one (string, error) pair per pull

Usage:
    from genpass.parallel import BatchCoordinator

    coordinator = BatchCoordinator(generator)
    results = coordinator.generate_batch(config)

    for value, error in coordinator.generate_stream(config):
        if error:
            break
        print(value)
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed, Future
from typing import Dict, Iterator, List, Optional, Tuple, TYPE_CHECKING

from genpass.cancel import CancelToken
from genpass.config import GeneratorConfig
from genpass.errors import Cancelled, GenpassError

if TYPE_CHECKING:
    from genpass.generator import CryptoGenerator

logger = logging.getLogger(__name__)


def _annotate(error: GenpassError, index: int) -> GenpassError:
    """Tag an error with the batch position that produced it."""
    error.index = index
    error.args = (f"generating string {index}: {error}",)
    return error


class BatchCoordinator:
    """
    Fans a GeneratorConfig out into config.count generations.

    The coordinator holds no state between calls beyond the generator it
    wraps; the generator's own semaphore still bounds concurrency.
    """

    def __init__(self, generator: 'CryptoGenerator'):
        """
        Args:
            generator: CryptoGenerator that produces each string
        """
        self.generator = generator

    def generate_batch(self, config: GeneratorConfig,
                       token: Optional[CancelToken] = None) -> List[str]:
        """
        Generate config.count strings.

        Args:
            config: Generation request
            token: Cancellation signal (default: one built from config.timeout)

        Returns:
            List of strings in input order

        Raises:
            The first GenpassError encountered, with `index` set for
            generation failures. Any other worker exception, or
            KeyboardInterrupt, cancels outstanding work and propagates as-is.
        """
        config = config.validate()
        if token is None:
            token = CancelToken(timeout=config.timeout)
        token.raise_if_cancelled()

        if config.count == 1 or not config.parallel:
            return self._sequential(config, token)
        return self._parallel(config, token)

    def _sequential(self, config: GeneratorConfig, token: CancelToken) -> List[str]:
        results: List[str] = []
        for i in range(config.count):
            try:
                results.append(self.generator.generate_validated(config, token))
            except GenpassError as e:
                logger.debug(f"Sequential batch aborted at {i}/{config.count}")
                raise _annotate(e, i) from None
        return results

    def _parallel(self, config: GeneratorConfig, token: CancelToken) -> List[str]:
        results: List[Optional[str]] = [None] * config.count
        batch_token = token.child()

        def task(index: int) -> None:
            results[index] = self.generator.generate_validated(config, batch_token)

        logger.debug(f"Parallel batch: {config.count} strings, {config.workers} workers")

        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            futures: Dict[Future, int] = {
                executor.submit(task, i): i
                for i in range(config.count)
            }

            index = None
            try:
                for future in as_completed(futures):
                    index = futures[future]
                    future.result()
            except GenpassError as e:
                self._abort(batch_token, futures)
                logger.debug(f"Parallel batch aborted at {index}/{config.count}")
                raise _annotate(e, index) from None
            except (Exception, KeyboardInterrupt):
                # Unexpected failure or Ctrl-C: stop queued work before the
                # executor waits on it
                self._abort(batch_token, futures)
                logger.debug(f"Parallel batch interrupted after {index}/{config.count}")
                raise

        return results

    @staticmethod
    def _abort(batch_token: CancelToken, futures: Dict[Future, int]) -> None:
        batch_token.cancel()
        for pending in futures:
            pending.cancel()

    def generate_stream(self, config: GeneratorConfig,
                        token: Optional[CancelToken] = None
                        ) -> Iterator[Tuple[str, Optional[GenpassError]]]:
        """
        Lazily generate config.count strings, one per pull.

        Yields (string, None) on success and ("", error) on failure. When
        the token is cancelled, one ("", Cancelled) pair is yielded and the
        stream ends. Stopping iteration early consumes no more entropy.

        Raises:
            InvalidConfig: On the first pull, if the config is invalid
        """
        config = config.validate()
        if token is None:
            token = CancelToken(timeout=config.timeout)

        for _ in range(config.count):
            try:
                token.raise_if_cancelled()
                value = self.generator.generate_validated(config, token)
            except Cancelled as e:
                yield "", e
                return
            except GenpassError as e:
                yield "", e
                continue
            yield value, None


__all__ = [
    'BatchCoordinator',
]
