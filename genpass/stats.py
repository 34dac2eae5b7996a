#!/usr/bin/env python3
"""
Generation Statistics
=====================
Read-only counters for a generator, and a rich-rendered report.

Usage:
    stats = generator.stats()
    render_stats(stats, elapsed=1.2, count=100)
"""

from dataclasses import dataclass, asdict
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box


@dataclass(frozen=True)
class GeneratorStats:
    """Snapshot of one generator's counters."""
    generated: int = 0
    errors: int = 0
    avg_duration: float = 0.0       # seconds per generated string
    entropy_bytes: int = 0
    entropy_errors: int = 0
    entropy_healthy: bool = True
    workers_busy: int = 0
    workers_capacity: int = 0

    @property
    def avg_duration_ms(self) -> float:
        return self.avg_duration * 1000

    def to_dict(self) -> dict:
        data = asdict(self)
        data['avg_duration_ms'] = self.avg_duration_ms
        return data


def throughput(count: int, elapsed: float) -> float:
    """Strings per second, 0 when nothing was timed."""
    return count / elapsed if elapsed > 0 else 0.0


def render_stats(stats: GeneratorStats,
                 elapsed: float,
                 count: int,
                 console: Optional[Console] = None) -> None:
    """
    Print the statistics block.

    Args:
        stats: Generator snapshot taken after the run
        elapsed: Wall-clock seconds for the whole run
        count: Strings produced by the run
        console: Target console (default: stderr)
    """
    console = console or Console(stderr=True)

    table = Table(title="Generation Statistics", box=box.SIMPLE, show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Total Generated", f"{stats.generated} strings")
    table.add_row("Total Errors", str(stats.errors))
    table.add_row("Batch Duration", f"{elapsed:.4f}s")
    table.add_row("Average Duration", f"{stats.avg_duration_ms:.3f}ms per string")
    table.add_row("Throughput", f"{throughput(count, elapsed):.2f} strings/sec")
    table.add_row("Entropy Generated", f"{stats.entropy_bytes} bytes")
    table.add_row("Entropy Errors", str(stats.entropy_errors))
    table.add_row("Entropy Source", "healthy" if stats.entropy_healthy else "UNHEALTHY")
    table.add_row("Worker Utilization", f"{stats.workers_busy}/{stats.workers_capacity}")

    console.print(table)


__all__ = [
    'GeneratorStats',
    'throughput',
    'render_stats',
]
