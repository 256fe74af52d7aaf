"""
Profiling utilities for batch decoding.

Measures a block of work the way the pipeline reports it:
- Wall-clock time (perf_counter)
- CPU usage (psutil)
- Peak RSS (psutil, sampled at entry and exit)

Usage example:
    from querystring_serde.utils.profiler import profile_block

    with profile_block("decode:events.tsv") as stats:
        records = list(decode_lines(decoder, lines))

    print(stats.duration_seconds, stats.peak_rss_bytes)
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for profiling measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    peak_rss_bytes: Optional[int] = field(default=None)
    cpu_percent: Optional[float] = field(default=None)
    extra: dict[str, Any] = field(default_factory=dict)


def _rss_bytes(process: psutil.Process) -> Optional[int]:
    try:
        return process.memory_info().rss
    except psutil.Error:
        return None


@contextlib.contextmanager
def profile_block(label: str) -> Generator[ProfileStats, None, None]:
    """
    Context manager to profile a block of code.

    Parameters
    ----------
    label : str
        Human-friendly label for the profiled block.

    Notes
    -----
    RSS is sampled at entry and exit only; short spikes in between are not seen.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()

    # CPU percent needs a priming call
    process.cpu_percent(interval=None)
    rss_at_start = _rss_bytes(process)

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts

        rss_at_end = _rss_bytes(process)
        samples = [value for value in (rss_at_start, rss_at_end) if value]
        stats.peak_rss_bytes = max(samples) if samples else None
        stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["ProfileStats", "profile_block"]
