"""Lightweight profiling: wall-clock timers.

Provides:
    - timer(): Context manager for wall-clock timing with optional sink
    - TimerAccumulator: repeated measurements with a running mean

Used to measure:
    - Poisson-disk sampling per layer
    - Attribute generation per layer
    - Whole-scene composition

Timings go to the logger (DEBUG) unless a sink is given. They are never
stored in a Scene, so scenes stay bit-identical across runs.

No heavy dependencies (no line_profiler, no cProfile overhead).
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@contextmanager
def timer(name: str, sink: Optional[Callable[[str, float], None]] = None):
    """Context manager for wall-clock timing.

    Parameters
    ----------
    name : str
        Timer name (for logging/display)
    sink : Optional[Callable[[str, float], None]]
        Optional callback(name, elapsed_seconds).
        If None, logs at DEBUG level.

    Yields
    ------
    None

    Examples
    --------
    >>> timings = {}
    >>> with timer("micro_stars", sink=timings.__setitem__):
    ...     points = sample_poisson_disk(rng, cfg)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if sink is not None:
            sink(name, elapsed)
        else:
            logger.debug("%s: %.3f s", name, elapsed)


class TimerAccumulator:
    """Accumulate multiple timing measurements for averaging.

    Examples
    --------
    >>> compose_timer = TimerAccumulator("compose")
    >>> for seed in range(10):
    ...     with compose_timer.measure():
    ...         compose_scene(seed, 800, 600)
    >>> print(f"Mean: {compose_timer.mean():.4f} s")
    """

    def __init__(self, name: str):
        self.name = name
        self.total_time = 0.0
        self.count = 0

    @contextmanager
    def measure(self):
        """Context manager to measure and accumulate time."""
        with timer(self.name, sink=self._add):
            yield

    def _add(self, name: str, elapsed: float) -> None:
        self.total_time += elapsed
        self.count += 1

    def mean(self) -> float:
        """Mean time per measurement in seconds, or 0.0 if none."""
        return self.total_time / self.count if self.count > 0 else 0.0

    def reset(self) -> None:
        self.total_time = 0.0
        self.count = 0

    def __repr__(self) -> str:
        return f"TimerAccumulator({self.name}, mean={self.mean():.4f}s, count={self.count})"
