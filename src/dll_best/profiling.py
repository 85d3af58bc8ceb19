"""Timing and structural event counters for DLL-BEST tree operations."""

import time
import functools
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional
from dataclasses import dataclass, field
from collections import Counter, defaultdict

import numpy as np


@dataclass
class OperationMetrics:
    """Wall-clock samples of one public tree operation."""
    call_count: int = 0
    total_time: float = 0.0
    samples: List[float] = field(default_factory=list)

    def add_measurement(self, elapsed: float) -> None:
        self.call_count += 1
        self.total_time += elapsed
        self.samples.append(elapsed)

    @property
    def avg_time(self) -> float:
        return self.total_time / self.call_count if self.call_count > 0 else 0

    def percentile(self, q: float) -> float:
        """The q-th percentile (0-100) of the samples, 0 without samples."""
        return float(np.percentile(self.samples, q)) if self.samples else 0

    @property
    def median_time(self) -> float:
        return self.percentile(50)

    @property
    def p95_time(self) -> float:
        return self.percentile(95)

    @property
    def max_time(self) -> float:
        return max(self.samples, default=0.0)

    def __str__(self) -> str:
        return (f"Calls: {self.call_count}, "
                f"Total: {self.total_time:.6f}s, "
                f"Avg: {self.avg_time:.6f}s, "
                f"p50: {self.median_time:.6f}s, "
                f"p95: {self.p95_time:.6f}s")


class PerformanceTracker:
    """
    Process-wide collector shared by every tree.

    Two kinds of data are gathered while enabled:
      - metrics: per-operation timings recorded by `track_performance`
      - events:  counts of structural work done inside operations, such as
                 rotations ("rotate_rr", ...), successor swaps and promotions
                 of duplicates

    Tracking starts disabled; a disabled tracker costs one flag check.
    """

    _instance = None

    @classmethod
    def get_instance(cls) -> 'PerformanceTracker':
        if cls._instance is None:
            cls._instance = PerformanceTracker()
        return cls._instance

    def __init__(self):
        self.metrics: Dict[str, OperationMetrics] = defaultdict(OperationMetrics)
        self.events = Counter()
        self.enabled = False

    def add_measurement(self, operation: str, elapsed: float) -> None:
        if self.enabled:
            self.metrics[operation].add_measurement(elapsed)

    def count(self, event: str, n: int = 1) -> None:
        if self.enabled:
            self.events[event] += n

    def reset(self) -> None:
        self.metrics.clear()
        self.events.clear()

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def report(self, sort_by: str = 'total_time') -> str:
        """
        Render operation timings and event counts as fixed-width tables.

        Parameters:
            sort_by (str): OperationMetrics attribute to sort operations by,
                descending.
        """
        if not self.metrics and not self.events:
            return "No performance data collected."

        lines = ["Performance Metrics:"]
        lines.append("-" * 80)
        lines.append(f"{'Operation':<32} {'Calls':>8} {'Total (s)':>12} "
                     f"{'Avg (s)':>12} {'p95 (s)':>12}")
        lines.append("-" * 80)

        for name, metrics in sorted(
            self.metrics.items(),
            key=lambda x: getattr(x[1], sort_by),
            reverse=True
        ):
            lines.append(f"{name:<32} {metrics.call_count:>8} {metrics.total_time:>12.6f} "
                         f"{metrics.avg_time:>12.6f} {metrics.p95_time:>12.6f}")

        if self.events:
            lines.append("")
            lines.append(f"{'Event':<32} {'Count':>8}")
            lines.append("-" * 41)
            for event, n in self.events.most_common():
                lines.append(f"{event:<32} {n:>8}")

        return "\n".join(lines)


@contextmanager
def tracking(reset: bool = True) -> Iterator[PerformanceTracker]:
    """
    Enable tracking for the duration of a block, restoring the previous
    state afterwards.

    Example:
        with tracking() as tracker:
            tree.insert(1)
        print(tracker.report())
    """
    tracker = PerformanceTracker.get_instance()
    was_enabled = tracker.enabled
    if reset:
        tracker.reset()
    tracker.enable()
    try:
        yield tracker
    finally:
        tracker.enabled = was_enabled


def track_performance(method: Optional[Callable] = None, *,
                      tag: Optional[str] = None) -> Callable:
    """
    Decorator recording the duration of each call while tracking is enabled,
    under `tag` or the function's qualified name (e.g. "AvlTreeBase.insert").
    Calls that raise are recorded too.
    """
    def decorator(func):
        name = tag or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            tracker = PerformanceTracker.get_instance()
            if not tracker.enabled:
                return func(*args, **kwargs)

            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                tracker.add_measurement(name, time.perf_counter() - start_time)
        return wrapper

    # Handle both @track_performance and @track_performance(tag="name") forms
    if method is None:
        return decorator
    return decorator(method)
