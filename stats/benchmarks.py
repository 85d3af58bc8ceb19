#!/usr/bin/env python3
"""
Benchmarks for the DLL-BEST tree data structure.

This script measures:
 1. Full tree build times (random_tree_of_size)
 2. Statistics of a single large random tree
 3. Per-operation cost (insert, find, get, remove) in trees of various sizes
 4. Range scans through the linked list
 5. Draining a tree with dequeue

Usage:
    python benchmarks.py [--space S] [--sizes 100 1000 10000] [--trials T] [--span W] [--redundant]
"""
import argparse
import time
import gc
from pprint import pprint
from dataclasses import asdict
from statistics import mean, variance

import numpy as np
from tqdm import tqdm

from dll_best.base import Redundancy
from dll_best.avl_tree_base import tree_stats_, AvlTreeBase
from tests.stats_avl_tree import random_tree_of_size


def bench_build_tree(sizes: list[int], redundancy: Redundancy) -> None:
    """Measure random_tree_of_size for various sizes."""
    for n in sizes:
        t0 = time.perf_counter()
        _ = random_tree_of_size(n, redundancy)
        elapsed = time.perf_counter() - t0
        print(f"[bench] random_tree_of_size({n}): {elapsed:.4f}s")


def bench_tree_stats(n: int, redundancy: Redundancy) -> None:
    """Build a single random tree and print its stats."""
    tree = random_tree_of_size(n, redundancy)
    stats = tree_stats_(tree)
    print(f"[bench] random_tree_of_size({n}) stats:")
    pprint(asdict(stats))


def _timed(op, args) -> list[float]:
    gc.collect()
    gc.disable()
    try:
        times = []
        for arg in args:
            t0 = time.perf_counter()
            op(arg)
            times.append(time.perf_counter() - t0)
    finally:
        gc.enable()
    return times


def measure_single_ops(
    n: int,
    space: int,
    trials: int,
    redundancy: Redundancy,
    rng: np.random.Generator,
) -> dict[str, tuple[float, float]]:
    """
    Measure the per-call cost of insert, find, get and remove on a tree of
    exactly `n` values. Returns {operation: (mean_time_s, variance_time_s)}.
    """
    tree = random_tree_of_size(n, redundancy, space=space, rng=rng)
    present = tree.dll_dump()
    fresh = rng.integers(0, space, size=trials).tolist()

    results = {}
    results["find"] = _timed(tree.find, rng.choice(present, size=trials).tolist())
    results["get"] = _timed(tree.get, rng.integers(0, len(tree), size=trials).tolist())
    results["insert"] = _timed(tree.insert, fresh)
    results["remove"] = _timed(tree.remove, fresh)
    return {op: (mean(times), variance(times)) for op, times in results.items()}


def bench_single_ops(
    sizes: list[int],
    space: int,
    trials: int,
    redundancy: Redundancy,
) -> None:
    """Run measure_single_ops for each size and print results."""
    rng = np.random.default_rng()
    for n in tqdm(sizes, desc="Tree sizes", unit="tree"):
        for op, (avg, var) in measure_single_ops(n, space, trials, redundancy, rng).items():
            tqdm.write(
                f"[bench] {op:<7} in size {n:<7} → avg {avg*1e6:8.2f} µs   σ²={var*1e12:8.2f} µs²"
            )


def bench_range(n: int, span: int, trials: int, redundancy: Redundancy) -> None:
    """Time range queries of a fixed key span on one random tree."""
    rng = np.random.default_rng()
    space = 1 << 24
    tree = random_tree_of_size(n, redundancy, space=space, rng=rng)
    lowers = rng.integers(0, space - span, size=trials).tolist()

    gc.collect()
    gc.disable()
    try:
        times = []
        found = 0
        for lower in tqdm(lowers, desc="Range scans", unit="scan"):
            t0 = time.perf_counter()
            found += len(tree.range(lower, lower + span))
            times.append(time.perf_counter() - t0)
    finally:
        gc.enable()
    print(f"[bench] range(span={span}) on size {n}: avg {mean(times)*1e6:8.2f} µs, "
          f"{found / trials:.2f} values per scan")


def bench_dequeue(n: int, redundancy: Redundancy) -> None:
    """Drain a random tree from the top."""
    tree = random_tree_of_size(n, redundancy)
    t0 = time.perf_counter()
    with tqdm(total=len(tree), desc="Dequeue", unit="value") as progress:
        while not tree.is_empty():
            tree.dequeue()
            progress.update(1)
    elapsed = time.perf_counter() - t0
    print(f"[bench] dequeue all of {n}: {elapsed:.4f}s")


def main():
    parser = argparse.ArgumentParser(description="DLL-BEST tree benchmarks")
    parser.add_argument("--space", type=int, default=1 << 24,
                        help="Key space for single-operation benchmarks")
    parser.add_argument("--sizes", nargs='+', type=int, default=[100, 1000, 10_000],
                        help="Tree sizes for single-operation benchmarks")
    parser.add_argument("--trials", type=int, default=1000,
                        help="Number of trials per operation")
    parser.add_argument("--span", type=int, default=1 << 16,
                        help="Key span of each range query")
    parser.add_argument("--redundant", action="store_true",
                        help="Allow duplicate keys")
    args = parser.parse_args()
    redundancy = Redundancy.REDUNDANT if args.redundant else Redundancy.UNIQUE

    AvlTreeBase.enable_performance_tracking()

    print("\n=== Full Tree Build ===")
    bench_build_tree([10, 100, 1000, 10_000, 100_000], redundancy)

    print("\n=== Random Tree Stats ===")
    bench_tree_stats(100_000, redundancy)

    print("\n=== Single-Operation Benchmarks ===")
    bench_single_ops(args.sizes, args.space, args.trials, redundancy)

    print("\n=== Range Benchmarks ===")
    bench_range(100_000, args.span, args.trials, redundancy)

    print("\n=== Dequeue Benchmark ===")
    bench_dequeue(100_000, redundancy)

    print("\n=== Method-Level Performance Breakdown ===")
    print(AvlTreeBase.get_performance_report())
    AvlTreeBase.reset_performance_metrics()  # Reset for next run
    AvlTreeBase.disable_performance_tracking()

if __name__ == "__main__":
    main()
