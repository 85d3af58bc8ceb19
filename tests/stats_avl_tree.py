"""Statistics for DLL-BEST trees."""
# pylint: skip-file

import os
import logging
import math
import time
from typing import List, Optional
from dataclasses import asdict
from datetime import datetime
import numpy as np

from dll_best.base import Redundancy
from dll_best.factory import make_avl_tree_classes
from dll_best.avl_tree_base import (
    AvlTreeBase,
    Stats,
    TREE_FLAGS,
    tree_stats_,
)


def assert_invariants(t: AvlTreeBase, stats: Stats) -> None:
    """Check all invariants, but only log ERROR messages on failures."""
    for flag in TREE_FLAGS:
        if not getattr(stats, flag):
            logging.error("Invariant failed: %s is False", flag)

    if stats.item_count != len(t):
        logging.error(
            "Invariant failed: item_count=%d ≠ len(tree)=%d",
            stats.item_count, len(t)
        )
    if not t.is_empty():
        if stats.node_count <= 0:
            logging.error(
                "Invariant failed: node_count=%d ≤ 0 for non-empty tree",
                stats.node_count
            )
        if stats.least_key is None:
            logging.error("Invariant failed: least_key is None for non-empty tree")
        if stats.greatest_key is None:
            logging.error("Invariant failed: greatest_key is None for non-empty tree")


def create_tree(keys, redundancy=Redundancy.UNIQUE) -> AvlTreeBase:
    """Build a tree by inserting each key in the given order."""
    TreeClass, _ = make_avl_tree_classes(redundancy)
    tree = TreeClass()
    tree_insert = tree.insert
    for key in keys:
        tree_insert(key)
    return tree


def random_tree_of_size(
    n: int,
    redundancy=Redundancy.UNIQUE,
    space: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> AvlTreeBase:
    """
    Create a random tree with n values. Under the UNIQUE policy the keys are
    distinct; under REDUNDANT they are drawn with replacement from `space`.
    """
    rng = rng if rng is not None else np.random.default_rng()
    redundancy = Redundancy.coerce(redundancy)

    if redundancy is Redundancy.UNIQUE:
        # we need at least n unique values; 2^24 = 16 777 216 > 1 000 000
        space = space or 1 << 24
        if space <= n:
            raise ValueError(f"Key-space too small! Required: {n + 1}, Available: {space}")
        keys = rng.choice(space, size=n, replace=False)
    else:
        space = space or max(1, n // 4)
        keys = rng.integers(0, space, size=n)

    return create_tree(keys.tolist(), redundancy)


def _shape_row(stats: Stats, perfect_height: int) -> List[float]:
    amp = stats.height / perfect_height if perfect_height else 0.0
    return [stats.item_count, stats.node_count, stats.max_chain_length, stats.height, amp]


def repeated_experiment(
        size: int,
        repetitions: int,
        redundancy=Redundancy.UNIQUE,
    ) -> None:
    """
    Repeatedly builds random trees of `size` values and logs the mean and
    variance of their shape statistics and of the time spent per phase.
    Heights are compared with the perfectly balanced height floor(log2(n))
    and the AVL worst case 1.44 * log2(n + 2) - 0.328.
    """
    started = time.perf_counter()
    rng = np.random.default_rng()
    perfect_height = math.floor(math.log2(size)) if size > 0 else 0
    avl_bound = 1.44 * math.log2(size + 2) - 0.328

    shape = np.zeros((repetitions, 5))
    # one column per phase: build, stats, dll dump
    timings = np.zeros((repetitions, 3))

    for i in range(repetitions):
        t0 = time.perf_counter()
        tree = random_tree_of_size(size, redundancy, rng=rng)
        t1 = time.perf_counter()
        stats = tree_stats_(tree)
        t2 = time.perf_counter()
        tree.dll_dump()
        t3 = time.perf_counter()

        timings[i] = (t1 - t0, t2 - t1, t3 - t2)
        shape[i] = _shape_row(stats, perfect_height)

        assert_invariants(tree, stats)
        logging.debug("Tree stats: %s", asdict(stats))

    shape_names = ["Item count", "Node count", "Max chain length", "Height",
                   "Height amplification"]
    header = f"{'Metric':<22} {'Avg':>12} {'(Var)':>12}"
    logging.info(header)
    logging.info("-" * len(header))
    for name, avg, var in zip(shape_names, shape.mean(axis=0), shape.var(axis=0)):
        logging.info(f"{name:<22} {avg:12.2f} {f'({var:.2f})':>12}")
    logging.info(f"{'Perfect height':<22} {perfect_height:>12}")
    logging.info(f"{'AVL height bound':<22} {avl_bound:12.2f}")

    phase_names = ["Build time (s)", "Stats time (s)", "DLL dump time (s)"]
    totals = timings.sum(axis=0)
    shares = totals / totals.sum() * 100 if totals.sum() else np.zeros(3)
    header = f"{'Phase':<22}{'Avg(s)':>13}{'Var(s)':>13}{'Total(s)':>13}{'%Total':>10}"

    logging.info("")
    logging.info("Performance summary:")
    logging.info(header)
    logging.info("-" * len(header))
    for name, avg, var, total, pct in zip(
        phase_names, timings.mean(axis=0), timings.var(axis=0), totals, shares
    ):
        logging.info(f"{name:<22}{avg:13.6f}{var:13.6f}{total:13.6f}{pct:10.2f}%")

    logging.info("")
    logging.info("Method-level performance breakdown:")
    for line in AvlTreeBase.get_performance_report(sort_by='total_time').split('\n'):
        logging.info(line)
    logging.info("Execution time: %.3f seconds", time.perf_counter() - started)

if __name__ == "__main__":
    log_dir = os.path.join(os.getcwd(), "tests/logs")
    os.makedirs(log_dir, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = os.path.join(log_dir, f"run_{ts}.log")

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_path, mode="w"),
            logging.StreamHandler()
        ]
    )

    AvlTreeBase.enable_performance_tracking()
    logging.info("Performance tracking enabled")

    sizes = [1000, 10_000]
    policies = [Redundancy.UNIQUE, Redundancy.REDUNDANT]
    repetitions = 3

    for n in sizes:
        for policy in policies:
            logging.info("")
            logging.info("")
            logging.info(f"---------------- NOW RUNNING EXPERIMENT: n = {n}, policy = {policy.value}, repetitions = {repetitions} ----------------")
            t0 = time.perf_counter()
            repeated_experiment(size=n, repetitions=repetitions, redundancy=policy)
            elapsed = time.perf_counter() - t0

            AvlTreeBase.reset_performance_metrics()
            logging.info(f"Total experiment time: {elapsed:.3f} seconds")

    AvlTreeBase.disable_performance_tracking()
    logging.info("")
    logging.info("Performance tracking disabled")
