"""Utility functions for testing DLL-BEST tree invariants."""

import logging
from typing import Any, List, Optional, Tuple

from dll_best.avl_tree_base import (
    AvlTreeBase,
    Stats,
    TREE_FLAGS,
    collect_keys,
)

def assert_tree_invariants_tc(tc, t: AvlTreeBase, stats: Stats) -> None:
    """TestCase version: use inside unittest.TestCase methods."""
    for flag in TREE_FLAGS:
        tc.assertTrue(
            getattr(stats, flag),
            f"Invariant failed: {flag} is False\n{t.print_structure()}"
        )

    tc.assertEqual(
        stats.item_count, len(t),
        f"Invariant failed: item_count={stats.item_count} ≠ len(tree)={len(t)}"
    )

    if not t.is_empty():
        tc.assertGreater(
            stats.node_count, 0,
            f"Invariant failed: node_count={stats.node_count} ≤ 0 for non-empty tree"
        )
        tc.assertEqual(
            stats.height, t.height,
            f"Invariant failed: height={stats.height} ≠ root height {t.height}"
        )
        tc.assertIsNotNone(
            stats.least_key,
            "Invariant failed: least_key is None for non-empty tree"
        )
        tc.assertIsNotNone(
            stats.greatest_key,
            "Invariant failed: greatest_key is None for non-empty tree"
        )
        tc.assertIs(t.smallest, t.head, "Invariant failed: head is not the smallest node")
        tc.assertIs(t.biggest, t.tail, "Invariant failed: tail is not the biggest node")
    else:
        tc.assertIsNone(t.head, "Invariant failed: empty tree has a head")
        tc.assertIsNone(t.tail, "Invariant failed: empty tree has a tail")


def check_keys_and_order(
    tree: AvlTreeBase,
    expected_keys: Optional[List[Any]] = None
) -> Tuple[List[Any], bool, bool]:
    """
    Walk the linked list once and compute two properties:
      1. presence_ok: if `expected_keys` is provided, does the tree store
                      exactly that multiset of keys? Otherwise always True.
      2. order_ok:    are the keys non-decreasing under the tree's comparator?

    Returns:
        (keys, presence_ok, order_ok)
    """
    keys = collect_keys(tree)
    compare = tree.compare
    order_ok = all(compare(a, b) <= 0 for a, b in zip(keys, keys[1:]))

    presence_ok = True
    if expected_keys is not None:
        presence_ok = sorted(keys) == sorted(expected_keys)

    return keys, presence_ok, order_ok


def assert_tree_invariants_log(t: AvlTreeBase, stats: Stats) -> bool:
    """Check all invariants, logging an ERROR for the first failure."""
    for flag in TREE_FLAGS:
        if not getattr(stats, flag):
            logging.error(f"Invariant failed: {flag} is False")
            return False

    if stats.item_count != len(t):
        logging.error(f"Invariant failed: item_count={stats.item_count} ≠ len(tree)={len(t)}")
        return False
    return True
