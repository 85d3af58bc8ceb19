"""Tests for DLL-BEST trees with factory pattern"""
# pylint: skip-file

from typing import Any, List, Optional
import unittest
import logging

from dll_best.base import Redundancy
from dll_best.factory import make_avl_tree_classes
from dll_best.avl_tree_base import (
    AvlNodeBase,
    tree_stats_,
)
from tests.utils import assert_tree_invariants_tc, check_keys_and_order

# Configure logging for test
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

class TreeTestCase(unittest.TestCase):
    """Base class for all DLL-BEST tree tests"""

    REDUNDANCY = Redundancy.UNIQUE

    def setUp(self):
        self.TreeClass, self.NodeClass = make_avl_tree_classes(self.REDUNDANCY)
        self.tree = self.TreeClass()
        logger.debug(f"Created tree test using class {self.TreeClass.__name__}")

    def tearDown(self):
        if not getattr(self, 'tree', None):
            return

        stats = tree_stats_(self.tree)
        assert_tree_invariants_tc(self, self.tree, stats)

        # --- optional invariants ---
        expected_node_count = getattr(self, 'expected_node_count', None)
        if expected_node_count is not None:
            self.assertEqual(
                stats.node_count, expected_node_count,
                f"Node count {stats.node_count} does not match "
                f"expected {expected_node_count}\n"
                f"Tree structure:\n{self.tree.print_structure()}"
            )

        expected_height = getattr(self, 'expected_height', None)
        if expected_height is not None:
            self.assertEqual(
                self.tree.height, expected_height,
                f"Height {self.tree.height} does not match expected {expected_height}"
            )

        expected_keys = getattr(self, 'expected_keys', None)
        keys, presence_ok, order_ok = check_keys_and_order(self.tree, expected_keys)
        self.assertTrue(order_ok, f"Keys must be in sorted order, got {keys}")
        if expected_keys is not None:
            self.assertTrue(
                presence_ok,
                f"Keys {keys} do not match expected {sorted(expected_keys)}"
            )

    def _insert_all(self, keys: List[Any]) -> None:
        for key in keys:
            self.tree.insert(key)

    def _assert_node(
        self,
        node: Optional[AvlNodeBase],
        key: Any,
        left: Optional[Any] = None,
        right: Optional[Any] = None,
    ) -> None:
        """
        Verify that `node` holds `key` and that its children hold the
        `left`/`right` keys (None meaning no child on that side).
        """
        self.assertIsNotNone(node, f"Expected a node with key {key}")
        self.assertEqual(node.key, key, f"Expected key {key}, got {node.key}")
        for side, expected in (("left", left), ("right", right)):
            child = getattr(node, side)
            if expected is None:
                self.assertIsNone(child, f"Expected no {side} child under {key}")
            else:
                self.assertIsNotNone(child, f"Expected {side} child {expected} under {key}")
                self.assertEqual(
                    child.key, expected,
                    f"{side} child of {key}: expected {expected}, got {child.key}"
                )
                self.assertIs(child.parent, node, f"Parent link of {child.key} is broken")
