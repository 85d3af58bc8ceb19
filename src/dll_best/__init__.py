"""
DLL-BEST: an AVL tree threaded into a sorted doubly-linked list.

The tree answers point and rank queries in O(log n) and range queries in
O(log n + k) by walking the list from the lower bound.
"""

from dll_best.base import (
    AbstractOrderedIndex,
    Redundancy,
    default_compare,
)
from dll_best.avl_tree_base import (
    AvlTreeBase,
    AvlNodeBase,
    Stats,
    tree_stats_,
)
from dll_best.factory import (
    make_avl_tree_classes,
    create_avl_tree,
)

__all__ = [
    'AbstractOrderedIndex',
    'Redundancy',
    'default_compare',
    'AvlTreeBase',
    'AvlNodeBase',
    'Stats',
    'tree_stats_',
    'make_avl_tree_classes',
    'create_avl_tree',
]
