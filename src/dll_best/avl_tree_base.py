"""AVL DLL-BEST tree base implementation"""

from __future__ import annotations
import logging
from typing import Any, Iterator, List, Optional, Tuple, Type
from dataclasses import dataclass

from dll_best.base import (
    AbstractOrderedIndex,
    Comparator,
    Redundancy,
    default_compare,
)
from dll_best.profiling import (
    track_performance,
    PerformanceTracker
)

_tracker = PerformanceTracker.get_instance()

# Configure logging
logger = logging.getLogger(__name__)
# Clear all handlers to ensure we don't add duplicates
if logger.hasHandlers():
    logger.handlers.clear()
# Add a single handler with formatting
handler = logging.StreamHandler()
formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(logging.INFO)
# Prevent propagation to the root logger to avoid duplicate logs
logger.propagate = False

# Marks an omitted value argument; the key then doubles as the value.
NO_VALUE = object()

DEBUG = False


class AvlNodeBase:
    """
    A node of the DLL-BEST tree.

    Besides the usual AVL links (left, right, parent, height) every node carries:
      - children:     number of structural descendants (equal chains excluded)
      - multiplicity: 1 + length of the equal chain hanging off this node
      - weight:       number of stored values in the subtree (chains included)
      - lt, gt:       neighbours in the global ascending list of primary nodes
      - eq:           next node holding an equal key
    """
    __slots__ = (
        "key", "value",
        "left", "right", "parent",
        "height", "children", "multiplicity", "weight",
        "lt", "gt", "eq",
    )

    def __init__(self, key: Any, value: Any = NO_VALUE) -> None:
        self.key = key
        self.value = key if value is NO_VALUE else value
        self.left: Optional[AvlNodeBase] = None
        self.right: Optional[AvlNodeBase] = None
        self.parent: Optional[AvlNodeBase] = None
        self.height = 0
        self.children = 0
        self.multiplicity = 1
        self.weight = 1
        self.lt: Optional[AvlNodeBase] = None
        self.gt: Optional[AvlNodeBase] = None
        self.eq: Optional[AvlNodeBase] = None

    @property
    def is_leaf(self) -> bool:
        return self.height == 0

    @property
    def is_branch(self) -> bool:
        """Whether the node has exactly one child."""
        return (self.left is None) != (self.right is None)

    @property
    def max_child_height(self) -> int:
        """The larger of the two child heights, or -1 for a leaf."""
        return max(_height(self.left), _height(self.right))

    @property
    def balance(self) -> int:
        return _height(self.left) - _height(self.right)

    @property
    def is_balanced(self) -> bool:
        return -1 <= self.balance <= 1

    def iter_equal(self) -> Iterator[AvlNodeBase]:
        """Yields this node followed by every node of its equal chain."""
        node = self
        while node is not None:
            yield node
            node = node.eq

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        return f"{cls}(key={self.key!r}, value={self.value!r}, height={self.height})"

    def __str__(self) -> str:
        return f"({self.key}, {self.height})"


def _height(node: Optional[AvlNodeBase]) -> int:
    return node.height if node is not None else -1


def _subtree_size(node: Optional[AvlNodeBase]) -> int:
    return node.children + 1 if node is not None else 0


def _weight(node: Optional[AvlNodeBase]) -> int:
    return node.weight if node is not None else 0


class AvlTreeBase(AbstractOrderedIndex):
    """
    An AVL tree merged with a sorted doubly-linked list (a DLL-BEST tree).

    The BST finds the base of a query in O(log n); the list then enumerates
    the ordered neighbours without climbing the tree.

    Attributes:
        root (Optional[AvlNodeBase]): Root of the BST, None if the tree is empty.
        head (Optional[AvlNodeBase]): Smallest primary node (start of the list).
        tail (Optional[AvlNodeBase]): Greatest primary node (end of the list).
        compare (Comparator): Total order over keys.
        redundancy (Redundancy): Duplicate-key policy.
    """
    __slots__ = ("root", "head", "tail", "compare", "redundancy", "_size")

    # Factory-specialised subclasses override these
    NodeClass: Type[AvlNodeBase] = AvlNodeBase
    REDUNDANCY: Redundancy = Redundancy.REDUNDANT

    def __init__(
        self,
        compare: Optional[Comparator] = None,
        redundancy: Optional[Redundancy] = None
    ) -> None:
        if compare is not None and not callable(compare):
            raise TypeError(f"compare must be callable, got {type(compare).__name__!r}")
        self.compare: Comparator = compare if compare is not None else default_compare
        self.redundancy = (
            Redundancy.coerce(redundancy) if redundancy is not None else self.REDUNDANCY
        )
        self.root: Optional[AvlNodeBase] = None
        self.head: Optional[AvlNodeBase] = None
        self.tail: Optional[AvlNodeBase] = None
        self._size = 0

    def is_empty(self) -> bool:
        return self.root is None

    def __len__(self) -> int:
        return self._size

    def node_count(self) -> int:
        """Number of structural nodes, i.e. distinct keys."""
        return _subtree_size(self.root)

    def __str__(self):
        cls = self.__class__.__name__
        if self.is_empty():
            return f"Empty {cls}"
        return (f"{cls}(size={self._size}, nodes={self.node_count()}, "
                f"height={self.height}, redundancy={self.redundancy.value})")

    __repr__ = __str__

    @property
    def height(self) -> int:
        """Height of the root, -1 for an empty tree."""
        return _height(self.root)

    @property
    def biggest(self) -> Optional[AvlNodeBase]:
        if self.root is None:
            return None
        return self.find_biggest(self.root)

    @property
    def smallest(self) -> Optional[AvlNodeBase]:
        if self.root is None:
            return None
        return self.find_smallest(self.root)

    @staticmethod
    def find_biggest(node: AvlNodeBase) -> AvlNodeBase:
        while node.right is not None:
            node = node.right
        return node

    @staticmethod
    def find_smallest(node: AvlNodeBase) -> AvlNodeBase:
        while node.left is not None:
            node = node.left
        return node

    # Public API
    @track_performance
    def insert(self, key: Any, value: Any = NO_VALUE) -> bool:
        """
        Insert a value under `key` (O(log n)).

        An equal key is chained onto the existing node under the REDUNDANT
        policy and silently ignored under the UNIQUE policy.

        Args:
            key: The ordering key.
            value: The payload; when omitted the key itself is stored.

        Returns:
            bool: True if a value was added.
        """
        inserted = self._insert(self.NodeClass(key, value))
        if DEBUG:
            self.check_invariants()
        return inserted

    @track_performance
    def try_insert(self, key: Any, value: Any = NO_VALUE) -> bool:
        """
        Insert only if no equal key is stored yet, regardless of the policy.

        Returns:
            bool: False if the key already exists, True once inserted.
        """
        if self._find_node(key) is not None:
            return False
        inserted = self._insert(self.NodeClass(key, value))
        if DEBUG:
            self.check_invariants()
        return inserted

    def append(self, key: Any, value: Any = NO_VALUE) -> AvlTreeBase:
        """Insert honouring the duplicate policy and return the tree for chaining."""
        self.insert(key, value)
        return self

    @track_performance
    def put(self, key: Any, value: Any) -> AvlTreeBase:
        """Associate `value` with `key`, replacing the value of an existing key."""
        node = self._find_node(key)
        if node is not None:
            node.value = value
        else:
            self._insert(self.NodeClass(key, value))
            if DEBUG:
                self.check_invariants()
        return self

    @track_performance
    def find(self, key: Any, node: Optional[AvlNodeBase] = None) -> Optional[AvlNodeBase]:
        """
        Locate the primary node whose key compares equal to `key`.

        Args:
            key: The key to search for.
            node: Root of the subtree to search; defaults to the tree root.

        Returns:
            Optional[AvlNodeBase]: The matching node, or None if not found.
        """
        return self._find_node(key, node)

    def __contains__(self, key: Any) -> bool:
        return self._find_node(key) is not None

    @track_performance
    def remove(self, key: Any) -> bool:
        """
        Remove one value stored under `key`.

        Returns:
            bool: True if a value was removed, False if the key is absent.
        """
        node = self._find_node(key)
        if node is None:
            return False
        self._remove_primary(node)
        if DEBUG:
            self.check_invariants()
        return True

    @track_performance
    def remove_node(self, node: Optional[AvlNodeBase]) -> bool:
        """
        Remove a specific node: a primary node returned by `find`, or a
        node of some equal chain.

        Returns:
            bool: False if the node is not stored in this tree.
        """
        if node is None:
            return False
        primary = self._find_node(node.key)
        if primary is None:
            return False

        if primary is node:
            self._remove_primary(node)
        else:
            prev = primary
            while prev.eq is not None and prev.eq is not node:
                prev = prev.eq
            if prev.eq is None:
                return False
            prev.eq = node.eq
            node.eq = None
            primary.multiplicity -= 1
            self._adjust_counts(primary, 0, -1)
            self._size -= 1

        if DEBUG:
            self.check_invariants()
        return True

    @track_performance
    def get(self, index: int) -> Any:
        """
        Return the value with 0-based rank `index` (O(log n)).

        Returns:
            The value, or None if `index` is out of range.

        Raises:
            TypeError: If `index` is not an int.
        """
        node = self.get_node(index)
        return node.value if node is not None else None

    def get_node(self, index: int) -> Optional[AvlNodeBase]:
        """Return the node holding rank `index`; equal-chain entries count as ranks."""
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"index must be int, got {type(index).__name__!r}")
        if index < 0 or index >= self._size:
            return None

        node = self.root
        while node is not None:
            left_weight = _weight(node.left)
            if index < left_weight:
                node = node.left
                continue

            index -= left_weight
            if index < node.multiplicity:
                while index:
                    node = node.eq
                    index -= 1
                return node

            index -= node.multiplicity
            node = node.right
        return None

    def index_of(self, key: Any) -> int:
        """Rank of the first value stored under `key`, or -1 if absent."""
        compare = self.compare
        rank = 0
        node = self.root
        while node is not None:
            ineq = compare(key, node.key)
            if ineq < 0:
                node = node.left
            elif ineq > 0:
                rank += _weight(node.left) + node.multiplicity
                node = node.right
            else:
                return rank + _weight(node.left)
        return -1

    @track_performance
    def range(self, lower: Any, upper: Any) -> List[Any]:
        """
        Return every value whose key lies in [lower, upper], ascending.

        O(log n) to locate the lower bound, then O(k) along the linked list.
        """
        return list(self.iter_range(lower, upper))

    def iter_range(self, lower: Any, upper: Any) -> Iterator[Any]:
        compare = self.compare
        node = self._lower_bound(lower)
        while node is not None and compare(node.key, upper) <= 0:
            yield node.value
            dup = node.eq
            while dup is not None:
                yield dup.value
                dup = dup.eq
            node = node.gt

    def preorder(self) -> List[Any]:
        out: List[Any] = []
        if self.root is not None:
            self._preorder(self.root, out)
        return out

    def inorder(self) -> List[Any]:
        out: List[Any] = []
        if self.root is not None:
            self._inorder(self.root, out)
        return out

    def postorder(self) -> List[Any]:
        out: List[Any] = []
        if self.root is not None:
            self._postorder(self.root, out)
        return out

    @track_performance
    def dll_dump(self) -> List[Any]:
        """
        Ascending list of all values taken from the doubly-linked list rather
        than the BST. The fastest full ordered enumeration.
        """
        return list(self)

    def iter_nodes(self) -> Iterator[AvlNodeBase]:
        """Yields the primary nodes from head to tail."""
        node = self.head
        while node is not None:
            yield node
            node = node.gt

    def __iter__(self) -> Iterator[Any]:
        for node in self.iter_nodes():
            for dup in node.iter_equal():
                yield dup.value

    def __reversed__(self) -> Iterator[Any]:
        node = self.tail
        while node is not None:
            values = [dup.value for dup in node.iter_equal()]
            yield from reversed(values)
            node = node.lt

    @track_performance
    def dequeue(self) -> Any:
        """
        Remove and return the greatest value, letting the tree act as a
        priority queue.

        Returns:
            The removed value, or None if the tree is empty.
        """
        node = self.biggest
        if node is None:
            return None
        value = node.value
        self._remove_primary(node)
        if DEBUG:
            self.check_invariants()
        return value

    def clear(self) -> None:
        self.root = self.head = self.tail = None
        self._size = 0

    # Locator
    def _find_node(self, key: Any, node: Optional[AvlNodeBase] = None) -> Optional[AvlNodeBase]:
        compare = self.compare
        if node is None:
            node = self.root
        while node is not None:
            ineq = compare(key, node.key)
            if ineq < 0:
                node = node.left
            elif ineq > 0:
                node = node.right
            else:
                return node
        return None

    def _lower_bound(self, lower: Any) -> Optional[AvlNodeBase]:
        """The smallest primary node whose key is >= lower."""
        compare = self.compare
        node = self.root
        candidate = None
        while node is not None:
            ineq = compare(node.key, lower)
            if ineq < 0:
                node = node.right
            elif ineq > 0:
                candidate = node
                node = node.left
            else:
                return node
        return candidate

    # Inserter
    def _insert(self, node: AvlNodeBase) -> bool:
        if self.root is None:
            self.root = self.head = self.tail = node
            self._size += 1
            return True

        compare = self.compare
        cur = self.root
        while True:
            ineq = compare(node.key, cur.key)
            if ineq < 0:
                if cur.left is None:
                    cur.left = node
                    self._link_before(cur, node)
                    break
                cur = cur.left
            elif ineq > 0:
                if cur.right is None:
                    cur.right = node
                    self._link_after(cur, node)
                    break
                cur = cur.right
            else:
                return self._add_equal(cur, node)

        node.parent = cur
        self._size += 1
        self._adjust_counts(cur, 1, 1)
        self._retrace_insert(cur)
        return True

    def _retrace_insert(self, node: AvlNodeBase) -> None:
        """
        Walk up from the parent of a new leaf updating heights. One rotation
        at the first unbalanced ancestor restores the pre-insert height of
        that subtree, so the walk ends there.
        """
        while node is not None:
            old_height = node.height
            node.height = node.max_child_height + 1
            if not node.is_balanced:
                self._rebalance(node)
                return
            if node.height == old_height:
                return
            node = node.parent

    @staticmethod
    def _adjust_counts(node: Optional[AvlNodeBase], children: int, weight: int) -> None:
        while node is not None:
            node.children += children
            node.weight += weight
            node = node.parent

    # Linker
    def _link_before(self, parent: AvlNodeBase, node: AvlNodeBase) -> None:
        """Splice `node`, the new left child of `parent`, in front of it."""
        node.gt = parent
        node.lt = parent.lt
        if parent.lt is not None:
            parent.lt.gt = node
        else:
            self.head = node
        parent.lt = node

    def _link_after(self, parent: AvlNodeBase, node: AvlNodeBase) -> None:
        """Splice `node`, the new right child of `parent`, behind it."""
        node.lt = parent
        node.gt = parent.gt
        if parent.gt is not None:
            parent.gt.lt = node
        else:
            self.tail = node
        parent.gt = node

    def _add_equal(self, primary: AvlNodeBase, node: AvlNodeBase) -> bool:
        if self.redundancy is Redundancy.UNIQUE:
            return False

        # Only the primary node takes part in the linked list
        node.lt = node.gt = None
        node.eq = primary.eq
        primary.eq = node
        primary.multiplicity += 1
        self._adjust_counts(primary, 0, 1)
        self._size += 1
        return True

    def _unlink(self, node: AvlNodeBase) -> None:
        if node.lt is not None:
            node.lt.gt = node.gt
        else:
            self.head = node.gt
        if node.gt is not None:
            node.gt.lt = node.lt
        else:
            self.tail = node.lt
        node.lt = node.gt = None

    def _promote_equal(self, node: AvlNodeBase) -> None:
        """Replace the payload of `node` with that of its first duplicate."""
        _tracker.count("promote_equal")
        dup = node.eq
        node.key, node.value = dup.key, dup.value
        node.eq = dup.eq
        dup.eq = None
        node.multiplicity -= 1
        self._adjust_counts(node, 0, -1)

    # Remover
    def _remove_primary(self, node: AvlNodeBase) -> None:
        """
        There are three structural cases:

        1) The node is a leaf: detach it from its parent.
        2) The node is a branch (one child): hand the child to the parent.
        3) The node has two children: swap it with its in-order successor
           (the smallest node of its right subtree), then remove it from
           the successor's former slot, where it is a leaf or a branch.
        """
        self._size -= 1
        if node.eq is not None:
            self._promote_equal(node)
            return

        self._unlink(node)
        if node.is_leaf:
            self._remove_leaf(node)
        elif node.is_branch:
            self._remove_branch(node)
        else:
            self._swap_and_remove(node)

    def _remove_leaf(self, node: AvlNodeBase) -> None:
        parent = node.parent
        self._replace_child(parent, node, None)
        node.parent = None
        self._retrace_remove(parent)

    def _remove_branch(self, node: AvlNodeBase) -> None:
        parent = node.parent
        child = node.left if node.left is not None else node.right
        self._replace_child(parent, node, child)
        node.parent = node.left = node.right = None
        self._retrace_remove(parent)

    def _swap_and_remove(self, node: AvlNodeBase) -> None:
        successor = self.find_smallest(node.right)
        logger.debug("Swapping %r with successor %r", node.key, successor.key)
        _tracker.count("successor_swap")
        self._swap_nodes(node, successor)
        if node.is_leaf:
            self._remove_leaf(node)
        else:
            self._remove_branch(node)

    def _swap_nodes(self, node: AvlNodeBase, successor: AvlNodeBase) -> None:
        """
        Exchange the tree positions of `node` and its in-order successor.
        The successor has no left child.
        """
        parent = node.parent
        left, right = node.left, node.right
        s_parent, s_right = successor.parent, successor.right

        self._replace_child(parent, node, successor)
        successor.left = left
        left.parent = successor

        if s_parent is node:
            successor.right = node
            node.parent = successor
        else:
            successor.right = right
            right.parent = successor
            s_parent.left = node
            node.parent = s_parent

        node.left = None
        node.right = s_right
        if s_right is not None:
            s_right.parent = node

        node.height, successor.height = successor.height, node.height
        node.children, successor.children = successor.children, node.children
        node.weight, successor.weight = successor.weight, node.weight

    def _retrace_remove(self, node: Optional[AvlNodeBase]) -> None:
        """
        Refresh every ancestor up to the root. Unlike insertion, a removal
        may need a rotation on several levels.
        """
        while node is not None:
            self._refresh(node)
            if not node.is_balanced:
                node = self._rebalance(node)
            node = node.parent

    # Balancer
    @staticmethod
    def _refresh(node: AvlNodeBase) -> None:
        """Recompute height and counts of `node` from its children."""
        left, right = node.left, node.right
        node.height = max(_height(left), _height(right)) + 1
        node.children = _subtree_size(left) + _subtree_size(right)
        node.weight = _weight(left) + node.multiplicity + _weight(right)

    def _replace_child(
        self,
        parent: Optional[AvlNodeBase],
        old: AvlNodeBase,
        new: Optional[AvlNodeBase]
    ) -> None:
        if parent is None:
            self.root = new
        elif parent.left is old:
            parent.left = new
        else:
            parent.right = new
        if new is not None:
            new.parent = parent

    @staticmethod
    def _recompute_heights(node: Optional[AvlNodeBase]) -> None:
        """Recompute heights towards the root until one stays unchanged."""
        changed = True
        while node is not None and changed:
            old_height = node.height
            node.height = node.max_child_height + 1
            changed = node.height != old_height
            node = node.parent

    def _rebalance(self, node: AvlNodeBase) -> AvlNodeBase:
        """
        Restore the AVL balance at `node`.

        Returns:
            AvlNodeBase: The root of the rebalanced subtree.
        """
        balance = node.balance
        if balance <= -2:
            if node.right.balance <= 0:
                return self._rotate_rr(node)
            return self._rotate_rl(node)
        if balance >= 2:
            if node.left.balance >= 0:
                return self._rotate_ll(node)
            return self._rotate_lr(node)
        return node

    def _rotate_rr(self, a: AvlNodeBase) -> AvlNodeBase:
        f, b = a.parent, a.right
        logger.debug("RR rotation at %r", a.key)
        _tracker.count("rotate_rr")

        a.right = b.left
        if a.right is not None:
            a.right.parent = a
        b.left = a
        a.parent = b
        self._replace_child(f, a, b)

        self._refresh(a)
        self._refresh(b)
        self._recompute_heights(f)
        return b

    def _rotate_ll(self, a: AvlNodeBase) -> AvlNodeBase:
        f, b = a.parent, a.left
        logger.debug("LL rotation at %r", a.key)
        _tracker.count("rotate_ll")

        a.left = b.right
        if a.left is not None:
            a.left.parent = a
        b.right = a
        a.parent = b
        self._replace_child(f, a, b)

        self._refresh(a)
        self._refresh(b)
        self._recompute_heights(f)
        return b

    def _rotate_rl(self, a: AvlNodeBase) -> AvlNodeBase:
        f, b = a.parent, a.right
        c = b.left
        logger.debug("RL rotation at %r", a.key)
        _tracker.count("rotate_rl")

        b.left = c.right
        if b.left is not None:
            b.left.parent = b
        a.right = c.left
        if a.right is not None:
            a.right.parent = a
        c.right = b
        b.parent = c
        c.left = a
        a.parent = c
        self._replace_child(f, a, c)

        self._refresh(a)
        self._refresh(b)
        self._refresh(c)
        self._recompute_heights(f)
        return c

    def _rotate_lr(self, a: AvlNodeBase) -> AvlNodeBase:
        f, b = a.parent, a.left
        c = b.right
        logger.debug("LR rotation at %r", a.key)
        _tracker.count("rotate_lr")

        a.left = c.right
        if a.left is not None:
            a.left.parent = a
        b.right = c.left
        if b.right is not None:
            b.right.parent = b
        c.left = b
        b.parent = c
        c.right = a
        a.parent = c
        self._replace_child(f, a, c)

        self._refresh(a)
        self._refresh(b)
        self._refresh(c)
        self._recompute_heights(f)
        return c

    # Traversal
    @staticmethod
    def _emit(node: AvlNodeBase, out: List[Any]) -> None:
        out.append(node.value)
        dup = node.eq
        while dup is not None:
            out.append(dup.value)
            dup = dup.eq

    def _preorder(self, node: AvlNodeBase, out: List[Any]) -> None:
        self._emit(node, out)
        if node.left is not None:
            self._preorder(node.left, out)
        if node.right is not None:
            self._preorder(node.right, out)

    def _inorder(self, node: AvlNodeBase, out: List[Any]) -> None:
        if node.left is not None:
            self._inorder(node.left, out)
        self._emit(node, out)
        if node.right is not None:
            self._inorder(node.right, out)

    def _postorder(self, node: AvlNodeBase, out: List[Any]) -> None:
        if node.left is not None:
            self._postorder(node.left, out)
        if node.right is not None:
            self._postorder(node.right, out)
        self._emit(node, out)

    # Diagnostics
    def check_invariants(self) -> None:
        """
        Verifies the BST order, AVL balance, stored heights and counts,
        parent links, the linked list and the isolation of equal chains.

        Raises:
            AssertionError: if any invariant is violated.
        """
        stats = tree_stats_(self)
        for flag in TREE_FLAGS:
            assert getattr(stats, flag), (
                f"Invariant violated: {flag}\n{self.print_structure()}"
            )
        assert stats.item_count == self._size, (
            f"Invariant violated: {stats.item_count} stored values, size is {self._size}"
        )

    def print_structure(self, indent: int = 0, max_depth: Optional[int] = None) -> str:
        """
        Returns a string representation of the tree for debugging, one node
        per line as `key (h=height, n=descendants[, eq=duplicates])`.
        """
        prefix = ' ' * indent
        if self.is_empty():
            return f"{prefix}Empty {self.__class__.__name__}"

        result = []

        def _collect(node: AvlNodeBase, pad: str, label: str, depth: int) -> None:
            if max_depth is not None and depth > max_depth:
                result.append(f"{pad}{label}... (max depth reached)")
                return
            dup = f", eq={node.multiplicity - 1}" if node.multiplicity > 1 else ""
            result.append(f"{pad}{label}{node.key!r} (h={node.height}, n={node.children}{dup})")
            if node.left is not None:
                _collect(node.left, pad + "    ", "L: ", depth + 1)
            if node.right is not None:
                _collect(node.right, pad + "    ", "R: ", depth + 1)

        _collect(self.root, prefix, "", 0)
        return "\n".join(result)

    # Profiling
    @staticmethod
    def get_performance_report(sort_by: str = 'total_time') -> str:
        return PerformanceTracker.get_instance().report(sort_by=sort_by)

    @staticmethod
    def enable_performance_tracking() -> None:
        PerformanceTracker.get_instance().enable()

    @staticmethod
    def disable_performance_tracking() -> None:
        PerformanceTracker.get_instance().disable()

    @staticmethod
    def reset_performance_metrics() -> None:
        PerformanceTracker.get_instance().reset()


TREE_FLAGS = (
    "is_search_tree",
    "is_balanced",
    "heights_correct",
    "counts_correct",
    "parents_consistent",
    "list_in_order",
    "list_matches_tree",
    "eq_chains_isolated",
)

@dataclass
class Stats:
    node_count: int
    item_count: int
    height: int
    least_key: Optional[Any]
    greatest_key: Optional[Any]
    max_chain_length: int
    is_search_tree: bool
    is_balanced: bool
    heights_correct: bool
    counts_correct: bool
    parents_consistent: bool
    list_in_order: bool
    list_matches_tree: bool
    eq_chains_isolated: bool

def tree_stats_(t: Optional[AvlTreeBase]) -> Stats:
    """
    Returns aggregated statistics and invariant flags for a DLL-BEST tree
    in **O(n)** time. Stored fields are compared against values recomputed
    from scratch, never trusted.
    """
    stats = Stats(node_count          = 0,
                  item_count          = 0,
                  height              = -1,
                  least_key           = None,
                  greatest_key        = None,
                  max_chain_length    = 0,
                  is_search_tree      = True,
                  is_balanced         = True,
                  heights_correct     = True,
                  counts_correct      = True,
                  parents_consistent  = True,
                  list_in_order       = True,
                  list_matches_tree   = True,
                  eq_chains_isolated  = True,)

    # ---------- empty tree return ---------------------------------
    if t is None or t.is_empty():
        if t is not None:
            stats.list_matches_tree = t.head is None and t.tail is None
            stats.counts_correct = len(t) == 0
        return stats

    compare = t.compare
    in_order: List[AvlNodeBase] = []

    def _walk(node: AvlNodeBase, parent: Optional[AvlNodeBase]) -> Tuple[int, int, int]:
        if node.parent is not parent:
            stats.parents_consistent = False

        left_h = right_h = -1
        left_n = right_n = left_w = right_w = 0
        if node.left is not None:
            left_h, left_n, left_w = _walk(node.left, node)
        in_order.append(node)
        if node.right is not None:
            right_h, right_n, right_w = _walk(node.right, node)

        height = 1 + max(left_h, right_h)
        if node.height != height:
            stats.heights_correct = False
        if abs(left_h - right_h) > 1:
            stats.is_balanced = False

        # ----- equal chain -----
        chain = 0
        dup = node.eq
        while dup is not None:
            chain += 1
            if (dup.lt is not None or dup.gt is not None or dup.parent is not None
                    or dup.left is not None or dup.right is not None):
                stats.eq_chains_isolated = False
            if compare(dup.key, node.key) != 0:
                stats.is_search_tree = False
            dup = dup.eq
        stats.max_chain_length = max(stats.max_chain_length, chain)

        size = left_n + 1 + right_n
        weight = left_w + chain + 1 + right_w
        if (node.multiplicity != chain + 1 or node.children != size - 1
                or node.weight != weight):
            stats.counts_correct = False
        return height, size, weight

    if t.root.parent is not None:
        stats.parents_consistent = False
    stats.height, stats.node_count, stats.item_count = _walk(t.root, None)
    if stats.item_count != len(t):
        stats.counts_correct = False

    # ---------- BST order from the in-order node sequence ---------
    for prev, cur in zip(in_order, in_order[1:]):
        if compare(prev.key, cur.key) >= 0:
            stats.is_search_tree = False
            break
    stats.least_key = in_order[0].key
    stats.greatest_key = in_order[-1].key

    # ---------- linked list walk ONCE, bounded by the node count ---
    forward: List[AvlNodeBase] = []
    node = t.head
    if node is not None and node.lt is not None:
        stats.list_matches_tree = False
    while node is not None and len(forward) <= stats.node_count:
        forward.append(node)
        node = node.gt
    for prev, cur in zip(forward, forward[1:]):
        if compare(prev.key, cur.key) >= 0:
            stats.list_in_order = False
            break

    backward: List[AvlNodeBase] = []
    node = t.tail
    while node is not None and len(backward) <= stats.node_count:
        backward.append(node)
        node = node.lt

    if (len(forward) != len(in_order)
            or any(a is not b for a, b in zip(forward, in_order))
            or t.tail is not forward[-1]
            or backward[::-1] != forward):
        stats.list_matches_tree = False

    return stats

def collect_keys(tree: AvlTreeBase) -> List[Any]:
    """Keys of every stored value, ascending, read from the linked list."""
    return [dup.key for node in tree.iter_nodes() for dup in node.iter_equal()]
