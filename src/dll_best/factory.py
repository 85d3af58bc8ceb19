"""Factory for the creation of DLL-BEST tree classes"""

from typing import Type, Tuple, Dict, Optional
import logging

from dll_best.base import Comparator, Redundancy
from dll_best.avl_tree_base import AvlTreeBase, AvlNodeBase

# Configure logging
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

# Cache for previously created classes to avoid recreating them
_class_cache: Dict[Redundancy, Tuple[Type[AvlTreeBase], Type[AvlNodeBase]]] = {}


def make_avl_tree_classes(redundancy=Redundancy.REDUNDANT) -> Tuple[
    Type[AvlTreeBase],
    Type[AvlNodeBase]
]:
    """
    Factory function to generate tree and node classes specialized for a
    duplicate-key policy.

    Returns:
        AvlTree_<Policy> – subclass of AvlTreeBase with REDUNDANCY and NodeClass set.
        AvlNode_<Policy> – subclass of AvlNodeBase allocated by that tree.

    Raises:
        ValueError: If `redundancy` names no known policy.
    """
    redundancy = Redundancy.coerce(redundancy)

    if redundancy in _class_cache:
        logger.debug(f"Using cached classes for redundancy={redundancy.value}")
        return _class_cache[redundancy]

    logger.debug(f"Creating new classes for redundancy={redundancy.value}")
    suffix = redundancy.name.capitalize()

    # 1) Node class: slots are inherited, no per-instance dict
    AvlNodeP = type(
        f"AvlNode_{suffix}",
        (AvlNodeBase,),
        {"__slots__": ()}
    )
    logger.debug(f"Created AvlNode_{suffix}")

    # 2) Tree class allocates the node class and carries the policy
    AvlTreeP = type(
        f"AvlTree_{suffix}",
        (AvlTreeBase,),
        {
            "NodeClass": AvlNodeP,
            "REDUNDANCY": redundancy,
            "__slots__": ()
        }
    )
    logger.debug(f"Created AvlTree_{suffix} with NodeClass={AvlNodeP.__name__}")

    _class_cache[redundancy] = (AvlTreeP, AvlNodeP)
    logger.debug(f"Cached classes for redundancy={redundancy.value}")

    return AvlTreeP, AvlNodeP


def create_avl_tree(
    redundancy=Redundancy.REDUNDANT,
    compare: Optional[Comparator] = None
) -> AvlTreeBase:
    """
    Create a new empty tree with the given duplicate policy.

    Args:
        redundancy: Redundancy member, or its name ("unique"/"redundant").
        compare: Three-way comparator over keys; natural ordering by default.

    Returns:
        A new empty tree instance of the specialized class.
    """
    TreeP, _ = make_avl_tree_classes(redundancy)
    tree = TreeP(compare=compare)
    logger.debug(f"Created tree instance of type {type(tree).__name__}")
    return tree
