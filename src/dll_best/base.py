from abc import ABC, abstractmethod
from enum import Enum

from typing import Any, Callable, Generic, Iterator, List, Optional, TypeVar


class Redundancy(Enum):
    """
    Duplicate-key policy of an ordered index.

    REDUNDANT: equal keys are chained off the primary node of their key.
    UNIQUE:    inserting an existing key is silently ignored.
    """
    REDUNDANT = "redundant"
    UNIQUE = "unique"

    @classmethod
    def coerce(cls, policy) -> "Redundancy":
        """Accept a Redundancy member or its (case-insensitive) name/value."""
        if isinstance(policy, cls):
            return policy
        if isinstance(policy, str):
            for member in cls:
                if policy.lower() in (member.value, member.name.lower()):
                    return member
        raise ValueError(f"unknown redundancy policy: {policy!r}")


Comparator = Callable[[Any, Any], int]


def default_compare(x: Any, y: Any) -> int:
    """
    Natural ordering comparator.

    Returns:
        int: negative if x < y, zero if x == y, positive if x > y.
    """
    return (x > y) - (x < y)


N = TypeVar("N")


class AbstractOrderedIndex(ABC, Generic[N]):
    """
    Abstract base class for an ordered index storing (key, value) pairs in
    comparator order.
    """

    @abstractmethod
    def insert(self, key: Any, value: Any = None) -> bool:
        """
        Insert a value under the given key, honouring the duplicate policy.

        Parameters:
            key: The ordering key.
            value: The payload. Defaults to the key itself.

        Returns:
            bool: True if a value was added, False if it was ignored.
        """
        pass

    @abstractmethod
    def remove(self, key: Any) -> bool:
        """
        Remove one value stored under the given key.

        Returns:
            bool: True if a value was removed, False if the key was absent.
        """
        pass

    @abstractmethod
    def find(self, key: Any) -> Optional[N]:
        """
        Locate the primary node whose key compares equal to `key`.

        Returns:
            The node, or None if no such key is stored.
        """
        pass

    @abstractmethod
    def get(self, index: int) -> Any:
        """Return the value with 0-based rank `index`, or None if out of range."""
        pass

    @abstractmethod
    def range(self, lower: Any, upper: Any) -> List[Any]:
        """Return all values whose keys lie in [lower, upper], ascending."""
        pass

    @abstractmethod
    def __iter__(self) -> Iterator[Any]:
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass
