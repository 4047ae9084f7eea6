"""
tree.py — Binary Search Tree Snapshot
======================================
A strict binary search tree: every node owns its two subtrees, values
are unique, left < node < right.

The methods here are the direct (non-animated) mutation API used while
a user builds a tree before a run.  The animated versions live in
algorithms/bst.py and operate on the same BSTNode objects.
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple


SAMPLE_VALUES: Tuple[int, ...] = (50, 30, 70, 20, 40, 60, 80, 10, 25, 35, 45)


@dataclass
class BSTNode:
    value: int
    left:  Optional["BSTNode"] = None
    right: Optional["BSTNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


# nested (value, left, right) tuples; None for an empty subtree
FrozenTree = Optional[Tuple[int, Any, Any]]


class BinarySearchTree:

    def __init__(self, root: Optional[BSTNode] = None):
        self.root: Optional[BSTNode] = root

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(self, value: int) -> bool:
        """Insert `value`.  Returns False (and changes nothing) if it exists."""
        if self.root is None:
            self.root = BSTNode(value)
            return True
        node = self.root
        while True:
            if value == node.value:
                return False
            side = "left" if value < node.value else "right"
            child = getattr(node, side)
            if child is None:
                setattr(node, side, BSTNode(value))
                return True
            node = child

    def delete(self, value: int) -> bool:
        """Remove `value`.  Returns False when it was not in the tree."""
        self.root, removed = _delete(self.root, value)
        return removed

    def clear(self) -> None:
        self.root = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def contains(self, value: int) -> bool:
        node = self.root
        while node is not None:
            if value == node.value:
                return True
            node = node.left if value < node.value else node.right
        return False

    def in_order(self) -> List[int]:
        out: List[int] = []
        _walk(self.root, "inorder", out)
        return out

    def pre_order(self) -> List[int]:
        out: List[int] = []
        _walk(self.root, "preorder", out)
        return out

    def post_order(self) -> List[int]:
        out: List[int] = []
        _walk(self.root, "postorder", out)
        return out

    def height(self) -> int:
        return _height(self.root)

    def leaves(self) -> int:
        return _leaves(self.root)

    def shape_stats(self) -> Dict[str, int]:
        """Node count, height and leaf count for the stats panel."""
        return {"nodes": len(self), "height": self.height(), "leaves": self.leaves()}

    def is_valid(self) -> bool:
        """True when the strict ordering invariant holds everywhere."""
        values = self.in_order()
        return all(a < b for a, b in zip(values, values[1:]))

    def __len__(self) -> int:
        return _count(self.root)

    def __repr__(self) -> str:
        return f"BinarySearchTree({self.in_order()})"

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def freeze(self) -> FrozenTree:
        return _freeze(self.root)

    def to_dict(self) -> Optional[dict]:
        return _to_dict(self.root)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def from_values(cls, values: Iterable[int]) -> "BinarySearchTree":
        tree = cls()
        for v in values:
            tree.insert(v)
        return tree

    @classmethod
    def sample(cls) -> "BinarySearchTree":
        return cls.from_values(SAMPLE_VALUES)

    @classmethod
    def generate_random(cls, seed: Optional[int] = None) -> "BinarySearchTree":
        """5..10 distinct values in 10..99, inserted in random order."""
        rng = random.Random(seed)
        count = rng.randint(5, 10)
        return cls.from_values(rng.sample(range(10, 100), count))


# ---------------------------------------------------------------------------
# Recursive helpers
# ---------------------------------------------------------------------------
def min_node(node: BSTNode) -> BSTNode:
    while node.left is not None:
        node = node.left
    return node


def _delete(node: Optional[BSTNode], value: int) -> Tuple[Optional[BSTNode], bool]:
    if node is None:
        return None, False
    if value < node.value:
        node.left, removed = _delete(node.left, value)
        return node, removed
    if value > node.value:
        node.right, removed = _delete(node.right, value)
        return node, removed
    if node.left is None:
        return node.right, True
    if node.right is None:
        return node.left, True
    # two children: take the in-order successor's value, then remove the successor
    successor = min_node(node.right)
    node.value = successor.value
    node.right, _ = _delete(node.right, successor.value)
    return node, True


def _walk(node: Optional[BSTNode], order: str, out: List[int]) -> None:
    if node is None:
        return
    if order == "preorder":
        out.append(node.value)
    _walk(node.left, order, out)
    if order == "inorder":
        out.append(node.value)
    _walk(node.right, order, out)
    if order == "postorder":
        out.append(node.value)


def _count(node: Optional[BSTNode]) -> int:
    return 0 if node is None else 1 + _count(node.left) + _count(node.right)


def _height(node: Optional[BSTNode]) -> int:
    return 0 if node is None else 1 + max(_height(node.left), _height(node.right))


def _leaves(node: Optional[BSTNode]) -> int:
    if node is None:
        return 0
    if node.is_leaf:
        return 1
    return _leaves(node.left) + _leaves(node.right)


def _freeze(node: Optional[BSTNode]) -> FrozenTree:
    if node is None:
        return None
    return (node.value, _freeze(node.left), _freeze(node.right))


def _to_dict(node: Optional[BSTNode]) -> Optional[dict]:
    if node is None:
        return None
    return {"value": node.value, "left": _to_dict(node.left), "right": _to_dict(node.right)}
