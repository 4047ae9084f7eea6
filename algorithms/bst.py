"""
bst.py — Binary Search Tree Operations
=======================================
Generator-based insert, delete, search and traversal.  Item ids are the
node values themselves (values are unique in a BST).

Steps:
  insert    Compare per node descended, Mutate when the new leaf is linked.
  delete    Compare per node descended, Visit per node walked while looking
            for the in-order successor, Mutate per value copy / unlink.
  search    Visit per node descended.
  traverse  Visit per node in pre-, in- or post-order.

Edge cases:
  - Inserting a value that exists ends with Complete(UNCHANGED).
  - Deleting or searching a missing value ends with Complete(NOT_FOUND);
    on an empty tree that Complete is the only step.
"""

from typing import Generator, List, Optional

from structures import BinarySearchTree, BSTNode
from algorithms.stats import Stats
from algorithms.step import Step, StepBuilder, Outcome


TreeSteps = Generator[Step, None, None]

TRAVERSAL_ORDERS = ("preorder", "inorder", "postorder")


# ---------------------------------------------------------------------------
# Insert
# ---------------------------------------------------------------------------
def bst_insert(tree: BinarySearchTree, value: int, stats: Optional[Stats] = None) -> TreeSteps:
    sb = StepBuilder(stats)

    if tree.root is None:
        tree.root = BSTNode(value)
        yield sb.mutate((value,), tree.freeze(), f"The tree is empty: {value} becomes the root.")
        yield sb.complete(tree.freeze(), explanation=f"Inserted {value}.", value=value)
        return

    inserted = yield from _insert(tree, tree.root, value, sb)
    if inserted:
        yield sb.complete(tree.freeze(), explanation=f"Inserted {value}.", value=value)
    else:
        yield sb.complete(
            tree.freeze(), Outcome.UNCHANGED,
            explanation=f"{value} is already in the tree; duplicates are not inserted.",
            value=value,
        )


def _insert(tree: BinarySearchTree, node: BSTNode, value: int, sb: StepBuilder) -> Generator[Step, None, bool]:
    yield sb.compare((node.value,), tree.freeze(), f"Compare {value} with {node.value}.", probe=value)
    if value == node.value:
        return False
    side = "left" if value < node.value else "right"
    child = getattr(node, side)
    if child is None:
        setattr(node, side, BSTNode(value))
        yield sb.mutate(
            (value,), tree.freeze(),
            f"{node.value} has no {side} child: attach {value} there.",
            parent=node.value,
        )
        return True
    return (yield from _insert(tree, child, value, sb))


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------
def bst_delete(tree: BinarySearchTree, value: int, stats: Optional[Stats] = None) -> TreeSteps:
    sb = StepBuilder(stats)

    if tree.root is None:
        yield sb.complete(None, Outcome.NOT_FOUND, explanation="The tree is empty.", value=value)
        return

    removed = yield from _delete(tree, None, "", tree.root, value, sb)
    if removed:
        yield sb.complete(tree.freeze(), explanation=f"Deleted {value}.", value=value)
    else:
        yield sb.complete(tree.freeze(), Outcome.NOT_FOUND, explanation=f"{value} was not found.", value=value)


def _delete(
    tree: BinarySearchTree,
    parent: Optional[BSTNode],
    side: str,
    node: Optional[BSTNode],
    value: int,
    sb: StepBuilder,
) -> Generator[Step, None, bool]:
    if node is None:
        return False

    yield sb.compare((node.value,), tree.freeze(), f"Compare {value} with {node.value}.", probe=value)
    if value < node.value:
        return (yield from _delete(tree, node, "left", node.left, value, sb))
    if value > node.value:
        return (yield from _delete(tree, node, "right", node.right, value, sb))

    if node.left is not None and node.right is not None:
        successor = node.right
        yield sb.visit(successor.value, tree.freeze(), f"{value} has two children: look for the smallest value on its right.")
        while successor.left is not None:
            successor = successor.left
            yield sb.visit(successor.value, tree.freeze(), f"Keep going left to {successor.value}.")
        node.value = successor.value
        yield sb.mutate(
            (successor.value,), tree.freeze(),
            f"Replace {value} with its in-order successor {successor.value}.",
        )
        return (yield from _delete(tree, node, "right", node.right, successor.value, sb))

    child = node.left if node.left is not None else node.right
    if parent is None:
        tree.root = child
    else:
        setattr(parent, side, child)
    yield sb.mutate(
        (value,), tree.freeze(),
        f"Unlink {value}" + (f" and lift its child {child.value} into its place." if child else "; it was a leaf."),
    )
    return True


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
def bst_search(tree: BinarySearchTree, value: int, stats: Optional[Stats] = None) -> TreeSteps:
    sb = StepBuilder(stats)
    state = tree.freeze()
    path: List[int] = []

    node = tree.root
    while node is not None:
        path.append(node.value)
        yield sb.visit(node.value, state, f"Look at {node.value}.", path=tuple(path))
        if node.value == value:
            yield sb.complete(state, Outcome.FOUND, explanation=f"Found {value}.", path=path, value=value)
            return
        node = node.left if value < node.value else node.right

    explanation = "The tree is empty." if not path else f"Fell off the tree below {path[-1]}: {value} is not present."
    yield sb.complete(state, Outcome.NOT_FOUND, explanation=explanation, value=value)


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------
def bst_traverse(tree: BinarySearchTree, order: str = "inorder", stats: Optional[Stats] = None) -> TreeSteps:
    """Rejects an unknown order before the first step is pulled."""
    if order not in TRAVERSAL_ORDERS:
        raise ValueError(f"Unknown traversal order: {order!r} (expected one of {', '.join(TRAVERSAL_ORDERS)})")
    return _traverse_steps(tree, order, StepBuilder(stats))


def _traverse_steps(tree: BinarySearchTree, order: str, sb: StepBuilder) -> TreeSteps:
    state = tree.freeze()
    if tree.root is None:
        yield sb.complete(state, Outcome.NOTHING_TO_DO, explanation="The tree is empty.")
        return

    result: List[int] = []
    yield from _traverse(tree.root, order, result, sb, state)
    yield sb.complete(
        state,
        explanation=f"{order} traversal: " + ", ".join(map(str, result)),
        result=result,
    )


def _traverse(node: Optional[BSTNode], order: str, result: List[int], sb: StepBuilder, state) -> TreeSteps:
    if node is None:
        return
    if order == "preorder":
        yield _emit(node, result, sb, state)
    yield from _traverse(node.left, order, result, sb, state)
    if order == "inorder":
        yield _emit(node, result, sb, state)
    yield from _traverse(node.right, order, result, sb, state)
    if order == "postorder":
        yield _emit(node, result, sb, state)


def _emit(node: BSTNode, result: List[int], sb: StepBuilder, state) -> Step:
    result.append(node.value)
    return sb.visit(node.value, state, f"Output {node.value}.", result=tuple(result))
