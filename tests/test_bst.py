"""Tests for the animated BST producers."""

import random

import pytest

from structures import BinarySearchTree
from algorithms.bst import bst_insert, bst_delete, bst_search, bst_traverse
from algorithms.step import Compare, Complete, Mutate, Outcome, Visit


def build(values):
    tree = BinarySearchTree()
    for v in values:
        list(bst_insert(tree, v))
    return tree


class TestInsert:
    def test_into_empty_tree(self):
        tree = BinarySearchTree()
        steps = list(bst_insert(tree, 10))
        assert [type(s) for s in steps] == [Mutate, Complete]
        assert tree.root.value == 10

    def test_compares_along_the_path(self):
        tree = build([50, 30, 70])
        steps = list(bst_insert(tree, 40))
        assert [s.compared for s in steps if isinstance(s, Compare)] == [(50,), (30,)]
        assert tree.root.left.right.value == 40

    def test_duplicate_is_idempotent(self):
        tree = build([50, 30, 70, 20])
        before = tree.freeze()
        final = list(bst_insert(tree, 30))[-1]
        assert final.outcome is Outcome.UNCHANGED
        assert tree.freeze() == before


class TestDelete:
    def test_scenario_two_children(self):
        tree = build([50, 30, 70, 20, 40, 60, 80])
        final = list(bst_delete(tree, 30))[-1]
        assert final.outcome is Outcome.DONE
        assert tree.root.left.value == 40
        assert tree.is_valid()
        assert tree.in_order() == [20, 40, 50, 60, 70, 80]

    def test_successor_walk_is_visited(self):
        tree = build([50, 30, 70, 60, 65])
        steps = list(bst_delete(tree, 50))
        assert [s.target for s in steps if isinstance(s, Visit)] == [70, 60]
        assert tree.root.value == 60
        assert tree.in_order() == [30, 60, 65, 70]

    def test_delete_root_leaf(self):
        tree = build([5])
        list(bst_delete(tree, 5))
        assert tree.root is None

    def test_missing_value(self):
        tree = build([50, 30])
        final = list(bst_delete(tree, 99))[-1]
        assert final.outcome is Outcome.NOT_FOUND
        assert tree.in_order() == [30, 50]

    def test_empty_tree(self):
        steps = list(bst_delete(BinarySearchTree(), 1))
        assert len(steps) == 1
        assert steps[0].outcome is Outcome.NOT_FOUND

    @pytest.mark.parametrize("seed", range(6))
    def test_random_inserts_and_deletes_keep_order(self, seed):
        rng = random.Random(seed)
        tree = BinarySearchTree()
        mirror = set()
        for _ in range(60):
            v = rng.randint(0, 30)
            if rng.random() < 0.6:
                list(bst_insert(tree, v))
                mirror.add(v)
            else:
                list(bst_delete(tree, v))
                mirror.discard(v)
            assert tree.is_valid()
        assert tree.in_order() == sorted(mirror)


class TestSearch:
    def test_found(self):
        tree = build([50, 30, 70, 20, 40])
        steps = list(bst_search(tree, 40))
        assert [s.target for s in steps if isinstance(s, Visit)] == [50, 30, 40]
        assert steps[-1].outcome is Outcome.FOUND
        assert steps[-1].path == (50, 30, 40)

    def test_not_found(self):
        tree = build([50, 30, 70])
        final = list(bst_search(tree, 35))[-1]
        assert final.outcome is Outcome.NOT_FOUND

    def test_empty_tree(self):
        steps = list(bst_search(BinarySearchTree(), 3))
        assert len(steps) == 1
        assert steps[0].outcome is Outcome.NOT_FOUND


class TestTraverse:
    @pytest.mark.parametrize("order,expected", [
        ("preorder",  [50, 30, 20, 40, 70, 60, 80]),
        ("inorder",   [20, 30, 40, 50, 60, 70, 80]),
        ("postorder", [20, 40, 30, 60, 80, 70, 50]),
    ])
    def test_orders(self, order, expected):
        tree = build([50, 30, 70, 20, 40, 60, 80])
        steps = list(bst_traverse(tree, order))
        assert [s.target for s in steps if isinstance(s, Visit)] == expected
        assert list(steps[-1].result) == expected

    def test_result_accumulates(self):
        tree = build([2, 1, 3])
        steps = list(bst_traverse(tree, "inorder"))
        assert [s.overlay["result"] for s in steps if isinstance(s, Visit)] == [(1,), (1, 2), (1, 2, 3)]

    def test_unknown_order_raises_on_creation(self):
        with pytest.raises(ValueError):
            bst_traverse(build([1]), "levelorder")

    def test_empty_tree(self):
        steps = list(bst_traverse(BinarySearchTree()))
        assert steps[0].outcome is Outcome.NOTHING_TO_DO
