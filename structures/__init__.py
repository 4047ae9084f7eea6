"""
structures/
-----------
Core data layer: the structures a user builds before a run.  Public API:

    from structures import Graph, Node, Edge
    from structures import BinarySearchTree, BSTNode
    from structures import LinkedList, ListNode
    from structures import random_array
"""

from structures.array       import random_array
from structures.graph       import Graph, Node, Edge
from structures.tree        import BinarySearchTree, BSTNode
from structures.linked_list import LinkedList, ListNode

__all__ = [
    "random_array",
    "Graph",            "Node",      "Edge",
    "BinarySearchTree", "BSTNode",
    "LinkedList",       "ListNode",
]
