"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every step-producer the visualizer knows about.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "bubble": AlgoInfo(key, label, fn, domain, structure_type, tags, …),
        …
    }

The set is closed: the Run Controller only ever starts producers listed
here, and the API lists them for the UI.  Every producer takes the live
structure first, then the stats collector, then its own keyword params.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from structures import BinarySearchTree, Graph, LinkedList
from algorithms.sorting      import bubble_sort, selection_sort, insertion_sort, merge_sort, quick_sort
from algorithms.graph_search import bfs, dfs, dijkstra
from algorithms.bst          import bst_insert, bst_delete, bst_search, bst_traverse, TRAVERSAL_ORDERS
from algorithms.linked_list  import list_search, list_reverse, list_middle


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                    # registry key, e.g. "quick"
    label:            str                    # human label, e.g. "Quick Sort"
    fn:               Callable               # the generator function
    domain:           str                    # "sorting" | "graph" | "tree" | "list"
    structure_type:   type                   # what the producer expects as its first argument
    tags:             List[str] = field(default_factory=list)
    params:           List[str] = field(default_factory=list)   # keyword params the producer accepts
    needs_content:    bool      = True       # empty structure → nothing to do
    complexity_time:  str       = ""
    complexity_space: str       = ""
    description:      str       = ""

    def to_dict(self) -> dict:
        return {
            "key":              self.key,
            "label":            self.label,
            "domain":           self.domain,
            "tags":             list(self.tags),
            "params":           list(self.params),
            "needs_content":    self.needs_content,
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    # ── sorting ──────────────────────────────────────────────────────────
    "bubble": AlgoInfo(
        key="bubble", label="Bubble Sort", fn=bubble_sort,
        domain="sorting", structure_type=list,
        tags=["comparison", "stable", "in-place"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Repeatedly swaps neighbours that are out of order; large values bubble right.",
    ),

    "selection": AlgoInfo(
        key="selection", label="Selection Sort", fn=selection_sort,
        domain="sorting", structure_type=list,
        tags=["comparison", "in-place"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Finds the minimum of the unsorted part and moves it to the front.",
    ),

    "insertion": AlgoInfo(
        key="insertion", label="Insertion Sort", fn=insertion_sort,
        domain="sorting", structure_type=list,
        tags=["comparison", "stable", "in-place", "adaptive"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Grows a sorted prefix by shifting each new key left into place.",
    ),

    "merge": AlgoInfo(
        key="merge", label="Merge Sort", fn=merge_sort,
        domain="sorting", structure_type=list,
        tags=["comparison", "stable", "divide-and-conquer", "recursive"],
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Sorts both halves recursively, then merges them back together.",
    ),

    "quick": AlgoInfo(
        key="quick", label="Quick Sort", fn=quick_sort,
        domain="sorting", structure_type=list,
        tags=["comparison", "in-place", "divide-and-conquer", "recursive"],
        complexity_time="O(n log n) avg, O(n²) worst", complexity_space="O(log n)",
        description="Lomuto partition around the last element, then recurse on both sides.",
    ),

    # ── graph ────────────────────────────────────────────────────────────
    "bfs": AlgoInfo(
        key="bfs", label="Breadth-First Search", fn=bfs,
        domain="graph", structure_type=Graph,
        tags=["unweighted", "traversal"], params=["source"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Explores layer-by-layer from the source using a FIFO queue.",
    ),

    "dfs": AlgoInfo(
        key="dfs", label="Depth-First Search", fn=dfs,
        domain="graph", structure_type=Graph,
        tags=["unweighted", "traversal", "recursive"], params=["source"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Dives deep before backtracking. Does NOT guarantee shortest path.",
    ),

    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", fn=dijkstra,
        domain="graph", structure_type=Graph,
        tags=["weighted", "shortest-path"], params=["source", "target"],
        complexity_time="O((V + E) log V)", complexity_space="O(V)",
        description="Greedily expands the closest node. Optimal for positive weights.",
    ),

    # ── tree ─────────────────────────────────────────────────────────────
    "bst_insert": AlgoInfo(
        key="bst_insert", label="BST Insert", fn=bst_insert,
        domain="tree", structure_type=BinarySearchTree,
        tags=["bst", "mutation"], params=["value"],
        needs_content=False,
        complexity_time="O(h)", complexity_space="O(h)",
        description="Walks down from the root and attaches the value as a new leaf.",
    ),

    "bst_delete": AlgoInfo(
        key="bst_delete", label="BST Delete", fn=bst_delete,
        domain="tree", structure_type=BinarySearchTree,
        tags=["bst", "mutation"], params=["value"],
        complexity_time="O(h)", complexity_space="O(h)",
        description="Removes a value; a node with two children takes its in-order successor's value.",
    ),

    "bst_search": AlgoInfo(
        key="bst_search", label="BST Search", fn=bst_search,
        domain="tree", structure_type=BinarySearchTree,
        tags=["bst", "search"], params=["value"],
        complexity_time="O(h)", complexity_space="O(1)",
        description="Goes left or right at every node until the value is found or a child is missing.",
    ),

    "bst_traverse": AlgoInfo(
        key="bst_traverse", label="BST Traversal", fn=bst_traverse,
        domain="tree", structure_type=BinarySearchTree,
        tags=["bst", "traversal", "recursive"] + list(TRAVERSAL_ORDERS), params=["order"],
        complexity_time="O(n)", complexity_space="O(h)",
        description="Visits every node in pre-, in- or post-order.",
    ),

    # ── linked list ──────────────────────────────────────────────────────
    "list_search": AlgoInfo(
        key="list_search", label="Linked List Search", fn=list_search,
        domain="list", structure_type=LinkedList,
        tags=["linked-list", "search"], params=["value"],
        complexity_time="O(n)", complexity_space="O(1)",
        description="Follows next pointers from the head until the value turns up.",
    ),

    "list_reverse": AlgoInfo(
        key="list_reverse", label="Reverse Linked List", fn=list_reverse,
        domain="list", structure_type=LinkedList,
        tags=["linked-list", "mutation", "in-place"],
        complexity_time="O(n)", complexity_space="O(1)",
        description="Re-links the list in place so the tail becomes the head.",
    ),

    "list_middle": AlgoInfo(
        key="list_middle", label="Find Middle", fn=list_middle,
        domain="list", structure_type=LinkedList,
        tags=["linked-list", "two-pointers"],
        complexity_time="O(n)", complexity_space="O(1)",
        description="Slow pointer moves one node, fast pointer two; slow lands on the middle.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_for_domain(domain: str) -> List[AlgoInfo]:
    return [a for a in REGISTRY.values() if a.domain == domain]


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    """Filter registry by tag."""
    return [a for a in REGISTRY.values() if tag in a.tags]


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "algorithms_for_domain",
    "algorithms_by_tag",
]
