"""
graph.py — Graph Snapshot
==========================
Single source of truth for a graph.  Producers and the API both talk
to this object.

Responsibilities:
  1. CRUD on nodes & edges                  (add / remove)
  2. Adjacency queries                      (neighbours, get_edge_between)
  3. Sample factory                         (the A..E teaching graph)
  4. Serialisation round-trip               (to_dict / from_dict / freeze)

Design decisions:
  - Node ids are integers assigned from a counter, so ids are unique and
    monotonically increasing even after removals.  Insertion order is
    kept by the `nodes` dict and decides the implicit source (first
    node) and target (last node) of a run.
  - Edges are undirected for traversal and kept in a list in creation
    order.  Parallel edges and self-loops are tolerated.
  - Weights are positive integers; shortest-path producers rely on it.
"""

import random
from dataclasses import dataclass
from typing import Dict, List, Tuple, Optional


# ---------------------------------------------------------------------------
# Node / Edge
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Node:
    id:    int
    label: str

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label}


@dataclass(frozen=True)
class Edge:
    source: int
    target: int
    weight: int = 1

    def other_end(self, node_id: int) -> Optional[int]:
        """Given one endpoint, return the other. None if node_id isn't an endpoint."""
        if node_id == self.source:
            return self.target
        if node_id == self.target:
            return self.source
        return None

    def connects(self, a: int, b: int) -> bool:
        return {self.source, self.target} == {a, b}

    def to_dict(self) -> dict:
        return {"source": self.source, "target": self.target, "weight": self.weight}


def default_label(node_id: int) -> str:
    """1 → 'A', 26 → 'Z', 27 → 'AA', … (spreadsheet column style)."""
    label = ""
    n = node_id
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = chr(65 + rem) + label
    return label


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------
class Graph:
    """
    Attributes:
        nodes    : {node_id: Node} in insertion order
        edges    : [Edge] in creation order
        _next_id : id handed to the next add_node()
    """

    WEIGHT_RANGE: Tuple[int, int] = (1, 9)

    def __init__(self):
        self.nodes:    Dict[int, Node] = {}
        self.edges:    List[Edge]      = []
        self._next_id: int             = 1

    # ==================================================================
    # NODE CRUD
    # ==================================================================
    def add_node(self, label: Optional[str] = None) -> Node:
        node_id = self._next_id
        self._next_id += 1
        node = Node(id=node_id, label=label or default_label(node_id))
        self.nodes[node_id] = node
        return node

    def remove_node(self, node_id: int) -> bool:
        """Drop a node and every edge touching it.  False if it didn't exist."""
        if node_id not in self.nodes:
            return False
        self.edges = [e for e in self.edges if node_id not in (e.source, e.target)]
        del self.nodes[node_id]
        return True

    def label_of(self, node_id: int) -> str:
        node = self.nodes.get(node_id)
        return node.label if node else str(node_id)

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_edge(
        self,
        source: int,
        target: int,
        weight: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> Edge:
        """
        Connect two existing nodes.  When `weight` is omitted a random
        weight in WEIGHT_RANGE is drawn.
        """
        for nid in (source, target):
            if nid not in self.nodes:
                raise ValueError(f"Unknown node id: {nid}")
        if weight is None:
            weight = (rng or random).randint(*self.WEIGHT_RANGE)
        if isinstance(weight, bool) or not isinstance(weight, int) or weight <= 0:
            raise ValueError(f"Edge weight must be a positive integer, got {weight!r}")
        edge = Edge(source=source, target=target, weight=weight)
        self.edges.append(edge)
        return edge

    def get_edge_between(self, a: int, b: int) -> Optional[Edge]:
        """Lightest edge connecting a and b, if any."""
        candidates = [e for e in self.edges if e.connects(a, b)]
        if not candidates:
            return None
        return min(candidates, key=lambda e: e.weight)

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, node_id: int) -> List[Tuple[int, Edge]]:
        """Return [(neighbour_id, edge)] for every edge touching node_id, in edge order."""
        result = []
        for edge in self.edges:
            other = edge.other_end(node_id)
            if other is not None:
                result.append((other, edge))
        return result

    def path_cost(self, path: List[int]) -> int:
        """Sum of the lightest edge weights along consecutive path nodes."""
        total = 0
        for a, b in zip(path, path[1:]):
            edge = self.get_edge_between(a, b)
            if edge is None:
                raise ValueError(f"No edge between {a} and {b}")
            total += edge.weight
        return total

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_ids(self) -> List[int]:
        return list(self.nodes.keys())

    def first_id(self) -> Optional[int]:
        return next(iter(self.nodes), None)

    def last_id(self) -> Optional[int]:
        return next(reversed(list(self.nodes)), None)

    def clear(self) -> None:
        self.nodes.clear()
        self.edges.clear()
        self._next_id = 1

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self.nodes)}, edges={len(self.edges)})"

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def freeze(self) -> Tuple[Tuple[Tuple[int, str], ...], Tuple[Tuple[int, int, int], ...]]:
        """Read-only view handed to observers: (nodes, edges) as tuples."""
        return (
            tuple((n.id, n.label) for n in self.nodes.values()),
            tuple((e.source, e.target, e.weight) for e in self.edges),
        )

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "edges": [e.to_dict() for e in self.edges],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls()
        for nd in data.get("nodes", []):
            node = Node(id=int(nd["id"]), label=nd.get("label") or default_label(int(nd["id"])))
            g.nodes[node.id] = node
            g._next_id = max(g._next_id, node.id + 1)
        for ed in data.get("edges", []):
            g.add_edge(int(ed["source"]), int(ed["target"]), weight=int(ed.get("weight", 1)))
        return g

    # ==================================================================
    # FACTORY
    # ==================================================================
    @classmethod
    def sample(cls) -> "Graph":
        """
        The five-node teaching graph:

            A-B(4) A-D(2) B-C(3) B-D(1) B-E(5) C-E(2) D-E(3)

        Shortest A→E distance is 5 (A→D→E).
        """
        g = cls()
        a, b, c, d, e = (g.add_node().id for _ in range(5))
        for src, tgt, w in [
            (a, b, 4), (a, d, 2), (b, c, 3), (b, d, 1),
            (b, e, 5), (c, e, 2), (d, e, 3),
        ]:
            g.add_edge(src, tgt, weight=w)
        return g
