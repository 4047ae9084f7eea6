"""
graph_search.py — Traversal & Shortest Path
=============================================
Generator-based BFS, DFS and Dijkstra over an undirected Graph.

Conventions shared by all three:
  - The source defaults to the first inserted node; Dijkstra's target
    defaults to the last inserted node.  Both can be overridden.
  - Every edge touching the current node counts as one explored edge
    (stats side channel, no step of its own).
  - A Visit step is yielded when a node becomes current; its overlay
    carries the frontier and the visit order so far.
  - An empty graph yields one Complete(NOTHING_TO_DO) and stops.
  - An unknown source or target id raises ValueError as soon as the
    producer is created, before any step exists.
"""

import heapq
import itertools
from collections import deque
from typing import Dict, Generator, List, Optional, Set

from structures import Graph
from algorithms.stats import Stats
from algorithms.step import Step, StepBuilder, Outcome


GraphSteps = Generator[Step, None, None]

INF = float("inf")


def _resolve(graph: Graph, node_id: Optional[int], fallback: Optional[int], role: str) -> Optional[int]:
    if node_id is None:
        return fallback
    if node_id not in graph.nodes:
        raise ValueError(f"Unknown {role} node id: {node_id}")
    return node_id


def _nothing(sb: StepBuilder, graph: Graph, name: str) -> Step:
    return sb.complete(graph.freeze(), Outcome.NOTHING_TO_DO, explanation=f"Add nodes first: {name} needs a non-empty graph.")


# ---------------------------------------------------------------------------
# Breadth-first search
# ---------------------------------------------------------------------------
def bfs(graph: Graph, stats: Optional[Stats] = None, source: Optional[int] = None) -> GraphSteps:
    """
    FIFO frontier from the source.  Visits exactly the connected component
    containing the source, each node once, layer by layer.
    """
    start = _resolve(graph, source, graph.first_id(), "source")
    return _bfs_steps(graph, start, StepBuilder(stats))


def _bfs_steps(graph: Graph, start: Optional[int], sb: StepBuilder) -> GraphSteps:
    if start is None:
        yield _nothing(sb, graph, "BFS")
        return

    state = graph.freeze()
    seen:  Set[int]   = {start}
    queue             = deque([start])
    order: List[int]  = []

    while queue:
        node = queue.popleft()
        order.append(node)
        yield sb.visit(
            node, state,
            f"Dequeue {graph.label_of(node)}: it was discovered earliest, so it is expanded next.",
            frontier=tuple(queue), visited=tuple(order),
        )
        for nbr, _edge in graph.neighbours(node):
            sb.explore_edge()
            if nbr not in seen:
                seen.add(nbr)
                queue.append(nbr)

    yield sb.complete(
        state,
        explanation=f"Queue is empty. BFS reached {len(order)} of {len(graph)} node(s).",
        result=order,
        visited=tuple(order),
    )


# ---------------------------------------------------------------------------
# Depth-first search (recursive)
# ---------------------------------------------------------------------------
def dfs(graph: Graph, stats: Optional[Stats] = None, source: Optional[int] = None) -> GraphSteps:
    """
    Recursive DFS.  A node is marked visited before its neighbours are
    explored, so cycles terminate.  The overlay's `stack` is the current
    recursion path.
    """
    start = _resolve(graph, source, graph.first_id(), "source")
    return _dfs_steps(graph, start, StepBuilder(stats))


def _dfs_steps(graph: Graph, start: Optional[int], sb: StepBuilder) -> GraphSteps:
    if start is None:
        yield _nothing(sb, graph, "DFS")
        return

    state = graph.freeze()
    seen:  Set[int]  = set()
    order: List[int] = []
    yield from _dfs_visit(graph, start, seen, order, [], sb, state)

    yield sb.complete(
        state,
        explanation=f"Recursion unwound. DFS reached {len(order)} of {len(graph)} node(s).",
        result=order,
        visited=tuple(order),
    )


def _dfs_visit(graph, node, seen, order, stack, sb, state) -> GraphSteps:
    seen.add(node)
    order.append(node)
    stack.append(node)
    yield sb.visit(
        node, state,
        f"Visit {graph.label_of(node)} and dive into its unvisited neighbours before backtracking.",
        stack=tuple(stack), visited=tuple(order),
    )
    for nbr, _edge in graph.neighbours(node):
        sb.explore_edge()
        if nbr not in seen:
            yield from _dfs_visit(graph, nbr, seen, order, stack, sb, state)
    stack.pop()


# ---------------------------------------------------------------------------
# Dijkstra
# ---------------------------------------------------------------------------
def dijkstra(
    graph: Graph,
    stats: Optional[Stats] = None,
    source: Optional[int] = None,
    target: Optional[int] = None,
) -> GraphSteps:
    """
    Single-source shortest path with a binary heap.  Ties are broken by
    push order so runs are deterministic.  Stops as soon as the target is
    extracted; an unreachable target ends with an empty path.
    """
    src = _resolve(graph, source, graph.first_id(), "source")
    dst = _resolve(graph, target, graph.last_id(), "target")
    return _dijkstra_steps(graph, src, dst, StepBuilder(stats))


def _dijkstra_steps(graph: Graph, src: Optional[int], dst: Optional[int], sb: StepBuilder) -> GraphSteps:
    if src is None:
        yield _nothing(sb, graph, "Dijkstra")
        return

    state   = graph.freeze()
    dist:   Dict[int, float]         = {nid: INF for nid in graph.nodes}
    parent: Dict[int, Optional[int]] = {src: None}
    done:   Set[int]                 = set()
    order:  List[int]                = []
    seq     = itertools.count()
    pq      = [(0, next(seq), src)]
    dist[src] = 0

    while pq:
        d, _, node = heapq.heappop(pq)
        if node in done:
            continue
        done.add(node)
        order.append(node)

        yield sb.visit(
            node, state,
            f"Extract {graph.label_of(node)} with distance {d}: the smallest in the queue, so it is final.",
            distances=_known(dist),
            frontier=tuple(n for _, _, n in sorted(pq) if n not in done),
            visited=tuple(order),
        )

        if node == dst:
            path = _reconstruct(parent, dst)
            yield sb.complete(
                state, Outcome.FOUND,
                explanation=(
                    f"Reached {graph.label_of(dst)}. Shortest distance = {dist[dst]} via "
                    + " → ".join(graph.label_of(n) for n in path)
                ),
                path=path,
                value=dist[dst],
                distances=_known(dist),
                visited=tuple(order),
            )
            return

        for nbr, edge in graph.neighbours(node):
            sb.explore_edge()
            new_dist = dist[node] + edge.weight
            if new_dist < dist[nbr]:
                dist[nbr] = new_dist
                parent[nbr] = node
                heapq.heappush(pq, (new_dist, next(seq), nbr))

    yield sb.complete(
        state, Outcome.NOT_FOUND,
        explanation=f"Queue is empty: {graph.label_of(dst)} is not reachable from {graph.label_of(src)}.",
        path=(),
        distances=_known(dist),
        visited=tuple(order),
    )


def _known(dist: Dict[int, float]) -> Dict[int, float]:
    return {nid: d for nid, d in dist.items() if d != INF}


def _reconstruct(parent: Dict[int, Optional[int]], target: int) -> List[int]:
    path: List[int] = []
    cur: Optional[int] = target
    while cur is not None:
        path.append(cur)
        cur = parent.get(cur)
    path.reverse()
    return path
