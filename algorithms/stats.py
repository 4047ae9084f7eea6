"""
stats.py — Run Statistics
==========================
Mutable counters owned by one run.  Producers bump them; observers get
an immutable StatsSnapshot with every step.

Counters:
    comparisons     – read-only comparisons (Compare steps)
    swaps           – swaps, overwrites and structural changes (Mutate steps)
    nodes_visited   – nodes that became current (Visit steps)
    edges_explored  – adjacency checks during graph traversal (no step of their own)
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict


class StatKind(Enum):
    COMPARISONS    = "comparisons"
    SWAPS          = "swaps"
    NODES_VISITED  = "nodes_visited"
    EDGES_EXPLORED = "edges_explored"


@dataclass(frozen=True)
class StatsSnapshot:
    comparisons:    int = 0
    swaps:          int = 0
    nodes_visited:  int = 0
    edges_explored: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class Stats:
    """
    The collector.  Must be reset at the start of every run; counts are
    never carried from one run into the next.
    """

    def __init__(self):
        self._counts: Dict[StatKind, int] = {}
        self.reset()

    def reset(self) -> None:
        self._counts = {kind: 0 for kind in StatKind}

    def increment(self, kind: StatKind, by: int = 1) -> None:
        self._counts[kind] += by

    def get(self, kind: StatKind) -> int:
        return self._counts[kind]

    def snapshot(self) -> StatsSnapshot:
        return StatsSnapshot(**{kind.value: count for kind, count in self._counts.items()})
