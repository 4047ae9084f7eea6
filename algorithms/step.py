"""
step.py — Algorithm Step Events
================================
Every producer is a generator that yields Step objects.  A Step is one
discrete, observable state change:

    • Compare   – a read-only comparison happened (indices / node ids / values)
    • Mutate    – a swap, overwrite or structural change happened
    • Visit     – a node became "current" during a traversal or search
    • Complete  – terminal event, nothing follows it

Design decisions:
  - Steps are frozen dataclasses.  The producer is the only writer of the
    structure; observers get `state`, a read-only copy taken right after
    the step, so they can re-render without touching the live structure.
  - `overlay` is a free-form dict so each producer can push whatever
    transient run data a renderer wants (frontier, distances, traversal
    result so far, …).
  - Producers never build Steps by hand.  They go through a StepBuilder,
    which numbers the steps and keeps the run's Stats in sync with them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple

from algorithms.stats import Stats, StatKind


class StepKind(Enum):
    COMPARE  = "compare"
    MUTATE   = "mutate"
    VISIT    = "visit"
    COMPLETE = "complete"


class Outcome(Enum):
    DONE          = "done"            # ran to the end normally
    FOUND         = "found"           # search / shortest path succeeded
    NOT_FOUND     = "not_found"       # search miss, delete miss, unreachable target
    UNCHANGED     = "unchanged"       # e.g. inserting a value that is already there
    NOTHING_TO_DO = "nothing_to_do"   # empty structure


# ---------------------------------------------------------------------------
# Step types
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Step:
    """
    Attributes:
        step_number : 0-based index of this step in the run.
        state       : Read-only view of the structure after this step.
        explanation : Human-readable "why" text.
        overlay     : Free-form dict of transient run data.
    """

    kind: ClassVar[StepKind]

    step_number: int            = 0
    state:       Any            = None
    explanation: str            = ""
    overlay:     Dict[str, Any] = field(default_factory=dict)

    @property
    def targets(self) -> Tuple[Any, ...]:
        """Ids highlighted by this step (empty for Complete)."""
        return ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind":        self.kind.value,
            "step_number": self.step_number,
            "state":       self.state,
            "explanation": self.explanation,
            "overlay":     dict(self.overlay),
            "targets":     list(self.targets),
        }


@dataclass(frozen=True)
class Compare(Step):
    kind: ClassVar[StepKind] = StepKind.COMPARE

    compared: Tuple[Any, ...] = ()

    @property
    def targets(self) -> Tuple[Any, ...]:
        return self.compared


@dataclass(frozen=True)
class Mutate(Step):
    kind: ClassVar[StepKind] = StepKind.MUTATE

    changed: Tuple[Any, ...] = ()

    @property
    def targets(self) -> Tuple[Any, ...]:
        return self.changed


@dataclass(frozen=True)
class Visit(Step):
    kind: ClassVar[StepKind] = StepKind.VISIT

    target: Any = None

    @property
    def targets(self) -> Tuple[Any, ...]:
        return (self.target,)


@dataclass(frozen=True)
class Complete(Step):
    """
    Extra attributes:
        outcome          : How the run ended.
        sorted_positions : Sorting — every position marked sorted.
        path             : Dijkstra path / BST search path / list hit.
        result           : Traversal order accumulated during the run.
        value            : Distance, found value or middle value.
    """

    kind: ClassVar[StepKind] = StepKind.COMPLETE

    outcome:          Outcome         = Outcome.DONE
    sorted_positions: Tuple[int, ...] = ()
    path:             Tuple[Any, ...] = ()
    result:           Tuple[Any, ...] = ()
    value:            Any             = None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            outcome=self.outcome.value,
            sorted_positions=list(self.sorted_positions),
            path=list(self.path),
            result=list(self.result),
            value=self.value,
        )
        return data


# ---------------------------------------------------------------------------
# Builder: numbers steps and bumps the counters
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    One per run.  Usage inside a producer:

        sb = StepBuilder(stats)
        yield sb.compare((j, j + 1), tuple(values), "Compare neighbours.")
        sb.explore_edge()
        yield sb.complete(tuple(values), sorted_positions=tuple(range(n)))
    """

    def __init__(self, stats: Optional[Stats] = None):
        self.stats:   Stats = stats if stats is not None else Stats()
        self.step_no: int   = 0

    def _next_number(self) -> int:
        n = self.step_no
        self.step_no += 1
        return n

    def compare(self, targets, state, explanation: str = "", **overlay) -> Compare:
        self.stats.increment(StatKind.COMPARISONS)
        return Compare(
            step_number=self._next_number(),
            state=state,
            explanation=explanation,
            overlay=overlay,
            compared=tuple(targets),
        )

    def mutate(self, targets, state, explanation: str = "", **overlay) -> Mutate:
        self.stats.increment(StatKind.SWAPS)
        return Mutate(
            step_number=self._next_number(),
            state=state,
            explanation=explanation,
            overlay=overlay,
            changed=tuple(targets),
        )

    def visit(self, target, state, explanation: str = "", **overlay) -> Visit:
        self.stats.increment(StatKind.NODES_VISITED)
        return Visit(
            step_number=self._next_number(),
            state=state,
            explanation=explanation,
            overlay=overlay,
            target=target,
        )

    def explore_edge(self) -> None:
        self.stats.increment(StatKind.EDGES_EXPLORED)

    def complete(
        self,
        state,
        outcome: Outcome = Outcome.DONE,
        explanation: str = "",
        sorted_positions=(),
        path=(),
        result=(),
        value=None,
        **overlay,
    ) -> Complete:
        return Complete(
            step_number=self._next_number(),
            state=state,
            explanation=explanation,
            overlay=overlay,
            outcome=outcome,
            sorted_positions=tuple(sorted_positions),
            path=tuple(path),
            result=tuple(result),
            value=value,
        )
