"""
recorder.py — Recording Observer
=================================
An observer that remembers what the scheduler delivered, so a host that
renders on its own schedule (a polling browser, a test) can ask "what
does the run look like now?" at any time.

Usage:
    rec = Recorder()
    controller = RunController(observer=rec)
    controller.run("bfs", graph)
    rec.frame()          # JSON-ready dict: latest step, stats, history size

A step numbered 0 begins a new run, so the history is cleared
automatically between runs.
"""

from collections import deque
from typing import Any, Deque, Dict, List, Optional, Set

from algorithms.stats import StatsSnapshot
from algorithms.step import Complete, Step, Visit


class Recorder:
    """
    Attributes:
        history : The most recent Steps of the current run (bounded).
        stats   : Stats snapshot delivered with the latest Step.
        visited : Every Visit target seen in the current run.
    """

    def __init__(self, max_history: int = 500):
        self.history: Deque[Step]            = deque(maxlen=max_history)
        self.stats:   Optional[StatsSnapshot] = None
        self.visited: Set[Any]               = set()
        self._count:  int                    = 0

    def __call__(self, step: Step, stats: StatsSnapshot) -> None:
        if step.step_number == 0:
            self.clear()
        self.history.append(step)
        self.stats = stats
        self._count += 1
        if isinstance(step, Visit):
            self.visited.add(step.target)

    def clear(self) -> None:
        self.history.clear()
        self.stats = None
        self.visited = set()
        self._count = 0

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def latest(self) -> Optional[Step]:
        return self.history[-1] if self.history else None

    @property
    def count(self) -> int:
        """Steps seen this run, including any that fell out of `history`."""
        return self._count

    @property
    def finished(self) -> bool:
        return isinstance(self.latest, Complete)

    @property
    def path(self) -> List[Any]:
        """Path carried by the final Complete, or the live overlay path."""
        step = self.latest
        if step is None:
            return []
        if isinstance(step, Complete):
            return list(step.path)
        return list(step.overlay.get("path", ()))

    def frame(self) -> Dict[str, Any]:
        latest = self.latest
        return {
            "step":     latest.to_dict() if latest else None,
            "stats":    self.stats.to_dict() if self.stats else None,
            "steps":    self._count,
            "finished": self.finished,
        }
