"""
controller.py — Run Controller
===============================
Thin façade over one Scheduler.  It picks the producer from the
registry, resets the run's Stats and starts the scheduler.  It never
rolls back a structure: after reset() the structure stays in whatever
partial state the run left it in.
"""

import logging
from enum import Enum
from typing import Optional

from algorithms import AlgoInfo, get_algorithm
from algorithms.stats import Stats, StatsSnapshot
from algorithms.step import Step
from engine.scheduler import Observer, RunState, Scheduler


logger = logging.getLogger(__name__)


class RunOutcome(Enum):
    STARTED       = "started"
    BUSY          = "busy"            # a run is already RUNNING or PAUSED
    NOTHING_TO_DO = "nothing_to_do"   # empty structure; the lone Complete was delivered


def _ignore(step: Step, stats: StatsSnapshot) -> None:
    pass


class RunController:
    """
    Attributes:
        scheduler : The Scheduler this controller drives.
        stats     : Stats collector shared with every producer it starts.
        observer  : Callback handed to the scheduler on each run.
        algorithm : AlgoInfo of the most recent run, if any.
    """

    def __init__(
        self,
        observer: Optional[Observer] = None,
        scheduler: Optional[Scheduler] = None,
        speed_ms: Optional[int] = None,
    ):
        self.scheduler: Scheduler          = scheduler or Scheduler()
        self.stats:     Stats              = Stats()
        self.observer:  Observer           = observer or _ignore
        self.algorithm: Optional[AlgoInfo] = None
        if speed_ms is not None:
            self.scheduler.set_speed(speed_ms)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------
    def run(self, key: str, structure, speed_ms: Optional[int] = None, **params) -> RunOutcome:
        """
        Start `key` over `structure`.  Unknown keys, a structure of the
        wrong kind and parameters the producer does not accept are
        ValueErrors; everything else is reported as a RunOutcome.
        """
        info = get_algorithm(key)
        if info is None:
            raise ValueError(f"Unknown algorithm: {key!r}")
        if not isinstance(structure, info.structure_type):
            raise ValueError(
                f"{info.label} runs on {info.structure_type.__name__}, got {type(structure).__name__}"
            )

        unknown = set(params) - set(info.params)
        if unknown:
            raise ValueError(f"{info.label} does not accept: {', '.join(sorted(unknown))}")

        with self.scheduler.lock:
            if self.scheduler.is_active:
                logger.info("%s rejected: scheduler busy", info.key)
                return RunOutcome.BUSY

            self.stats.reset()
            try:
                producer = info.fn(structure, stats=self.stats, **params)
            except TypeError as exc:
                raise ValueError(f"Bad parameters for {info.label}: {exc}") from exc

            empty = info.needs_content and len(structure) == 0
            self.algorithm = info
            self.scheduler.start(producer, self.observer, speed_ms=speed_ms, stats=self.stats)
        if empty:
            logger.info("%s: nothing to do on an empty structure", info.key)
            return RunOutcome.NOTHING_TO_DO
        return RunOutcome.STARTED

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------
    def toggle(self) -> RunState:
        return self.scheduler.toggle()

    def stop(self) -> bool:
        return self.scheduler.stop()

    def reset(self) -> None:
        with self.scheduler.lock:
            self.scheduler.discard()
            self.algorithm = None

    def set_speed(self, speed_ms: int) -> int:
        return self.scheduler.set_speed(speed_ms)

    def set_speed_preset(self, preset: str) -> int:
        return self.scheduler.set_speed_preset(preset)

    def tick(self) -> bool:
        return self.scheduler.tick()

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def state(self) -> RunState:
        return self.scheduler.state

    @property
    def is_active(self) -> bool:
        return self.scheduler.is_active

    @property
    def last_step(self) -> Optional[Step]:
        return self.scheduler.last_step

    def stats_snapshot(self) -> StatsSnapshot:
        return self.stats.snapshot()
