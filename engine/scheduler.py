"""
scheduler.py — Cooperative Step Scheduler
==========================================
Drives one step-producer at a time.  After every Step it calls the
observer with the Step and a stats snapshot, then waits `speed_ms`
before pulling the next one.

The wait is cooperative: nothing sleeps.  The host calls tick() from its
own loop (a timer, an HTTP poll, a test with a fake clock) and tick()
pulls at most one Step, and only once the pacing delay has elapsed.
Pause and stop are therefore honoured on the very next tick, never
after a full delay.

State machine:
    IDLE      →  start()           →  RUNNING
    RUNNING   ⇄  pause() / resume()   PAUSED
    RUNNING   →  (Complete seen)   →  COMPLETED
    RUNNING / PAUSED  →  stop()    →  STOPPED
    any       →  discard()         →  IDLE

COMPLETED and STOPPED are terminal for that run; start() begins a new
one.  Misuse (pause while idle, resume while running, stop while idle)
is a silent no-op.

Thread safety:
  Every public method holds `lock` (an RLock), so at most one Step is
  pulled and delivered at a time even when several HTTP workers poll
  the same surface.  The observer runs under the lock and may call
  stop() or pause() re-entrantly.
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, Dict, Generator, Optional

from algorithms.stats import Stats, StatsSnapshot
from algorithms.step import Step, Complete


logger = logging.getLogger(__name__)

Observer = Callable[[Step, StatsSnapshot], None]
Producer = Generator[Step, None, None]


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class RunState(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    PAUSED    = "paused"
    COMPLETED = "completed"
    STOPPED   = "stopped"


# ---------------------------------------------------------------------------
# Speed presets (milliseconds per step)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   1000,   # teaching mode
    "medium": 400,
    "fast":   150,    # demo mode
    "turbo":  50,
}

DEFAULT_SPEED_MS = 80
MIN_SPEED_MS     = 10
MAX_SPEED_MS     = 2000


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------
class Scheduler:
    """
    Attributes:
        state      : Current RunState.
        speed_ms   : Pacing delay applied after each delivered Step.
        last_step  : Most recent Step handed to the observer.
        delivered  : Number of Steps delivered in the current run.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        min_speed_ms: int = MIN_SPEED_MS,
        max_speed_ms: int = MAX_SPEED_MS,
        default_speed_ms: int = DEFAULT_SPEED_MS,
        presets: Optional[Dict[str, int]] = None,
    ):
        if min_speed_ms <= 0 or min_speed_ms > max_speed_ms:
            raise ValueError(f"Invalid speed bounds: {min_speed_ms}..{max_speed_ms} ms")

        self._clock        = clock
        self.min_speed_ms  = min_speed_ms
        self.max_speed_ms  = max_speed_ms
        self.speed_ms: int = self._clamp(default_speed_ms)
        self.presets:  Dict[str, int] = dict(presets or SPEED_PRESETS)

        self.state:     RunState       = RunState.IDLE
        self.last_step: Optional[Step] = None
        self.delivered: int            = 0

        self._producer:  Optional[Producer] = None
        self._observer:  Optional[Observer] = None
        self._stats:     Stats              = Stats()
        self._next_due:  float              = 0.0
        self._remaining: float              = 0.0
        self.lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(
        self,
        producer: Producer,
        observer: Observer,
        speed_ms: Optional[int] = None,
        stats: Optional[Stats] = None,
    ) -> bool:
        """
        Begin a run.  Returns False (and leaves the active run alone) if a
        run is already RUNNING or PAUSED.  The first Step is pulled and
        delivered before this returns.
        """
        with self.lock:
            if self.is_active:
                logger.info("Rejected start: a run is already %s", self.state.value)
                return False

            if speed_ms is not None:
                self.speed_ms = self._clamp(speed_ms)
            self._producer  = producer
            self._observer  = observer
            self._stats     = stats if stats is not None else Stats()
            self.last_step  = None
            self.delivered  = 0
            self._remaining = 0.0
            self.state      = RunState.RUNNING
            logger.info("Run started at %d ms/step", self.speed_ms)

            self._advance()
            return True

    def stop(self) -> bool:
        """Abandon the active run.  No observer call happens after this."""
        with self.lock:
            if not self.is_active:
                return False
            self._finish(RunState.STOPPED)
            logger.info("Run stopped after %d step(s)", self.delivered)
            return True

    def discard(self) -> None:
        """Stop if needed, then forget the run entirely and go back to IDLE."""
        with self.lock:
            self.stop()
            self.state     = RunState.IDLE
            self.last_step = None
            self.delivered = 0

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def pause(self) -> bool:
        with self.lock:
            if self.state != RunState.RUNNING:
                return False
            self._remaining = max(0.0, self._next_due - self._clock())
            self.state = RunState.PAUSED
            logger.debug("Run paused after %d step(s)", self.delivered)
            return True

    def resume(self) -> bool:
        with self.lock:
            if self.state != RunState.PAUSED:
                return False
            self._next_due = self._clock() + self._remaining
            self.state = RunState.RUNNING
            logger.debug("Run resumed")
            return True

    def toggle(self) -> RunState:
        with self.lock:
            if self.state == RunState.RUNNING:
                self.pause()
            elif self.state == RunState.PAUSED:
                self.resume()
            return self.state

    # ------------------------------------------------------------------
    # Tick  (call this from your event loop / timer)
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """
        Deliver the next Step if RUNNING and the pacing delay has elapsed.
        Returns True if a Step was delivered.
        """
        with self.lock:
            if self.state != RunState.RUNNING:
                return False
            if self._clock() < self._next_due:
                return False
            return self._advance()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, speed_ms: int) -> int:
        """Change the delay for every following wait.  Returns the clamped value."""
        with self.lock:
            self.speed_ms = self._clamp(speed_ms)
            return self.speed_ms

    def set_speed_preset(self, preset: str) -> int:
        if preset not in self.presets:
            raise ValueError(f"Unknown speed preset: {preset!r} (expected one of {', '.join(self.presets)})")
        return self.set_speed(self.presets[preset])

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.state in (RunState.RUNNING, RunState.PAUSED)

    @property
    def stats(self) -> StatsSnapshot:
        return self._stats.snapshot()

    def time_until_next(self) -> Optional[float]:
        """Seconds until tick() would deliver, or None when nothing is pending."""
        if self.state == RunState.PAUSED:
            return self._remaining
        if self.state != RunState.RUNNING:
            return None
        return max(0.0, self._next_due - self._clock())

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _clamp(self, speed_ms: int) -> int:
        return max(self.min_speed_ms, min(self.max_speed_ms, int(speed_ms)))

    def _advance(self) -> bool:
        producer = self._producer
        try:
            step = next(producer)
        except StopIteration:
            # producer ended without its own Complete
            step = Complete(
                step_number=self.delivered,
                state=self.last_step.state if self.last_step else None,
                explanation="Run finished.",
            )
        except Exception:
            logger.exception("Step producer failed after %d step(s)", self.delivered)
            self._finish(RunState.STOPPED)
            raise

        self.last_step = step
        self.delivered += 1
        self._next_due = self._clock() + self.speed_ms / 1000.0

        try:
            self._observer(step, self._stats.snapshot())
        except Exception:
            logger.exception("Observer failed on step %d", step.step_number)
            if self._producer is producer:
                self._finish(RunState.STOPPED)
            raise

        # the observer may have stopped (or restarted) the run
        if self._producer is not producer:
            return True
        if isinstance(step, Complete):
            self._finish(RunState.COMPLETED)
            logger.info("Run completed in %d step(s): %s", self.delivered, step.outcome.value)
        return True

    def _finish(self, state: RunState) -> None:
        producer = self._producer
        self._producer = None
        self._observer = None
        self.state = state
        if producer is not None:
            producer.close()
