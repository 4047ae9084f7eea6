"""
engine/
-------
Scheduling & observation layer.

    from engine import Scheduler, RunController, Recorder
"""

from engine.scheduler  import Scheduler, RunState, SPEED_PRESETS
from engine.controller import RunController, RunOutcome
from engine.recorder   import Recorder

__all__ = [
    "Scheduler",
    "RunState",
    "SPEED_PRESETS",
    "RunController",
    "RunOutcome",
    "Recorder",
]
