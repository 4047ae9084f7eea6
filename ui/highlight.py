"""
highlight.py — Item Highlighting
=================================
Pure derivation of how an item (array index, graph node id, tree value,
list position) should be drawn, computed from what a Recorder has seen.
Nothing here is stored on the structures themselves.

Precedence, strongest first:
    VISITING   – targeted by the latest non-terminal Step
    ON_PATH    – on the path carried by the run (final or live)
    VISITED    – visited earlier in the run, or marked sorted
    SELECTED   – picked by the user (e.g. a source node)
    UNVISITED  – everything else
"""

from enum import Enum
from typing import Any, Dict, Iterable, Optional, Set

from algorithms.step import Complete
from engine.recorder import Recorder


class Highlight(Enum):
    UNVISITED = "unvisited"
    VISITING  = "visiting"
    VISITED   = "visited"
    ON_PATH   = "on_path"
    SELECTED  = "selected"


HIGHLIGHT_COLORS: Dict[Highlight, str] = {
    Highlight.UNVISITED: "#1c2128",   # dark grey
    Highlight.VISITING:  "#06b6d4",   # teal
    Highlight.VISITED:   "#10b981",   # emerald
    Highlight.ON_PATH:   "#a855f7",   # purple
    Highlight.SELECTED:  "#ec4899",   # pink
}


def _settled(recorder: Recorder) -> Set[Any]:
    step = recorder.latest
    if step is None:
        return set()
    if isinstance(step, Complete):
        return set(step.sorted_positions)
    return set(step.overlay.get("sorted", ()))


def classify(item_id: Any, recorder: Recorder, selected: Optional[Iterable[Any]] = None) -> Highlight:
    step = recorder.latest
    if step is not None and not isinstance(step, Complete) and item_id in step.targets:
        return Highlight.VISITING
    if item_id in recorder.path:
        return Highlight.ON_PATH
    if item_id in recorder.visited or item_id in _settled(recorder):
        return Highlight.VISITED
    if selected is not None and item_id in set(selected):
        return Highlight.SELECTED
    return Highlight.UNVISITED


def highlight_map(
    item_ids: Iterable[Any],
    recorder: Recorder,
    selected: Optional[Iterable[Any]] = None,
) -> Dict[Any, str]:
    """{item_id: highlight value} for every id, ready for JSON."""
    chosen = set(selected or ())
    return {item_id: classify(item_id, recorder, chosen).value for item_id in item_ids}
