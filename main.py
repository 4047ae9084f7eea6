"""
main.py — Step Visualizer Flask App
====================================
JSON API over four isolated visualization surfaces.  Each surface owns
its structure, a RunController and a Recorder; nothing is shared
between them.

Routes:
  GET  /api/algorithms                 – registry listing (?domain=sorting, ?tag=recursive) and palette
  GET  /api/<surface>/state            – structure, run state, stats, latest step, highlights
  POST /api/<surface>/structure        – pre-run mutations ({action, …})
  POST /api/<surface>/run              – start a run ({algorithm, params, speed})
  POST /api/<surface>/tick             – deliver the next step if it is due
  POST /api/<surface>/toggle           – pause / resume
  POST /api/<surface>/stop             – stop and discard the run
  POST /api/<surface>/speed            – {speed_ms} or {preset}
  POST /api/explain                    – {algorithm} → markdown or the fallback text

Surfaces: sorting, graph, tree, list.

The browser drives playback by polling /tick; the scheduler decides
whether the pacing delay has elapsed, so a slow poll never skips steps
and a fast poll never speeds the run up.  Every surface route holds the
surface lock, so concurrent polls on a threaded server are serialized.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from flask import Flask, abort, jsonify, request

from config import Settings, get_settings
from structures import BinarySearchTree, Graph, LinkedList, random_array
from algorithms import get_algorithm, list_algorithms, algorithms_for_domain, algorithms_by_tag
from engine import Recorder, RunController, RunOutcome, Scheduler
from explain import explain_algorithm
from ui import HIGHLIGHT_COLORS, highlight_map


logger = logging.getLogger(__name__)

SAMPLE_ARRAY = (5, 1, 4, 2, 8)


class SurfaceBusy(Exception):
    """Structure edits are refused while a run owns the structure."""


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------
def _payload() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def _as_int(data: Dict[str, Any], key: str, default: Optional[int] = None) -> Optional[int]:
    raw = data.get(key, default)
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be an integer, got {raw!r}") from None


# ---------------------------------------------------------------------------
# Surfaces
# ---------------------------------------------------------------------------
class Surface:
    """
    One visualization page.

    Subclasses provide the empty structure, the item ids used for
    highlighting, the structure edits they accept (`_do_<action>`
    methods listed in ACTIONS) and how run params are coerced.
    """

    domain:  str = ""
    ACTIONS: tuple = ("sample", "clear")

    def __init__(self, settings: Settings, clock: Callable[[], float] = time.monotonic):
        self.settings = settings
        self.recorder = Recorder()
        self.controller = RunController(
            observer=self.recorder,
            scheduler=Scheduler(
                clock=clock,
                min_speed_ms=settings.min_speed_ms,
                max_speed_ms=settings.max_speed_ms,
                default_speed_ms=settings.default_speed_ms,
                presets=settings.speed_presets,
            ),
        )
        self.selected: List[Any] = []
        self.structure = self.empty()
        # held by every route; the scheduler takes the same RLock internally
        self.lock = self.controller.scheduler.lock

    # ------------------------------------------------------------------
    # Per-domain hooks
    # ------------------------------------------------------------------
    def empty(self):
        raise NotImplementedError

    def item_ids(self) -> List[Any]:
        raise NotImplementedError

    def structure_dict(self) -> Any:
        return self.structure.to_dict()

    def coerce_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return dict(params)

    def extras(self) -> Dict[str, Any]:
        return {}

    # ------------------------------------------------------------------
    # Structure edits
    # ------------------------------------------------------------------
    def apply(self, action: str, data: Dict[str, Any]) -> Any:
        if action not in self.ACTIONS:
            raise ValueError(f"Unknown {self.domain} action: {action!r} (expected one of {', '.join(self.ACTIONS)})")
        if self.controller.is_active:
            raise SurfaceBusy(f"A {self.domain} run is in progress; stop it before editing the structure.")
        # the previous run's highlights no longer describe the structure
        self.controller.reset()
        self.recorder.clear()
        return getattr(self, f"_do_{action}")(data)

    def _do_clear(self, data: Dict[str, Any]) -> None:
        self.structure = self.empty()
        self.selected = []

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------
    def run(self, key: str, params: Dict[str, Any], speed_ms: Optional[int] = None) -> RunOutcome:
        info = get_algorithm(key)
        if info is None:
            raise ValueError(f"Unknown algorithm: {key!r}")
        if info.domain != self.domain:
            raise ValueError(f"{info.label} belongs to the {info.domain} page, not {self.domain}")
        return self.controller.run(key, self.structure, speed_ms=speed_ms, **self.coerce_params(params))

    def snapshot(self) -> Dict[str, Any]:
        controller = self.controller
        return {
            "surface":    self.domain,
            "structure":  self.structure_dict(),
            "state":      controller.state.value,
            "algorithm":  controller.algorithm.key if controller.algorithm else None,
            "speed_ms":   controller.scheduler.speed_ms,
            "stats":      controller.stats_snapshot().to_dict(),
            "frame":      self.recorder.frame(),
            "highlights": highlight_map(self.item_ids(), self.recorder, self.selected),
            "selected":   list(self.selected),
            **self.extras(),
        }


class SortingSurface(Surface):
    domain  = "sorting"
    ACTIONS = ("generate", "sample", "clear")

    def empty(self) -> List[int]:
        return []

    def item_ids(self) -> List[int]:
        return list(range(len(self.structure)))

    def structure_dict(self) -> Dict[str, Any]:
        return {"values": list(self.structure)}

    def _do_generate(self, data: Dict[str, Any]) -> None:
        size = _as_int(data, "size", self.settings.default_array_size)
        self.structure = random_array(
            size,
            min_size=self.settings.min_array_size,
            max_size=self.settings.max_array_size,
            seed=_as_int(data, "seed"),
        )

    def _do_sample(self, data: Dict[str, Any]) -> None:
        self.structure = list(SAMPLE_ARRAY)


class GraphSurface(Surface):
    domain  = "graph"
    ACTIONS = ("sample", "clear", "add_node", "remove_node", "add_edge", "select")

    def empty(self) -> Graph:
        return Graph()

    def item_ids(self) -> List[int]:
        return self.structure.node_ids()

    def coerce_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(params)
        for key in ("source", "target"):
            if key in out:
                out[key] = _as_int(out, key)
        return out

    def _do_sample(self, data: Dict[str, Any]) -> None:
        self.structure = Graph.sample()
        self.selected = []

    def _do_add_node(self, data: Dict[str, Any]) -> Dict[str, Any]:
        limit = self.settings.max_graph_nodes
        if len(self.structure) >= limit:
            raise ValueError(f"A graph holds at most {limit} nodes")
        return self.structure.add_node(data.get("label")).to_dict()

    def _do_remove_node(self, data: Dict[str, Any]) -> bool:
        node_id = _as_int(data, "id")
        self.selected = [s for s in self.selected if s != node_id]
        return self.structure.remove_node(node_id)

    def _do_add_edge(self, data: Dict[str, Any]) -> Dict[str, Any]:
        edge = self.structure.add_edge(
            _as_int(data, "source"),
            _as_int(data, "target"),
            weight=_as_int(data, "weight"),
        )
        return edge.to_dict()

    def _do_select(self, data: Dict[str, Any]) -> List[int]:
        ids = [int(i) for i in data.get("ids", [])]
        unknown = [i for i in ids if i not in self.structure.nodes]
        if unknown:
            raise ValueError(f"Unknown node id(s): {unknown}")
        self.selected = ids
        return ids


class TreeSurface(Surface):
    domain  = "tree"
    ACTIONS = ("generate", "sample", "clear", "insert", "delete")

    def empty(self) -> BinarySearchTree:
        return BinarySearchTree()

    def item_ids(self) -> List[int]:
        return self.structure.in_order()

    def coerce_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(params)
        if "value" in out:
            out["value"] = _as_int(out, "value")
        return out

    def extras(self) -> Dict[str, Any]:
        return {"shape": self.structure.shape_stats()}

    def _do_generate(self, data: Dict[str, Any]) -> None:
        self.structure = BinarySearchTree.generate_random(seed=_as_int(data, "seed"))

    def _do_sample(self, data: Dict[str, Any]) -> None:
        self.structure = BinarySearchTree.sample()

    def run(self, key: str, params: Dict[str, Any], speed_ms: Optional[int] = None) -> RunOutcome:
        if key == "bst_insert" and not self.controller.is_active:
            self._check_room(_as_int(params, "value"))
        return super().run(key, params, speed_ms)

    def _check_room(self, value: Optional[int]) -> None:
        limit = self.settings.max_tree_nodes
        if len(self.structure) >= limit and (value is None or not self.structure.contains(value)):
            raise ValueError(f"A tree holds at most {limit} nodes")

    def _do_insert(self, data: Dict[str, Any]) -> bool:
        value = _as_int(data, "value")
        self._check_room(value)
        return self.structure.insert(value)

    def _do_delete(self, data: Dict[str, Any]) -> bool:
        return self.structure.delete(_as_int(data, "value"))


class ListSurface(Surface):
    domain  = "list"
    ACTIONS = ("generate", "sample", "clear", "append", "prepend", "delete")

    def empty(self) -> LinkedList:
        return LinkedList()

    def item_ids(self) -> List[int]:
        return list(range(len(self.structure)))

    def coerce_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(params)
        if "value" in out:
            out["value"] = _as_int(out, "value")
        return out

    def _do_generate(self, data: Dict[str, Any]) -> None:
        self.structure = LinkedList.generate_random(seed=_as_int(data, "seed"))

    def _do_sample(self, data: Dict[str, Any]) -> None:
        self.structure = LinkedList(SAMPLE_ARRAY)

    def _do_append(self, data: Dict[str, Any]) -> None:
        self.structure.append(_as_int(data, "value"))

    def _do_prepend(self, data: Dict[str, Any]) -> None:
        self.structure.prepend(_as_int(data, "value"))

    def _do_delete(self, data: Dict[str, Any]) -> bool:
        return self.structure.delete(_as_int(data, "value")) > 0


SURFACE_TYPES = {cls.domain: cls for cls in (SortingSurface, GraphSurface, TreeSurface, ListSurface)}


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None, clock: Optional[Callable[[], float]] = None) -> Flask:
    settings = settings or get_settings()
    configure_logging(settings)

    app = Flask(__name__)
    surfaces: Dict[str, Surface] = {
        name: cls(settings, clock or time.monotonic) for name, cls in SURFACE_TYPES.items()
    }
    app.config["SETTINGS"] = settings
    app.config["SURFACES"] = surfaces

    def surface_or_404(name: str) -> Surface:
        surface = surfaces.get(name)
        if surface is None:
            abort(404, description=f"Unknown surface: {name}")
        return surface

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------
    @app.errorhandler(ValueError)
    def handle_value_error(exc: ValueError):
        logger.info("Rejected request: %s", exc)
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(SurfaceBusy)
    def handle_busy(exc: SurfaceBusy):
        return jsonify({"error": str(exc)}), 409

    @app.errorhandler(404)
    def handle_not_found(exc):
        return jsonify({"error": getattr(exc, "description", "Not found")}), 404

    # ------------------------------------------------------------------
    # API: Registry
    # ------------------------------------------------------------------
    @app.route("/api/algorithms")
    def api_algorithms():
        domain = request.args.get("domain")
        tag = request.args.get("tag")
        infos = algorithms_for_domain(domain) if domain else list_algorithms()
        if tag:
            tagged = {info.key for info in algorithms_by_tag(tag)}
            infos = [info for info in infos if info.key in tagged]
        return jsonify({
            "algorithms": [info.to_dict() for info in infos],
            "colors":     {h.value: color for h, color in HIGHLIGHT_COLORS.items()},
        })

    # ------------------------------------------------------------------
    # API: Surface state & structure
    # ------------------------------------------------------------------
    @app.route("/api/<name>/state")
    def api_state(name: str):
        surface = surface_or_404(name)
        with surface.lock:
            return jsonify(surface.snapshot())

    @app.route("/api/<name>/structure", methods=["POST"])
    def api_structure(name: str):
        surface = surface_or_404(name)
        data = _payload()
        with surface.lock:
            result = surface.apply(str(data.get("action", "")), data)
            return jsonify({"result": result, **surface.snapshot()})

    # ------------------------------------------------------------------
    # API: Run & playback
    # ------------------------------------------------------------------
    @app.route("/api/<name>/run", methods=["POST"])
    def api_run(name: str):
        surface = surface_or_404(name)
        data = _payload()
        params = data.get("params") or {}
        if not isinstance(params, dict):
            raise ValueError("'params' must be an object")
        with surface.lock:
            outcome = surface.run(str(data.get("algorithm", "")), params, speed_ms=_as_int(data, "speed"))
            status = 409 if outcome is RunOutcome.BUSY else 200
            return jsonify({"outcome": outcome.value, **surface.snapshot()}), status

    @app.route("/api/<name>/tick", methods=["POST"])
    def api_tick(name: str):
        surface = surface_or_404(name)
        with surface.lock:
            advanced = surface.controller.tick()
            return jsonify({"advanced": advanced, **surface.snapshot()})

    @app.route("/api/<name>/toggle", methods=["POST"])
    def api_toggle(name: str):
        surface = surface_or_404(name)
        with surface.lock:
            surface.controller.toggle()
            return jsonify(surface.snapshot())

    @app.route("/api/<name>/stop", methods=["POST"])
    def api_stop(name: str):
        surface = surface_or_404(name)
        with surface.lock:
            surface.controller.reset()
            return jsonify(surface.snapshot())

    @app.route("/api/<name>/speed", methods=["POST"])
    def api_speed(name: str):
        surface = surface_or_404(name)
        data = _payload()
        if "preset" in data:
            speed = surface.controller.set_speed_preset(str(data["preset"]))
        else:
            speed_ms = _as_int(data, "speed_ms")
            if speed_ms is None:
                raise ValueError("Provide 'speed_ms' or 'preset'")
            speed = surface.controller.set_speed(speed_ms)
        return jsonify({"speed_ms": speed})

    # ------------------------------------------------------------------
    # API: Explanations
    # ------------------------------------------------------------------
    @app.route("/api/explain", methods=["POST"])
    def api_explain():
        key = str(_payload().get("algorithm", ""))
        if not key:
            raise ValueError("'algorithm' is required")
        return jsonify({"algorithm": key, "markdown": explain_algorithm(key, settings)})

    return app


app = create_app()


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    settings = get_settings()
    logger.info("Starting step visualizer on http://%s:%d", settings.host, settings.port)
    app.run(debug=settings.debug, host=settings.host, port=settings.port)
