"""Tests for the Flask JSON API."""

import itertools
import threading

import pytest

from config import Settings
from explain import FALLBACK_MESSAGE
from main import create_app


def make_app(clock, **overrides):
    options = {"gemini_api_key": "", "default_speed_ms": 100, "log_level": "warning", **overrides}
    settings = Settings(**options)
    app = create_app(settings=settings, clock=clock)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(clock):
    return make_app(clock).test_client()


def play_out(client, clock, surface, limit=1_000):
    for _ in range(limit):
        clock.advance(2_000)
        data = client.post(f"/api/{surface}/tick").get_json()
        if data["state"] != "running":
            return data
    raise AssertionError("run did not finish")


class TestRegistryRoute:
    def test_lists_everything(self, client):
        data = client.get("/api/algorithms").get_json()
        assert len(data["algorithms"]) == 15

    def test_filter_by_domain(self, client):
        data = client.get("/api/algorithms?domain=tree").get_json()
        assert [a["key"] for a in data["algorithms"]] == ["bst_insert", "bst_delete", "bst_search", "bst_traverse"]

    def test_filter_by_tag(self, client):
        data = client.get("/api/algorithms?domain=sorting&tag=recursive").get_json()
        assert [a["key"] for a in data["algorithms"]] == ["merge", "quick"]

    def test_palette(self, client):
        colors = client.get("/api/algorithms").get_json()["colors"]
        assert set(colors) == {"unvisited", "visiting", "visited", "on_path", "selected"}


class TestSortingSurface:
    def test_quick_sort_run(self, client, clock):
        client.post("/api/sorting/structure", json={"action": "sample"})
        resp = client.post("/api/sorting/run", json={"algorithm": "quick", "speed": 50})
        assert resp.status_code == 200
        assert resp.get_json()["outcome"] == "started"

        data = play_out(client, clock, "sorting")
        assert data["state"] == "completed"
        assert data["structure"]["values"] == [1, 2, 4, 5, 8]
        assert data["stats"]["swaps"] == 4
        assert set(data["highlights"].values()) == {"visited"}
        assert data["frame"]["step"]["outcome"] == "done"

    def test_edits_refused_while_running(self, client):
        client.post("/api/sorting/structure", json={"action": "generate", "size": 10, "seed": 1})
        client.post("/api/sorting/run", json={"algorithm": "bubble"})
        resp = client.post("/api/sorting/structure", json={"action": "clear"})
        assert resp.status_code == 409

    def test_second_run_is_busy(self, client):
        client.post("/api/sorting/structure", json={"action": "sample"})
        client.post("/api/sorting/run", json={"algorithm": "bubble"})
        resp = client.post("/api/sorting/run", json={"algorithm": "merge"})
        assert resp.status_code == 409
        assert resp.get_json()["outcome"] == "busy"

    def test_empty_array(self, client):
        resp = client.post("/api/sorting/run", json={"algorithm": "merge"})
        assert resp.get_json()["outcome"] == "nothing_to_do"

    def test_size_bounds(self, client):
        resp = client.post("/api/sorting/structure", json={"action": "generate", "size": 500})
        assert resp.status_code == 400

    def test_algorithm_from_another_page(self, client):
        resp = client.post("/api/sorting/run", json={"algorithm": "bfs"})
        assert resp.status_code == 400

    def test_toggle_and_stop(self, client):
        client.post("/api/sorting/structure", json={"action": "sample"})
        client.post("/api/sorting/run", json={"algorithm": "bubble"})
        assert client.post("/api/sorting/toggle").get_json()["state"] == "paused"
        assert client.post("/api/sorting/stop").get_json()["state"] == "idle"
        assert client.post("/api/sorting/structure", json={"action": "clear"}).status_code == 200


class TestGraphSurface:
    def test_build_and_search(self, client, clock):
        client.post("/api/graph/structure", json={"action": "add_node"})
        client.post("/api/graph/structure", json={"action": "add_node"})
        resp = client.post("/api/graph/structure", json={"action": "add_edge", "source": 1, "target": 2, "weight": 3})
        assert resp.get_json()["result"] == {"source": 1, "target": 2, "weight": 3}

        client.post("/api/graph/run", json={"algorithm": "dijkstra"})
        data = play_out(client, clock, "graph")
        assert data["frame"]["step"]["path"] == [1, 2]
        assert data["frame"]["step"]["value"] == 3

    def test_bad_edge(self, client):
        client.post("/api/graph/structure", json={"action": "add_node"})
        resp = client.post("/api/graph/structure", json={"action": "add_edge", "source": 1, "target": 9})
        assert resp.status_code == 400

    def test_source_override(self, client):
        client.post("/api/graph/structure", json={"action": "sample"})
        resp = client.post("/api/graph/run", json={"algorithm": "bfs", "params": {"source": "3"}})
        assert resp.get_json()["frame"]["step"]["targets"] == [3]

    def test_unknown_action(self, client):
        resp = client.post("/api/graph/structure", json={"action": "insert", "value": 1})
        assert resp.status_code == 400


class TestTreeSurface:
    def test_insert_delete_and_shape(self, client):
        client.post("/api/tree/structure", json={"action": "sample"})
        client.post("/api/tree/structure", json={"action": "delete", "value": 30})
        data = client.get("/api/tree/state").get_json()
        assert data["shape"]["nodes"] == 10
        assert data["structure"]["left"]["value"] == 35

    def test_search_run(self, client, clock):
        client.post("/api/tree/structure", json={"action": "sample"})
        client.post("/api/tree/run", json={"algorithm": "bst_search", "params": {"value": "45"}})
        data = play_out(client, clock, "tree")
        assert data["frame"]["step"]["outcome"] == "found"
        assert data["highlights"]["45"] == "on_path"


class TestListSurface:
    def test_reverse(self, client, clock):
        for v in (1, 2, 3):
            client.post("/api/list/structure", json={"action": "append", "value": v})
        client.post("/api/list/run", json={"algorithm": "list_reverse"})
        data = play_out(client, clock, "list")
        assert data["structure"]["values"] == [3, 2, 1]

    def test_moved_node_is_highlighted_at_its_new_position(self, client, clock):
        for v in (1, 2, 3):
            client.post("/api/list/structure", json={"action": "append", "value": v})
        client.post("/api/list/run", json={"algorithm": "list_reverse"})
        clock.advance(2_000)
        client.post("/api/list/tick")
        clock.advance(2_000)
        data = client.post("/api/list/tick").get_json()
        assert data["frame"]["step"]["kind"] == "mutate"
        assert data["structure"]["values"][0] == 2
        assert data["highlights"]["0"] == "visiting"


class TestMisc:
    def test_unknown_surface(self, client):
        assert client.get("/api/heap/state").status_code == 404

    def test_speed(self, client):
        assert client.post("/api/graph/speed", json={"preset": "slow"}).get_json()["speed_ms"] == 1000
        assert client.post("/api/graph/speed", json={"speed_ms": 1}).get_json()["speed_ms"] == 10
        assert client.post("/api/graph/speed", json={}).status_code == 400

    def test_explain_without_key_falls_back(self, client):
        data = client.post("/api/explain", json={"algorithm": "quick"}).get_json()
        assert data["markdown"] == FALLBACK_MESSAGE


class TestSizeLimits:
    def test_graph_node_limit(self, clock):
        client = make_app(clock, max_graph_nodes=2).test_client()
        for _ in range(2):
            assert client.post("/api/graph/structure", json={"action": "add_node"}).status_code == 200
        resp = client.post("/api/graph/structure", json={"action": "add_node"})
        assert resp.status_code == 400
        assert "at most 2" in resp.get_json()["error"]

    def test_tree_node_limit(self, clock):
        client = make_app(clock, max_tree_nodes=12).test_client()
        client.post("/api/tree/structure", json={"action": "sample"})
        assert client.post("/api/tree/structure", json={"action": "insert", "value": 1}).status_code == 200
        assert client.post("/api/tree/structure", json={"action": "insert", "value": 2}).status_code == 400
        # a duplicate changes nothing, so it is still accepted
        assert client.post("/api/tree/structure", json={"action": "insert", "value": 50}).status_code == 200

    def test_animated_insert_respects_limit(self, clock):
        client = make_app(clock, max_tree_nodes=11).test_client()
        client.post("/api/tree/structure", json={"action": "sample"})
        resp = client.post("/api/tree/run", json={"algorithm": "bst_insert", "params": {"value": 99}})
        assert resp.status_code == 400
        assert client.get("/api/tree/state").get_json()["state"] == "idle"


class TestBadRunParams:
    def test_traversal_order_rejected_before_run(self, client):
        client.post("/api/tree/structure", json={"action": "sample"})
        resp = client.post("/api/tree/run", json={"algorithm": "bst_traverse", "params": {"order": "sideways"}})
        assert resp.status_code == 400
        data = client.get("/api/tree/state").get_json()
        assert data["state"] == "idle"
        assert data["algorithm"] is None

    def test_unknown_target_rejected_before_run(self, client):
        client.post("/api/graph/structure", json={"action": "sample"})
        resp = client.post("/api/graph/run", json={"algorithm": "dijkstra", "params": {"target": 42}})
        assert resp.status_code == 400
        assert client.get("/api/graph/state").get_json()["state"] == "idle"


class TestConcurrentPolling:
    def test_parallel_ticks_and_stop(self):
        seconds = itertools.count(0, 1.0)
        app = make_app(lambda: next(seconds), default_speed_ms=10)
        setup = app.test_client()
        setup.post("/api/sorting/structure", json={"action": "generate", "size": 120, "seed": 7})
        setup.post("/api/sorting/run", json={"algorithm": "bubble"})

        statuses, errors = [], []

        def poll():
            client = app.test_client()
            try:
                for _ in range(60):
                    statuses.append(client.post("/api/sorting/tick").status_code)
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=poll) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

        assert errors == []
        assert set(statuses) == {200}

        surface = app.config["SURFACES"]["sorting"]
        numbers = [s.step_number for s in surface.recorder.history]
        assert numbers == list(range(numbers[0], numbers[0] + len(numbers)))
        assert surface.recorder.count == surface.controller.scheduler.delivered
        assert surface.controller.state.value == "running"

        assert setup.post("/api/sorting/stop").get_json()["state"] == "idle"
