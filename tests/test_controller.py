"""Tests for the Run Controller façade and the recording observer."""

import pytest

from structures import BinarySearchTree, Graph, LinkedList
from algorithms import REGISTRY, algorithms_for_domain, get_algorithm
from algorithms.step import Complete, Outcome
from engine import Recorder, RunController, RunOutcome, RunState, Scheduler


@pytest.fixture
def controller(clock, collector):
    return RunController(observer=collector, scheduler=Scheduler(clock=clock))


def finish(controller, clock, limit=10_000):
    for _ in range(limit):
        if not controller.is_active:
            return
        clock.advance(controller.scheduler.speed_ms)
        controller.tick()
    raise AssertionError("run did not finish")


class TestRegistry:
    def test_closed_set(self):
        assert set(REGISTRY) == {
            "bubble", "selection", "insertion", "merge", "quick",
            "bfs", "dfs", "dijkstra",
            "bst_insert", "bst_delete", "bst_search", "bst_traverse",
            "list_search", "list_reverse", "list_middle",
        }

    def test_domains(self):
        assert [a.key for a in algorithms_for_domain("graph")] == ["bfs", "dfs", "dijkstra"]
        assert get_algorithm("nope") is None

    def test_to_dict_is_json_ready(self):
        data = get_algorithm("quick").to_dict()
        assert data["domain"] == "sorting"
        assert "fn" not in data


class TestRun:
    def test_started(self, controller, collector):
        outcome = controller.run("bubble", [3, 1, 2])
        assert outcome is RunOutcome.STARTED
        assert controller.state is RunState.RUNNING
        assert len(collector.steps) == 1

    def test_busy(self, controller, collector, clock):
        values = [3, 1, 2]
        controller.run("bubble", values)
        assert controller.run("quick", [9, 8]) is RunOutcome.BUSY
        finish(controller, clock)
        assert values == [1, 2, 3]
        assert controller.algorithm.key == "bubble"

    def test_busy_does_not_reset_stats(self, controller, clock):
        controller.run("bubble", [3, 2, 1])
        clock.advance(controller.scheduler.speed_ms)
        controller.tick()
        before = controller.stats_snapshot()
        controller.run("bubble", [5, 4])
        assert controller.stats_snapshot() == before

    def test_nothing_to_do(self, controller, collector):
        assert controller.run("quick", []) is RunOutcome.NOTHING_TO_DO
        assert len(collector.steps) == 1
        assert collector.steps[0].outcome is Outcome.NOTHING_TO_DO
        assert controller.state is RunState.COMPLETED

    def test_empty_tree_search_is_nothing_to_do(self, controller, collector):
        outcome = controller.run("bst_search", BinarySearchTree(), value=4)
        assert outcome is RunOutcome.NOTHING_TO_DO
        assert collector.steps[-1].outcome is Outcome.NOT_FOUND

    def test_insert_into_empty_tree_starts(self, controller, clock):
        tree = BinarySearchTree()
        assert controller.run("bst_insert", tree, value=8) is RunOutcome.STARTED
        finish(controller, clock)
        assert tree.in_order() == [8]

    def test_stats_reset_between_runs(self, controller, collector, clock):
        controller.run("bubble", [4, 3, 2, 1])
        finish(controller, clock)
        first_total = collector.stats[-1].comparisons
        controller.run("bubble", [2, 1])
        assert first_total == 6
        assert collector.stats[-1].comparisons == 1

    def test_graph_params(self, controller, collector, clock):
        controller.run("dijkstra", Graph.sample(), source=1, target=4)
        finish(controller, clock)
        assert collector.steps[-1].value == 2


class TestRunErrors:
    def test_unknown_key(self, controller):
        with pytest.raises(ValueError):
            controller.run("bogo", [1])

    def test_wrong_structure(self, controller):
        with pytest.raises(ValueError):
            controller.run("bfs", [1, 2, 3])

    def test_unknown_param(self, controller):
        with pytest.raises(ValueError):
            controller.run("bfs", Graph.sample(), value=3)

    def test_missing_param(self, controller):
        with pytest.raises(ValueError):
            controller.run("bst_insert", BinarySearchTree())

    def test_bad_order_rejected_before_a_run_exists(self, controller, collector):
        with pytest.raises(ValueError):
            controller.run("bst_traverse", BinarySearchTree.sample(), order="sideways")
        assert controller.state is RunState.IDLE
        assert controller.algorithm is None
        assert collector.steps == []
        assert controller.run("bst_traverse", BinarySearchTree.sample()) is RunOutcome.STARTED


class TestControls:
    def test_toggle(self, controller):
        controller.run("bubble", [2, 1])
        assert controller.toggle() is RunState.PAUSED
        assert controller.toggle() is RunState.RUNNING

    def test_reset_keeps_partial_structure(self, controller, collector, clock):
        lst = LinkedList([1, 2, 3, 4, 5])
        controller.run("list_reverse", lst)
        for _ in range(2):
            clock.advance(controller.scheduler.speed_ms)
            controller.tick()
        controller.reset()
        assert controller.state is RunState.IDLE
        assert controller.algorithm is None
        assert lst.values() == [2, 1, 3, 4, 5]
        delivered = len(collector.steps)
        clock.advance(10_000)
        controller.tick()
        assert len(collector.steps) == delivered

    def test_set_speed(self, controller):
        assert controller.set_speed(250) == 250
        assert controller.set_speed_preset("fast") == 150


class TestRecorder:
    def test_frame_tracks_run(self, clock):
        rec = Recorder()
        controller = RunController(observer=rec, scheduler=Scheduler(clock=clock))
        controller.run("bfs", Graph.sample())
        finish(controller, clock)
        frame = rec.frame()
        assert frame["finished"] is True
        assert frame["steps"] == 6
        assert frame["stats"]["nodes_visited"] == 5
        assert rec.visited == {1, 2, 3, 4, 5}

    def test_new_run_clears_history(self, clock):
        rec = Recorder()
        controller = RunController(observer=rec, scheduler=Scheduler(clock=clock))
        controller.run("quick", [3, 1, 2])
        finish(controller, clock)
        controller.run("list_middle", LinkedList([1, 2, 3]))
        assert rec.count == 1
        assert rec.visited == {0}

    def test_history_is_bounded(self, clock):
        rec = Recorder(max_history=3)
        controller = RunController(observer=rec, scheduler=Scheduler(clock=clock))
        controller.run("bubble", [5, 4, 3, 2, 1])
        finish(controller, clock)
        assert len(rec.history) == 3
        assert rec.count > 3
        assert isinstance(rec.latest, Complete)

    def test_path_from_dijkstra(self, clock):
        rec = Recorder()
        controller = RunController(observer=rec, scheduler=Scheduler(clock=clock))
        controller.run("dijkstra", Graph.sample())
        finish(controller, clock)
        assert rec.path == [1, 4, 5]


class TestEagerValidation:
    def test_unknown_source_rejected_before_a_run_exists(self, controller, collector):
        with pytest.raises(ValueError):
            controller.run("dijkstra", Graph.sample(), target=99)
        assert controller.state is RunState.IDLE
        assert collector.steps == []
        assert controller.run("bfs", Graph.sample(), source=3) is RunOutcome.STARTED
