"""
Tests for the layered grid layout
"""
from wfgrid.visualization.layout import GridLayoutEngine, calculate_layout
from wfgrid.workflow.graph import Workflow

from conftest import make_workflow


class TestGridLayout:
    """Levels and grid positions"""

    def test_fan_out(self):
        wf, ids = make_workflow(["A", "B", "C"], [("A", "B"), ("A", "C")], start="A")

        positions = GridLayoutEngine(4).layout(wf)

        assert positions[ids["A"]] == (1, 1)
        assert positions[ids["B"]] == (3, 1)
        assert positions[ids["C"]] == (3, 3)

    def test_positions_written_to_nodes(self):
        wf, ids = make_workflow(["A", "B"], [("A", "B")], start="A")

        GridLayoutEngine().layout(wf)

        assert wf.get_node(ids["B"]).position == (3, 1)

    def test_column_follows_level(self):
        wf, ids = make_workflow(
            ["A", "B", "C", "D"],
            [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")],
            start="A"
        )
        engine = GridLayoutEngine(8)

        levels = engine.compute_levels(wf)
        engine.layout(wf)

        assert levels == {ids["A"]: 0, ids["B"]: 1, ids["C"]: 1, ids["D"]: 2}
        for node in wf.nodes:
            assert node.column == 2 * levels[node.id] + 1

    def test_rows_within_level_step_by_two(self):
        wf, ids = make_workflow(["S", "A", "B", "C"], [("S", "A"), ("S", "B"), ("S", "C")], start="S")

        GridLayoutEngine().layout(wf)

        rows = [wf.get_node(ids[n]).row for n in ("A", "B", "C")]
        assert rows == [1, 3, 5]

    def test_start_node_not_first(self):
        wf, ids = make_workflow(["B", "A"], [("A", "B")], start="A")

        GridLayoutEngine().layout(wf)

        assert wf.get_node(ids["A"]).position == (1, 1)
        assert wf.get_node(ids["B"]).position == (3, 1)

    def test_without_start_node_first_node_is_root(self):
        wf, ids = make_workflow(["A", "B", "C"], [("A", "B"), ("B", "C")])

        GridLayoutEngine().layout(wf)

        assert [wf.get_node(ids[n]).column for n in ("A", "B", "C")] == [1, 3, 5]

    def test_unreachable_nodes_share_level_zero(self):
        wf, ids = make_workflow(["A", "B", "X"], [("A", "B")], start="A")

        GridLayoutEngine().layout(wf)

        assert wf.get_node(ids["A"]).position == (1, 1)
        assert wf.get_node(ids["X"]).position == (1, 3)
        assert wf.get_node(ids["B"]).position == (3, 1)

    def test_back_edge_keeps_raising_rule(self):
        # A -> B -> A: B is raised to 1, then A to 2 after it was visited
        wf, ids = make_workflow(["A", "B"], [("A", "B"), ("B", "A")], start="A")

        levels = GridLayoutEngine().compute_levels(wf)

        assert levels == {ids["A"]: 2, ids["B"]: 1}

    def test_idempotent(self):
        wf, _ = make_workflow(
            ["A", "B", "C", "D", "E"],
            [("A", "B"), ("B", "C"), ("C", "A"), ("A", "D"), ("D", "E")],
            start="A"
        )
        engine = GridLayoutEngine()

        first = engine.layout(wf)
        second = engine.layout(wf)

        assert first == second

    def test_empty_workflow_is_noop(self):
        wf = Workflow.from_records(1, "empty", [], [])
        assert GridLayoutEngine().layout(wf) == {}

    def test_overflow_lists_nodes_beyond_grid(self):
        wf, ids = make_workflow(["A", "B", "C"], [("A", "B"), ("B", "C")], start="A")
        engine = GridLayoutEngine(grid_columns=4)

        engine.layout(wf)

        assert [n.id for n in engine.overflow(wf)] == [ids["C"]]

    def test_invalid_column_count_falls_back(self):
        assert GridLayoutEngine(0).grid_columns == 4

    def test_calculate_layout_uses_workflow_columns(self):
        wf, ids = make_workflow(["A"], start="A", grid_columns=6)
        assert calculate_layout(wf) == {ids["A"]: (1, 1)}
