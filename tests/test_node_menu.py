"""
Tests for node menu construction and the grid view
"""
from wfgrid.core.constants import MenuAction
from wfgrid.visualization.grid_view import build_grid_view
from wfgrid.visualization.node_menu import build_node_menu
from wfgrid.workflow.graph import Node, Transition, Workflow

from conftest import TENANT, OTHER_TENANT


def _labels(items):
    return [item.label for item in items]


class TestNodeMenu:
    """Entries offered for a selected node"""

    def test_full_menu_for_own_node(self, seed):
        wf, ids = seed(nodes={"A": (1, 1), "B": (3, 1), "C": (3, 3)}, edges=[("A", "B")], start="A")

        items = build_node_menu(wf, ids["A"], TENANT)

        assert _labels(items) == [
            "Copy",
            "Zoom",
            "Properties",
            "Delete Node: A",
            "Add Line: A -> C",
            "Delete Line: A -> B",
            "Insert Operation: A -> B",
        ]
        add_line = items[4]
        assert add_line.action == MenuAction.ADD_LINE
        assert add_line.target_node_id == ids["C"]
        assert items[5].transition_id == ids["A->B"]
        assert items[6].transition_id == ids["A->B"]

    def test_no_line_into_start_or_linked_nodes(self, seed):
        wf, ids = seed(nodes={"A": (1, 1), "B": (3, 1), "C": (3, 3)}, edges=[("A", "B")], start="A")

        items = build_node_menu(wf, ids["B"], TENANT)

        targets = [i.target_node_id for i in items if i.action == MenuAction.ADD_LINE]
        assert targets == [ids["C"]]

    def test_linked_in_reverse_direction_is_excluded(self, seed):
        wf, ids = seed(nodes={"A": (1, 1), "B": (3, 1), "C": (3, 3)}, edges=[("C", "B")])

        items = build_node_menu(wf, ids["B"], TENANT)

        targets = [i.target_node_id for i in items if i.action == MenuAction.ADD_LINE]
        assert targets == [ids["A"]]

    def test_other_tenant_node_hides_properties_and_delete(self, seed):
        wf, ids = seed(nodes={"A": (1, 1), "B": (3, 1)}, owners={"B": OTHER_TENANT})

        actions = [i.action for i in build_node_menu(wf, ids["B"], TENANT)]

        assert MenuAction.PROPERTIES not in actions
        assert MenuAction.DELETE_NODE not in actions
        assert actions[0] == MenuAction.CLONE

    def test_transitions_of_other_tenant_are_not_offered(self):
        nodes = [
            Node(workflow_id=1, name="A", id=1, tenant_id=TENANT),
            Node(workflow_id=1, name="B", id=2, tenant_id=TENANT),
            Node(workflow_id=1, name="C", id=3, tenant_id=TENANT),
        ]
        transitions = [
            Transition(from_node_id=1, to_node_id=2, id=10, tenant_id=OTHER_TENANT),
            Transition(from_node_id=1, to_node_id=3, id=11, tenant_id=TENANT),
        ]
        wf = Workflow.from_records(1, "wf", nodes, transitions)

        items = build_node_menu(wf, 1, TENANT)

        line_items = [i for i in items if i.transition_id is not None]
        assert {i.transition_id for i in line_items} == {11}
        assert [i.action for i in line_items] == [MenuAction.DELETE_LINE, MenuAction.INSERT_NODE]

    def test_unknown_node_has_no_menu(self, seed):
        wf, _ = seed(nodes={"A": (1, 1)})
        assert build_node_menu(wf, 4242, TENANT) == []

    def test_to_dict_omits_unused_references(self, seed):
        wf, ids = seed(nodes={"A": (1, 1)})

        copy_item = build_node_menu(wf, ids["A"], TENANT)[0]

        assert copy_item.to_dict() == {"action": "clone", "label": "Copy", "node_id": ids["A"]}


class TestGridView:
    """Visible grid with one spare row"""

    def test_dimensions_and_cells(self, seed):
        wf, ids = seed(nodes={"A": (1, 1), "B": (3, 2)}, grid_columns=4)

        view = build_grid_view(wf)

        assert view.columns == 4
        assert view.rows == 4
        assert len(view.cells) == 16
        assert view.cell(1, 1).node_id == ids["A"]
        assert view.cell(3, 2).node_id == ids["B"]
        assert view.cell(0, 3).node_id is None
        assert view.hidden_node_ids == []

    def test_nodes_beyond_width_are_hidden(self, seed):
        wf, ids = seed(nodes={"A": (1, 1), "Far": (7, 1)}, grid_columns=4)

        view = build_grid_view(wf)

        assert view.hidden_node_ids == [ids["Far"]]
        assert view.cell(7, 1) is None

    def test_empty_workflow(self, seed):
        wf, _ = seed(nodes={}, grid_columns=3)

        view = build_grid_view(wf)

        assert (view.columns, view.rows) == (3, 1)
        assert all(c.node_id is None for c in view.cells)
