"""
Tests for the edit session service
"""
import pytest

from wfgrid.core.constants import EditStatus, MenuAction, NodeAction
from wfgrid.core.errors import (
    NodeNotFoundException,
    NoWorkflowSelectedException,
    WorkflowNotFoundException
)
from wfgrid.services.edit_session import EditSession

from conftest import TENANT


@pytest.fixture
def redraws():
    return []


@pytest.fixture
def session(repository, redraws):
    return EditSession(repository, tenant_id=TENANT, on_change=redraws.append)


@pytest.fixture
def chain(seed):
    """A -> B -> C with scattered positions"""
    return seed(
        nodes={"A": (0, 6), "B": (2, 0), "C": (9, 9)},
        edges=[("A", "B"), ("B", "C")],
        start="A"
    )


class TestSelection:
    """Selecting and reloading workflows"""

    def test_first_select_lays_out_and_persists(self, session, repository, redraws, chain):
        wf, ids = chain

        selected = session.select_workflow(wf.id)

        assert [selected.get_node(ids[n]).position for n in "ABC"] == [(1, 1), (3, 1), (5, 1)]
        stored = repository.get_workflow(wf.id, reread=True)
        assert stored.get_node(ids["C"]).position == (5, 1)
        assert len(redraws) == 1

    def test_second_select_keeps_positions(self, session, chain):
        wf, ids = chain
        session.select_workflow(wf.id)
        session.move_node(ids["A"], 0, 8)

        reselected = session.select_workflow(wf.id)

        assert reselected.get_node(ids["A"]).position == (0, 8)

    def test_without_first_load_layout(self, repository, chain):
        wf, ids = chain
        session = EditSession(repository, tenant_id=TENANT, layout_on_first_load=False)

        selected = session.select_workflow(wf.id)

        assert selected.get_node(ids["A"]).position == (0, 6)

    def test_missing_workflow(self, session):
        with pytest.raises(WorkflowNotFoundException):
            session.select_workflow(4242)
        assert not session.has_workflow

    def test_edit_before_selection(self, session):
        with pytest.raises(NoWorkflowSelectedException):
            session.clone_node(1)

    def test_list_workflows(self, session, chain):
        assert session.list_workflows() == [(chain[0].id, "Assembly")]


class TestGridColumns:

    def test_unset_width_uses_default(self, session, chain):
        session.select_workflow(chain[0].id)
        assert session.workflow.grid_columns == 4

    def test_set_grid_columns_persists_and_reloads(self, session, repository, chain):
        wf, _ = chain
        session.select_workflow(wf.id)

        session.set_grid_columns(6)

        assert repository.get_grid_columns(wf.id) == 6
        assert session.workflow.grid_columns == 6
        assert session.grid_view().columns == 6

    @pytest.mark.parametrize("value", [0, -3, None])
    def test_invalid_width_falls_back(self, session, repository, chain, value):
        wf, _ = chain
        session.select_workflow(wf.id)

        session.set_grid_columns(value)

        assert repository.get_grid_columns(wf.id) == 4

    def test_auto_layout_reports_nodes(self, session, chain):
        wf, ids = chain
        session.select_workflow(wf.id)
        session.move_node(ids["B"], 0, 9)

        result = session.auto_layout()

        assert result.applied
        assert sorted(result.node_ids) == sorted(ids[n] for n in "ABC")
        assert session.workflow.get_node(ids["B"]).position == (3, 1)


class TestSessionEdits:
    """Edits are followed by a reload"""

    def test_clone_visible_after_reload(self, session, redraws, chain):
        wf, ids = chain
        session.select_workflow(wf.id)
        before = session.workflow

        result = session.clone_node(ids["A"])

        assert session.workflow is not before
        assert session.workflow.get_node(result.node_ids[0]).position == (2, 1)
        assert len(redraws) == 2

    def test_drop_on_node_inserts_after_it(self, session, chain):
        wf, ids = chain
        session.select_workflow(wf.id)

        result = session.drop_action(NodeAction.WAIT_SLEEP, target_node_id=ids["C"])

        new_id = result.node_ids[0]
        assert [n.id for n in session.workflow.successors(ids["C"])] == [new_id]
        assert session.workflow.get_node(new_id).position == (7, 1)

    def test_drop_on_cell_creates_node_there(self, session, chain):
        wf, _ = chain
        session.select_workflow(wf.id)

        result = session.drop_action(NodeAction.DOCUMENT_ACTION, column=0, row=3)

        node = session.workflow.get_node(result.node_ids[0])
        assert node.position == (0, 3)
        assert node.doc_action == "CO"

    def test_drop_on_taken_cell_is_skipped(self, session, chain):
        wf, _ = chain
        session.select_workflow(wf.id)

        result = session.drop_action(NodeAction.DOCUMENT_ACTION, column=1, row=1)

        assert result.status == EditStatus.SKIPPED
        assert len(session.workflow) == 3

    def test_delete_start_node_reports_error(self, session, chain):
        wf, ids = chain
        session.select_workflow(wf.id)

        result = session.delete_node(ids["A"])

        assert result.status == EditStatus.REFUSED
        assert "DeleteError" in result.message
        assert ids["A"] in session.workflow


class TestMenuExecution:

    def test_insert_from_menu(self, session, chain):
        wf, ids = chain
        session.select_workflow(wf.id)
        item = next(i for i in session.node_menu(ids["A"]) if i.action == MenuAction.INSERT_NODE)

        result = session.execute_menu_item(item, name="Inspect")

        new_id = result.node_ids[0]
        assert session.workflow.get_node(new_id).name == "Inspect"
        assert [n.id for n in session.workflow.successors(ids["A"])] == [new_id]

    def test_add_line_from_menu(self, session, chain):
        wf, ids = chain
        session.select_workflow(wf.id)
        new_id = session.create_node("D").node_ids[0]
        item = next(i for i in session.node_menu(ids["C"]) if i.action == MenuAction.ADD_LINE)

        session.execute_menu_item(item)

        assert item.target_node_id == new_id
        assert [t.to_node_id for t in session.workflow.outgoing(ids["C"])] == [new_id]

    def test_properties_from_menu(self, session, chain):
        wf, ids = chain
        session.select_workflow(wf.id)
        item = next(i for i in session.node_menu(ids["B"]) if i.action == MenuAction.PROPERTIES)

        session.execute_menu_item(item, name="Check", description="quality gate")

        assert session.workflow.get_node(ids["B"]).name == "Check"

    def test_delete_line_from_menu(self, session, chain):
        wf, ids = chain
        session.select_workflow(wf.id)
        item = next(i for i in session.node_menu(ids["B"]) if i.action == MenuAction.DELETE_LINE)

        session.execute_menu_item(item)

        assert not session.workflow.is_linked(ids["B"], ids["C"])

    def test_zoom_from_menu(self, repository, chain):
        wf, ids = chain
        opened = []
        session = EditSession(repository, tenant_id=TENANT, on_zoom=lambda kind, i: opened.append((kind, i)))
        session.select_workflow(wf.id)
        item = next(i for i in session.node_menu(ids["B"]) if i.action == MenuAction.ZOOM)

        result = session.execute_menu_item(item)

        assert result.applied
        assert opened == [("node", ids["B"])]

    def test_zoom_without_node_opens_workflow(self, repository, chain):
        wf, _ = chain
        opened = []
        session = EditSession(repository, tenant_id=TENANT, on_zoom=lambda kind, i: opened.append((kind, i)))
        session.select_workflow(wf.id)

        session.zoom()

        assert opened == [("workflow", wf.id)]

    def test_menu_of_unknown_node(self, session, chain):
        session.select_workflow(chain[0].id)
        with pytest.raises(NodeNotFoundException):
            session.node_menu(4242)
