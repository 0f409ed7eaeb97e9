"""
Edit Session Service
Drives a user's editing of one workflow at a time

Each edit is dispatched to the GraphEditor and followed by a full reload
from the repository, so the session never keeps a second copy of the
graph in sync by hand.
"""
from typing import Callable, List, Optional, Set, Tuple

from wfgrid.core.config import get_settings
from wfgrid.core.constants import GridLimits, MenuAction, NodeAction
from wfgrid.core.errors import (
    EditResult,
    NodeNotFoundException,
    NoWorkflowSelectedException,
    applied,
    skipped
)
from wfgrid.core.logging import get_logger
from wfgrid.storage.base import WorkflowRepository
from wfgrid.storage.filesystem import FilesystemWorkflowRepository
from wfgrid.visualization.graph_editor import GraphEditor
from wfgrid.visualization.grid_view import GridView, build_grid_view
from wfgrid.visualization.layout import GridLayoutEngine
from wfgrid.visualization.node_menu import MenuItem, build_node_menu
from wfgrid.workflow.graph import Workflow

logger = get_logger(__name__)


class EditSession:
    """
    Edit session over a workflow repository

    Responsibilities:
    - Workflow selection and reload
    - Dispatching edits, then reloading
    - Grid width changes and explicit auto-layout
    - Notifying the host that the workflow must be redrawn
    - Asking the host to open a node or workflow record (zoom)

    Usage:
        session = EditSession(repository, tenant_id=11, on_change=redraw)
        session.select_workflow(100)

        session.clone_node(node_id)
        session.set_grid_columns(6)
        session.auto_layout()
    """

    def __init__(
        self,
        repository: WorkflowRepository,
        tenant_id: Optional[int] = None,
        org_id: Optional[int] = None,
        on_change: Optional[Callable[[Workflow], None]] = None,
        on_zoom: Optional[Callable[[str, int], None]] = None,
        layout_on_first_load: bool = True
    ):
        settings = get_settings()
        self.repository = repository
        self.tenant_id = settings.TENANT_ID if tenant_id is None else tenant_id
        self.org_id = settings.ORG_ID if org_id is None else org_id
        self.on_change = on_change
        self.on_zoom = on_zoom
        self.layout_on_first_load = layout_on_first_load
        self.default_columns = settings.DEFAULT_GRID_COLUMNS or GridLimits.DEFAULT_COLUMNS

        self._workflow: Optional[Workflow] = None
        self._laid_out: Set[int] = set()

        logger.info(f"EditSession initialized for tenant {self.tenant_id}")

    # ------------------------------------------------------------------
    # Selection and reload
    # ------------------------------------------------------------------

    @property
    def workflow(self) -> Workflow:
        if self._workflow is None:
            raise NoWorkflowSelectedException("No workflow selected")
        return self._workflow

    @property
    def has_workflow(self) -> bool:
        return self._workflow is not None

    def list_workflows(self) -> List[Tuple[int, str]]:
        return self.repository.list_workflows(self.tenant_id)

    def select_workflow(self, workflow_id: int) -> Workflow:
        """
        Load a workflow and make it the one being edited

        The first time a workflow is selected in this session it is
        auto-laid out (when layout_on_first_load is set).

        Raises:
            WorkflowNotFoundException: If the workflow does not exist
        """
        logger.info(f"Selecting workflow {workflow_id}")
        self.reload(workflow_id, reread=True, notify=False)

        if self.layout_on_first_load and workflow_id not in self._laid_out:
            self._laid_out.add(workflow_id)
            self.auto_layout()
        else:
            self._notify()

        return self.workflow

    def reload(self, workflow_id: Optional[int] = None, reread: bool = True, notify: bool = True) -> Workflow:
        """
        Load the workflow again from the repository

        Args:
            workflow_id: Workflow to load, defaults to the selected one
            reread: Discard cached nodes and transitions
            notify: Tell the host to redraw
        """
        if workflow_id is None:
            workflow_id = self.workflow.id

        workflow = self.repository.get_workflow(workflow_id, reread=reread)

        columns = self.repository.get_grid_columns(workflow_id)
        workflow.grid_columns = columns if columns > 0 else self.default_columns

        self._workflow = workflow
        if notify:
            self._notify()
        return workflow

    def refresh(self) -> Workflow:
        return self.reload(reread=True)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self._workflow)

    # ------------------------------------------------------------------
    # Grid
    # ------------------------------------------------------------------

    def set_grid_columns(self, columns: Optional[int]) -> EditResult:
        """
        Persist a new grid width and reload

        Missing or non-positive values fall back to the default width.
        """
        workflow = self.workflow
        if columns is None or columns < GridLimits.MIN_COLUMNS:
            columns = GridLimits.DEFAULT_COLUMNS

        self.repository.set_grid_columns(workflow.id, columns)
        self.reload()
        return applied("set_grid_columns", f"Grid columns set to {columns}")

    def auto_layout(self) -> EditResult:
        """Lay out the selected workflow and persist every node position"""
        workflow = self.workflow
        engine = GridLayoutEngine(workflow.grid_columns)
        positions = engine.layout(workflow)

        for node in workflow.nodes:
            self.repository.save_node(node)

        self.reload()
        return applied("auto_layout", f"{len(positions)} nodes laid out", node_ids=list(positions))

    def grid_view(self) -> GridView:
        return build_grid_view(self.workflow)

    def zoom(self, node_id: Optional[int] = None) -> EditResult:
        """
        Ask the host to open the record behind a node, or the workflow itself

        Args:
            node_id: Node to open, None for the selected workflow
        """
        workflow = self.workflow
        if node_id is None:
            target = ("workflow", workflow.id)
        elif node_id in workflow:
            target = ("node", node_id)
        else:
            return skipped("zoom", f"Node {node_id} not found")

        logger.debug(f"Zoom to {target[0]} {target[1]}")
        if self.on_zoom is not None:
            self.on_zoom(*target)
        return applied("zoom", f"Open {target[0]} {target[1]}", node_ids=[node_id] if node_id is not None else None)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def editor(self) -> GraphEditor:
        return GraphEditor(self.repository, self.workflow, self.tenant_id, self.org_id)

    def _run(self, edit: Callable[[GraphEditor], EditResult]) -> EditResult:
        result = edit(self.editor())
        self.reload()
        return result

    def create_node(self, name: Optional[str], action: Optional[NodeAction] = None) -> EditResult:
        return self._run(lambda e: e.create_node(name, action))

    def clone_node(self, node_id: int) -> EditResult:
        return self._run(lambda e: e.clone_node(node_id))

    def insert_node_on_transition(
        self,
        transition_id: int,
        name: Optional[str],
        action: Optional[NodeAction] = None
    ) -> EditResult:
        return self._run(lambda e: e.insert_node_on_transition(transition_id, name, action))

    def drop_action(
        self,
        action: Optional[NodeAction],
        column: Optional[int] = None,
        row: Optional[int] = None,
        target_node_id: Optional[int] = None,
        name: Optional[str] = None
    ) -> EditResult:
        """
        Handle a node action dropped onto the grid

        Dropped on a node: a new action node is inserted after it.
        Dropped on an empty cell: a new action node is created there.
        """
        if action is not None and target_node_id is not None:
            return self._run(lambda e: e.insert_action_after_node(action, target_node_id, name))
        return self._run(lambda e: e.insert_node_at_cell(action, column, row, name))

    def move_node(self, node_id: Optional[int], column: Optional[int], row: Optional[int]) -> EditResult:
        return self._run(lambda e: e.move_node(node_id, column, row))

    def update_node_properties(self, node_id: int, name: Optional[str], description: Optional[str] = None) -> EditResult:
        return self._run(lambda e: e.update_node_properties(node_id, name, description))

    def delete_node(self, node_id: int) -> EditResult:
        return self._run(lambda e: e.delete_node(node_id))

    def add_transition(self, from_node_id: Optional[int], to_node_id: Optional[int]) -> EditResult:
        return self._run(lambda e: e.add_transition(from_node_id, to_node_id))

    def delete_transition(self, transition_id: int) -> EditResult:
        return self._run(lambda e: e.delete_transition(transition_id))

    # ------------------------------------------------------------------
    # Node menu
    # ------------------------------------------------------------------

    def node_menu(self, node_id: int) -> List[MenuItem]:
        """
        Menu entries for a node of the selected workflow

        Raises:
            NodeNotFoundException: If the node is not in the workflow
        """
        if node_id not in self.workflow:
            raise NodeNotFoundException(node_id)
        return build_node_menu(self.workflow, node_id, self.tenant_id)

    def execute_menu_item(
        self,
        item: MenuItem,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> EditResult:
        """
        Run the edit behind a menu entry

        Args:
            item: Entry from node_menu()
            name: Name for INSERT_NODE and PROPERTIES
            description: Description for PROPERTIES
        """
        if item.action == MenuAction.CLONE:
            return self.clone_node(item.node_id)
        if item.action == MenuAction.ZOOM:
            return self.zoom(item.node_id)
        if item.action == MenuAction.PROPERTIES:
            return self.update_node_properties(item.node_id, name, description)
        if item.action == MenuAction.DELETE_NODE:
            return self.delete_node(item.node_id)
        if item.action == MenuAction.ADD_LINE:
            return self.add_transition(item.node_id, item.target_node_id)

        if item.transition_id is None:
            logger.warning(f"Menu item {item.action.value} has no transition")
            return skipped(item.action.value, "Transition is required")
        if item.action == MenuAction.DELETE_LINE:
            return self.delete_transition(item.transition_id)
        return self.insert_node_on_transition(item.transition_id, name)


# ============================================================================
# SINGLETON INSTANCE (optional, or use dependency injection)
# ============================================================================

_edit_session: Optional[EditSession] = None


def get_edit_session() -> EditSession:
    """
    Get singleton edit session backed by filesystem storage

    Returns:
        EditSession instance
    """
    global _edit_session

    if _edit_session is None:
        _edit_session = EditSession(FilesystemWorkflowRepository())

    return _edit_session
