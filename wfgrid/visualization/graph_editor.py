"""
Graph Editor
Structural edits of a loaded workflow: create, clone, insert, move, delete

Every edit is built as an EditPlan, an ordered list of persistence steps.
Steps run one after another against the repository and keep the loaded
workflow in step with what was written. A failing step raises and leaves
the steps before it committed.
"""
from typing import Dict, Any, List, Optional, Tuple

from wfgrid.core.config import get_settings
from wfgrid.core.constants import NodeAction, ACTION_REQUIREMENTS, ENTITY_FIELDS, EntityKind
from wfgrid.core.errors import EditResult, applied, skipped, refused
from wfgrid.core.logging import get_logger
from wfgrid.storage.base import WorkflowRepository
from wfgrid.workflow.graph import Workflow, Node, Transition
from wfgrid.workflow.occupancy import OccupancyResolver

logger = get_logger(__name__)


# ============================================================================
# EDIT STEPS
# ============================================================================

class EditStep:
    """
    Base class for a single persistence step

    apply() returns False only when the repository refuses a delete.
    """
    def apply(self, repository: WorkflowRepository, workflow: Workflow) -> bool:
        """Persist this step and update the loaded workflow"""
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError


class CreateNodeStep(EditStep):
    """
    Insert a new node

    The node object receives its id from the repository, so later steps
    holding the same object see the id.
    """
    def __init__(self, node: Node):
        self.node = node

    def apply(self, repository: WorkflowRepository, workflow: Workflow) -> bool:
        repository.save_node(self.node)
        workflow._attach_node(self.node)
        logger.debug(f"Node created: {self.node.id} at {self.node.position}")
        return True

    def describe(self) -> str:
        return f"create node '{self.node.name}' at {self.node.position}"


class UpdateNodeStep(EditStep):
    """
    Overwrite fields of an existing node
    """
    def __init__(self, node: Node, changes: Dict[str, Any]):
        self.node = node
        self.changes = changes

    def apply(self, repository: WorkflowRepository, workflow: Workflow) -> bool:
        updated = self.node.copy(**self.changes)
        repository.save_node(updated)
        for key, value in self.changes.items():
            setattr(self.node, key, value)
        return True

    def describe(self) -> str:
        return f"update node {self.node.id}: {sorted(self.changes)}"


class DeleteNodeStep(EditStep):
    """
    Delete a node together with its transitions
    """
    def __init__(self, node: Node):
        self.node = node

    def apply(self, repository: WorkflowRepository, workflow: Workflow) -> bool:
        if not repository.delete_node(self.node):
            return False
        workflow._detach_node(self.node.id)
        return True

    def describe(self) -> str:
        return f"delete node {self.node.id}"


class CreateTransitionStep(EditStep):
    """
    Insert a transition between two nodes

    Ends are node objects so a node created earlier in the same plan
    can be linked.
    """
    def __init__(self, source: Node, target: Node, tenant_id: int, org_id: int = 0):
        self.source = source
        self.target = target
        self.tenant_id = tenant_id
        self.org_id = org_id
        self.transition: Optional[Transition] = None

    def apply(self, repository: WorkflowRepository, workflow: Workflow) -> bool:
        self.transition = repository.save_transition(Transition(
            from_node_id=self.source.id,
            to_node_id=self.target.id,
            tenant_id=self.tenant_id,
            org_id=self.org_id
        ))
        workflow._attach_transition(self.transition)
        return True

    def describe(self) -> str:
        return f"link '{self.source.name}' -> '{self.target.name}'"


class DeleteTransitionStep(EditStep):
    """
    Delete a transition
    """
    def __init__(self, transition: Transition):
        self.transition = transition

    def apply(self, repository: WorkflowRepository, workflow: Workflow) -> bool:
        if not repository.delete_transition(self.transition):
            return False
        workflow._detach_transition(self.transition.id)
        return True

    def describe(self) -> str:
        return f"unlink {self.transition.from_node_id} -> {self.transition.to_node_id}"


# ============================================================================
# EDIT PLAN
# ============================================================================

class EditPlan:
    """
    Ordered steps making up one edit

    Usage:
        plan = EditPlan("insert_node")
        plan.add(CreateNodeStep(new_node))
        plan.add(CreateTransitionStep(source, new_node, tenant_id))
        plan.add(DeleteTransitionStep(old_transition))
    """

    def __init__(self, operation: str):
        self.operation = operation
        self.steps: List[EditStep] = []

    def add(self, step: EditStep) -> "EditPlan":
        self.steps.append(step)
        return self

    def describe(self) -> List[str]:
        return [step.describe() for step in self.steps]

    def created_node_ids(self) -> List[int]:
        return [s.node.id for s in self.steps if isinstance(s, CreateNodeStep) and s.node.id is not None]

    def created_transition_ids(self) -> List[int]:
        return [
            s.transition.id for s in self.steps
            if isinstance(s, CreateTransitionStep) and s.transition is not None
        ]


# ============================================================================
# GRAPH EDITOR
# ============================================================================

class GraphEditor:
    """
    Applies structural edits to a loaded workflow

    Preconditions that do not hold make an edit a no-op reported as
    skipped. A delete refused by the repository is reported as refused.
    Any other repository error propagates.

    Usage:
        editor = GraphEditor(repository, workflow, tenant_id=11)

        result = editor.clone_node(node_id)
        result = editor.insert_node_on_transition(transition_id, "Inspect")
        result = editor.move_node(node_id, column=3, row=5)
    """

    def __init__(
        self,
        repository: WorkflowRepository,
        workflow: Workflow,
        tenant_id: int,
        org_id: int = 0
    ):
        self.repository = repository
        self.workflow = workflow
        self.tenant_id = tenant_id
        self.org_id = org_id
        self.occupancy = OccupancyResolver(workflow)
        self.settings = get_settings()

    # ------------------------------------------------------------------
    # Plan execution
    # ------------------------------------------------------------------

    def execute(self, plan: EditPlan) -> EditResult:
        """
        Run the steps of a plan in order

        Args:
            plan: Edit plan

        Returns:
            Applied result, or refused if a delete step was refused
        """
        logger.debug(f"Executing {plan.operation}: {plan.describe()}")

        for index, step in enumerate(plan.steps):
            try:
                ok = step.apply(self.repository, self.workflow)
            except Exception as e:
                logger.error(
                    f"{plan.operation} failed at step {index + 1}/{len(plan.steps)} "
                    f"({step.describe()}): {e}",
                    exc_info=True
                )
                raise

            if not ok:
                logger.warning(f"{plan.operation} refused at step {index + 1}: {step.describe()}")
                return refused(plan.operation, f"Refused: {step.describe()}")

        logger.info(f"{plan.operation} applied in workflow {self.workflow.id} ({len(plan.steps)} steps)")
        return applied(
            plan.operation,
            node_ids=plan.created_node_ids(),
            transition_ids=plan.created_transition_ids()
        )

    # ------------------------------------------------------------------
    # Node creation
    # ------------------------------------------------------------------

    def new_node(self, name: str, action: Optional[NodeAction] = None) -> Node:
        """
        Unsaved node owned by the acting tenant

        Action-specific mandatory links are filled with defaults.
        """
        node = Node(
            workflow_id=self.workflow.id,
            name=name,
            action=action,
            tenant_id=self.tenant_id,
            org_id=0
        )
        if self.tenant_id > self.settings.SYSTEM_TENANT_MAX_ID:
            node.entity_type = self.settings.DEFAULT_ENTITY_TYPE
        else:
            node.entity_type = self.settings.SYSTEM_ENTITY_TYPE

        self.apply_action_defaults(node)
        return node

    def apply_action_defaults(self, node: Node) -> None:
        """
        Fill the link an action requires with the first active candidate

        This only satisfies mandatory-field checks downstream.
        """
        if node.action is None:
            return

        if node.action == NodeAction.DOCUMENT_ACTION:
            node.doc_action = self.settings.DEFAULT_DOC_ACTION
            return

        if node.action == NodeAction.SET_VARIABLE:
            node.attribute_value = self.settings.DEFAULT_ATTRIBUTE_VALUE

        kind = ACTION_REQUIREMENTS.get(node.action)
        if kind is None:
            return

        exclude_id = self.workflow.id if kind == EntityKind.WORKFLOW else None
        entity_id = self.repository.find_first_active(kind, exclude_id=exclude_id)
        if entity_id is not None:
            setattr(node, ENTITY_FIELDS[kind], entity_id)
        else:
            logger.debug(f"No active {kind.value} to link to new {node.action.label} node")

    def create_node(self, name: Optional[str], action: Optional[NodeAction] = None) -> EditResult:
        """
        Create a node at the default position

        Args:
            name: Node name, required
            action: Optional action code
        """
        if not name:
            logger.warning("create_node skipped: no name given")
            return skipped("create_node", "Name is required")

        node = self.new_node(name, action)
        return self.execute(EditPlan("create_node").add(CreateNodeStep(node)))

    def clone_node(self, node_id: int) -> EditResult:
        """
        Copy a node one column to the right of the source

        The copy keeps description, owner, action and the window, process
        and form links. It gets a new name, id and position.
        """
        source = self.workflow.get_node(node_id)
        if source is None:
            logger.warning(f"clone_node skipped: node {node_id} not in workflow {self.workflow.id}")
            return skipped("clone_node", f"Node {node_id} not found")

        column, row = self.occupancy.next_free(source.column + 1, source.row)

        name = f"{source.name}{self.settings.COPY_SUFFIX}"
        clone = Node(
            workflow_id=self.workflow.id,
            name=name,
            description=source.description,
            action=source.action,
            column=column,
            row=row,
            tenant_id=source.tenant_id,
            org_id=source.org_id,
            entity_type=source.entity_type,
            window_id=source.window_id,
            process_id=source.process_id,
            form_id=source.form_id
        )
        return self.execute(EditPlan("clone_node").add(CreateNodeStep(clone)))

    def insert_node_on_transition(
        self,
        transition_id: int,
        name: Optional[str],
        action: Optional[NodeAction] = None
    ) -> EditResult:
        """
        Split a transition with a new node

        from -> to becomes from -> new -> to. The new node goes between
        the source and its successors, then down to the first free cell.
        """
        transition = self.workflow.get_transition(transition_id)
        if transition is None:
            logger.warning(f"insert_node skipped: transition {transition_id} not found")
            return skipped("insert_node", f"Transition {transition_id} not found")
        if not name:
            logger.warning("insert_node skipped: no name given")
            return skipped("insert_node", "Name is required")

        source = self.workflow.get_node(transition.from_node_id)
        target = self.workflow.get_node(transition.to_node_id)

        node = self.new_node(name, action)
        node.column, node.row = self.placement_between(source, shift=1)

        plan = EditPlan("insert_node")
        plan.add(CreateNodeStep(node))
        plan.add(CreateTransitionStep(source, node, self.tenant_id, self.org_id))
        plan.add(CreateTransitionStep(node, target, self.tenant_id, self.org_id))
        plan.add(DeleteTransitionStep(transition))
        return self.execute(plan)

    def insert_action_after_node(
        self,
        action: NodeAction,
        target_node_id: int,
        name: Optional[str] = None
    ) -> EditResult:
        """
        Put a new action node right after an existing node

        All outgoing transitions of the target move to the new node and
        the target is linked to the new node.
        """
        target = self.workflow.get_node(target_node_id)
        if target is None:
            logger.warning(f"insert_action skipped: node {target_node_id} not found")
            return skipped("insert_action", f"Node {target_node_id} not found")

        node = self.new_node(name or action.label, action)
        node.column, node.row = self.placement_between(target, shift=2)

        plan = EditPlan("insert_action")
        plan.add(CreateNodeStep(node))
        for transition in self.workflow.outgoing(target.id):
            successor = self.workflow.get_node(transition.to_node_id)
            plan.add(CreateTransitionStep(node, successor, self.tenant_id, self.org_id))
            plan.add(DeleteTransitionStep(transition))
        plan.add(CreateTransitionStep(target, node, self.tenant_id, self.org_id))
        return self.execute(plan)

    def insert_node_at_cell(
        self,
        action: Optional[NodeAction],
        column: Optional[int],
        row: Optional[int],
        name: Optional[str] = None
    ) -> EditResult:
        """
        Create a node directly at an empty grid cell (drop)
        """
        if action is None or column is None or row is None:
            logger.warning(f"insert_at_cell skipped: action={action}, column={column}, row={row}")
            return skipped("insert_at_cell", "Action and cell are required")
        if column < 0 or row < 0:
            return skipped("insert_at_cell", f"Cell ({column}, {row}) is outside the grid")
        if self.occupancy.is_occupied(column, row):
            logger.warning(f"insert_at_cell skipped: ({column}, {row}) is taken")
            return skipped("insert_at_cell", f"Cell ({column}, {row}) is taken")

        node = self.new_node(name or action.label, action)
        node.column = column
        node.row = row
        return self.execute(EditPlan("insert_at_cell").add(CreateNodeStep(node)))

    def placement_between(self, source: Node, shift: int) -> Tuple[int, int]:
        """
        Free cell between a node and the mean of its successors

        Without successors the node's cell shifted right by `shift`
        columns is used as the starting point.
        """
        successors = self.workflow.successors(source.id)
        if successors:
            mean_column = sum(s.column for s in successors) // len(successors)
            mean_row = sum(s.row for s in successors) // len(successors)
            column = (source.column + mean_column) // 2
            row = (source.row + mean_row) // 2
        else:
            column = source.column + shift
            row = source.row
        return self.occupancy.next_free(column, row)

    # ------------------------------------------------------------------
    # Node changes
    # ------------------------------------------------------------------

    def move_node(self, node_id: Optional[int], column: Optional[int], row: Optional[int]) -> EditResult:
        """
        Overwrite a node's position (drag and drop)

        Nodes owned by another tenant are left where they are.
        """
        if node_id is None or column is None or row is None:
            logger.warning(f"move_node skipped: missing attributes id={node_id}, column={column}, row={row}")
            return skipped("move_node", "Node and target cell are required")

        node = self.workflow.get_node(node_id)
        if node is None:
            logger.warning(f"move_node skipped: node {node_id} not found")
            return skipped("move_node", f"Node {node_id} not found")
        if column < 0 or row < 0:
            return skipped("move_node", f"Cell ({column}, {row}) is outside the grid")
        if node.tenant_id != self.tenant_id:
            logger.warning(
                f"move_node ignored: node {node_id} belongs to tenant {node.tenant_id}, "
                f"acting tenant is {self.tenant_id}"
            )
            return skipped("move_node", "Node belongs to another tenant")

        plan = EditPlan("move_node").add(UpdateNodeStep(node, {"column": column, "row": row}))
        return self.execute(plan)

    def update_node_properties(
        self,
        node_id: int,
        name: Optional[str],
        description: Optional[str] = None
    ) -> EditResult:
        """Rename a node and replace its description"""
        node = self.workflow.get_node(node_id)
        if node is None:
            return skipped("update_node", f"Node {node_id} not found")
        if not name:
            logger.warning(f"update_node skipped: empty name for node {node_id}")
            return skipped("update_node", "Name is required")

        changes = {"name": name, "description": description or ""}
        return self.execute(EditPlan("update_node").add(UpdateNodeStep(node, changes)))

    def delete_node(self, node_id: int) -> EditResult:
        """Delete a node and its transitions"""
        node = self.workflow.get_node(node_id)
        if node is None:
            return skipped("delete_node", f"Node {node_id} not found")

        result = self.execute(EditPlan("delete_node").add(DeleteNodeStep(node)))
        if not result.applied:
            result.message = f"DeleteError: node '{node.name}' could not be deleted"
        return result

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def add_transition(self, from_node_id: Optional[int], to_node_id: Optional[int]) -> EditResult:
        """
        Link two distinct nodes

        Duplicates are not checked here; the node menu only offers
        pairs that are not linked yet.
        """
        if from_node_id is None or to_node_id is None:
            return skipped("add_transition", "Both nodes are required")
        if from_node_id == to_node_id:
            logger.warning(f"add_transition skipped: self-loop on node {from_node_id}")
            return skipped("add_transition", "Nodes must be distinct")

        source = self.workflow.get_node(from_node_id)
        target = self.workflow.get_node(to_node_id)
        if source is None or target is None:
            return skipped("add_transition", f"Node {from_node_id} or {to_node_id} not found")

        step = CreateTransitionStep(source, target, self.tenant_id, self.org_id)
        return self.execute(EditPlan("add_transition").add(step))

    def delete_transition(self, transition_id: int) -> EditResult:
        transition = self.workflow.get_transition(transition_id)
        if transition is None:
            return skipped("delete_transition", f"Transition {transition_id} not found")

        return self.execute(EditPlan("delete_transition").add(DeleteTransitionStep(transition)))
