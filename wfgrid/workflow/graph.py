"""
Workflow Graph Model
Arena-style representation of workflow nodes and transitions

Nodes and transitions are plain records indexed by id. Adjacency is
looked up through the outgoing index, never through object references.
"""
from typing import List, Dict, Any, Optional, Iterable, Tuple
from dataclasses import dataclass, field, fields, replace

from wfgrid.core.constants import NodeAction, GridLimits
from wfgrid.core.logging import get_logger

logger = get_logger(__name__)


# ============================================================================
# RECORDS
# ============================================================================

@dataclass
class Node:
    """
    Workflow node (a step with a grid position)

    Attributes:
        id: Assigned by the repository on first save, immutable afterwards
        workflow_id: Owning workflow
        name: Display name
        description: Free text
        action: Action code, None for a plain node
        column: Grid column (>= 0)
        row: Grid row (>= 0)
        tenant_id: Owning tenant
        org_id: Owning organization
        entity_type: Entity-type classification
    """
    workflow_id: int
    name: str
    id: Optional[int] = None
    description: str = ""
    action: Optional[NodeAction] = None
    column: int = 0
    row: int = 0
    tenant_id: int = 0
    org_id: int = 0
    entity_type: str = "U"

    # Action-specific links
    process_id: Optional[int] = None
    task_id: Optional[int] = None
    mail_template_id: Optional[int] = None
    column_id: Optional[int] = None
    subflow_id: Optional[int] = None
    form_id: Optional[int] = None
    window_id: Optional[int] = None
    info_window_id: Optional[int] = None
    doc_action: Optional[str] = None
    attribute_value: Optional[str] = None

    @property
    def position(self) -> Tuple[int, int]:
        return (self.column, self.row)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        result["action"] = self.action.value if self.action else None
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        """Build a node from a stored dictionary, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if values.get("action"):
            values["action"] = NodeAction(values["action"])
        else:
            values["action"] = None
        return cls(**values)

    def copy(self, **changes) -> "Node":
        return replace(self, **changes)


@dataclass
class Transition:
    """
    Directed edge from one node to another

    Attributes:
        id: Assigned by the repository on first save
        from_node_id: Source node
        to_node_id: Target node
        tenant_id: Owning tenant
        org_id: Owning organization
    """
    from_node_id: int
    to_node_id: int
    id: Optional[int] = None
    tenant_id: int = 0
    org_id: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "from_node_id": self.from_node_id,
            "to_node_id": self.to_node_id,
            "tenant_id": self.tenant_id,
            "org_id": self.org_id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transition":
        return cls(
            id=data.get("id"),
            from_node_id=data["from_node_id"],
            to_node_id=data["to_node_id"],
            tenant_id=data.get("tenant_id", 0),
            org_id=data.get("org_id", 0)
        )


# ============================================================================
# WORKFLOW AGGREGATE
# ============================================================================

@dataclass
class Workflow:
    """
    Workflow aggregate: start node, nodes, transitions and grid width

    Read access is public. The underscore methods are used only by the
    edit steps in wfgrid.visualization.graph_editor, which keep this
    arena in step with what they persist.

    Usage:
        wf = Workflow.from_records(1, "Assembly", nodes, transitions, start_node_id=10)

        for node in wf.nodes:
            for t in wf.outgoing(node.id):
                print(f"{node.name} -> {wf.get_node(t.to_node_id).name}")
    """
    id: int
    name: str
    start_node_id: Optional[int] = None
    grid_columns: int = GridLimits.DEFAULT_COLUMNS
    tenant_id: int = 0
    _nodes: Dict[int, Node] = field(default_factory=dict, repr=False)
    _transitions: Dict[int, Transition] = field(default_factory=dict, repr=False)
    _outgoing: Dict[int, List[int]] = field(default_factory=dict, repr=False)

    @classmethod
    def from_records(
        cls,
        workflow_id: int,
        name: str,
        nodes: Iterable[Node],
        transitions: Iterable[Transition],
        start_node_id: Optional[int] = None,
        grid_columns: int = GridLimits.DEFAULT_COLUMNS,
        tenant_id: int = 0
    ) -> "Workflow":
        """
        Build the arena from flat records

        Transitions whose ends are not both in the node set are dropped.
        A start node id that is not a member of the node set is cleared.
        """
        wf = cls(
            id=workflow_id,
            name=name,
            grid_columns=max(grid_columns, GridLimits.MIN_COLUMNS),
            tenant_id=tenant_id
        )
        for node in nodes:
            wf._attach_node(node)

        for transition in transitions:
            if transition.from_node_id in wf._nodes and transition.to_node_id in wf._nodes:
                wf._attach_transition(transition)
            else:
                logger.warning(
                    f"Dropping transition {transition.id}: "
                    f"{transition.from_node_id} -> {transition.to_node_id} leaves workflow {workflow_id}"
                )

        if start_node_id is not None and start_node_id not in wf._nodes:
            logger.warning(f"Start node {start_node_id} is not part of workflow {workflow_id}")
            start_node_id = None
        wf.start_node_id = start_node_id

        return wf

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> List[Node]:
        """Nodes in repository order"""
        return list(self._nodes.values())

    @property
    def transitions(self) -> List[Transition]:
        return list(self._transitions.values())

    @property
    def start_node(self) -> Optional[Node]:
        if self.start_node_id is None:
            return None
        return self._nodes.get(self.start_node_id)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: int) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_transition(self, transition_id: int) -> Optional[Transition]:
        return self._transitions.get(transition_id)

    def node_at(self, column: int, row: int) -> Optional[Node]:
        """First node (in repository order) at the given cell"""
        for node in self._nodes.values():
            if node.column == column and node.row == row:
                return node
        return None

    def outgoing(self, node_id: int) -> List[Transition]:
        """Outgoing transitions of a node, in creation order"""
        return [self._transitions[t_id] for t_id in self._outgoing.get(node_id, [])]

    def incoming(self, node_id: int) -> List[Transition]:
        return [t for t in self._transitions.values() if t.to_node_id == node_id]

    def successors(self, node_id: int) -> List[Node]:
        """Target nodes of a node's outgoing transitions"""
        result = []
        for transition in self.outgoing(node_id):
            target = self._nodes.get(transition.to_node_id)
            if target is not None:
                result.append(target)
        return result

    def find_transitions(self, from_node_id: int, to_node_id: int) -> List[Transition]:
        return [t for t in self.outgoing(from_node_id) if t.to_node_id == to_node_id]

    def is_linked(self, first_id: int, second_id: int) -> bool:
        """True if a transition exists between the two nodes in either direction"""
        return bool(
            self.find_transitions(first_id, second_id)
            or self.find_transitions(second_id, first_id)
        )

    def max_row(self) -> int:
        return max((node.row for node in self._nodes.values()), default=0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "start_node_id": self.start_node_id,
            "grid_columns": self.grid_columns,
            "tenant_id": self.tenant_id,
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "transitions": [t.to_dict() for t in self._transitions.values()]
        }

    # ------------------------------------------------------------------
    # Arena maintenance (edit steps only)
    # ------------------------------------------------------------------

    def _attach_node(self, node: Node) -> None:
        self._nodes[node.id] = node
        self._outgoing.setdefault(node.id, [])

    def _detach_node(self, node_id: int) -> None:
        for transition in self.outgoing(node_id) + self.incoming(node_id):
            self._detach_transition(transition.id)
        self._nodes.pop(node_id, None)
        self._outgoing.pop(node_id, None)
        if self.start_node_id == node_id:
            self.start_node_id = None

    def _attach_transition(self, transition: Transition) -> None:
        self._transitions[transition.id] = transition
        self._outgoing.setdefault(transition.from_node_id, []).append(transition.id)

    def _detach_transition(self, transition_id: int) -> None:
        transition = self._transitions.pop(transition_id, None)
        if transition is None:
            return
        outgoing = self._outgoing.get(transition.from_node_id, [])
        if transition_id in outgoing:
            outgoing.remove(transition_id)
