"""
Node Menu
Builds the list of actions offered for a selected node
"""
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

from wfgrid.core.constants import MenuAction
from wfgrid.workflow.graph import Workflow


@dataclass
class MenuItem:
    """
    One entry of a node's action menu

    Attributes:
        action: What the entry does
        label: Display text
        node_id: Node the menu was opened on
        target_node_id: Other end for ADD_LINE
        transition_id: Transition for DELETE_LINE and INSERT_NODE
    """
    action: MenuAction
    label: str
    node_id: int
    target_node_id: Optional[int] = None
    transition_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        result = {
            "action": self.action.value,
            "label": self.label,
            "node_id": self.node_id
        }
        if self.target_node_id is not None:
            result["target_node_id"] = self.target_node_id
        if self.transition_id is not None:
            result["transition_id"] = self.transition_id
        return result


def build_node_menu(workflow: Workflow, node_id: int, tenant_id: int) -> List[MenuItem]:
    """
    Menu entries for a node

    Order: copy, zoom, properties and delete (own tenant only), one "add line"
    per node that could be linked, then "delete line" and "insert" for
    each outgoing transition of the acting tenant.

    Args:
        workflow: Loaded workflow
        node_id: Selected node
        tenant_id: Acting tenant

    Returns:
        Menu entries, empty if the node is unknown
    """
    node = workflow.get_node(node_id)
    if node is None:
        return []

    items = [
        MenuItem(MenuAction.CLONE, "Copy", node.id),
        MenuItem(MenuAction.ZOOM, "Zoom", node.id),
    ]

    if node.tenant_id == tenant_id:
        items.append(MenuItem(MenuAction.PROPERTIES, "Properties", node.id))
        items.append(MenuItem(MenuAction.DELETE_NODE, f"Delete Node: {node.name}", node.id))

    for other in workflow.nodes:
        if other.id == node.id:
            continue
        # no line into the start node
        if other.id == workflow.start_node_id:
            continue
        if workflow.is_linked(node.id, other.id):
            continue
        items.append(MenuItem(
            MenuAction.ADD_LINE,
            f"Add Line: {node.name} -> {other.name}",
            node.id,
            target_node_id=other.id
        ))

    for transition in workflow.outgoing(node.id):
        if transition.tenant_id != tenant_id:
            continue
        target = workflow.get_node(transition.to_node_id)
        items.append(MenuItem(
            MenuAction.DELETE_LINE,
            f"Delete Line: {node.name} -> {target.name}",
            node.id,
            transition_id=transition.id
        ))
        items.append(MenuItem(
            MenuAction.INSERT_NODE,
            f"Insert Operation: {node.name} -> {target.name}",
            node.id,
            transition_id=transition.id
        ))

    return items
