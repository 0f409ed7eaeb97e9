"""
Workflow Repository Contract
Operations the editor needs from whatever persists workflows
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from wfgrid.core.constants import EntityKind
from wfgrid.workflow.graph import Workflow, Node, Transition


class WorkflowRepository(ABC):
    """
    Persistence collaborator of the editor

    Saves are individually transactional. Errors other than a refused
    delete are raised and abort the edit in progress.
    """

    @abstractmethod
    def list_workflows(self, tenant_id: int) -> List[Tuple[int, str]]:
        """Active workflows visible to a tenant (its own and the system's), by name"""

    @abstractmethod
    def get_workflow(self, workflow_id: int, reread: bool = False) -> Workflow:
        """
        Load a workflow with its nodes and transitions

        Args:
            workflow_id: Workflow to load
            reread: Discard any cached copy and read from the source

        Raises:
            WorkflowNotFoundException: If the workflow does not exist
        """

    def reload_nodes(self, workflow_id: int) -> Workflow:
        """Force a fresh read of a workflow"""
        return self.get_workflow(workflow_id, reread=True)

    @abstractmethod
    def save_node(self, node: Node) -> Node:
        """Insert or update a node, assigning its id on insert"""

    @abstractmethod
    def delete_node(self, node: Node) -> bool:
        """Delete a node and its transitions; False when the delete is refused"""

    @abstractmethod
    def save_transition(self, transition: Transition) -> Transition:
        """Insert or update a transition, assigning its id on insert"""

    @abstractmethod
    def delete_transition(self, transition: Transition) -> bool:
        """Delete a transition; False when the delete is refused"""

    @abstractmethod
    def get_grid_columns(self, workflow_id: int) -> int:
        """Persisted grid width, 0 when none was stored"""

    @abstractmethod
    def set_grid_columns(self, workflow_id: int, columns: int) -> None:
        """Persist the grid width"""

    @abstractmethod
    def find_first_active(self, kind: EntityKind, exclude_id: Optional[int] = None) -> Optional[int]:
        """First active entity of a kind, used to fill mandatory node links"""
