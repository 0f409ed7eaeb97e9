"""
Editor Error Types
Structured outcomes for graph edits plus exceptions for fatal failures
"""
from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field

from wfgrid.core.constants import EditStatus


# ============================================================================
# EDIT RESULT
# ============================================================================

@dataclass
class EditResult:
    """
    Outcome of an edit

    Skips and refusals are expected outcomes and travel as data.
    Anything else is raised as an EditorException.
    """
    status: EditStatus
    operation: str
    message: str = ""
    node_ids: List[int] = field(default_factory=list)
    transition_ids: List[int] = field(default_factory=list)

    @property
    def applied(self) -> bool:
        return self.status == EditStatus.APPLIED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response"""
        return {
            "status": self.status.value,
            "operation": self.operation,
            "message": self.message,
            "node_ids": list(self.node_ids),
            "transition_ids": list(self.transition_ids)
        }


def applied(operation: str, message: str = "", node_ids=None, transition_ids=None) -> EditResult:
    """Build an applied result"""
    return EditResult(
        status=EditStatus.APPLIED,
        operation=operation,
        message=message,
        node_ids=list(node_ids or []),
        transition_ids=list(transition_ids or [])
    )


def skipped(operation: str, message: str) -> EditResult:
    """Build a skipped result"""
    return EditResult(status=EditStatus.SKIPPED, operation=operation, message=message)


def refused(operation: str, message: str) -> EditResult:
    """Build a refused result"""
    return EditResult(status=EditStatus.REFUSED, operation=operation, message=message)


# ============================================================================
# EXCEPTION TYPES (for fatal failures)
# ============================================================================

class EditorException(Exception):
    """
    Base exception for fatal editor failures

    Expected outcomes (skips, refused deletes) use EditResult instead.
    """
    pass


class WorkflowNotFoundException(EditorException):
    """Workflow does not exist in the repository"""

    def __init__(self, workflow_id: int):
        self.workflow_id = workflow_id
        super().__init__(f"Workflow not found: {workflow_id}")


class NodeNotFoundException(EditorException):
    """Node does not exist in the loaded workflow"""

    def __init__(self, node_id: Optional[int]):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")


class NoWorkflowSelectedException(EditorException):
    """An edit was requested before any workflow was selected"""
    pass


class PersistenceException(EditorException):
    """Repository failed to write or read"""
    pass
