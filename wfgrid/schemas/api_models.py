"""
API Request/Response Models for the Workflow Grid Editor
"""
from typing import Dict, List, Optional, Any, Literal
from pydantic import BaseModel, Field

from wfgrid.core.constants import NodeAction


# ============================================================================
# WORKFLOW MODELS
# ============================================================================

class WorkflowSummary(BaseModel):
    """Entry of the workflow list"""
    id: int
    name: str


class WorkflowGraphResponse(BaseModel):
    """Loaded workflow with nodes, transitions and the visible grid"""
    workflow: Dict[str, Any]
    grid: Dict[str, Any]


class GridColumnsRequest(BaseModel):
    """Change the grid width; values below 1 fall back to the default"""
    columns: Optional[int] = None


# ============================================================================
# EDIT MODELS
# ============================================================================

class CreateNodeRequest(BaseModel):
    name: str = Field(..., min_length=1)
    action: Optional[NodeAction] = None


class InsertNodeRequest(BaseModel):
    """Split a transition with a new node"""
    transition_id: int
    name: str = Field(..., min_length=1)
    action: Optional[NodeAction] = None


class DropActionRequest(BaseModel):
    """Node action dropped on a node or an empty cell"""
    action: NodeAction
    column: Optional[int] = Field(default=None, ge=0)
    row: Optional[int] = Field(default=None, ge=0)
    target_node_id: Optional[int] = None
    name: Optional[str] = None


class MoveNodeRequest(BaseModel):
    column: int = Field(..., ge=0)
    row: int = Field(..., ge=0)


class UpdateNodeRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class AddTransitionRequest(BaseModel):
    from_node_id: int
    to_node_id: int


class MenuItemModel(BaseModel):
    """Entry of a node menu"""
    action: Literal["clone", "zoom", "properties", "delete_node", "add_line", "delete_line", "insert_node"]
    label: str
    node_id: int
    target_node_id: Optional[int] = None
    transition_id: Optional[int] = None


class ExecuteMenuItemRequest(BaseModel):
    item: MenuItemModel
    name: Optional[str] = None
    description: Optional[str] = None


class EditResultResponse(BaseModel):
    """Outcome of an edit"""
    status: Literal["applied", "skipped", "refused"]
    operation: str
    message: str = ""
    node_ids: List[int] = Field(default_factory=list)
    transition_ids: List[int] = Field(default_factory=list)


class NodeActionModel(BaseModel):
    """Selectable node action"""
    code: str
    label: str
