"""
Editor API Routes
Workflow selection, layout and structural edits for the grid editor UI
"""
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from wfgrid.core.constants import NodeAction, MenuAction
from wfgrid.core.errors import (
    EditResult,
    EditorException,
    WorkflowNotFoundException,
    NodeNotFoundException,
    NoWorkflowSelectedException
)
from wfgrid.core.logging import get_logger
from wfgrid.schemas.api_models import (
    WorkflowSummary,
    WorkflowGraphResponse,
    GridColumnsRequest,
    CreateNodeRequest,
    InsertNodeRequest,
    DropActionRequest,
    MoveNodeRequest,
    UpdateNodeRequest,
    AddTransitionRequest,
    MenuItemModel,
    ExecuteMenuItemRequest,
    EditResultResponse,
    NodeActionModel
)
from wfgrid.services.edit_session import EditSession, get_edit_session
from wfgrid.visualization.node_menu import MenuItem

logger = get_logger(__name__)

router = APIRouter(prefix="/editor", tags=["Editor"])


def _call(fn: Callable):
    """Run a session call, mapping editor exceptions to HTTP errors"""
    try:
        return fn()
    except (WorkflowNotFoundException, NodeNotFoundException) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NoWorkflowSelectedException as e:
        raise HTTPException(status_code=409, detail=str(e))
    except EditorException as e:
        logger.error(f"Edit failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Edit failed: {str(e)}")


def _edit(fn: Callable[[], EditResult]) -> EditResultResponse:
    return EditResultResponse(**_call(fn).to_dict())


def _graph(session: EditSession) -> WorkflowGraphResponse:
    return WorkflowGraphResponse(
        workflow=session.workflow.to_dict(),
        grid=session.grid_view().to_dict()
    )


# ============================================================================
# WORKFLOWS
# ============================================================================

@router.get("/actions", response_model=List[NodeActionModel])
async def list_node_actions() -> List[NodeActionModel]:
    """Node actions that can be dropped onto the grid"""
    return [NodeActionModel(code=a.value, label=a.label) for a in NodeAction]


@router.get("/workflows", response_model=List[WorkflowSummary])
async def list_workflows(session: EditSession = Depends(get_edit_session)) -> List[WorkflowSummary]:
    return [WorkflowSummary(id=i, name=n) for i, n in session.list_workflows()]


@router.post("/workflows/{workflow_id}/select", response_model=WorkflowGraphResponse)
async def select_workflow(
    workflow_id: int,
    session: EditSession = Depends(get_edit_session)
) -> WorkflowGraphResponse:
    """Load a workflow for editing"""
    _call(lambda: session.select_workflow(workflow_id))
    return _graph(session)


@router.get("/workflow", response_model=WorkflowGraphResponse)
async def current_workflow(session: EditSession = Depends(get_edit_session)) -> WorkflowGraphResponse:
    return _call(lambda: _graph(session))


@router.post("/refresh", response_model=WorkflowGraphResponse)
async def refresh(session: EditSession = Depends(get_edit_session)) -> WorkflowGraphResponse:
    _call(session.refresh)
    return _graph(session)


@router.post("/layout", response_model=EditResultResponse)
async def auto_layout(session: EditSession = Depends(get_edit_session)) -> EditResultResponse:
    return _edit(session.auto_layout)


@router.post("/zoom", response_model=EditResultResponse)
async def zoom(
    node_id: Optional[int] = None,
    session: EditSession = Depends(get_edit_session)
) -> EditResultResponse:
    """Open the selected workflow, or one of its nodes, in the host"""
    return _edit(lambda: session.zoom(node_id))


@router.put("/grid-columns", response_model=EditResultResponse)
async def set_grid_columns(
    request: GridColumnsRequest,
    session: EditSession = Depends(get_edit_session)
) -> EditResultResponse:
    return _edit(lambda: session.set_grid_columns(request.columns))


# ============================================================================
# NODES
# ============================================================================

@router.post("/nodes", response_model=EditResultResponse)
async def create_node(
    request: CreateNodeRequest,
    session: EditSession = Depends(get_edit_session)
) -> EditResultResponse:
    return _edit(lambda: session.create_node(request.name, request.action))


@router.post("/nodes/{node_id}/clone", response_model=EditResultResponse)
async def clone_node(node_id: int, session: EditSession = Depends(get_edit_session)) -> EditResultResponse:
    return _edit(lambda: session.clone_node(node_id))


@router.put("/nodes/{node_id}/position", response_model=EditResultResponse)
async def move_node(
    node_id: int,
    request: MoveNodeRequest,
    session: EditSession = Depends(get_edit_session)
) -> EditResultResponse:
    return _edit(lambda: session.move_node(node_id, request.column, request.row))


@router.put("/nodes/{node_id}", response_model=EditResultResponse)
async def update_node(
    node_id: int,
    request: UpdateNodeRequest,
    session: EditSession = Depends(get_edit_session)
) -> EditResultResponse:
    return _edit(lambda: session.update_node_properties(node_id, request.name, request.description))


@router.delete("/nodes/{node_id}", response_model=EditResultResponse)
async def delete_node(node_id: int, session: EditSession = Depends(get_edit_session)) -> EditResultResponse:
    return _edit(lambda: session.delete_node(node_id))


@router.get("/nodes/{node_id}/menu", response_model=List[MenuItemModel])
async def node_menu(node_id: int, session: EditSession = Depends(get_edit_session)) -> List[MenuItemModel]:
    items = _call(lambda: session.node_menu(node_id))
    return [MenuItemModel(**item.to_dict()) for item in items]


@router.post("/menu", response_model=EditResultResponse)
async def execute_menu_item(
    request: ExecuteMenuItemRequest,
    session: EditSession = Depends(get_edit_session)
) -> EditResultResponse:
    item = MenuItem(
        action=MenuAction(request.item.action),
        label=request.item.label,
        node_id=request.item.node_id,
        target_node_id=request.item.target_node_id,
        transition_id=request.item.transition_id
    )
    return _edit(lambda: session.execute_menu_item(item, request.name, request.description))


@router.post("/drop", response_model=EditResultResponse)
async def drop_action(
    request: DropActionRequest,
    session: EditSession = Depends(get_edit_session)
) -> EditResultResponse:
    """Node action dropped onto a node or an empty cell"""
    return _edit(lambda: session.drop_action(
        request.action,
        column=request.column,
        row=request.row,
        target_node_id=request.target_node_id,
        name=request.name
    ))


# ============================================================================
# TRANSITIONS
# ============================================================================

@router.post("/transitions", response_model=EditResultResponse)
async def add_transition(
    request: AddTransitionRequest,
    session: EditSession = Depends(get_edit_session)
) -> EditResultResponse:
    return _edit(lambda: session.add_transition(request.from_node_id, request.to_node_id))


@router.delete("/transitions/{transition_id}", response_model=EditResultResponse)
async def delete_transition(
    transition_id: int,
    session: EditSession = Depends(get_edit_session)
) -> EditResultResponse:
    return _edit(lambda: session.delete_transition(transition_id))


@router.post("/transitions/insert", response_model=EditResultResponse)
async def insert_node(
    request: InsertNodeRequest,
    session: EditSession = Depends(get_edit_session)
) -> EditResultResponse:
    """Split a transition with a new node"""
    return _edit(lambda: session.insert_node_on_transition(request.transition_id, request.name, request.action))
