"""
Grid View
Describes the visible editor grid of a workflow for the UI host
"""
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

from wfgrid.workflow.graph import Workflow


@dataclass
class GridCell:
    """Single grid cell; node_id is None for an empty, droppable cell"""
    column: int
    row: int
    node_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"column": self.column, "row": self.row, "node_id": self.node_id}


@dataclass
class GridView:
    """
    Visible grid of a workflow

    One extra row is kept below the lowest node so new nodes can be
    dropped there. Nodes in columns beyond the grid width are listed in
    hidden_node_ids.
    """
    workflow_id: int
    columns: int
    rows: int
    cells: List[GridCell]
    hidden_node_ids: List[int]

    def cell(self, column: int, row: int) -> Optional[GridCell]:
        if 0 <= column < self.columns and 0 <= row < self.rows:
            return self.cells[row * self.columns + column]
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workflow_id": self.workflow_id,
            "columns": self.columns,
            "rows": self.rows,
            "cells": [c.to_dict() for c in self.cells],
            "hidden_node_ids": self.hidden_node_ids
        }


def build_grid_view(workflow: Workflow) -> GridView:
    """
    Build the visible grid for a workflow

    Args:
        workflow: Loaded workflow

    Returns:
        GridView sized grid_columns x (max row + 2)
    """
    columns = workflow.grid_columns
    rows = workflow.max_row() + 2 if len(workflow) else 1

    cells = []
    for row in range(rows):
        for column in range(columns):
            node = workflow.node_at(column, row)
            cells.append(GridCell(column, row, node.id if node else None))

    hidden = [node.id for node in workflow.nodes if node.column >= columns]

    return GridView(
        workflow_id=workflow.id,
        columns=columns,
        rows=rows,
        cells=cells,
        hidden_node_ids=hidden
    )
