"""
Workflow graph model
Nodes, transitions and grid occupancy
"""
from wfgrid.workflow.graph import Node, Transition, Workflow
from wfgrid.workflow.occupancy import OccupancyResolver

__all__ = ["Node", "Transition", "Workflow", "OccupancyResolver"]
