"""
Workflow grid editing module.
Layout, structural edits, node menus and the visible grid.
"""
from .layout import GridLayoutEngine
from .graph_editor import GraphEditor, EditPlan
from .node_menu import MenuItem, build_node_menu
from .grid_view import GridView, build_grid_view

__all__ = [
    "GridLayoutEngine",
    "GraphEditor",
    "EditPlan",
    "MenuItem",
    "build_node_menu",
    "GridView",
    "build_grid_view",
]
