"""
Layout Algorithms
Auto-layout of workflow nodes onto the editor grid
"""
from collections import deque
from typing import Dict, List, Optional, Tuple

from wfgrid.workflow.graph import Workflow, Node
from wfgrid.core.constants import GridLimits
from wfgrid.core.logging import get_logger

logger = get_logger(__name__)


# ============================================================================
# LAYERED GRID LAYOUT
# ============================================================================

class GridLayoutEngine:
    """
    Layered layout from the workflow's start node

    Levels come from a breadth-first walk along outgoing transitions.
    Each level becomes a column and nodes within a level are stacked in
    rows, leaving an empty row and column between occupied cells for the
    transition lines.

    A target's level is only raised when it is not already deeper than
    the current node. On cyclic graphs back-edges can therefore leave
    levels that are not longest-path levels; this is kept as is.

    Usage:
        engine = GridLayoutEngine(grid_columns=4)
        positions = engine.layout(workflow)

        for node_id, (column, row) in positions.items():
            print(f"{node_id}: ({column}, {row})")
    """

    def __init__(self, grid_columns: int = GridLimits.DEFAULT_COLUMNS):
        if grid_columns < GridLimits.MIN_COLUMNS:
            grid_columns = GridLimits.DEFAULT_COLUMNS
        self.grid_columns = grid_columns

    def layout(self, workflow: Workflow) -> Dict[int, Tuple[int, int]]:
        """
        Assign grid positions to every node of the workflow

        Mutates node positions in place. The transition set is untouched.

        Args:
            workflow: Loaded workflow

        Returns:
            Mapping of node id to its new (column, row)
        """
        nodes = workflow.nodes
        if not nodes:
            return {}

        levels = self.compute_levels(workflow)

        positions = {}
        for level, level_nodes in sorted(_group_by_level(nodes, levels).items()):
            for index, node in enumerate(level_nodes):
                node.column = GridLimits.COLUMN_SPACING * level + 1
                node.row = GridLimits.ROW_SPACING * index + 1
                positions[node.id] = node.position

        hidden = self.overflow(workflow)
        if hidden:
            logger.warning(
                f"{len(hidden)} node(s) laid out beyond the {self.grid_columns} visible columns "
                f"of workflow {workflow.id}"
            )

        logger.info(f"Laid out {len(positions)} nodes in workflow {workflow.id}")
        return positions

    def compute_levels(self, workflow: Workflow) -> Dict[int, int]:
        """
        Breadth-first levels from the layout root

        Nodes not reachable from the root stay at level 0.

        Returns:
            Mapping of node id to level
        """
        levels = {node.id: 0 for node in workflow.nodes}
        root = self.find_root(workflow)
        if root is None:
            return levels

        queue = deque([root.id])
        visited = set()

        while queue:
            current_id = queue.popleft()
            if current_id in visited:
                continue
            visited.add(current_id)

            current_level = levels[current_id]
            for transition in workflow.outgoing(current_id):
                next_id = transition.to_node_id
                if next_id not in levels:
                    continue
                if levels[next_id] <= current_level:
                    levels[next_id] = current_level + 1
                    queue.append(next_id)

        return levels

    def find_root(self, workflow: Workflow) -> Optional[Node]:
        """Start node when known, otherwise the first node"""
        root = workflow.start_node
        if root is not None:
            return root

        nodes = workflow.nodes
        if not nodes:
            return None

        logger.debug(f"Workflow {workflow.id} has no start node, using {nodes[0].id} as root")
        return nodes[0]

    def overflow(self, workflow: Workflow) -> List[Node]:
        """Nodes whose column lies outside the visible grid"""
        return [node for node in workflow.nodes if node.column >= self.grid_columns]


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _group_by_level(nodes: List[Node], levels: Dict[int, int]) -> Dict[int, List[Node]]:
    """Group nodes by level, keeping repository order within a level"""
    grouped: Dict[int, List[Node]] = {}
    for node in nodes:
        grouped.setdefault(levels.get(node.id, 0), []).append(node)
    return grouped


def calculate_layout(workflow: Workflow, grid_columns: Optional[int] = None) -> Dict[int, Tuple[int, int]]:
    """
    Lay out a workflow using its own grid width

    Args:
        workflow: Loaded workflow
        grid_columns: Override for the workflow's grid width

    Returns:
        Mapping of node id to (column, row)
    """
    engine = GridLayoutEngine(grid_columns or workflow.grid_columns)
    return engine.layout(workflow)
