"""
Occupancy Resolver
Answers whether a grid cell is taken and finds the next free cell below it
"""
from typing import Tuple

from wfgrid.workflow.graph import Workflow


class OccupancyResolver:
    """
    Cell occupancy over the current node set of a workflow

    The probe is a downward linear search: the row is incremented until
    a free cell is found and the column never changes. Nodes placed
    automatically in a crowded column therefore drift down that column.
    """

    def __init__(self, workflow: Workflow):
        self.workflow = workflow

    def is_occupied(self, column: int, row: int) -> bool:
        return self.workflow.node_at(column, row) is not None

    def next_free(self, column: int, row: int) -> Tuple[int, int]:
        """
        Find the first free cell at or below (column, row)

        Args:
            column: Starting column, kept as is
            row: Starting row

        Returns:
            (column, row) of the free cell
        """
        while self.is_occupied(column, row):
            row += 1
        return column, row
