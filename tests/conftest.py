"""
Shared fixtures: filesystem repository and workflow seeding helpers
"""
from typing import Dict, List, Optional, Tuple

import pytest

from wfgrid.core.constants import EntityKind
from wfgrid.storage.filesystem import FilesystemWorkflowRepository
from wfgrid.workflow.graph import Node, Transition, Workflow

TENANT = 1000
OTHER_TENANT = 2000


@pytest.fixture
def repository(tmp_path):
    """Empty filesystem repository in a temp directory"""
    return FilesystemWorkflowRepository(tmp_path / "workflows")


@pytest.fixture
def catalog(repository):
    """Catalog with one inactive and one active entity per kind"""
    for offset, kind in enumerate(EntityKind):
        if kind == EntityKind.WORKFLOW:
            continue
        base = 500 + offset * 10
        repository.register_entity(kind, base, active=False)
        repository.register_entity(kind, base + 1)
    return repository


@pytest.fixture
def seed(repository):
    """
    Create a workflow from compact descriptions

    Usage:
        wf, ids = seed(
            nodes={"A": (1, 1), "B": (3, 1)},
            edges=[("A", "B")],
            start="A"
        )
    """
    def _seed(
        nodes: Dict[str, Tuple[int, int]],
        edges: List[Tuple[str, str]] = (),
        start: Optional[str] = None,
        tenant_id: int = TENANT,
        grid_columns: int = 0,
        owners: Optional[Dict[str, int]] = None
    ) -> Tuple[Workflow, Dict[str, int]]:
        owners = owners or {}
        workflow_id = repository.create_workflow("Assembly", tenant_id=tenant_id, grid_columns=grid_columns)

        ids = {}
        for name, (column, row) in nodes.items():
            node = repository.save_node(Node(
                workflow_id=workflow_id,
                name=name,
                column=column,
                row=row,
                tenant_id=owners.get(name, tenant_id)
            ))
            ids[name] = node.id

        for source, target in edges:
            t = repository.save_transition(Transition(
                from_node_id=ids[source],
                to_node_id=ids[target],
                tenant_id=tenant_id
            ))
            ids[f"{source}->{target}"] = t.id

        if start is not None:
            repository.set_start_node(workflow_id, ids[start])

        return repository.get_workflow(workflow_id, reread=True), ids

    return _seed


def make_workflow(
    names: List[str],
    edges: List[Tuple[str, str]] = (),
    start: Optional[str] = None,
    grid_columns: int = 4
) -> Tuple[Workflow, Dict[str, int]]:
    """In-memory workflow with ids 1..n in the given order, all at (0, 0)"""
    ids = {name: index + 1 for index, name in enumerate(names)}
    nodes = [Node(workflow_id=1, name=name, id=ids[name], tenant_id=TENANT) for name in names]
    transitions = [
        Transition(from_node_id=ids[a], to_node_id=ids[b], id=100 + i)
        for i, (a, b) in enumerate(edges)
    ]
    workflow = Workflow.from_records(
        1, "Test", nodes, transitions,
        start_node_id=ids.get(start) if start else None,
        grid_columns=grid_columns
    )
    return workflow, ids
