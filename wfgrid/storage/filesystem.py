"""
Filesystem Storage for Workflows
One JSON document per workflow plus a sequence and a catalog document
"""
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from wfgrid.core.config import get_settings
from wfgrid.core.constants import EntityKind
from wfgrid.core.errors import WorkflowNotFoundException, PersistenceException
from wfgrid.core.logging import get_logger
from wfgrid.storage.base import WorkflowRepository
from wfgrid.utils.json_utils import load_json, save_json_atomic
from wfgrid.workflow.graph import Workflow, Node, Transition

logger = get_logger(__name__)


class FilesystemWorkflowRepository(WorkflowRepository):
    """
    JSON-file implementation of the workflow repository

    Layout under base_path:
        {id}.workflow.json  workflow header, nodes and transitions
        sequence.json       last id issued per record type
        catalog.json        linkable entities by kind, with an active flag

    The start node of a workflow is referenced by the workflow header,
    so deleting it is refused.
    """

    def __init__(self, base_path: Optional[Path] = None):
        settings = get_settings()
        self.base_path = Path(base_path) if base_path else settings.WORKFLOWS_PATH
        self.base_path.mkdir(parents=True, exist_ok=True)

        self.sequence_path = self.base_path / "sequence.json"
        self.catalog_path = self.base_path / "catalog.json"
        self._cache: Dict[int, Workflow] = {}

        logger.info(f"Workflow storage initialized at: {self.base_path}")

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    def create_workflow(self, name: str, tenant_id: int = 0, grid_columns: int = 0) -> int:
        """
        Create an empty workflow

        Args:
            name: Workflow name
            tenant_id: Owning tenant (0 = system)
            grid_columns: Stored grid width, 0 to use the default

        Returns:
            New workflow id
        """
        workflow_id = self._next_id("workflow")
        self._write_document(workflow_id, {
            "id": workflow_id,
            "name": name,
            "tenant_id": tenant_id,
            "is_active": True,
            "start_node_id": None,
            "grid_columns": grid_columns,
            "nodes": [],
            "transitions": []
        })
        logger.info(f"Workflow created: {workflow_id} ({name})")
        return workflow_id

    def set_start_node(self, workflow_id: int, node_id: Optional[int]) -> None:
        doc = self._read_document(workflow_id)
        if node_id is not None and not any(n["id"] == node_id for n in doc["nodes"]):
            raise PersistenceException(f"Node {node_id} is not part of workflow {workflow_id}")
        doc["start_node_id"] = node_id
        self._write_document(workflow_id, doc)

    def list_workflows(self, tenant_id: int) -> List[Tuple[int, str]]:
        result = []
        for path in self.base_path.glob("*.workflow.json"):
            doc = load_json(path)
            if doc.get("is_active", True) and doc.get("tenant_id", 0) in (tenant_id, 0):
                result.append((doc["id"], doc["name"]))
        return sorted(result, key=lambda item: item[1])

    def get_workflow(self, workflow_id: int, reread: bool = False) -> Workflow:
        if not reread and workflow_id in self._cache:
            return self._cache[workflow_id]

        doc = self._read_document(workflow_id)
        workflow = Workflow.from_records(
            workflow_id=doc["id"],
            name=doc["name"],
            nodes=[Node.from_dict(n) for n in doc["nodes"]],
            transitions=[Transition.from_dict(t) for t in doc["transitions"]],
            start_node_id=doc.get("start_node_id"),
            grid_columns=doc.get("grid_columns") or get_settings().DEFAULT_GRID_COLUMNS,
            tenant_id=doc.get("tenant_id", 0)
        )
        self._cache[workflow_id] = workflow
        logger.debug(f"Loaded workflow {workflow_id}: {len(workflow)} nodes")
        return workflow

    def get_grid_columns(self, workflow_id: int) -> int:
        return self._read_document(workflow_id).get("grid_columns") or 0

    def set_grid_columns(self, workflow_id: int, columns: int) -> None:
        doc = self._read_document(workflow_id)
        doc["grid_columns"] = columns
        self._write_document(workflow_id, doc)
        logger.info(f"Grid columns of workflow {workflow_id} set to {columns}")

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def save_node(self, node: Node) -> Node:
        doc = self._read_document(node.workflow_id)

        if node.id is None:
            node.id = self._next_id("node")
            doc["nodes"].append(node.to_dict())
        else:
            for index, stored in enumerate(doc["nodes"]):
                if stored["id"] == node.id:
                    doc["nodes"][index] = node.to_dict()
                    break
            else:
                doc["nodes"].append(node.to_dict())

        self._write_document(node.workflow_id, doc)
        return node

    def delete_node(self, node: Node) -> bool:
        doc = self._read_document(node.workflow_id)

        if doc.get("start_node_id") == node.id:
            logger.warning(f"Refusing to delete node {node.id}: start node of workflow {node.workflow_id}")
            return False

        remaining = [n for n in doc["nodes"] if n["id"] != node.id]
        if len(remaining) == len(doc["nodes"]):
            logger.warning(f"Node {node.id} not found in workflow {node.workflow_id}")
            return False

        doc["nodes"] = remaining
        doc["transitions"] = [
            t for t in doc["transitions"]
            if t["from_node_id"] != node.id and t["to_node_id"] != node.id
        ]
        self._write_document(node.workflow_id, doc)
        return True

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def save_transition(self, transition: Transition) -> Transition:
        workflow_id = self._workflow_of_node(transition.from_node_id)
        doc = self._read_document(workflow_id)

        if not any(n["id"] == transition.to_node_id for n in doc["nodes"]):
            raise PersistenceException(
                f"Transition target {transition.to_node_id} is not part of workflow {workflow_id}"
            )

        if transition.id is None:
            transition.id = self._next_id("transition")
            doc["transitions"].append(transition.to_dict())
        else:
            for index, stored in enumerate(doc["transitions"]):
                if stored["id"] == transition.id:
                    doc["transitions"][index] = transition.to_dict()
                    break
            else:
                doc["transitions"].append(transition.to_dict())

        self._write_document(workflow_id, doc)
        return transition

    def delete_transition(self, transition: Transition) -> bool:
        try:
            workflow_id = self._workflow_of_node(transition.from_node_id)
        except PersistenceException:
            logger.warning(f"Transition {transition.id} has no owning workflow")
            return False

        doc = self._read_document(workflow_id)
        remaining = [t for t in doc["transitions"] if t["id"] != transition.id]
        if len(remaining) == len(doc["transitions"]):
            return False

        doc["transitions"] = remaining
        self._write_document(workflow_id, doc)
        return True

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def register_entity(self, kind: EntityKind, entity_id: int, active: bool = True) -> None:
        """Add a linkable entity to the catalog"""
        catalog = load_json(self.catalog_path, default={})
        catalog.setdefault(kind.value, []).append({"id": entity_id, "active": active})
        save_json_atomic(self.catalog_path, catalog)

    def find_first_active(self, kind: EntityKind, exclude_id: Optional[int] = None) -> Optional[int]:
        if kind == EntityKind.WORKFLOW:
            candidates = [
                {"id": doc["id"], "active": doc.get("is_active", True)}
                for doc in self._all_documents()
            ]
            candidates.sort(key=lambda c: c["id"])
        else:
            candidates = load_json(self.catalog_path, default={}).get(kind.value, [])

        for candidate in candidates:
            if candidate.get("active", True) and candidate["id"] != exclude_id:
                return candidate["id"]
        return None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _document_path(self, workflow_id: int) -> Path:
        return self.base_path / f"{workflow_id}.workflow.json"

    def _read_document(self, workflow_id: int) -> Dict[str, Any]:
        path = self._document_path(workflow_id)
        if not path.exists():
            raise WorkflowNotFoundException(workflow_id)
        return deepcopy(load_json(path))

    def _write_document(self, workflow_id: int, doc: Dict[str, Any]) -> None:
        try:
            save_json_atomic(self._document_path(workflow_id), doc)
        except OSError as e:
            raise PersistenceException(f"Failed to write workflow {workflow_id}: {e}") from e

    def _all_documents(self) -> List[Dict[str, Any]]:
        return [load_json(path) for path in self.base_path.glob("*.workflow.json")]

    def _workflow_of_node(self, node_id: int) -> int:
        for doc in self._all_documents():
            if any(n["id"] == node_id for n in doc["nodes"]):
                return doc["id"]
        raise PersistenceException(f"Node {node_id} does not belong to any workflow")

    def _next_id(self, record_type: str) -> int:
        sequence = load_json(self.sequence_path, default={})
        next_id = sequence.get(record_type, 99) + 1
        sequence[record_type] = next_id
        save_json_atomic(self.sequence_path, sequence)
        return next_id
