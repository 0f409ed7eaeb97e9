"""
Workflow persistence
"""
from wfgrid.storage.base import WorkflowRepository
from wfgrid.storage.filesystem import FilesystemWorkflowRepository

__all__ = ["WorkflowRepository", "FilesystemWorkflowRepository"]
