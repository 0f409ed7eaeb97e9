"""
Service layer
"""
from wfgrid.services.edit_session import EditSession, get_edit_session

__all__ = ["EditSession", "get_edit_session"]
