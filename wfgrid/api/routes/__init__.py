"""
External API Routes
Export all routers for main.py to include
"""
from wfgrid.api.routes import (
    health,
    editor
)

__all__ = [
    "health",
    "editor"
]
