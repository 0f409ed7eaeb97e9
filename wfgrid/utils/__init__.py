"""
Utilities Module
Shared utility functions for the application
"""
from wfgrid.utils.json_utils import (
    load_json,
    save_json,
    save_json_atomic
)

__all__ = [
    "load_json",
    "save_json",
    "save_json_atomic",
]
