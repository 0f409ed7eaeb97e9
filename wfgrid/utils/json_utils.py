"""
JSON Utilities
Helper functions for loading and saving JSON documents
"""
import json
from pathlib import Path
from typing import Any, Optional

from wfgrid.core.logging import get_logger

logger = get_logger(__name__)


def load_json(file_path: Path, default: Optional[Any] = None) -> Any:
    """
    Load JSON from file with error handling

    Args:
        file_path: Path to JSON file
        default: Default value if file doesn't exist or invalid

    Returns:
        Parsed JSON data or default

    Raises:
        FileNotFoundError: If file not found and no default provided
        json.JSONDecodeError: If JSON is invalid and no default provided
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.debug(f"Loaded JSON from: {file_path}")
        return data

    except FileNotFoundError:
        if default is not None:
            logger.debug(f"File not found: {file_path}, returning default")
            return default
        logger.error(f"File not found: {file_path}")
        raise

    except json.JSONDecodeError as e:
        if default is not None:
            logger.warning(f"Invalid JSON in {file_path}: {e}, returning default")
            return default
        logger.error(f"Invalid JSON in {file_path}: {e}")
        raise


def save_json(
    file_path: Path,
    data: Any,
    indent: int = 2,
    ensure_ascii: bool = False
) -> None:
    """
    Save data as JSON file with pretty printing

    Args:
        file_path: Path to save JSON file
        data: Data to save
        indent: Indentation spaces (default: 2)
        ensure_ascii: Escape non-ASCII characters (default: False)

    Raises:
        IOError: If unable to write file
    """
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii)

        logger.debug(f"Saved JSON to: {file_path}")

    except Exception as e:
        logger.error(f"Failed to save JSON to {file_path}: {e}", exc_info=True)
        raise


def save_json_atomic(
    file_path: Path,
    data: Any,
    indent: int = 2,
    ensure_ascii: bool = False
) -> None:
    """
    Save JSON atomically (temp file + rename)

    Args:
        file_path: Path to save JSON file
        data: Data to save
        indent: Indentation spaces
        ensure_ascii: Escape non-ASCII characters
    """
    temp_path = file_path.with_suffix('.tmp')

    try:
        save_json(temp_path, data, indent, ensure_ascii)
        temp_path.replace(file_path)
        logger.debug(f"Atomically saved JSON to: {file_path}")

    except Exception as e:
        if temp_path.exists():
            temp_path.unlink()

        logger.error(f"Failed to atomically save JSON to {file_path}: {e}", exc_info=True)
        raise
