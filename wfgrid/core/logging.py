"""
Logging Configuration
"""
import logging
import sys
from pathlib import Path
from wfgrid.core.config import get_settings


def setup_logging():
    """Configure application-wide logging"""
    settings = get_settings()

    handlers = [logging.StreamHandler(sys.stdout)]

    if settings.LOG_TO_FILE:
        log_dir = Path(__file__).parent.parent.parent / "logs"
        log_dir.mkdir(exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / "wfgrid.log"))

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper()),
        format=settings.LOG_FORMAT,
        handlers=handlers
    )

    # Set level for external libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get logger for a specific module"""
    return logging.getLogger(name)
