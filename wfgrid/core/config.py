"""
Application Configuration
"""
from functools import lru_cache
from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application
    APP_NAME: str = "Workflow Grid Editor"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Storage
    STORAGE_BASE_PATH: Path = Path(__file__).parent.parent.parent / "storage"
    WORKFLOWS_PATH: Path = STORAGE_BASE_PATH / "workflows"

    # Grid
    DEFAULT_GRID_COLUMNS: int = 4

    # Acting tenant context
    TENANT_ID: int = 11
    ORG_ID: int = 0

    # Tenants with an id up to this value are system tenants
    SYSTEM_TENANT_MAX_ID: int = 11
    DEFAULT_ENTITY_TYPE: str = "U"
    SYSTEM_ENTITY_TYPE: str = "D"

    # Node defaults
    DEFAULT_DOC_ACTION: str = "CO"
    DEFAULT_ATTRIBUTE_VALUE: str = "Default"
    COPY_SUFFIX: str = " (Copy)"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_TO_FILE: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance
    Using lru_cache ensures settings are loaded once and reused
    """
    return Settings()
