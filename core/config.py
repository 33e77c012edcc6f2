"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from typing import Optional, List, Dict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Database (credentials come from the environment, never from code)
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/csv_catalog"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Ingestion
    INGEST_BATCH_SIZE: int = 100
    HTTP_TIMEOUT_SECONDS: float = 30.0
    PREVIEW_LIMIT: int = 10

    # Sources registered by POST /initialize, e.g.
    # SEED_SOURCES='[{"name": "Hours", "url": "https://example.com/hours.csv"}]'
    SEED_SOURCES: List[Dict[str, Optional[str]]] = []

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
