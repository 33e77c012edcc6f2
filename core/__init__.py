"""
Core utilities and configuration for the CSV catalog.

Modules:
    config: Application configuration and environment variable management
    database: Async engine and session factory lifecycle
    storage: Table-oriented storage client used by the ingestion core
    exceptions: Exception hierarchy mapped to API error responses
    logging: Logging configuration

Usage:
    from core.config import settings
    from core.database import Database
    from core.storage import SQLAlchemyStorage
    from core.exceptions import FetchError, NotFoundError
    from core.logging import setup_logging

Example:
    setup_logging()

    database = Database.from_settings(settings)
    storage = SQLAlchemyStorage(database.session_maker)
    sources = await storage.select("data_sources", order_by="created_at")
"""

__all__ = [
    "settings",
    "Database",
    "StorageClient",
    "SQLAlchemyStorage",
    "setup_logging",
    # Exceptions
    "CatalogException",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "FetchError",
    "StorageError",
    "DeleteError",
]
