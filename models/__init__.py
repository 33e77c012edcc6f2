"""
SQLAlchemy ORM models for the CSV catalog tables.

Models:
    base: Base declarative class and timestamp helper
    data_source: Registered CSV endpoints and their refresh metadata
    data_row: Parsed CSV records stored as JSON documents

Database Schema:
    data_sources (1) ──< data_rows (N), ON DELETE CASCADE

Usage:
    from models import DataSource, DataRow
"""

from models.base import Base
from models.data_source import DataSource
from models.data_row import DataRow

__all__ = [
    "Base",
    "DataSource",
    "DataRow",
]
