"""
Custom exceptions for the CSV catalog with structured error context.

Every terminal failure of a catalog operation is raised as a subclass of
CatalogException. Each exception carries a human-readable message, a
classification string and the HTTP status the API layer maps it to.

Exception Hierarchy:
    CatalogException (base)
    ├── ValidationError     (400, missing registration fields)
    ├── ConflictError       (409, duplicate data source URL)
    ├── NotFoundError       (404, unknown data source id)
    ├── FetchError          (400, remote CSV unreachable or non-success status)
    └── StorageError        (500, storage client failure)
        └── DeleteError     (500, purge or delete failed)

Batch insert failures during ingestion are NOT exceptions; they are
collected as BatchFailure values on the ingest result.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class CatalogException(Exception):
    """
    Base exception for all catalog errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (source id, url, etc.)
        original_exception: The original exception that was caught (if any)
    """

    status_code: int = 500
    classification: str = "internal_error"

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/responses."""
        return {
            "error_type": self.__class__.__name__,
            "classification": self.classification,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


class ValidationError(CatalogException):
    """
    Raised when a registration request is missing required fields.

    Context should include:
        - missing_fields: Names of the blank or absent fields
    """
    status_code = 400
    classification = "validation_error"


class ConflictError(CatalogException):
    """
    Raised when a data source with the same URL is already registered.

    Context should include:
        - url: The duplicate URL
        - existing_id: Id of the source that owns the URL
    """
    status_code = 409
    classification = "conflict"


class NotFoundError(CatalogException):
    """Raised when a data source id does not exist."""
    status_code = 404
    classification = "not_found"


class FetchError(CatalogException):
    """
    Raised when the remote CSV cannot be fetched.

    Context should include:
        - url: The CSV URL
        - status_code: HTTP status (None for transport failures)
        - status_text: HTTP reason phrase
    """
    status_code = 400
    classification = "fetch_error"

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
        http_status: Optional[int] = None,
        status_text: Optional[str] = None
    ):
        super().__init__(message, context, original_exception)
        self.http_status = http_status
        self.status_text = status_text
        self.context["status_code"] = http_status
        self.context["status_text"] = status_text


class StorageError(CatalogException):
    """
    Raised when the storage client fails.

    Context should include:
        - operation: SELECT, INSERT, UPDATE or DELETE
        - table_name: Name of the table
    """
    status_code = 500
    classification = "storage_error"


class DeleteError(StorageError):
    """Raised when purging rows or deleting a data source fails."""
    classification = "delete_error"
