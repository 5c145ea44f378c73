"""
Error taxonomy for the ingestion pipeline.

Configuration, extraction and schema errors are fatal to a sync job.
Per-record persistence errors are handled inside the sync loop and never
surface here.
"""

from typing import Dict, List, Optional


class DirectorySyncError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(DirectorySyncError):
    """Raised when required configuration (e.g. FIRECRAWL_API_KEY) is missing."""


class ExtractionError(DirectorySyncError):
    """Raised when the extraction service call fails or reports failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SchemaValidationError(DirectorySyncError):
    """
    Raised when an extracted payload does not match the expected schema.

    Attributes:
        errors: One entry per violated field, as {"path": ..., "message": ...}
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []

    def __str__(self) -> str:
        if not self.errors:
            return super().__str__()
        paths = ", ".join(e["path"] for e in self.errors)
        return f"{super().__str__()} Invalid fields: {paths}"
