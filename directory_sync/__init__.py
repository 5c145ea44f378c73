"""
Directory Sync: ingestion pipeline for the regional business and event directory.
"""

from .exceptions import (
    ConfigurationError,
    DirectorySyncError,
    ExtractionError,
    SchemaValidationError,
)
from .jobs import (
    extract_and_sync_companies,
    extract_and_sync_events,
    run_sync_job,
    scrape_and_sync_companies,
)
from .sync import SyncResult, sync_companies, sync_events

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ConfigurationError",
    "DirectorySyncError",
    "ExtractionError",
    "SchemaValidationError",
    # Jobs
    "extract_and_sync_companies",
    "extract_and_sync_events",
    "run_sync_job",
    "scrape_and_sync_companies",
    # Sync engine
    "SyncResult",
    "sync_companies",
    "sync_events",
]
