"""
Optional Google Cloud Logging sink for sync job summaries.

Enabled with ENABLE_CLOUD_LOGGING=true and PROJECT_ID; otherwise (or when
google-cloud-logging is missing) every call is a no-op.
"""

import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

try:
    from google.cloud import logging as cloud_logging
    CLOUD_LOGGING_AVAILABLE = True
except ImportError:
    CLOUD_LOGGING_AVAILABLE = False


class CloudLoggingClient:
    """Writes one structured entry per sync job run."""

    def __init__(self, log_name: str = "directory_sync_jobs"):
        self.log_name = log_name
        self.logger: Optional[Any] = None
        self.project_id = os.getenv("PROJECT_ID")

        if not CLOUD_LOGGING_AVAILABLE:
            logger.debug("google-cloud-logging not installed; job summaries stay local")
        elif os.getenv("ENABLE_CLOUD_LOGGING", "false").lower() != "true":
            logger.debug("ENABLE_CLOUD_LOGGING is not 'true'; job summaries stay local")
        elif not self.project_id:
            logger.warning("ENABLE_CLOUD_LOGGING is set but PROJECT_ID is missing")
        else:
            self._connect()

    @property
    def enabled(self) -> bool:
        return self.logger is not None

    def _connect(self) -> None:
        # Application Default Credentials
        try:
            self.logger = cloud_logging.Client(project=self.project_id).logger(self.log_name)
            logger.info(f"Job summaries go to Cloud Logging: {self.project_id}/{self.log_name}")
        except Exception as e:
            logger.error(f"Failed to initialize Cloud Logging: {e}")
            self.logger = None

    def log_job_run(
        self,
        job_name: str,
        envelope: Dict[str, Any],
        started_at: datetime,
        completed_at: Optional[datetime] = None,
    ) -> bool:
        """
        Log one sync job run.

        Args:
            job_name: Job identifier (e.g. 'extract_and_sync_events')
            envelope: The success/failure envelope returned to the caller
            started_at: When the run started
            completed_at: When the run finished (defaults to now)

        Returns:
            True if the entry was written
        """
        if not self.enabled:
            return False

        completed_at = completed_at or datetime.now()
        success = bool(envelope.get("success"))
        entry = {
            "job": job_name,
            "success": success,
            "count": envelope.get("count", 0),
            "error": envelope.get("error"),
            "started_at": started_at.isoformat(),
            "completed_at": completed_at.isoformat(),
            "duration_seconds": (completed_at - started_at).total_seconds(),
        }

        try:
            self.logger.log_struct(
                entry,
                severity="INFO" if success else "ERROR",
                labels={"component": "directory_sync", "job": job_name},
            )
            return True
        except Exception as e:
            logger.error(f"Failed to log job run to Cloud Logging: {e}")
            return False


_cloud_logging_client: Optional[CloudLoggingClient] = None


def get_cloud_logging_client() -> CloudLoggingClient:
    """Get or create the shared CloudLoggingClient."""
    global _cloud_logging_client
    if _cloud_logging_client is None:
        _cloud_logging_client = CloudLoggingClient()
    return _cloud_logging_client
