"""
Runtime configuration for the sync jobs.

Values come from environment variables (a local .env file is loaded first).
Settings are read once per call to get_settings() and passed explicitly to
the jobs, so tests can build their own Settings without touching os.environ.
"""

import logging
import os
from typing import Optional

import dotenv
from pydantic import BaseModel, Field

from .exceptions import ConfigurationError

dotenv.load_dotenv()

# Location defaults for records that come back without one
DEFAULT_CITY = "Charleston"
DEFAULT_STATE = "South Carolina"
DEFAULT_EVENT_STATE = "SC"

DEFAULT_FIRECRAWL_API_URL = "https://api.firecrawl.dev"
DEFAULT_DATABASE_URL = "sqlite:///data/directory.db"


class Settings(BaseModel):
    """Configuration shared by every job entry point."""
    firecrawl_api_key: Optional[str] = Field(None, description="Firecrawl API credential")
    firecrawl_api_url: str = Field(DEFAULT_FIRECRAWL_API_URL, description="Firecrawl API base URL")
    firecrawl_request_timeout: float = Field(60.0, gt=0, description="Scrape request timeout (seconds)")
    firecrawl_poll_interval: float = Field(2.0, ge=0, description="Delay between extract status polls (seconds)")
    database_url: str = Field(DEFAULT_DATABASE_URL, description="SQLAlchemy database URL")
    sync_api_key: Optional[str] = Field(None, description="If set, HTTP triggers require X-API-Key")
    log_level: str = "INFO"

    def require_firecrawl_api_key(self) -> str:
        """Return the Firecrawl credential or raise ConfigurationError."""
        if not self.firecrawl_api_key or not self.firecrawl_api_key.strip():
            raise ConfigurationError("FIRECRAWL_API_KEY is not set in environment variables.")
        return self.firecrawl_api_key.strip()


def get_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        firecrawl_api_key=os.getenv("FIRECRAWL_API_KEY"),
        firecrawl_api_url=os.getenv("FIRECRAWL_API_URL", DEFAULT_FIRECRAWL_API_URL),
        firecrawl_request_timeout=float(os.getenv("FIRECRAWL_REQUEST_TIMEOUT", "60")),
        firecrawl_poll_interval=float(os.getenv("FIRECRAWL_POLL_INTERVAL", "2")),
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        sync_api_key=os.getenv("SYNC_API_KEY") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings, level: Optional[str] = None) -> None:
    """Configure root logging for a process entry point (API, Cloud Function, CLI)."""
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
