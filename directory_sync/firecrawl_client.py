"""
Firecrawl client for the sync jobs.

Wraps the firecrawl-py SDK for the two calls the jobs need:
- scrape: structured JSON extraction from a single page
- extract: structured JSON extraction consolidated across several URLs

No retries, backoff or rate limiting: one best-effort call per job run.
SDK and transport failures are reported as ExtractionError.
"""

import logging
from typing import Any, Dict, List, Optional

from firecrawl import Firecrawl

from .exceptions import ConfigurationError, ExtractionError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.firecrawl.dev"

EXTRACT_FAILED_STATES = {"failed", "cancelled"}


class FirecrawlClient:
    """Scrape/extract calls against Firecrawl, with errors mapped to ExtractionError."""

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = DEFAULT_API_URL,
        request_timeout: float = 60.0,
        poll_interval: float = 2.0,
        app: Optional[Firecrawl] = None,
    ):
        if not api_key or not api_key.strip():
            raise ConfigurationError("FIRECRAWL_API_KEY is not set in environment variables.")

        self.request_timeout = request_timeout
        self.poll_interval = poll_interval
        self.app = app or Firecrawl(api_key=api_key.strip(), api_url=api_url.rstrip("/"))

    def scrape(self, url: str, prompt: str, schema: Dict[str, Any]) -> Dict[str, Any]:
        """
        Scrape one page and extract JSON matching schema.

        Raises:
            ExtractionError: If the call fails or no JSON was extracted
        """
        logger.info(f"Scraping URL: {url}")
        try:
            document = self.app.scrape(
                url,
                formats=[{"type": "json", "schema": schema, "prompt": prompt}],
                timeout=int(self.request_timeout * 1000),
            )
        except Exception as e:
            logger.error(f"Firecrawl scrape failed: {e}")
            raise ExtractionError(f"Firecrawl scrape failed for {url}: {e}") from e

        extracted = getattr(document, "json", None)
        if not extracted:
            raise ExtractionError(f"Failed to scrape or extract JSON data from {url}")
        return extracted

    def extract(self, urls: List[str], prompt: str, schema: Dict[str, Any]) -> Dict[str, Any]:
        """
        Extract structured data across several URLs.

        The SDK starts the extract job and waits for it to finish.

        Returns:
            The extracted data, or {} when nothing matched the schema

        Raises:
            ExtractionError: If the call fails or the job ends unsuccessfully
        """
        logger.info(f"Extracting from {len(urls)} URLs")
        try:
            response = self.app.extract(
                urls=urls,
                prompt=prompt,
                schema=schema,
                poll_interval=self.poll_interval,
            )
        except Exception as e:
            logger.error(f"Firecrawl API call failed: {e}")
            raise ExtractionError(f"Extract job failed. Error: {e}") from e

        status = getattr(response, "status", None)
        if not getattr(response, "success", False) or status in EXTRACT_FAILED_STATES:
            error = getattr(response, "error", None) or status or "no error message"
            logger.error(f"Firecrawl extract failed: {error}")
            raise ExtractionError(f"Failed to extract data from the provided URLs: {error}")

        return getattr(response, "data", None) or {}
