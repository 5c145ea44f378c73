"""
Sync jobs: extraction + validation + upsert, one function per pipeline.

- scrape_and_sync_companies: single-page scrape of the Built In listing
- extract_and_sync_companies: multi-URL company extraction
- extract_and_sync_events: multi-URL tech event extraction

run_sync_job wraps a job for the trigger surfaces (HTTP, Cloud Functions,
CLI) and turns every outcome into a JSON envelope.
"""

import logging
import traceback
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from .cloud_logging import CloudLoggingClient
from .config import Settings
from .firecrawl_client import FirecrawlClient
from .models import (
    ExtractCompaniesPayload,
    ExtractEventsPayload,
    ScrapeCompaniesPayload,
    extraction_schema,
    validate_payload,
)
from .persistence import DirectoryStore, SourceType
from .sync import SyncResult, sync_companies, sync_events

logger = logging.getLogger(__name__)

SyncJob = Callable[[FirecrawlClient, DirectoryStore], SyncResult]

# ============================================================================
# Sources and prompts
# ============================================================================

BUILTIN_SCRAPE_URL = (
    "https://builtin.com/companies/type/app-development-companies/artificial-intelligence-companies/"
    "big-data-analytics-companies/biotech-companies/blockchain-companies/cloud-companies/"
    "computer-vision-companies/cryptocurrency-companies/cybersecurity-companies/database-companies/"
    "design-companies/edtech-companies/fintech-companies/gaming-companies/greentech-companies/"
    "healthtech-companies/information-technology-companies/iot-companies/legal-tech-companies/"
    "software-companies/virtual-reality-companies/web3-companies"
    "?city=Charleston&state=South+Carolina&country=USA"
)

COMPANY_SCRAPE_PROMPT = (
    "Extract all the companies listed on the page. For each company, provide its name, a brief "
    "description, website URL, a list of industries it belongs to, size (e.g., employee count.), "
    "the year it was founded, the street address, the city where the company is located, the state "
    "where the company is located, and the URL for the logo."
)

COMPANY_EXTRACT_URLS = [
    "https://builtin.com/companies?city=Charleston&state=South+Carolina&country=USA/*",
    "https://goodfirms.co/directory/city/top-software-development-companies/charleston/*",
    "https://biopharmguy.com/links/state-sc-all-geo.php/*",
]

COMPANY_EXTRACT_PROMPT = (
    "Extract tech company information from these webpages. For industry: give me all the industries "
    "that the company belongs to in an array of strings. For size: convert employee ranges like "
    "\"50-100\" to middle value (75). If there is only one value then just use that value. For founded: "
    "extract year only as number. Use Charleston, South Carolina as location defaults if not specified"
)

EVENT_EXTRACT_URLS = [
    "https://www.meetup.com/find/?keywords=tech&location=us--sc--Charleston&source=EVENTS/*",
    "https://cybersc.us/events/*",
    "https://allevents.in/charleston/it/*",
]

EVENT_EXTRACT_PROMPT = (
    "Extract tech event information from these webpages. Try your best to get the address information "
    "for the event. For industry: give me all the industries that this event belongs to in an array of "
    "strings (tech, ai, cyber, innovation, networking, etc). For startDate and endDate: convert to ISO "
    "date format. For isVirtual: true if online/virtual event, false if in-person. Extract organizer "
    "name and website if available. Use Charleston, SC as location defaults if not specified"
)


# ============================================================================
# Jobs
# ============================================================================

def scrape_and_sync_companies(client: FirecrawlClient, store: DirectoryStore) -> SyncResult:
    """Scrape the Built In company listing and upsert every company found."""
    raw = client.scrape(
        BUILTIN_SCRAPE_URL,
        prompt=COMPANY_SCRAPE_PROMPT,
        schema=extraction_schema(ScrapeCompaniesPayload),
    )
    payload = validate_payload(ScrapeCompaniesPayload, raw)
    logger.info(f"Found {len(payload.companies)} companies")

    return sync_companies(
        payload.companies,
        store,
        source_type=SourceType.SCRAPED,
        source_url=BUILTIN_SCRAPE_URL,
        verify_new=True,
    )


def extract_and_sync_companies(client: FirecrawlClient, store: DirectoryStore) -> SyncResult:
    """Extract companies from the directory sites and upsert them by name."""
    raw = client.extract(
        COMPANY_EXTRACT_URLS,
        prompt=COMPANY_EXTRACT_PROMPT,
        schema=extraction_schema(ExtractCompaniesPayload),
    )
    payload = validate_payload(ExtractCompaniesPayload, raw)

    if not payload.companies:
        logger.info("No companies found in the extracted data")
        return SyncResult()

    logger.info(f"Extracted {len(payload.companies)} companies")
    return sync_companies(payload.companies, store, source_type=SourceType.EXTRACTED)


def extract_and_sync_events(client: FirecrawlClient, store: DirectoryStore) -> SyncResult:
    """Extract tech events from the event sites and create the new ones."""
    raw = client.extract(
        EVENT_EXTRACT_URLS,
        prompt=EVENT_EXTRACT_PROMPT,
        schema=extraction_schema(ExtractEventsPayload),
    )
    payload = validate_payload(ExtractEventsPayload, raw)

    if not payload.events:
        logger.info("No events found in the extracted data")
        return SyncResult()

    logger.info(f"Extracted {len(payload.events)} events")
    return sync_events(payload.events, store)


JOBS: Dict[str, SyncJob] = {
    "scrape_companies": scrape_and_sync_companies,
    "extract_companies": extract_and_sync_companies,
    "extract_events": extract_and_sync_events,
}


# ============================================================================
# Entry point wrapper
# ============================================================================

def _serialize(entity: Any) -> Any:
    if hasattr(entity, "model_dump"):
        return entity.model_dump(mode="json")
    return entity


def run_sync_job(
    job: SyncJob,
    settings: Settings,
    store: DirectoryStore,
    client_factory: Callable[..., FirecrawlClient] = FirecrawlClient,
    cloud_logger: Optional[CloudLoggingClient] = None,
) -> Dict[str, Any]:
    """
    Run one sync job and return its result envelope.

    The Firecrawl credential is checked before the client is built, so a
    missing key fails without any network call. No exception escapes.

    Returns:
        {"success": True, "count": int, "data": [...]} or
        {"success": False, "error": str}
    """
    job_name = getattr(job, "__name__", "sync_job")
    started_at = datetime.now()
    logger.info(f"Starting {job_name} job...")

    try:
        api_key = settings.require_firecrawl_api_key()
        client = client_factory(
            api_key=api_key,
            api_url=settings.firecrawl_api_url,
            request_timeout=settings.firecrawl_request_timeout,
            poll_interval=settings.firecrawl_poll_interval,
        )
        result = job(client, store)
        envelope = {
            "success": True,
            "count": result.count,
            "data": [_serialize(entity) for entity in result.data],
        }
        logger.info(f"{job_name} job finished successfully ({result.count} records)")
    except Exception as e:
        logger.error(f"{job_name} job failed: {e}")
        logger.error(traceback.format_exc())
        envelope = {"success": False, "error": str(e) or e.__class__.__name__}

    if cloud_logger is not None:
        cloud_logger.log_job_run(job_name, envelope, started_at=started_at)

    return envelope
