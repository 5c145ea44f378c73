"""
FastAPI trigger endpoints for the sync jobs.

Each POST endpoint runs one job synchronously and returns its envelope:
200 with {success: true, count, data} or 500 with {success: false, error}.
"""

import logging
from typing import Callable, Dict

from fastapi import Depends, FastAPI, Security
from fastapi.responses import JSONResponse

from .auth import verify_api_key
from .cloud_logging import get_cloud_logging_client
from .config import Settings, configure_logging, get_settings
from .firecrawl_client import FirecrawlClient
from .jobs import JOBS, run_sync_job
from .persistence import DirectoryStore

logger = logging.getLogger(__name__)
configure_logging(get_settings())

app = FastAPI(
    title="Directory Sync API",
    description="Trigger endpoints for company and event ingestion",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

_stores: Dict[str, DirectoryStore] = {}


def get_store(settings: Settings = Depends(get_settings)) -> DirectoryStore:
    """Shared store for the configured DATABASE_URL."""
    if settings.database_url not in _stores:
        _stores[settings.database_url] = DirectoryStore.from_url(settings.database_url)
    return _stores[settings.database_url]


def get_client_factory() -> Callable[..., FirecrawlClient]:
    return FirecrawlClient


def _run(job_name: str, settings: Settings, store: DirectoryStore, client_factory) -> JSONResponse:
    envelope = run_sync_job(
        JOBS[job_name],
        settings=settings,
        store=store,
        client_factory=client_factory,
        cloud_logger=get_cloud_logging_client(),
    )
    return JSONResponse(content=envelope, status_code=200 if envelope["success"] else 500)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/scrape/companies")
def scrape_companies(
    settings: Settings = Depends(get_settings),
    store: DirectoryStore = Depends(get_store),
    client_factory=Depends(get_client_factory),
    api_key: str = Security(verify_api_key),
):
    return _run("scrape_companies", settings, store, client_factory)


@app.post("/api/extract/companies")
def extract_companies(
    settings: Settings = Depends(get_settings),
    store: DirectoryStore = Depends(get_store),
    client_factory=Depends(get_client_factory),
    api_key: str = Security(verify_api_key),
):
    return _run("extract_companies", settings, store, client_factory)


@app.post("/api/extract/events")
def extract_events(
    settings: Settings = Depends(get_settings),
    store: DirectoryStore = Depends(get_store),
    client_factory=Depends(get_client_factory),
    api_key: str = Security(verify_api_key),
):
    return _run("extract_events", settings, store, client_factory)
