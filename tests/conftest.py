"""
Shared fixtures: in-memory store, fake Firecrawl client, payload builders.
"""

from typing import Any, Dict, List, Optional

import pytest

from directory_sync.config import Settings
from directory_sync.persistence import DirectoryStore, create_db_engine, init_db


class FakeFirecrawlClient:
    """Stands in for FirecrawlClient; records calls and returns canned data."""

    def __init__(
        self,
        scrape_result: Optional[Dict[str, Any]] = None,
        extract_result: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None,
    ):
        self.scrape_result = scrape_result
        self.extract_result = extract_result
        self.error = error
        self.scrape_calls: List[Dict[str, Any]] = []
        self.extract_calls: List[Dict[str, Any]] = []

    def scrape(self, url, prompt, schema):
        self.scrape_calls.append({"url": url, "prompt": prompt, "schema": schema})
        if self.error:
            raise self.error
        return self.scrape_result

    def extract(self, urls, prompt, schema):
        self.extract_calls.append({"urls": urls, "prompt": prompt, "schema": schema})
        if self.error:
            raise self.error
        return self.extract_result


def make_company(**overrides) -> Dict[str, Any]:
    company = {
        "name": "Blue Harbor Software",
        "description": "Custom software for logistics teams.",
        "website": "https://blueharbor.example.com",
        "industry": ["Software", "Logistics"],
        "size": 75,
        "founded": 2014,
        "address": "145 King St",
        "city": "Charleston",
        "state": "South Carolina",
        "logoUrl": "https://blueharbor.example.com/logo.png",
    }
    company.update(overrides)
    return company


def make_event(**overrides) -> Dict[str, Any]:
    event = {
        "title": "Charleston AI Meetup",
        "description": "Monthly talks on applied machine learning.",
        "startDate": "2025-03-12T18:00:00Z",
        "endDate": "2025-03-12T20:00:00Z",
        "venue": "The Harbor Entrepreneur Center",
        "address": "4000 Faber Place Dr",
        "isVirtual": False,
        "eventUrl": "https://www.meetup.com/charleston-ai/events/1",
        "industry": ["ai", "tech"],
        "organizerName": "Charleston AI",
        "organizerWebsite": "https://charlestonai.example.org",
    }
    event.update(overrides)
    return event


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host configuration out of the tests."""
    for name in ("FIRECRAWL_API_KEY", "SYNC_API_KEY", "ENABLE_CLOUD_LOGGING", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def store():
    """Empty in-memory store."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield DirectoryStore(engine)
    engine.dispose()


@pytest.fixture
def settings():
    return Settings(firecrawl_api_key="fc-test-key", database_url="sqlite://")


@pytest.fixture
def fake_client():
    return FakeFirecrawlClient()


@pytest.fixture
def client_factory(fake_client):
    """client_factory for run_sync_job that always hands back fake_client."""
    return lambda **kwargs: fake_client
