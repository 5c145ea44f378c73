"""
Tests for the sync jobs and the run_sync_job envelope wrapper.
"""

from unittest.mock import MagicMock

import pytest

from directory_sync.config import Settings
from directory_sync.exceptions import ExtractionError
from directory_sync.jobs import (
    BUILTIN_SCRAPE_URL,
    COMPANY_EXTRACT_URLS,
    EVENT_EXTRACT_URLS,
    JOBS,
    extract_and_sync_companies,
    extract_and_sync_events,
    run_sync_job,
    scrape_and_sync_companies,
)
from conftest import FakeFirecrawlClient, make_company, make_event


# ============================================================================
# Jobs
# ============================================================================

class TestJobs:

    def test_scrape_companies(self, store):
        client = FakeFirecrawlClient(scrape_result={"companies": [make_company(city="")]})

        result = scrape_and_sync_companies(client, store)

        assert result.count == 1
        assert client.scrape_calls[0]["url"] == BUILTIN_SCRAPE_URL
        assert "properties" in client.scrape_calls[0]["schema"]
        stored = store.get_company("Blue Harbor Software")
        assert stored.source_type == "scraped"
        assert stored.source_url == BUILTIN_SCRAPE_URL
        assert stored.is_verified is True
        assert stored.city == "Charleston"

    def test_extract_companies(self, store):
        client = FakeFirecrawlClient(extract_result={"Companies": [
            make_company(name="Palmetto Bio", industry=["Biotech"]),
            make_company(name="Tidewater Security", industry=["Cybersecurity"]),
        ]})

        result = extract_and_sync_companies(client, store)

        assert result.count == 2
        assert client.extract_calls[0]["urls"] == COMPANY_EXTRACT_URLS
        assert all(c.source_url is None for c in store.list_companies())

    def test_extract_companies_with_range_midpoint_size(self, store):
        client = FakeFirecrawlClient(extract_result={"Companies": [
            make_company(name="Palmetto Bio", size=17.5),
            make_company(name="Tidewater Security"),
            make_company(name="Harbor Robotics"),
        ]})

        result = extract_and_sync_companies(client, store)

        assert result.count == 3
        assert [c.name for c in store.list_companies()] == ["Harbor Robotics", "Palmetto Bio", "Tidewater Security"]
        assert store.get_company("Palmetto Bio").size == 18

    def test_extract_companies_empty(self, store):
        client = FakeFirecrawlClient(extract_result={})

        result = extract_and_sync_companies(client, store)

        assert result.count == 0
        assert result.data == []

    def test_extract_events(self, store):
        client = FakeFirecrawlClient(extract_result={"Events": [make_event()]})

        result = extract_and_sync_events(client, store)

        assert result.count == 1
        assert client.extract_calls[0]["urls"] == EVENT_EXTRACT_URLS
        assert store.list_events()[0].title == "Charleston AI Meetup"

    def test_job_registry(self):
        assert JOBS == {
            "scrape_companies": scrape_and_sync_companies,
            "extract_companies": extract_and_sync_companies,
            "extract_events": extract_and_sync_events,
        }


# ============================================================================
# run_sync_job
# ============================================================================

class TestRunSyncJob:

    def test_success_envelope(self, store, settings, fake_client, client_factory):
        fake_client.extract_result = {"Events": [make_event(), make_event(title="Cyber Breakfast")]}

        envelope = run_sync_job(extract_and_sync_events, settings, store, client_factory=client_factory)

        assert envelope["success"] is True
        assert envelope["count"] == 2
        assert [e["title"] for e in envelope["data"]] == ["Charleston AI Meetup", "Cyber Breakfast"]
        assert envelope["data"][0]["start_date"].startswith("2025-03-12T18:00:00")

    def test_client_built_from_settings(self, store):
        factory = MagicMock(return_value=FakeFirecrawlClient(extract_result={}))
        settings = Settings(
            firecrawl_api_key=" fc-key ",
            firecrawl_api_url="https://firecrawl.test",
            firecrawl_request_timeout=15,
            firecrawl_poll_interval=0.5,
        )

        run_sync_job(extract_and_sync_companies, settings, store, client_factory=factory)

        factory.assert_called_once_with(
            api_key="fc-key",
            api_url="https://firecrawl.test",
            request_timeout=15,
            poll_interval=0.5,
        )

    @pytest.mark.parametrize("api_key", [None, ""])
    @pytest.mark.parametrize("job", list(JOBS.values()))
    def test_missing_credential_makes_no_call(self, store, job, api_key):
        factory = MagicMock()

        envelope = run_sync_job(job, Settings(firecrawl_api_key=api_key), store, client_factory=factory)

        assert envelope["success"] is False
        assert "FIRECRAWL_API_KEY" in envelope["error"]
        factory.assert_not_called()

    def test_extraction_failure_writes_nothing(self, store, settings, fake_client, client_factory):
        fake_client.error = ExtractionError("Firecrawl API call failed: connection reset")

        envelope = run_sync_job(extract_and_sync_events, settings, store, client_factory=client_factory)

        assert envelope == {"success": False, "error": "Firecrawl API call failed: connection reset"}
        assert store.list_events() == []
        assert store.list_companies() == []

    def test_schema_failure_aborts_whole_batch(self, store, settings, fake_client, client_factory):
        fake_client.extract_result = {"Companies": [make_company(name="Valid Co"), {"description": "nameless"}]}

        envelope = run_sync_job(extract_and_sync_companies, settings, store, client_factory=client_factory)

        assert envelope["success"] is False
        assert "does not match" in envelope["error"]
        assert "1.name" in envelope["error"]
        assert store.list_companies() == []

    def test_unexpected_error_is_contained(self, store, settings):
        def exploding_job(client, store):
            raise KeyError("boom")

        envelope = run_sync_job(exploding_job, settings, store, client_factory=MagicMock())

        assert envelope["success"] is False
        assert envelope["error"]

    def test_reports_to_cloud_logger(self, store, settings, fake_client, client_factory):
        fake_client.extract_result = {"Events": []}
        cloud_logger = MagicMock()

        envelope = run_sync_job(
            extract_and_sync_events, settings, store,
            client_factory=client_factory, cloud_logger=cloud_logger,
        )

        cloud_logger.log_job_run.assert_called_once()
        args, kwargs = cloud_logger.log_job_run.call_args
        assert args == ("extract_and_sync_events", envelope)
        assert "started_at" in kwargs
