"""
Cloud Functions Entry Points for Directory Ingestion

This module contains the HTTP entry points for Cloud Functions:
- scrape_companies: Single-page scrape of the Built In company listing
- extract_companies: Multi-URL company extraction
- extract_events: Multi-URL tech event extraction

Each function runs one sync job and returns {success, count, data} (200)
or {success: false, error} (500).
"""

import logging
from typing import Optional

from flask import jsonify
from functions_framework import http

from directory_sync.cloud_logging import get_cloud_logging_client
from directory_sync.config import configure_logging, get_settings
from directory_sync.jobs import JOBS, run_sync_job
from directory_sync.persistence import DirectoryStore

logger = logging.getLogger(__name__)
configure_logging(get_settings())

_store: Optional[DirectoryStore] = None


def get_store(database_url: str) -> DirectoryStore:
    """Open the store once per function instance."""
    global _store
    if _store is None:
        _store = DirectoryStore.from_url(database_url)
    return _store


def run_job(request, job_name: str):
    """
    Run the named sync job for an HTTP request.

    Args:
        request: Flask request object
        job_name: Key in JOBS

    Returns:
        JSON response with the job envelope
    """
    if request.method != 'POST':
        return jsonify({'success': False, 'error': 'Only POST method allowed'}), 405

    settings = get_settings()
    if settings.sync_api_key:
        api_key = request.headers.get('X-API-Key')
        if not api_key:
            return jsonify({'success': False, 'error': 'Missing API key. Please provide X-API-Key header.'}), 401
        if api_key != settings.sync_api_key:
            return jsonify({'success': False, 'error': 'Invalid API key.'}), 403

    try:
        store = get_store(settings.database_url)
    except Exception as e:
        logger.error(f"Failed to open store: {e}", exc_info=True)
        return jsonify({'success': False, 'error': str(e)}), 500

    envelope = run_sync_job(
        JOBS[job_name],
        settings=settings,
        store=store,
        cloud_logger=get_cloud_logging_client(),
    )
    return jsonify(envelope), 200 if envelope['success'] else 500


@http
def scrape_companies(request):
    """Cloud Function: scrape and sync companies (manual or Cloud Scheduler)."""
    return run_job(request, 'scrape_companies')


@http
def extract_companies(request):
    """Cloud Function: extract and sync companies (manual or Cloud Scheduler)."""
    return run_job(request, 'extract_companies')


@http
def extract_events(request):
    """Cloud Function: extract and sync events (manual or Cloud Scheduler)."""
    return run_job(request, 'extract_events')
