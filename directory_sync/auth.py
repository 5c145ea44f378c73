"""
API key authentication for the sync trigger endpoints.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Security
from fastapi.security import APIKeyHeader

from .config import Settings, get_settings

# API Key header name
API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def verify_api_key(
    api_key: Optional[str] = Security(API_KEY_HEADER),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Verify API key from request header.

    Args:
        api_key: API key from X-API-Key header
        settings: Runtime settings holding the expected SYNC_API_KEY

    Returns:
        The verified API key

    Raises:
        HTTPException: If API key is missing or invalid
    """
    expected_key = settings.sync_api_key

    # If no API key is configured, allow all requests (development mode)
    if expected_key is None:
        return "dev-mode"

    if api_key is None:
        raise HTTPException(
            status_code=401,
            detail="Missing API key. Please provide X-API-Key header."
        )

    if api_key != expected_key:
        raise HTTPException(
            status_code=403,
            detail="Invalid API key."
        )

    return api_key
