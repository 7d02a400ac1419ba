"""
Client for the internal job listings API.
"""
from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional

import httpx

LISTINGS_PATH = "/api/fetchJobs"

log = logging.getLogger(__name__)


class ListingsFetchError(RuntimeError):
    """The listings API could not be reached or returned an unusable body."""


def _listings_url(api_url: Optional[str]) -> str:
    base = (api_url or os.getenv("JOBS_API_URL") or "http://localhost:3000").rstrip("/")
    return f"{base}{LISTINGS_PATH}"


def fetch_listings(api_url: Optional[str] = None, timeout: Optional[float] = None) -> List[Dict]:
    """
    GET the current listings once and return the `listings` array.

    Raises ListingsFetchError on transport errors, non-2xx responses, or a body
    that is not `{"listings": [...]}`.
    """
    url = _listings_url(api_url)
    if timeout is None:
        timeout = float(os.getenv("LISTINGS_TIMEOUT", "20"))

    try:
        with httpx.Client(timeout=timeout, follow_redirects=True) as client:
            resp = client.get(url)
    except httpx.HTTPError as exc:
        raise ListingsFetchError(f"Failed to fetch jobs: {exc}") from exc

    if not resp.is_success:
        raise ListingsFetchError(f"Failed to fetch jobs: HTTP {resp.status_code}")

    try:
        payload = resp.json()
    except ValueError as exc:
        raise ListingsFetchError("Failed to fetch jobs: response is not JSON") from exc

    listings = payload.get("listings") if isinstance(payload, dict) else None
    if not isinstance(listings, list):
        raise ListingsFetchError("Failed to fetch jobs: response has no listings array")

    log.info("Fetched listings", extra={"url": url, "count": len(listings)})
    return listings
