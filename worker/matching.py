"""
Listing matching: which fetched listings are new and relevant for a subscription.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

log = logging.getLogger(__name__)

# criterion type -> listing field
CRITERION_FIELDS = {
    "company": "company",
    "location": "location",
    "keyword": "title",
}


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_posted_at(value) -> Optional[datetime]:
    """
    Parse a listing's datePosted into an aware datetime.

    Accepts datetime/date objects and ISO-8601 strings (bare dates and a trailing
    'Z' included). Naive values are taken as UTC. Returns None if unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None
    if raw.endswith("Z") or raw.endswith("z"):
        raw = raw[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(raw))
    except ValueError:
        return None


def criterion_matches(listing: Dict, criterion: Dict) -> bool:
    """
    Case-insensitive substring check of one criterion against its target field.
    Raises ValueError for a malformed criterion.
    """
    if not isinstance(criterion, dict):
        raise ValueError(f"Malformed criterion: {criterion!r}")

    field = CRITERION_FIELDS.get(criterion.get("type"))
    if field is None:
        raise ValueError(f"Unknown criterion type: {criterion.get('type')!r}")

    value = criterion.get("value")
    if not isinstance(value, str):
        raise ValueError(f"Criterion value must be a string: {value!r}")

    target = str(listing.get(field) or "").lower()
    return value.lower() in target


def listing_matches(listing: Dict, criteria: Optional[List[Dict]]) -> bool:
    """True if ANY criterion matches. No criteria never matches."""
    if not criteria:
        return False
    return any(criterion_matches(listing, c) for c in criteria)


def drop_undated_listings(listings: List[Dict]) -> List[Dict]:
    """Drop listings whose datePosted cannot be parsed, logging each one once."""
    kept: List[Dict] = []
    for listing in listings:
        if parse_posted_at(listing.get("datePosted")) is None:
            log.warning(
                "Skipping listing with unparseable datePosted",
                extra={"link": listing.get("link"), "datePosted": listing.get("datePosted")},
            )
            continue
        kept.append(listing)
    return kept


def find_matching_listings(subscription: Dict, listings: List[Dict]) -> List[Dict]:
    """
    Return listings posted strictly after the subscription's last_notified that
    satisfy at least one of its criteria, in input order.
    """
    criteria = subscription.get("criteria")
    if criteria is not None and not isinstance(criteria, list):
        raise ValueError("Subscription criteria must be a list")

    last_notified = subscription.get("last_notified")
    watermark = parse_posted_at(last_notified) if last_notified is not None else None
    if last_notified is not None and watermark is None:
        raise ValueError(f"Unparseable last_notified: {last_notified!r}")

    matches: List[Dict] = []
    for listing in listings:
        posted_at = parse_posted_at(listing.get("datePosted"))
        # Undated listings are reported once per run by drop_undated_listings.
        if posted_at is None:
            continue
        if watermark is not None and posted_at <= watermark:
            continue
        if listing_matches(listing, criteria):
            matches.append(listing)
    return matches


__all__ = [
    "CRITERION_FIELDS",
    "parse_posted_at",
    "criterion_matches",
    "listing_matches",
    "drop_undated_listings",
    "find_matching_listings",
]
