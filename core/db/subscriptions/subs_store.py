"""
Subscription storage helpers (data-level only).

The alert run reads and updates subscriptions through the connection it already
holds, so those helpers take `conn` and never commit; the caller owns the
transaction.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Dict, List

from psycopg.types.json import Jsonb

from core.db.base import get_conn

log = logging.getLogger(__name__)


def parse_criteria(raw) -> List[Dict]:
    """
    Decode the persisted criteria column.

    JSONB comes back from psycopg already decoded; a TEXT column (or a value
    written by hand) is still a JSON string. NULL means no criteria.
    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)):
        raw = json.loads(raw)
    if not isinstance(raw, list):
        raise ValueError(f"criteria must be a JSON array, got {type(raw).__name__}")
    return list(raw)


def get_all_subscriptions(conn) -> List[Dict]:
    """Return every subscription as a dict with criteria decoded."""
    cur = conn.cursor()
    cur.execute(
        """
        SELECT id, email, criteria, last_notified, created_at
        FROM subscriptions
        ORDER BY id
        """
    )
    rows = cur.fetchall()

    subs: List[Dict] = []
    for row in rows:
        sub = dict(row)
        try:
            sub["criteria"] = parse_criteria(sub.get("criteria"))
        except ValueError as exc:
            # Left as-is; matching rejects it for this subscription only.
            log.warning(
                "Subscription has malformed criteria",
                extra={"subscription_id": sub.get("id"), "error": str(exc)},
            )
        subs.append(sub)
    return subs


def update_last_notified(conn, subscription_id: int, notified_at: datetime) -> None:
    """Advance the last-notified watermark for one subscription."""
    cur = conn.cursor()
    cur.execute(
        "UPDATE subscriptions SET last_notified = ? WHERE id = ?",
        (notified_at, subscription_id),
    )


def add_subscription(
    email: str,
    criteria: List[Dict],
    last_notified: datetime | None = None,
) -> int:
    """Insert a subscription and return its id."""
    email_normalized = (email or "").strip().lower()

    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        """
        INSERT INTO subscriptions (email, criteria, last_notified)
        VALUES (?, ?, ?)
        RETURNING id
        """,
        (email_normalized, Jsonb(list(criteria or [])), last_notified),
    )
    sub_id = int(cur.fetchone()["id"])
    conn.commit()
    conn.close()
    return sub_id


def get_subscription(sub_id: int) -> Dict | None:
    """Return a single subscription by id (None if missing)."""
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        "SELECT id, email, criteria, last_notified, created_at FROM subscriptions WHERE id = ?",
        (sub_id,),
    )
    row = cur.fetchone()
    conn.close()
    if not row:
        return None
    sub = dict(row)
    sub["criteria"] = parse_criteria(sub.get("criteria"))
    return sub


__all__ = [
    "parse_criteria",
    "get_all_subscriptions",
    "update_last_notified",
    "add_subscription",
    "get_subscription",
]
