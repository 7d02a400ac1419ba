"""
Schema bootstrap for Postgres.
"""
from __future__ import annotations

from core.db.base import get_conn


def init_db() -> None:
    """Create the subscriptions table if it doesn't exist."""
    conn = get_conn()
    cur = conn.cursor()

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS subscriptions(
            id SERIAL PRIMARY KEY,
            email TEXT NOT NULL,
            criteria JSONB NOT NULL DEFAULT '[]'::jsonb,
            last_notified TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
        """
    )

    conn.commit()
    conn.close()


__all__ = [
    "init_db",
]
