import os

import pytest


_TABLES = [
    "subscriptions",
]


def _truncate_all():
    from core.db.base import get_conn

    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        "TRUNCATE " + ", ".join(_TABLES) + " RESTART IDENTITY CASCADE"
    )
    conn.commit()
    conn.close()


@pytest.fixture
def db():
    """Clean Postgres schema; skipped when DATABASE_URL is not configured."""
    if not os.getenv("DATABASE_URL"):
        pytest.skip("DATABASE_URL must be set for Postgres-backed tests.")

    from core.db.schema import init_db

    init_db()
    _truncate_all()
    yield
    _truncate_all()


@pytest.fixture(autouse=True)
def _dev_email_mode(monkeypatch):
    """Never hit the real email provider from tests unless a test opts in."""
    monkeypatch.setenv("EMAIL_MODE", "dev")
