from datetime import datetime, timezone

import pytest

from core.db.base import get_conn
from core.db.subscriptions import subs_store
from worker import main as worker_main


def test_add_and_load_subscriptions(db):
    first = subs_store.add_subscription(" A@Example.com ", [{"type": "company", "value": "acme"}])
    second = subs_store.add_subscription("b@example.com", [])

    conn = get_conn()
    try:
        subs = subs_store.get_all_subscriptions(conn)
    finally:
        conn.close()

    assert [s["id"] for s in subs] == [first, second]
    assert subs[0]["email"] == "a@example.com"
    assert subs[0]["criteria"] == [{"type": "company", "value": "acme"}]
    assert subs[0]["last_notified"] is None
    assert subs[1]["criteria"] == []


def test_update_last_notified_commits_with_transaction(db):
    sub_id = subs_store.add_subscription("a@example.com", [{"type": "keyword", "value": "python"}])
    stamp = datetime(2024, 2, 1, 8, 0, tzinfo=timezone.utc)

    conn = get_conn()
    try:
        with conn.transaction():
            subs_store.update_last_notified(conn, sub_id, stamp)
    finally:
        conn.close()

    assert subs_store.get_subscription(sub_id)["last_notified"] == stamp


def test_process_alerts_end_to_end(db, monkeypatch):
    watermark = datetime(2024, 1, 1, tzinfo=timezone.utc)
    run_start = datetime(2024, 2, 1, tzinfo=timezone.utc)
    hit = subs_store.add_subscription("hit@example.com", [{"type": "company", "value": "acme"}], watermark)
    miss = subs_store.add_subscription("miss@example.com", [{"type": "company", "value": "globex"}], watermark)

    sent = []
    monkeypatch.setattr(
        worker_main,
        "fetch_listings",
        lambda: [
            {"title": "Engineer", "company": "Acme Corp", "location": "Remote", "link": "https://x/1", "datePosted": "2024-01-02"},
            {"title": "Engineer", "company": "Acme Corp", "location": "Remote", "link": "https://x/2", "datePosted": "2023-12-31"},
        ],
    )
    monkeypatch.setattr(worker_main, "send_html_email", lambda to, subject, html: sent.append(to) or True)

    results = worker_main.process_alerts(now=run_start)

    assert results == [{"email": "hit@example.com", "matchedListings": 1, "success": True}]
    assert sent == ["hit@example.com"]
    assert subs_store.get_subscription(hit)["last_notified"] == run_start
    assert subs_store.get_subscription(miss)["last_notified"] == watermark


def test_parse_criteria_accepts_json_text():
    assert subs_store.parse_criteria('[{"type": "location", "value": "remote"}]') == [
        {"type": "location", "value": "remote"}
    ]
    assert subs_store.parse_criteria(None) == []


def test_parse_criteria_rejects_non_list():
    with pytest.raises(ValueError):
        subs_store.parse_criteria('{"type": "company"}')


class _RowsConn:
    """Connection stand-in whose cursor returns canned rows."""

    def __init__(self, rows):
        self._rows = rows

    def cursor(self):
        rows = self._rows

        class _Cursor:
            def execute(self, sql, params=None):
                return None

            def fetchall(self):
                return rows

        return _Cursor()


def test_malformed_criteria_warned_at_load(caplog):
    rows = [
        {"id": 7, "email": "bad@example.com", "criteria": "not json", "last_notified": None, "created_at": None},
        {"id": 8, "email": "ok@example.com", "criteria": [], "last_notified": None, "created_at": None},
    ]

    with caplog.at_level("WARNING"):
        subs = subs_store.get_all_subscriptions(_RowsConn(rows))

    assert [s["id"] for s in subs] == [7, 8]
    assert subs[1]["criteria"] == []
    warned = [rec for rec in caplog.records if "malformed criteria" in rec.getMessage()]
    assert len(warned) == 1
    assert warned[0].subscription_id == 7
