from fastapi.testclient import TestClient

import app.api as api_module
import app.routes.alerts as alerts_route


def test_process_route_returns_results(monkeypatch):
    processed = [
        {"email": "a@example.com", "matchedListings": 2, "success": True},
        {"email": "b@example.com", "error": "Failed to process subscription", "success": False},
    ]
    monkeypatch.setattr(alerts_route, "process_alerts", lambda: processed)

    client = TestClient(api_module.app)
    resp = client.get("/api/alerts/process")

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "processed": processed}


def test_process_route_returns_500_on_run_failure(monkeypatch):
    def _fail():
        raise RuntimeError("connection refused")

    monkeypatch.setattr(alerts_route, "process_alerts", _fail)

    client = TestClient(api_module.app)
    resp = client.get("/api/alerts/process")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to process alerts", "details": "connection refused"}


def test_process_route_needs_no_auth(monkeypatch):
    monkeypatch.setattr(alerts_route, "process_alerts", lambda: [])

    client = TestClient(api_module.app)
    resp = client.get("/api/alerts/process")

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "processed": []}


def test_healthz():
    client = TestClient(api_module.app)
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_startup_bootstraps_schema(monkeypatch):
    calls = []
    monkeypatch.setattr(api_module, "init_db", lambda: calls.append("init"))

    with TestClient(api_module.app) as client:
        resp = client.get("/healthz")

    assert resp.status_code == 200
    assert calls == ["init"]
