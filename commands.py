# Quick reference commands (run from repo root). These are comments only; copy/paste as needed.

# Install dependencies (with test extras)
# python -m pip install -e ".[test]"

# Run the full test suite (DB-backed tests skip unless DATABASE_URL is set)
# python -m pytest

# Run focused test files
# python -m pytest tests/test_matching.py
# python -m pytest tests/test_process_alerts.py tests/test_alerts_route.py
# python -m pytest tests/test_listings.py tests/test_email_utils.py
# DATABASE_URL=postgresql://... python -m pytest tests/test_subs_store.py

# Start the API locally (with env vars loaded)
# python -m dotenv run -- python -m uvicorn app.api:app --reload

# Trigger one alert pass over HTTP (what the scheduler calls)
# curl http://localhost:8000/api/alerts/process

# Run one alert pass from cron without the API
# python -m dotenv run -- python main.py

# Seed a subscription and preview matches (no email sent)
# python -m scripts.add_subscription you@example.com company=acme keyword=engineer --since 2024-01-01
# python -m scripts.preview_matches --email you@example.com

# Inspect the database (example query)
# python -m scripts.db_shell "SELECT id, email, criteria, last_notified FROM subscriptions"
