"""
Run a query against the alerts database (DATABASE_URL required).

Usage:
  python -m scripts.db_shell                                   # list subscriptions
  python -m scripts.db_shell "SELECT count(*) FROM subscriptions"
"""
from __future__ import annotations

import sys

from dotenv import load_dotenv

from core.db.base import get_conn

DEFAULT_QUERY = "SELECT id, email, criteria, last_notified FROM subscriptions ORDER BY id"


def main() -> None:
    load_dotenv(override=True)
    query = " ".join(sys.argv[1:]).strip() or DEFAULT_QUERY

    try:
        conn = get_conn()
    except RuntimeError as exc:
        raise SystemExit(str(exc)) from exc

    try:
        cur = conn.cursor()
        cur.execute(query)
        if query.lstrip().lower().startswith(("select", "with")):
            for row in cur.fetchall():
                print(dict(row))
        else:
            conn.commit()
            print(f"OK ({cur.rowcount} row(s) affected)")
    except Exception as exc:
        raise SystemExit(f"Error running query: {exc}") from exc
    finally:
        conn.close()


if __name__ == "__main__":
    main()
