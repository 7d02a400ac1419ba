"""
Create a subscription from the command line (local/dev seeding).

Usage:
  python -m scripts.add_subscription you@example.com company=acme keyword=python
  python -m scripts.add_subscription you@example.com location=remote --since 2024-01-01
"""
from __future__ import annotations

import argparse
from datetime import datetime, timezone

from dotenv import load_dotenv

from core.database import add_subscription, init_db
from worker.matching import CRITERION_FIELDS


def _parse_criterion(raw: str) -> dict:
    kind, sep, value = raw.partition("=")
    kind = kind.strip().lower()
    if not sep or kind not in CRITERION_FIELDS or not value.strip():
        raise argparse.ArgumentTypeError(
            f"expected one of {', '.join(CRITERION_FIELDS)}=<value>, got {raw!r}"
        )
    return {"type": kind, "value": value.strip()}


def main() -> None:
    load_dotenv(override=True)

    parser = argparse.ArgumentParser(description="Add a job alert subscription.")
    parser.add_argument("email")
    parser.add_argument("criteria", nargs="+", type=_parse_criterion)
    parser.add_argument("--since", help="ISO date to use as the initial last-notified watermark")
    args = parser.parse_args()

    since = None
    if args.since:
        since = datetime.fromisoformat(args.since)
        if since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)

    init_db()
    sub_id = add_subscription(args.email, args.criteria, last_notified=since)
    print(f"Created subscription id={sub_id} for {args.email}")


if __name__ == "__main__":
    main()
