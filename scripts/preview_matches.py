"""
Print what the next alert run would send, without emailing or touching watermarks.

Usage:
  python -m scripts.preview_matches
  python -m scripts.preview_matches --email user@example.com
"""
from __future__ import annotations

import argparse

from dotenv import load_dotenv

from core.database import get_all_subscriptions, get_conn
from worker.listings import fetch_listings
from worker.matching import drop_undated_listings, find_matching_listings


def main() -> None:
    load_dotenv(override=True)

    parser = argparse.ArgumentParser(description="Preview alert matches.")
    parser.add_argument("--email", help="Only show this subscriber")
    args = parser.parse_args()

    conn = get_conn()
    try:
        subs = get_all_subscriptions(conn)
    finally:
        conn.close()

    if args.email:
        wanted = args.email.strip().lower()
        subs = [s for s in subs if (s.get("email") or "").lower() == wanted]

    if not subs:
        print("No subscriptions found.")
        return

    listings = drop_undated_listings(fetch_listings())
    print(f"Fetched {len(listings)} listing(s)")

    for sub in subs:
        try:
            matches = find_matching_listings(sub, listings)
        except ValueError as exc:
            print(f"[{sub['id']}] {sub['email']}: malformed subscription ({exc})")
            continue
        print(f"[{sub['id']}] {sub['email']}: {len(matches)} match(es)")
        for listing in matches:
            print(f"    - {listing.get('title')} @ {listing.get('company')} ({listing.get('location')}) {listing.get('link')}")


if __name__ == "__main__":
    main()
