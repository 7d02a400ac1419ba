import html
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from dotenv import load_dotenv

from app.email_utils import send_html_email
from core.database import (
    get_all_subscriptions,
    get_conn,
    init_db,
    update_last_notified,
)
from worker.listings import ListingsFetchError, fetch_listings
from worker.matching import drop_undated_listings, find_matching_listings

# Load `.env` for local/dev runs (override=True so updates take effect after restart).
load_dotenv(override=True)

EMAIL_SUBJECT = "New Job Listings Match Your Criteria"
FAILED_SUBSCRIPTION_ERROR = "Failed to process subscription"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("worker")


def render_alert_email(listings: List[Dict]) -> tuple[str, str]:
    """Build the (subject, html) summarising every matched listing."""
    blocks = []
    for listing in listings:
        title = html.escape(str(listing.get("title") or ""))
        company = html.escape(str(listing.get("company") or ""))
        location = html.escape(str(listing.get("location") or ""))
        link = html.escape(str(listing.get("link") or "#"), quote=True)
        blocks.append(
            f"""
            <div style="margin-bottom: 20px;">
              <h2>{title}</h2>
              <p><strong>{company}</strong> - {location}</p>
              <p><a href="{link}">View Listing</a></p>
            </div>
            """
        )

    body = f"""
    <h1>New Job Listings</h1>
    <p>We found {len(listings)} new listings matching your criteria:</p>
    {"".join(blocks)}
    """
    return EMAIL_SUBJECT, body


def notify_subscription(conn, sub: Dict, listings: List[Dict], now: datetime) -> Optional[Dict]:
    """
    Match, email and advance the watermark for one subscription.
    Returns a result entry, or None when nothing matched.
    """
    matches = find_matching_listings(sub, listings)
    if not matches:
        return None

    subject, body = render_alert_email(matches)
    if not send_html_email(sub["email"], subject, body):
        # Logged only; keep the watermark so a real send picks these up later.
        log.warning(
            "Email not delivered, watermark left unchanged",
            extra={"subscription_id": sub.get("id"), "matched": len(matches)},
        )
        return {
            "email": sub["email"],
            "matchedListings": len(matches),
            "delivered": False,
            "success": True,
        }

    # Savepoint: a failed update must not abort the run-wide transaction.
    with conn.transaction():
        update_last_notified(conn, sub["id"], now)

    log.info(
        "Subscription notified",
        extra={"subscription_id": sub.get("id"), "matched": len(matches)},
    )
    return {
        "email": sub["email"],
        "matchedListings": len(matches),
        "success": True,
    }


def process_alerts(conn=None, now: Optional[datetime] = None) -> List[Dict]:
    """
    Do one full pass:
    - load every subscription
    - fetch listings once
    - per subscription: match, email, advance watermark
    Per-subscription failures are recorded and the pass continues; anything else
    propagates. A connection opened here is always closed here.
    """
    owns_conn = conn is None
    if owns_conn:
        conn = get_conn()

    try:
        if now is None:
            now = datetime.now(timezone.utc)
        results: List[Dict] = []

        with conn.transaction():
            subs = get_all_subscriptions(conn)
            log.info("Loaded subscriptions", extra={"count": len(subs)})
            if not subs:
                return results

            listings: List[Dict] = []
            fetch_error: Optional[Exception] = None
            try:
                listings = drop_undated_listings(fetch_listings())
            except Exception as e:
                log.error("Failed to fetch listings", extra={"error": str(e)})
                fetch_error = e

            for sub in subs:
                try:
                    if fetch_error is not None:
                        raise ListingsFetchError(str(fetch_error)) from fetch_error
                    result = notify_subscription(conn, sub, listings, now)
                except Exception as e:
                    log.error(
                        f"Error processing subscription {sub.get('id')}",
                        extra={"subscription_id": sub.get("id"), "error": str(e)},
                    )
                    results.append(
                        {
                            "email": sub.get("email"),
                            "error": FAILED_SUBSCRIPTION_ERROR,
                            "success": False,
                        }
                    )
                    continue

                if result is not None:
                    results.append(result)

        log.info(
            "Run complete",
            extra={
                "notified": sum(1 for r in results if r["success"] and r.get("delivered", True)),
                "failed": sum(1 for r in results if not r["success"]),
            },
        )
        return results
    finally:
        if owns_conn:
            conn.close()


def main() -> int:
    try:
        init_db()
        results = process_alerts()
    except Exception as e:
        log.exception("Error processing alerts", extra={"error": str(e)})
        return 1

    failed = [r for r in results if not r["success"]]
    log.info("Processed %d subscription(s), %d failed", len(results), len(failed))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
