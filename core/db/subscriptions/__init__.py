"""
Subscription storage re-exports.
"""
from core.db.subscriptions.subs_store import (
    parse_criteria,
    get_all_subscriptions,
    update_last_notified,
    add_subscription,
    get_subscription,
)

__all__ = [
    "parse_criteria",
    "get_all_subscriptions",
    "update_last_notified",
    "add_subscription",
    "get_subscription",
]
