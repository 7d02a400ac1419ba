"""
Facade over the storage helpers so callers import from one place.
"""
from core.db.base import get_conn
from core.db.schema import init_db
from core.db.subscriptions import (
    add_subscription,
    get_all_subscriptions,
    get_subscription,
    parse_criteria,
    update_last_notified,
)

__all__ = [
    "get_conn",
    "init_db",
    "add_subscription",
    "get_all_subscriptions",
    "get_subscription",
    "parse_criteria",
    "update_last_notified",
]
