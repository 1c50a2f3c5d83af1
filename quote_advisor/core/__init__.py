"""
Core services for the quote workflow.
"""

from .random_source import RandomSource, get_random_source
from .quote_store import QuoteStore, get_quote_store
from .notification_client import QuoteNotificationClient, NotificationResult, get_notification_client

__all__ = [
    "RandomSource",
    "get_random_source",
    "QuoteStore",
    "get_quote_store",
    "QuoteNotificationClient",
    "NotificationResult",
    "get_notification_client",
]
