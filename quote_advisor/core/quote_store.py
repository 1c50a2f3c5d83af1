"""
In-memory quote store backing the quote endpoints.
Holds generated quotes for the lifetime of the process.
"""

import logging
from datetime import datetime
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Tuple

from quote_advisor.pipeline.models import Quote, QuoteStatus


logger = logging.getLogger(__name__)


class QuoteStore:
    """Quotes keyed by id, in insertion order."""

    def __init__(self):
        self._quotes: Dict[str, Quote] = {}

    def add_many(self, quotes: Iterable[Quote]) -> None:
        for quote in quotes:
            self._quotes[quote.id] = quote

    def get(self, quote_id: str) -> Optional[Quote]:
        return self._quotes.get(quote_id)

    def get_many(self, quote_ids: Iterable[str]) -> List[Quote]:
        wanted = set(quote_ids)
        return [q for q in self._quotes.values() if q.id in wanted]

    def update_status(self, quote_id: str, status: QuoteStatus) -> Optional[Quote]:
        """Set a quote's status and refresh updated_at. Returns None if unknown."""
        quote = self._quotes.get(quote_id)
        if quote is None:
            return None
        updated = quote.model_copy(update={"status": status, "updated_at": datetime.utcnow()})
        self._quotes[quote_id] = updated
        logger.info(f"Quote {quote_id} status changed {quote.status} -> {status}")
        return updated

    def list_for_user(
        self,
        user_id: str,
        status: Optional[str] = None,
        insurance_type: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Quote], int]:
        """
        Page through a user's quotes.

        Returns:
            (quotes on the requested page, total matching quotes)
        """
        matching = [q for q in self._quotes.values() if q.user_id == user_id]
        if status:
            matching = [q for q in matching if q.status == status]
        if insurance_type:
            matching = [q for q in matching if q.type == insurance_type]

        start = (page - 1) * limit
        return matching[start:start + limit], len(matching)

    def clear(self) -> None:
        self._quotes.clear()

    def __len__(self) -> int:
        return len(self._quotes)


@lru_cache()
def get_quote_store() -> QuoteStore:
    """Get the process-wide quote store."""
    return QuoteStore()
