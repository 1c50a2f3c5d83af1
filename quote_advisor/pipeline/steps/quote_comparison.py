"""
Quote Comparison
Filters, sorts and summarizes quotes for the comparison view.
"""

import re
from typing import List, Optional

from quote_advisor.pipeline.models import Quote, QuoteComparison, QuoteFilters


def coverage_value(quote: Quote) -> float:
    """Numeric coverage amount from strings like 'R88,000'."""
    digits = re.sub(r"[^\d.]", "", quote.coverage)
    try:
        return float(digits)
    except ValueError:
        return 0.0


class QuoteComparisonStep:
    """Comparison helpers backing the comparison view and compare endpoint."""

    def compare(self, quotes: List[Quote]) -> Optional[QuoteComparison]:
        """
        Summarize a set of quotes.

        Returns:
            QuoteComparison, or None when there is nothing to compare
        """
        if not quotes:
            return None

        premiums = [q.premium for q in quotes]
        return QuoteComparison(
            quotes=quotes,
            cheapest=min(quotes, key=lambda q: q.premium),
            most_expensive=max(quotes, key=lambda q: q.premium),
            average_premium=sum(premiums) / len(premiums),
            min_premium=min(premiums),
            max_premium=max(premiums),
        )

    def filter_and_sort(self, quotes: List[Quote], filters: Optional[QuoteFilters] = None) -> List[Quote]:
        """Apply comparison filters, then order by the requested field."""
        filters = filters or QuoteFilters()

        def keep(quote: Quote) -> bool:
            if quote.premium < filters.min_premium:
                return False
            if filters.max_premium is not None and quote.premium > filters.max_premium:
                return False
            if filters.providers and quote.provider not in filters.providers:
                return False
            if quote.deductible is None or quote.deductible < filters.min_deductible:
                return False
            if filters.max_deductible is not None and quote.deductible > filters.max_deductible:
                return False
            if quote.provider_rating < filters.min_rating:
                return False
            return all(feature in quote.features for feature in filters.features)

        sort_keys = {
            "price": lambda q: q.premium,
            "rating": lambda q: q.provider_rating,
            "coverage": coverage_value,
            "provider": lambda q: q.provider,
        }
        result = [q for q in quotes if keep(q)]
        return sorted(result, key=sort_keys[filters.sort_by], reverse=filters.sort_order == "desc")
