"""
Identifier, date and display helpers for the quote workflow.
"""

import random
import string
import time
from datetime import datetime, timedelta
from typing import Optional

from quote_advisor.core.reference_data import INSURANCE_TYPE_TITLES
from quote_advisor.pipeline.models import Quote


_BASE36_DIGITS = string.digits + string.ascii_lowercase


def to_base36(number: int) -> str:
    """Encode a non-negative integer in base 36."""
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def _random_suffix(length: int = 6) -> str:
    return "".join(random.choice(_BASE36_DIGITS) for _ in range(length))


def generate_record_id(prefix: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Process-unique record ID: prefix, base-36 time component, random component.
    Collisions are unlikely but not impossible.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{prefix}-{to_base36(timestamp_ms)}-{_random_suffix()}".upper()


def generate_user_id() -> str:
    """Reference ID handed to the user for tracking their request."""
    return generate_record_id("USR")


def calculate_business_days(start: datetime, business_days: int) -> datetime:
    """Advance start by the given number of business days, skipping weekends."""
    result = start
    added = 0
    while added < business_days:
        result += timedelta(days=1)
        # Monday=0 .. Friday=4
        if result.weekday() < 5:
            added += 1
    return result


def format_currency(amount: float) -> str:
    return f"R{amount:,.2f}"


def insurance_type_title(insurance_type: str) -> str:
    return INSURANCE_TYPE_TITLES.get(insurance_type, insurance_type)


def format_quote_details(quote: Quote) -> str:
    """Plain-text summary of a quote for confirmation screens and emails."""
    features = ", ".join(quote.features[:5]) + ("..." if len(quote.features) > 5 else "")
    discounts = ", ".join(d.description for d in quote.discounts) or "None"

    lines = [
        f"Provider: {quote.provider}",
        f"Monthly Premium: {format_currency(quote.premium)}",
        f"Annual Premium: {format_currency(quote.annual_premium)}",
        f"Coverage: {quote.coverage}",
        f"Key Features: {features}",
        f"Discounts: {discounts}",
        f"Provider Rating: {quote.provider_rating:g}/5 stars",
        f"Risk Score: {quote.risk_score}/10",
        f"Valid Until: {quote.valid_until.strftime('%Y-%m-%d')}",
    ]
    return "\n".join(lines)
