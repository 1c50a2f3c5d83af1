"""
Pytest configuration and fixtures.
"""

import pytest
from datetime import datetime, timedelta
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from quote_advisor.config import Settings
from quote_advisor.pipeline.models import Discount, Quote


FIXED_NOW = datetime(2024, 3, 1, 9, 0, 0)  # a Friday


class SequenceRandom:
    """Deterministic random source replaying fixed values, cycling when exhausted."""

    def __init__(self, *values):
        self.values = list(values) or [0.0]
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def test_settings():
    """Settings with no delays and no notification endpoint."""
    return Settings(
        quote_generation_delay_seconds=0,
        representative_matching_delay_seconds=0,
        post_submit_generation_delay_seconds=0,
        notification_url=None,
        _env_file=None,
    )


@pytest.fixture
def make_quote():
    """Factory for quotes with sensible defaults."""
    counter = {"n": 0}

    def _make(
        provider="Santam",
        premium=900,
        provider_rating=4.2,
        risk_score=5,
        features=None,
        discounts=0,
        insurance_type="auto",
        quote_id=None,
    ):
        counter["n"] += 1
        catalog = [
            Discount(type="multi-policy", description="Multiple Policy Discount", amount=10),
            Discount(type="no-claims", description="No Claims Bonus", amount=15),
            Discount(type="security", description="Security Features Discount", amount=5),
        ]
        return Quote(
            id=quote_id or f"quote-{counter['n']}",
            user_id="user-1",
            type=insurance_type,
            provider=provider,
            premium=premium,
            annual_premium=premium * 12,
            coverage=f"R{premium * 100:,}",
            deductible=premium // 10,
            valid_until=FIXED_NOW + timedelta(days=30),
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
            features=features if features is not None else ["Comprehensive Cover", "Accident Management"],
            discounts=catalog[:discounts],
            risk_score=risk_score,
            provider_rating=provider_rating,
        )

    return _make


@pytest.fixture
def scenario_quotes(make_quote):
    """Santam/Discovery/Outsurance auto quotes with fixed premiums and ratings."""
    return [
        make_quote(provider="Santam", premium=900, provider_rating=4.2, quote_id="santam"),
        make_quote(provider="Discovery Insure", premium=850, provider_rating=4.5, quote_id="discovery"),
        make_quote(provider="Outsurance", premium=870, provider_rating=4.1, quote_id="outsurance"),
    ]


@pytest.fixture
def budget_form():
    return {"needsAnalysis": {"budgetPreferences": {"maxMonthlyPremium": 1000}}}


@pytest.fixture
def valid_form(budget_form):
    return {
        **budget_form,
        "applicant": {
            "firstName": "Naledi",
            "lastName": "Dlamini",
            "email": "naledi@example.com",
            "phone": "0821234567",
        },
    }
