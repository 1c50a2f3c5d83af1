"""
Quote Generation
Produces one priced quote per provider supporting the requested insurance line.
"""

import logging
import math
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence

from quote_advisor.config import get_settings
from quote_advisor.core.random_source import RandomSource, get_random_source, random_index
from quote_advisor.core.reference_data import (
    BASE_RATES,
    COVERAGE_MULTIPLIERS,
    DEFAULT_BASE_RATE,
    DEFAULT_COVERAGE_MULTIPLIER,
    DEFAULT_EXCLUSIONS,
    DEFAULT_FEATURES,
    DEFAULT_PROVIDERS,
    DISCOUNT_CATALOG,
    EXCLUSION_CATALOG,
    FEATURE_CATALOG,
)
from quote_advisor.pipeline.models import INSURANCE_TYPES, Discount, Provider, Quote


logger = logging.getLogger(__name__)


class QuoteGenerationStep:
    """
    Generates candidate quotes from the provider list.
    Premiums, feature counts, discounts and risk scores are drawn from the
    injected random source.
    """

    def __init__(
        self,
        providers: Sequence[Provider] = DEFAULT_PROVIDERS,
        random_source: Optional[RandomSource] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
        validity_days: Optional[int] = None,
    ):
        """
        Initialize the generator.

        Args:
            providers: Providers to quote from (read-only)
            random_source: Source of uniform floats (system PRNG if not provided)
            clock: Returns the creation timestamp for new quotes
            validity_days: Days a quote stays valid (settings default if not provided)
        """
        self.providers = tuple(providers)
        self.random = random_source or get_random_source()
        self.clock = clock
        self.validity_days = validity_days or get_settings().quote_validity_days

    def execute(
        self,
        insurance_type: str,
        user_id: Optional[str] = None,
        form_data: Optional[Dict[str, Any]] = None
    ) -> List[Quote]:
        """
        Generate quotes for an insurance line.

        Args:
            insurance_type: Insurance line requested
            user_id: Requesting user (anonymous if not provided)
            form_data: Originating form answers, stored as quote metadata

        Returns:
            One quote per provider supporting the insurance line
        """
        if insurance_type not in INSURANCE_TYPES:
            logger.warning(f"Unknown insurance line '{insurance_type}', using default rate tables")

        eligible = [p for p in self.providers if insurance_type in p.supported_types]
        quotes = [
            self._build_quote(insurance_type, provider, user_id or "anonymous", form_data or {})
            for provider in eligible
        ]
        logger.info(f"Generated {len(quotes)} {insurance_type} quotes for {user_id or 'anonymous'}")
        return quotes

    def _build_quote(
        self,
        insurance_type: str,
        provider: Provider,
        user_id: str,
        form_data: Dict[str, Any]
    ) -> Quote:
        premium = self._premium(insurance_type, provider)
        now = self.clock()

        return Quote(
            id=str(uuid.uuid4()),
            user_id=user_id,
            type=insurance_type,
            provider=provider.name,
            provider_id=provider.id,
            premium=premium,
            annual_premium=premium * 12,
            coverage=self._coverage_amount(insurance_type, premium),
            deductible=math.floor(premium * 0.1),
            status="pending",
            valid_until=now + timedelta(days=self.validity_days),
            created_at=now,
            updated_at=now,
            features=self._features(insurance_type),
            exclusions=list(EXCLUSION_CATALOG.get(insurance_type, DEFAULT_EXCLUSIONS)),
            discounts=self._discounts(),
            risk_score=random_index(self.random, 10) + 1,
            provider_rating=provider.rating,
            metadata=form_data,
        )

    def _premium(self, insurance_type: str, provider: Provider) -> int:
        """Base premium from the rate table, adjusted by the provider multiplier."""
        low, high = BASE_RATES.get(insurance_type, DEFAULT_BASE_RATE)
        base = math.floor(self.random.random() * (high - low) + low)
        return math.floor(base * provider.multiplier)

    def _coverage_amount(self, insurance_type: str, premium: int) -> str:
        multiplier = COVERAGE_MULTIPLIERS.get(insurance_type, DEFAULT_COVERAGE_MULTIPLIER)
        return f"R{premium * multiplier:,}"

    def _features(self, insurance_type: str) -> List[str]:
        catalog = FEATURE_CATALOG.get(insurance_type, DEFAULT_FEATURES)
        return list(catalog[:random_index(self.random, 3) + 2])

    def _discounts(self) -> List[Discount]:
        return list(DISCOUNT_CATALOG[:random_index(self.random, 3)])
