"""
Quote Recommendation
Scores quotes against the user's preferences and picks the best one.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from quote_advisor.pipeline.models import Quote, QuoteRecommendation, QuoteScore
from quote_advisor.pipeline.steps.request_normalization import form_section


logger = logging.getLogger(__name__)

DEFAULT_BUDGET_MAX = 1000.0
MAX_ALTERNATIVES = 3


def budget_max_from_form(form_data: Optional[Dict[str, Any]]) -> float:
    """Maximum monthly premium from the needs analysis, defaulting to 1000."""
    needs_analysis = form_section(form_data, "needsAnalysis")
    budget = form_section(needs_analysis, "budgetPreferences").get("maxMonthlyPremium")
    if not budget:
        return DEFAULT_BUDGET_MAX
    try:
        value = float(budget)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring unparseable budget {budget!r}, using {DEFAULT_BUDGET_MAX}")
        return DEFAULT_BUDGET_MAX
    return value if value > 0 else DEFAULT_BUDGET_MAX


def score_quote(quote: Quote, budget_max: float = DEFAULT_BUDGET_MAX) -> QuoteScore:
    """
    Score a single quote on a 0-100 scale.

    Terms:
        provider rating  0-25
        affordability    0-25
        risk             0-20
        features         0-20
        discounts        0-10
    """
    reasons: List[str] = []

    provider_score = (quote.provider_rating / 5) * 25
    if quote.provider_rating >= 4.5:
        reasons.append(f"Highly rated provider ({quote.provider_rating:g}/5 stars)")

    affordability_ratio = max(0.0, (budget_max - quote.premium) / budget_max)
    affordability_score = affordability_ratio * 25
    if quote.premium <= budget_max * 0.8:
        reasons.append("Excellent value - 20% within your budget range")
    elif quote.premium <= budget_max:
        reasons.append("Well within your specified budget")

    risk_score = max(0.0, (10 - quote.risk_score) / 10) * 20
    if quote.risk_score <= 3:
        reasons.append("Low risk profile")

    feature_count = len(quote.features)
    feature_score = min(20, feature_count * 2)
    if feature_count >= 8:
        reasons.append(f"Comprehensive coverage with {feature_count} features")

    discount_count = len(quote.discounts)
    discount_score = min(10, discount_count * 3)
    if discount_count > 0:
        total_discount = sum(d.amount for d in quote.discounts)
        reasons.append(f"Includes {discount_count} benefit(s) adding R{total_discount:.2f} in value")

    return QuoteScore(
        quote=quote,
        provider_score=provider_score,
        affordability_score=affordability_score,
        risk_score=risk_score,
        feature_score=feature_score,
        discount_score=discount_score,
        reasons=reasons,
    )


def rank_quotes(quotes: List[Quote], form_data: Optional[Dict[str, Any]] = None) -> List[QuoteScore]:
    """Score and order quotes best first; equal scores keep their input order."""
    budget_max = budget_max_from_form(form_data)
    scores = [score_quote(quote, budget_max) for quote in quotes]
    return sorted(scores, key=lambda s: s.total, reverse=True)


class RecommendationStep:
    """
    Picks the top-scoring quote and the next best alternatives.
    Pure function of its inputs.
    """

    def execute(
        self,
        quotes: List[Quote],
        form_data: Optional[Dict[str, Any]] = None
    ) -> Optional[QuoteRecommendation]:
        """
        Recommend a quote.

        Args:
            quotes: Candidate quotes
            form_data: Form answers holding the budget preferences

        Returns:
            QuoteRecommendation, or None when there are no quotes
        """
        if not quotes:
            return None

        ranked = rank_quotes(quotes, form_data)
        best = ranked[0]

        recommendation = QuoteRecommendation(
            recommended_quote=best.quote,
            reasons=best.reasons,
            score=_round_half_up(best.total),
            alternative_quotes=[s.quote for s in ranked[1:1 + MAX_ALTERNATIVES]],
        )
        logger.info(
            f"Recommended {best.quote.provider} quote {best.quote.id} "
            f"(score {recommendation.score}/100, {len(best.reasons)} reasons)"
        )
        return recommendation


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
