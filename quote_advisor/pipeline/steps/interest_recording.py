"""
Interest Recording
Builds quote interest and representative assignment records.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from quote_advisor.pipeline.models import (
    AssignmentStatus,
    Quote,
    QuoteInterest,
    RecommendationStatus,
    RepresentativeAssignment,
    UserChoice,
)
from quote_advisor.utils.formatting import calculate_business_days, generate_record_id


logger = logging.getLogger(__name__)

EXPECTED_RESPONSE_DAYS = 3

ASSIGNMENT_TRANSITIONS = {
    "assigned": ("in-progress", "cancelled"),
    "in-progress": ("completed", "cancelled"),
    "completed": (),
    "cancelled": (),
}


class InvalidStatusTransition(ValueError):
    """Raised when an assignment is moved to a status it cannot reach."""


def recommendation_status(
    interested_quote: Quote,
    recommended_quote: Quote,
    user_choice: UserChoice
) -> RecommendationStatus:
    """How the user's final choice relates to the recommendation."""
    if interested_quote.id == recommended_quote.id:
        return "same-as-recommendation"
    if user_choice == "change":
        return "recommended"
    return "not-recommended"


class InterestRecorder:
    """Creates the records that track a user's decision and its follow-up."""

    def __init__(self, clock: Callable[[], datetime] = datetime.utcnow):
        self.clock = clock

    def _timestamp_ms(self, moment: datetime) -> int:
        return int(moment.timestamp() * 1000)

    def create_quote_interest(
        self,
        user_id: str,
        interested_quote: Quote,
        recommended_quote: Quote,
        form_data: Optional[Dict[str, Any]],
        user_choice: UserChoice
    ) -> QuoteInterest:
        """
        Record the quote a user will proceed with.

        Args:
            user_id: User reference ID
            interested_quote: Quote the user originally marked
            recommended_quote: Quote the system recommended
            form_data: Original form answers
            user_choice: 'proceed' keeps the original quote, 'change' switches
                to the recommendation

        Returns:
            QuoteInterest without a representative
        """
        now = self.clock()
        chosen_id = recommended_quote.id if user_choice == "change" else interested_quote.id

        interest = QuoteInterest(
            id=generate_record_id("QI", self._timestamp_ms(now)),
            user_id=user_id,
            interested_quote_id=chosen_id,
            recommended_quote_id=recommended_quote.id,
            status=recommendation_status(interested_quote, recommended_quote, user_choice),
            representative_id="",
            created_at=now,
            form_data=form_data or {},
        )
        logger.info(f"Quote interest {interest.id} recorded for {user_id}: {interest.status}")
        return interest

    def attach_representative(self, interest: QuoteInterest, representative_id: str) -> QuoteInterest:
        return interest.model_copy(update={"representative_id": representative_id})

    def create_representative_assignment(
        self,
        user_id: str,
        representative_id: str,
        quote_interest_id: str
    ) -> RepresentativeAssignment:
        """Assign a representative to a quote interest with a 3 business day response window."""
        now = self.clock()
        assignment = RepresentativeAssignment(
            id=generate_record_id("RA", self._timestamp_ms(now)),
            user_id=user_id,
            representative_id=representative_id,
            quote_interest_id=quote_interest_id,
            status="assigned",
            assigned_at=now,
            expected_response_days=EXPECTED_RESPONSE_DAYS,
            respond_by=calculate_business_days(now, EXPECTED_RESPONSE_DAYS),
        )
        logger.info(
            f"Assignment {assignment.id}: representative {representative_id} "
            f"to respond by {assignment.respond_by:%Y-%m-%d}"
        )
        return assignment

    def advance_assignment(
        self,
        assignment: RepresentativeAssignment,
        status: AssignmentStatus
    ) -> RepresentativeAssignment:
        """Move an assignment along assigned -> in-progress -> completed/cancelled."""
        if status not in ASSIGNMENT_TRANSITIONS[assignment.status]:
            raise InvalidStatusTransition(
                f"Assignment {assignment.id} cannot move from {assignment.status} to {status}"
            )
        return assignment.model_copy(update={"status": status})
