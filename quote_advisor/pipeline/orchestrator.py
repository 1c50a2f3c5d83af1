"""
Workflow Orchestrator
State machine driving the quote comparison and recommendation workflow.

Each transition takes the current session and returns the next session plus
effect descriptors (timers, alerts) for the UI layer to carry out.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from quote_advisor.config import Settings, get_settings
from quote_advisor.core.notification_client import QuoteNotificationClient, get_notification_client
from quote_advisor.pipeline.models import (
    Quote,
    QuoteInterest,
    QuoteRecommendation,
    Representative,
    RepresentativeAssignment,
    UserChoice,
)
from quote_advisor.pipeline.steps import (
    InterestRecorder,
    QuoteGenerationStep,
    RecommendationStep,
    RepresentativeDirectory,
    RequestNormalizationStep,
)
from quote_advisor.utils.formatting import format_currency, generate_user_id, insurance_type_title


logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    IDLE = "idle"
    REPRESENTATIVE_MATCHING = "representative-assignment"
    QUOTE_INTAKE = "quote-intake"
    THANK_YOU = "thank-you"
    COMPARISON = "comparison"
    RECOMMENDATION_SHOWN = "recommendation-shown"
    REPRESENTATIVE_SHOWN = "representative-shown"
    FINAL_CONFIRMATION = "final-confirmation"


class WorkflowEvent(str, Enum):
    """Events raised by timers rather than by the user."""
    MATCHING_COMPLETE = "matching-complete"
    GENERATE_QUOTES = "generate-quotes"


class ScheduleEvent(BaseModel):
    """Fire an event after a delay."""
    kind: Literal["schedule"] = "schedule"
    delay_seconds: float
    event: WorkflowEvent


class ShowAlert(BaseModel):
    """Show a message to the user."""
    kind: Literal["alert"] = "alert"
    message: str
    level: Literal["info", "error"] = "info"


WorkflowEffect = Union[ScheduleEvent, ShowAlert]


class WorkflowSession(BaseModel):
    """Everything one browser session holds while moving through the workflow."""
    model_config = ConfigDict(frozen=True)

    state: WorkflowState = WorkflowState.IDLE
    insurance_type: Optional[str] = None
    matched_representative: Optional[Representative] = None
    form_data: Optional[Dict[str, Any]] = None
    quotes: List[Quote] = Field(default_factory=list)

    # Recommendation workflow, cleared when the user closes it
    user_id: str = ""
    interested_quote: Optional[Quote] = None
    recommendation: Optional[QuoteRecommendation] = None
    user_choice: Optional[UserChoice] = None
    representative: Optional[Representative] = None
    quote_interest: Optional[QuoteInterest] = None
    assignment: Optional[RepresentativeAssignment] = None


class TransitionResult(BaseModel):
    session: WorkflowSession
    effects: List[WorkflowEffect] = Field(default_factory=list)


class InvalidTransition(ValueError):
    """Raised when an event is not accepted in the session's current state."""


_CLEARED_RECOMMENDATION = {
    "user_id": "",
    "interested_quote": None,
    "recommendation": None,
    "user_choice": None,
    "representative": None,
    "quote_interest": None,
    "assignment": None,
}


class QuoteWorkflow:
    """
    Coordinates quote generation, recommendation, representative assignment
    and interest recording across the workflow states.
    """

    def __init__(
        self,
        generator: Optional[QuoteGenerationStep] = None,
        recommender: Optional[RecommendationStep] = None,
        directory: Optional[RepresentativeDirectory] = None,
        recorder: Optional[InterestRecorder] = None,
        normalizer: Optional[RequestNormalizationStep] = None,
        notifier: Optional[QuoteNotificationClient] = None,
        settings: Optional[Settings] = None,
        transition_callback: Optional[Callable[[WorkflowState, WorkflowState], None]] = None
    ):
        """
        Initialize the workflow with its components.

        Args:
            generator: Quote generator (default providers if not provided)
            recommender: Quote scorer
            directory: Representative directory (default roster if not provided)
            recorder: Interest and assignment recorder
            normalizer: Intake form validation and normalization
            notifier: Purchase notification client (resolved lazily if not provided)
            settings: Workflow timings and flags (cached settings if not provided)
            transition_callback: Optional callback (from_state, to_state)
        """
        self.settings = settings or get_settings()
        self.generator = generator or QuoteGenerationStep()
        self.recommender = recommender or RecommendationStep()
        self.directory = directory or RepresentativeDirectory()
        self.recorder = recorder or InterestRecorder()
        self.normalizer = normalizer or RequestNormalizationStep()
        self._notifier = notifier
        self.transition_callback = transition_callback

    @property
    def notifier(self) -> QuoteNotificationClient:
        if self._notifier is None:
            self._notifier = get_notification_client()
        return self._notifier

    def start(self) -> WorkflowSession:
        return WorkflowSession()

    def _require(self, session: WorkflowSession, action: str, *states: WorkflowState) -> None:
        if session.state not in states:
            raise InvalidTransition(f"Cannot {action} while in state '{session.state.value}'")

    def _move(
        self,
        session: WorkflowSession,
        state: WorkflowState,
        effects: Optional[List[WorkflowEffect]] = None,
        **changes: Any
    ) -> TransitionResult:
        next_session = session.model_copy(update={"state": state, **changes})
        if state != session.state:
            logger.info(f"Workflow {session.state.value} -> {state.value}")
            if self.transition_callback:
                self.transition_callback(session.state, state)
        return TransitionResult(session=next_session, effects=effects or [])

    def _reset_state(self, session: WorkflowSession) -> WorkflowState:
        return WorkflowState.COMPARISON if session.quotes else WorkflowState.IDLE

    # Quote intake

    def select_insurance_type(self, session: WorkflowSession, insurance_type: str) -> TransitionResult:
        """Start matching a representative for the chosen insurance line."""
        self._require(
            session, "select an insurance type",
            WorkflowState.IDLE, WorkflowState.THANK_YOU, WorkflowState.COMPARISON,
        )
        representative = self.directory.assign(insurance_type)
        return self._move(
            session,
            WorkflowState.REPRESENTATIVE_MATCHING,
            [ScheduleEvent(
                delay_seconds=self.settings.representative_matching_delay_seconds,
                event=WorkflowEvent.MATCHING_COMPLETE,
            )],
            insurance_type=insurance_type,
            matched_representative=representative,
        )

    def matching_complete(self, session: WorkflowSession) -> TransitionResult:
        self._require(session, "finish matching", WorkflowState.REPRESENTATIVE_MATCHING)
        return self._move(session, WorkflowState.QUOTE_INTAKE)

    def submit_quote_form(self, session: WorkflowSession, form_data: Dict[str, Any]) -> TransitionResult:
        """
        Submit the intake form. Invalid forms are rejected and the session
        stays on the form.
        """
        self._require(session, "submit the quote form", WorkflowState.QUOTE_INTAKE)

        errors = self.normalizer.validate(form_data)
        if errors:
            logger.info(f"Quote form rejected with {len(errors)} errors")
            return self._move(
                session,
                WorkflowState.QUOTE_INTAKE,
                [ShowAlert(message="; ".join(errors), level="error")],
            )

        effects: List[WorkflowEffect] = []
        if self.settings.auto_generate_quotes_on_submit:
            effects.append(ScheduleEvent(
                delay_seconds=self.settings.post_submit_generation_delay_seconds,
                event=WorkflowEvent.GENERATE_QUOTES,
            ))
        return self._move(
            session,
            WorkflowState.THANK_YOU,
            effects,
            form_data=self.normalizer.execute(form_data),
        )

    def generate_quotes(self, session: WorkflowSession) -> TransitionResult:
        """Generate quotes from the submitted form and open the comparison view."""
        self._require(session, "generate quotes", WorkflowState.THANK_YOU)
        if not session.insurance_type:
            return self._move(
                session,
                WorkflowState.QUOTE_INTAKE,
                [ShowAlert(message="Please choose an insurance type first.", level="error")],
            )

        quotes = self.generator.execute(session.insurance_type, session.user_id or None, session.form_data)
        effects: List[WorkflowEffect] = []
        if not quotes:
            title = insurance_type_title(session.insurance_type)
            effects.append(ShowAlert(message=f"No providers currently quote {title}."))
        return self._move(
            session,
            WorkflowState.COMPARISON,
            effects,
            quotes=[*session.quotes, *quotes],
        )

    def load_quotes(self, session: WorkflowSession, quotes: List[Quote]) -> TransitionResult:
        """Open the comparison view with additional quotes."""
        self._require(
            session, "load quotes",
            WorkflowState.IDLE, WorkflowState.THANK_YOU, WorkflowState.COMPARISON,
        )
        return self._move(session, WorkflowState.COMPARISON, quotes=[*session.quotes, *quotes])

    # Recommendation

    def mark_interested(self, session: WorkflowSession, quote: Quote) -> TransitionResult:
        """Score the compared quotes and show the recommendation next to the user's pick."""
        self._require(session, "mark a quote as interested", WorkflowState.COMPARISON)
        if session.quotes and all(q.id != quote.id for q in session.quotes):
            raise InvalidTransition(f"Quote {quote.id} is not part of the comparison")

        user_id = session.user_id or generate_user_id()
        recommendation = self.recommender.execute(session.quotes, session.form_data)
        if recommendation is None:
            return self._move(
                session,
                WorkflowState.COMPARISON,
                [ShowAlert(message="There are no quotes to recommend from yet.", level="error")],
            )

        return self._move(
            session,
            WorkflowState.RECOMMENDATION_SHOWN,
            user_id=user_id,
            interested_quote=quote,
            recommendation=recommendation,
        )

    def choose(self, session: WorkflowSession, choice: UserChoice) -> TransitionResult:
        """
        Record the user's decision and assign a representative.

        Args:
            session: Session showing a recommendation
            choice: 'proceed' with the original quote or 'change' to the recommendation
        """
        self._require(session, "choose a quote", WorkflowState.RECOMMENDATION_SHOWN)
        interested = session.interested_quote
        recommended = session.recommendation.recommended_quote

        representative = self.directory.assign(interested.type)
        interest = self.recorder.create_quote_interest(
            session.user_id, interested, recommended, session.form_data, choice,
        )
        assignment = self.recorder.create_representative_assignment(
            session.user_id, representative.id, interest.id,
        )
        interest = self.recorder.attach_representative(interest, representative.id)

        return self._move(
            session,
            WorkflowState.REPRESENTATIVE_SHOWN,
            user_choice=choice,
            representative=representative,
            quote_interest=interest,
            assignment=assignment,
        )

    def confirm(self, session: WorkflowSession) -> TransitionResult:
        self._require(session, "confirm", WorkflowState.REPRESENTATIVE_SHOWN)
        return self._move(session, WorkflowState.FINAL_CONFIRMATION)

    def close(self, session: WorkflowSession) -> TransitionResult:
        """Close the final confirmation and clear the recommendation workflow."""
        self._require(session, "close the confirmation", WorkflowState.FINAL_CONFIRMATION)
        return self._move(session, self._reset_state(session), **_CLEARED_RECOMMENDATION)

    def dismiss(self, session: WorkflowSession) -> TransitionResult:
        """Close an open modal; in-flight recommendation state is discarded."""
        self._require(
            session, "dismiss",
            WorkflowState.RECOMMENDATION_SHOWN, WorkflowState.REPRESENTATIVE_SHOWN,
        )
        return self._move(session, self._reset_state(session), **_CLEARED_RECOMMENDATION)

    def handle(self, session: WorkflowSession, event: WorkflowEvent) -> TransitionResult:
        """Dispatch a scheduled event."""
        if event == WorkflowEvent.MATCHING_COMPLETE:
            return self.matching_complete(session)
        if event == WorkflowEvent.GENERATE_QUOTES:
            return self.generate_quotes(session)
        raise InvalidTransition(f"Unknown workflow event {event!r}")

    # Purchase

    def notify_purchase(
        self,
        session: WorkflowSession,
        quote: Quote,
        applicant: Dict[str, Any],
        insurance_info: Optional[Dict[str, Any]] = None
    ) -> TransitionResult:
        """
        Send the purchase request to the broker. The session is unchanged
        whatever the outcome.
        """
        result = self.notifier.send_purchase_request(quote, applicant, insurance_info)
        if result.success:
            alert = ShowAlert(
                message=(
                    f"Purchase request sent for your {quote.provider} quote "
                    f"({format_currency(quote.premium)}/month). We will be in touch shortly."
                )
            )
        else:
            alert = ShowAlert(
                message="We could not send your purchase request. Please try again.",
                level="error",
            )
        return TransitionResult(session=session, effects=[alert])
