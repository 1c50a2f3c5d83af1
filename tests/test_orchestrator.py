"""
Tests for the workflow state machine.
"""

import pytest
from unittest.mock import MagicMock
from quote_advisor.core.notification_client import NotificationResult
from quote_advisor.pipeline.orchestrator import (
    InvalidTransition,
    QuoteWorkflow,
    ScheduleEvent,
    ShowAlert,
    WorkflowEvent,
    WorkflowSession,
    WorkflowState,
)
from quote_advisor.pipeline.steps import (
    InterestRecorder,
    QuoteGenerationStep,
    RepresentativeDirectory,
    RequestNormalizationStep,
)
from tests.conftest import SequenceRandom


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def transitions():
    return []


@pytest.fixture
def workflow(test_settings, fixed_clock, notifier, transitions):
    return QuoteWorkflow(
        generator=QuoteGenerationStep(random_source=SequenceRandom(0.5), clock=fixed_clock, validity_days=30),
        directory=RepresentativeDirectory(random_source=SequenceRandom(0.0)),
        recorder=InterestRecorder(clock=fixed_clock),
        normalizer=RequestNormalizationStep(cover_min=10000, cover_max=100000),
        notifier=notifier,
        settings=test_settings,
        transition_callback=lambda old, new: transitions.append((old, new)),
    )


@pytest.fixture
def comparison_session(workflow, scenario_quotes, budget_form):
    """Session in the comparison view holding the three scenario quotes."""
    session = WorkflowSession(insurance_type="auto", form_data=budget_form)
    return workflow.load_quotes(session, scenario_quotes).session


class TestQuoteIntake:
    """Tests for the intake half of the workflow."""

    def test_starts_idle(self, workflow):
        assert workflow.start().state == WorkflowState.IDLE

    def test_select_insurance_type_schedules_matching(self, workflow, test_settings):
        result = workflow.select_insurance_type(workflow.start(), "mining-rehabilitation")

        assert result.session.state == WorkflowState.REPRESENTATIVE_MATCHING
        assert result.session.insurance_type == "mining-rehabilitation"
        assert result.session.matched_representative.id == "rep-003"
        assert result.effects == [ScheduleEvent(
            delay_seconds=test_settings.representative_matching_delay_seconds,
            event=WorkflowEvent.MATCHING_COMPLETE,
        )]

    def test_matching_complete_opens_form(self, workflow):
        session = workflow.select_insurance_type(workflow.start(), "auto").session

        result = workflow.handle(session, WorkflowEvent.MATCHING_COMPLETE)

        assert result.session.state == WorkflowState.QUOTE_INTAKE

    def test_valid_form_submitted(self, workflow, valid_form):
        session = workflow.select_insurance_type(workflow.start(), "auto").session
        session = workflow.matching_complete(session).session

        result = workflow.submit_quote_form(session, valid_form)

        assert result.session.state == WorkflowState.THANK_YOU
        assert result.effects == []
        covers = result.session.form_data["needsAnalysis"]["coveragePreferences"]["optionalCovers"]
        assert covers["powerSurge"] == {"selected": False, "amount": None}

    def test_invalid_form_rejected(self, workflow):
        session = workflow.select_insurance_type(workflow.start(), "auto").session
        session = workflow.matching_complete(session).session

        result = workflow.submit_quote_form(session, {"applicant": {"firstName": "Naledi"}})

        assert result.session.state == WorkflowState.QUOTE_INTAKE
        assert result.session.form_data is None
        assert result.effects == [ShowAlert(
            message="Last name is required; Email is required; Phone number is required",
            level="error",
        )]

    def test_form_with_null_sections_rejected(self, workflow):
        session = WorkflowSession(state=WorkflowState.QUOTE_INTAKE, insurance_type="auto")

        result = workflow.submit_quote_form(session, {"applicant": None, "needsAnalysis": None})

        assert result.session.state == WorkflowState.QUOTE_INTAKE
        assert result.effects[0].level == "error"
        assert result.effects[0].message.startswith("First name is required")

    def test_auto_generation_scheduled_when_enabled(self, workflow, test_settings, valid_form):
        workflow.settings = test_settings.model_copy(update={
            "auto_generate_quotes_on_submit": True,
            "post_submit_generation_delay_seconds": 3.0,
        })
        session = WorkflowSession(state=WorkflowState.QUOTE_INTAKE, insurance_type="auto")

        result = workflow.submit_quote_form(session, valid_form)

        assert result.effects == [ScheduleEvent(delay_seconds=3.0, event=WorkflowEvent.GENERATE_QUOTES)]

    def test_generate_quotes_opens_comparison(self, workflow, valid_form):
        session = WorkflowSession(state=WorkflowState.THANK_YOU, insurance_type="auto", form_data=valid_form)

        result = workflow.handle(session, WorkflowEvent.GENERATE_QUOTES)

        assert result.session.state == WorkflowState.COMPARISON
        assert [q.provider for q in result.session.quotes] == ["Santam", "Discovery Insure", "Outsurance"]
        assert result.session.quotes[0].metadata == valid_form

    def test_generate_quotes_appends(self, workflow, scenario_quotes):
        session = WorkflowSession(state=WorkflowState.THANK_YOU, insurance_type="business", quotes=scenario_quotes)

        result = workflow.generate_quotes(session)

        assert len(result.session.quotes) == 4
        assert result.session.quotes[:3] == scenario_quotes

    def test_generate_without_type_returns_to_form(self, workflow):
        result = workflow.generate_quotes(WorkflowSession(state=WorkflowState.THANK_YOU))

        assert result.session.state == WorkflowState.QUOTE_INTAKE
        assert result.effects[0].level == "error"

    def test_no_providers_alert(self, workflow):
        session = WorkflowSession(state=WorkflowState.THANK_YOU, insurance_type="aviation-marine")

        result = workflow.generate_quotes(session)

        assert result.session.state == WorkflowState.COMPARISON
        assert result.session.quotes == []
        assert result.effects[0].message == "No providers currently quote Aviation & Marine."

    def test_new_type_from_comparison(self, workflow, comparison_session):
        result = workflow.select_insurance_type(comparison_session, "home")

        assert result.session.state == WorkflowState.REPRESENTATIVE_MATCHING
        assert len(result.session.quotes) == 3

    @pytest.mark.parametrize("action", ["matching_complete", "generate_quotes", "confirm", "close", "dismiss"])
    def test_invalid_transitions_from_idle(self, workflow, action):
        with pytest.raises(InvalidTransition):
            getattr(workflow, action)(workflow.start())

    def test_cannot_submit_outside_intake(self, workflow, valid_form):
        with pytest.raises(InvalidTransition):
            workflow.submit_quote_form(workflow.start(), valid_form)


class TestRecommendationFlow:
    """Tests for the recommendation half of the workflow."""

    def test_mark_interested_shows_recommendation(self, workflow, comparison_session, scenario_quotes):
        santam = scenario_quotes[0]

        result = workflow.mark_interested(comparison_session, santam)

        session = result.session
        assert session.state == WorkflowState.RECOMMENDATION_SHOWN
        assert session.interested_quote == santam
        assert session.recommendation.recommended_quote.provider == "Discovery Insure"
        assert session.user_id.startswith("USR-")

    def test_existing_user_id_kept(self, workflow, comparison_session, scenario_quotes):
        session = comparison_session.model_copy(update={"user_id": "user-42"})

        result = workflow.mark_interested(session, scenario_quotes[0])

        assert result.session.user_id == "user-42"

    def test_mark_interested_with_null_needs_analysis(self, workflow, scenario_quotes):
        session = WorkflowSession(form_data={"needsAnalysis": None})
        session = workflow.load_quotes(session, scenario_quotes).session

        result = workflow.mark_interested(session, scenario_quotes[0])

        assert result.session.state == WorkflowState.RECOMMENDATION_SHOWN
        assert result.session.recommendation.recommended_quote.provider == "Discovery Insure"

    def test_quote_outside_comparison_rejected(self, workflow, comparison_session, make_quote):
        with pytest.raises(InvalidTransition):
            workflow.mark_interested(comparison_session, make_quote(quote_id="elsewhere"))

    def test_nothing_to_recommend(self, workflow, make_quote):
        session = WorkflowSession(state=WorkflowState.COMPARISON)

        result = workflow.mark_interested(session, make_quote())

        assert result.session.state == WorkflowState.COMPARISON
        assert result.effects == [ShowAlert(message="There are no quotes to recommend from yet.", level="error")]

    def test_change_to_recommendation(self, workflow, comparison_session, scenario_quotes):
        """Test switching from Santam to the recommended Discovery quote."""
        session = workflow.mark_interested(comparison_session, scenario_quotes[0]).session

        result = workflow.choose(session, "change")

        session = result.session
        assert session.state == WorkflowState.REPRESENTATIVE_SHOWN
        assert session.user_choice == "change"
        assert session.quote_interest.interested_quote_id == "discovery"
        assert session.quote_interest.status == "recommended"
        assert session.representative.id == "rep-001"
        assert session.quote_interest.representative_id == "rep-001"
        assert session.assignment.representative_id == "rep-001"
        assert session.assignment.quote_interest_id == session.quote_interest.id
        assert session.assignment.user_id == session.user_id

    def test_proceed_with_original(self, workflow, comparison_session, scenario_quotes):
        session = workflow.mark_interested(comparison_session, scenario_quotes[0]).session

        result = workflow.choose(session, "proceed")

        assert result.session.quote_interest.interested_quote_id == "santam"
        assert result.session.quote_interest.status == "not-recommended"

    def test_full_flow_resets_to_comparison(self, workflow, comparison_session, scenario_quotes, transitions):
        session = workflow.mark_interested(comparison_session, scenario_quotes[1]).session
        session = workflow.choose(session, "proceed").session
        session = workflow.confirm(session).session

        assert session.state == WorkflowState.FINAL_CONFIRMATION
        assert session.quote_interest.status == "same-as-recommendation"

        session = workflow.close(session).session

        assert session.state == WorkflowState.COMPARISON
        assert session.quotes == scenario_quotes
        assert session.recommendation is None
        assert session.quote_interest is None
        assert session.assignment is None
        assert session.user_id == ""
        assert transitions[-1] == (WorkflowState.FINAL_CONFIRMATION, WorkflowState.COMPARISON)

    def test_dismiss_discards_recommendation(self, workflow, comparison_session, scenario_quotes):
        session = workflow.mark_interested(comparison_session, scenario_quotes[0]).session

        result = workflow.dismiss(session)

        assert result.session.state == WorkflowState.COMPARISON
        assert result.session.interested_quote is None
        assert result.session.recommendation is None

    def test_close_without_quotes_goes_idle(self, workflow, make_quote):
        quote = make_quote()
        session = WorkflowSession(state=WorkflowState.FINAL_CONFIRMATION, interested_quote=quote)

        assert workflow.close(session).session.state == WorkflowState.IDLE

    def test_choose_requires_recommendation(self, workflow, comparison_session):
        with pytest.raises(InvalidTransition):
            workflow.choose(comparison_session, "proceed")


class TestPurchaseNotification:
    """Tests for sending purchase requests from the workflow."""

    def test_success_alert(self, workflow, notifier, comparison_session, scenario_quotes):
        notifier.send_purchase_request.return_value = NotificationResult(success=True)
        applicant = {"firstName": "Naledi"}

        result = workflow.notify_purchase(comparison_session, scenario_quotes[1], applicant)

        assert result.session == comparison_session
        assert result.effects == [ShowAlert(
            message=(
                "Purchase request sent for your Discovery Insure quote (R850.00/month). "
                "We will be in touch shortly."
            )
        )]
        notifier.send_purchase_request.assert_called_once_with(scenario_quotes[1], applicant, None)

    def test_failure_alert(self, workflow, notifier, comparison_session, scenario_quotes):
        notifier.send_purchase_request.return_value = NotificationResult(success=False, error="timeout")

        result = workflow.notify_purchase(comparison_session, scenario_quotes[0], {})

        assert result.session == comparison_session
        assert result.effects[0].level == "error"
        assert result.effects[0].message == "We could not send your purchase request. Please try again."
