"""
Tests for the API endpoints.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from quote_advisor.api.routes import get_quote_generator, get_representative_directory
from quote_advisor.config import get_settings
from quote_advisor.core.notification_client import NotificationResult, get_notification_client
from quote_advisor.core.quote_store import QuoteStore, get_quote_store
from quote_advisor.main import app
from quote_advisor.pipeline.steps import QuoteGenerationStep, RepresentativeDirectory
from tests.conftest import SequenceRandom


@pytest.fixture
def store():
    return QuoteStore()


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def client(test_settings, store, notifier, fixed_clock):
    """Create test client with in-memory collaborators."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_quote_store] = lambda: store
    app.dependency_overrides[get_notification_client] = lambda: notifier
    app.dependency_overrides[get_quote_generator] = lambda: QuoteGenerationStep(
        random_source=SequenceRandom(0.5), clock=fixed_clock, validity_days=30
    )
    app.dependency_overrides[get_representative_directory] = lambda: RepresentativeDirectory(
        random_source=SequenceRandom(0.0)
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def generated(client, budget_form):
    """Quotes generated for user-1 through the API."""
    response = client.post(
        "/api/quotes/generate",
        json={"insurance_type": "auto", "user_id": "user-1", "form_data": budget_form},
    )
    return response.json()["data"]


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check_structure(self, client):
        """Test health endpoint returns expected structure."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "degraded"
        assert data["notifications_configured"] is False
        assert data["quotes_stored"] == 0
        assert "version" in data
        assert "timestamp" in data

    def test_healthy_with_notifications(self, client, test_settings):
        app.dependency_overrides[get_settings] = lambda: test_settings.model_copy(
            update={"notification_url": "https://functions.example.com/send-quote-email"}
        )

        assert client.get("/health").json()["status"] == "healthy"

    def test_root_endpoint(self, client):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["name"] == "Quote Advisor API"
        assert "version" in data
        assert "docs" in data


class TestQuoteEndpoints:
    """Tests for quote endpoints."""

    def test_generate_quotes(self, client, store, budget_form):
        response = client.post(
            "/api/quotes/generate",
            json={"insurance_type": "auto", "user_id": "user-1", "form_data": budget_form},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert [q["provider"] for q in data["data"]] == ["Santam", "Discovery Insure", "Outsurance"]
        assert len(store) == 3
        options = data["data"][0]["metadata"]["needsAnalysis"]["coveragePreferences"]["optionalCovers"]
        assert options["accidentalDamage"] == {"selected": False, "amount": None}

    def test_generate_requires_type(self, client):
        response = client.post("/api/quotes/generate", json={})
        assert response.status_code == 422

    def test_get_quote(self, client, generated):
        quote_id = generated[0]["id"]

        response = client.get(f"/api/quotes/{quote_id}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == quote_id

    def test_get_nonexistent_quote(self, client):
        response = client.get("/api/quotes/Q-NONEXISTENT")
        assert response.status_code == 404

    def test_update_status(self, client, generated):
        quote_id = generated[0]["id"]

        response = client.put(f"/api/quotes/{quote_id}/status", json={"status": "approved"})

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "approved"
        assert client.get(f"/api/quotes/{quote_id}").json()["data"]["status"] == "approved"

    def test_update_status_rejects_unknown_status(self, client, generated):
        response = client.put(f"/api/quotes/{generated[0]['id']}/status", json={"status": "lost"})
        assert response.status_code == 422

    def test_update_status_unknown_quote(self, client):
        response = client.put("/api/quotes/Q-NONEXISTENT/status", json={"status": "approved"})
        assert response.status_code == 404

    def test_list_user_quotes(self, client, generated):
        response = client.get("/api/quotes/user/user-1", params={"page": 2, "limit": 2})
        assert response.status_code == 200

        data = response.json()
        assert len(data["quotes"]) == 1
        assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "total_pages": 2}

    def test_list_user_quotes_filters(self, client, generated):
        response = client.get("/api/quotes/user/user-1", params={"type": "home"})
        assert response.json()["pagination"]["total"] == 0

    def test_list_user_quotes_rejects_bad_page(self, client):
        response = client.get("/api/quotes/user/user-1", params={"page": 0})
        assert response.status_code == 400

    def test_compare_quotes(self, client, generated):
        ids = [q["id"] for q in generated]

        response = client.post("/api/quotes/compare", json={"quote_ids": ids})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["cheapest"]["provider"] == "Outsurance"
        assert data["most_expensive"]["provider"] == "Discovery Insure"

    def test_compare_unknown_quotes(self, client):
        response = client.post("/api/quotes/compare", json={"quote_ids": ["missing"]})
        assert response.status_code == 404

    def test_compare_requires_ids(self, client):
        response = client.post("/api/quotes/compare", json={"quote_ids": []})
        assert response.status_code == 422

    def test_compare_with_filters(self, client, generated):
        """Test filters narrow and order the quotes before comparing."""
        ids = [q["id"] for q in generated]

        response = client.post("/api/quotes/compare", json={
            "quote_ids": ids,
            "filters": {"max_premium": 1900, "sort_by": "price", "sort_order": "desc"},
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert [q["provider"] for q in data["quotes"]] == ["Santam", "Outsurance"]
        assert data["most_expensive"]["provider"] == "Santam"

    def test_compare_filters_exclude_everything(self, client, generated):
        ids = [q["id"] for q in generated]

        response = client.post("/api/quotes/compare", json={"quote_ids": ids, "filters": {"min_rating": 5}})

        assert response.status_code == 404

    def test_compare_rejects_unknown_sort_field(self, client, generated):
        response = client.post("/api/quotes/compare", json={
            "quote_ids": [generated[0]["id"]],
            "filters": {"sort_by": "colour"},
        })

        assert response.status_code == 422


class TestRecommendationEndpoints:
    """Tests for recommendation, representative and interest endpoints."""

    def test_recommend_by_id(self, client, generated, budget_form):
        ids = [q["id"] for q in generated]

        response = client.post("/api/quotes/recommendation", json={"quote_ids": ids, "form_data": budget_form})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert 0 <= data["data"]["score"] <= 100
        assert len(data["data"]["alternative_quotes"]) == 2

    def test_recommend_inline_quotes(self, client, scenario_quotes, budget_form):
        quotes = [q.model_dump(mode="json") for q in scenario_quotes]

        response = client.post("/api/quotes/recommendation", json={"quotes": quotes, "form_data": budget_form})

        assert response.json()["data"]["recommended_quote"]["provider"] == "Discovery Insure"

    def test_recommend_with_null_form_sections(self, client, scenario_quotes):
        quotes = [q.model_dump(mode="json") for q in scenario_quotes]

        response = client.post("/api/quotes/recommendation", json={
            "quotes": quotes,
            "form_data": {"needsAnalysis": None},
        })

        assert response.status_code == 200
        assert response.json()["data"]["recommended_quote"]["provider"] == "Discovery Insure"

    def test_recommend_nothing(self, client):
        response = client.post("/api/quotes/recommendation", json={})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["data"] is None
        assert data["message"] == "No quotes to recommend from"

    def test_assign_representative(self, client):
        response = client.post("/api/representatives/assign", json={"insurance_type": "mining-rehabilitation"})

        assert response.status_code == 200
        assert response.json()["data"]["id"] == "rep-003"

    def test_get_representative(self, client):
        response = client.get("/api/representatives/rep-004")

        assert response.status_code == 200
        assert response.json()["data"]["surname"] == "Mavembeka"

    def test_get_unknown_representative(self, client):
        assert client.get("/api/representatives/rep-999").status_code == 404

    def test_create_interest(self, client, scenario_quotes):
        santam, discovery, _ = [q.model_dump(mode="json") for q in scenario_quotes]

        response = client.post("/api/interests", json={
            "user_id": "user-1",
            "interested_quote": santam,
            "recommended_quote": discovery,
            "user_choice": "change",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["interest"]["interested_quote_id"] == "discovery"
        assert data["interest"]["status"] == "recommended"
        assert data["interest"]["representative_id"] == "rep-001"
        assert data["assignment"]["representative_id"] == "rep-001"
        assert data["assignment"]["quote_interest_id"] == data["interest"]["id"]
        assert data["assignment"]["expected_response_days"] == 3

    def test_create_interest_rejects_unknown_choice(self, client, scenario_quotes):
        quote = scenario_quotes[0].model_dump(mode="json")

        response = client.post("/api/interests", json={
            "interested_quote": quote,
            "recommended_quote": quote,
            "user_choice": "maybe",
        })

        assert response.status_code == 422


class TestNotificationEndpoint:
    """Tests for purchase notifications."""

    def test_purchase_notification(self, client, notifier, scenario_quotes):
        notifier.send_purchase_request.return_value = NotificationResult(success=True)

        response = client.post("/api/notifications/quote-purchase", json={
            "quote": scenario_quotes[0].model_dump(mode="json"),
            "applicant": {"firstName": "Naledi"},
        })

        assert response.status_code == 200
        assert response.json()["success"] is True
        notifier.send_purchase_request.assert_called_once()

    def test_purchase_notification_failure(self, client, notifier, scenario_quotes):
        notifier.send_purchase_request.return_value = NotificationResult(success=False, error="timeout")

        response = client.post("/api/notifications/quote-purchase", json={
            "quote": scenario_quotes[0].model_dump(mode="json"),
            "applicant": {},
        })

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "timeout"


class TestAPIDocumentation:
    """Tests for API documentation."""

    def test_openapi_schema(self, client):
        """Test OpenAPI schema is available."""
        response = client.get("/openapi.json")
        assert response.status_code == 200

        schema = response.json()
        assert "/api/quotes/generate" in schema["paths"]
        assert "/api/interests" in schema["paths"]

    def test_docs_available(self, client):
        """Test Swagger docs are available."""
        response = client.get("/docs")
        assert response.status_code == 200
