"""
REST integration tests for the SiteDiary API

Runs the FastAPI app in-process with a fake text provider.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from google.api_core import exceptions as google_exceptions

from sitediary.api.app import create_app
from sitediary.api.dependencies import build_services
from sitediary.config import API_TEXT_MAX_LENGTH
from sitediary.diaries.repository import DiaryRepository
from sitediary.observability.telemetry import get_counter


def assert_error(response, status: int, code: str) -> dict:
    assert response.status_code == status, response.text
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == code
    assert body["timestamp"].endswith("Z")
    return body["error"]


class TestHealth:
    def test_health_endpoint(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "SiteDiary API"
        assert "ready" in data["llm"]

    def test_root(self, client):
        body = client.get("/").json()

        assert body["success"] is True
        assert body["data"]["graphql"] == "/api/graphql"


class TestSummarizeEndpoint:
    def test_recent_entries(self, client, provider):
        provider.responses = ["## Overview\nThree busy days."]

        response = client.post("/api/ai/summarize", json={"limit": 3})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Summary generated successfully"
        assert body["data"] == {
            "summary": "## Overview\nThree busy days.",
            "diariesCount": 3,
            "dateRange": {"startDate": "2024-12-11", "endDate": "2024-12-13"},
            "limit": 3,
        }

    def test_date_range(self, client):
        response = client.post(
            "/api/ai/summarize", json={"startDate": "2024-12-01", "endDate": "2024-12-31"}
        )

        data = response.json()["data"]
        assert data["diariesCount"] == 5
        assert data["limit"] is None

    def test_non_positive_limit_uses_range(self, client):
        response = client.post(
            "/api/ai/summarize",
            json={"startDate": "2024-12-12", "endDate": "2024-12-31", "limit": 0},
        )

        assert response.json()["data"]["diariesCount"] == 2

    @pytest.mark.parametrize("limit", [True, "3", "abc", 2.5, -4, None, [3], {"n": 3}])
    def test_non_integer_limit_behaves_like_no_limit(self, client, limit):
        response = client.post(
            "/api/ai/summarize",
            json={"startDate": "2024-12-12", "endDate": "2024-12-31", "limit": limit},
        )

        assert response.status_code == 200, response.text
        data = response.json()["data"]
        assert data["diariesCount"] == 2
        assert data["limit"] is None
        assert data["dateRange"] == {"startDate": "2024-12-12", "endDate": "2024-12-31"}

    def test_integral_float_limit_selects_recent_entries(self, client):
        response = client.post("/api/ai/summarize", json={"limit": 3.0})

        data = response.json()["data"]
        assert data["diariesCount"] == 3
        assert data["limit"] == 3

    def test_empty_selection_returns_not_found(self, client, provider):
        response = client.post(
            "/api/ai/summarize", json={"startDate": "2025-01-01", "endDate": "2025-01-07"}
        )

        error = assert_error(response, 404, "NOT_FOUND")
        assert error["details"]["diariesCount"] == 0
        assert error["details"]["dateRange"] == {
            "startDate": "2025-01-01",
            "endDate": "2025-01-07",
        }
        assert "To generate a summary" in error["details"]["helpText"]
        assert provider.calls == []

    def test_no_body_defaults_to_last_week(self, client):
        # Seed diaries are from 2024, so the last seven days are empty
        response = client.post("/api/ai/summarize")

        assert_error(response, 404, "NOT_FOUND")

    def test_invalid_date_is_validation_error(self, client):
        response = client.post("/api/ai/summarize", json={"startDate": "12/01/2024"})

        error = assert_error(response, 422, "VALIDATION")
        assert error["details"]["invalidFields"] == ["startDate"]
        assert "12/01/2024" not in response.text
        assert get_counter("api.validation_errors") == 1

    def test_not_configured(self, client, provider, rate_limiter):
        provider.configured = False

        response = client.post("/api/ai/summarize", json={"limit": 3})

        error = assert_error(response, 503, "CONFIGURATION")
        assert "GOOGLE_API_KEY" in error["details"]["setupHint"]
        assert rate_limiter.get_record("summarize") is None

    def test_third_request_rate_limited(self, client):
        for _ in range(2):
            assert client.post("/api/ai/summarize", json={"limit": 1}).status_code == 200

        response = client.post("/api/ai/summarize", json={"limit": 1})

        error = assert_error(response, 429, "RATE_LIMIT_EXCEEDED")
        assert error["details"]["waitTimeSeconds"] > 0
        assert error["details"]["maxRequestsPerWindow"] == 2

    def test_provider_quota_error(self, client, provider):
        provider.responses = [google_exceptions.ResourceExhausted("quota")]

        response = client.post("/api/ai/summarize", json={"limit": 2})

        assert_error(response, 429, "PROVIDER_RATE_LIMIT")


class TestBeautifyEndpoint:
    def test_enhances_text(self, client, provider):
        provider.responses = ["Scaffolding was inspected and approved."]

        response = client.post("/api/ai/beautify", json={"text": "scaffold inspected ok"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Text enhanced successfully"
        assert body["data"] == {
            "originalText": "scaffold inspected ok",
            "beautifiedText": "Scaffolding was inspected and approved.",
            "enhanced": True,
        }

    def test_missing_text(self, client):
        assert_error(client.post("/api/ai/beautify", json={}), 400, "VALIDATION")

    def test_non_string_text(self, client):
        assert_error(client.post("/api/ai/beautify", json={"text": 123}), 400, "VALIDATION")

    def test_text_too_long(self, client, provider):
        response = client.post("/api/ai/beautify", json={"text": "a" * (API_TEXT_MAX_LENGTH + 1)})

        error = assert_error(response, 400, "VALIDATION")
        assert error["details"]["maxLength"] == API_TEXT_MAX_LENGTH
        assert provider.calls == []

    def test_whitespace_only_is_not_enhanced(self, client, provider, rate_limiter):
        response = client.post("/api/ai/beautify", json={"text": "   "})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Text is empty, no enhancement needed."
        assert body["data"]["enhanced"] is False
        assert provider.calls == []
        assert rate_limiter.get_record("beautify") is None

    def test_not_configured_checked_first(self, client, provider):
        provider.configured = False

        assert_error(client.post("/api/ai/beautify", json={}), 503, "CONFIGURATION")

    def test_provider_unavailable(self, client, provider):
        provider.responses = [google_exceptions.ServiceUnavailable("down")]

        response = client.post("/api/ai/beautify", json={"text": "hello"})

        assert_error(response, 503, "PROVIDER_UNAVAILABLE")


class TestSiteDiaryEndpoints:
    def test_list(self, client):
        body = client.get("/api/site-diary").json()

        assert body["success"] is True
        assert len(body["data"]) == 5
        assert body["data"][0]["createdBy"] == "John Doe"

    def test_get(self, client):
        body = client.get("/api/site-diary/cm4lvx1rf00008fujdr7w5u9j").json()

        assert body["data"]["title"] == "Inspection Report"
        assert body["data"]["weather"]["description"] == "partly cloudy"

    def test_get_missing(self, client):
        error = assert_error(client.get("/api/site-diary/nope"), 404, "NOT_FOUND")
        assert error["details"] == {"id": "nope"}

    def test_create(self, client, repository):
        response = client.post(
            "/api/site-diary",
            json={
                "date": "2024-12-14",
                "createdBy": "Jane Smith",
                "title": "Crane lift",
                "attendees": ["Crew A"],
            },
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["id"]
        assert repository.get(data["id"]).title == "Crane lift"

    def test_create_duplicate(self, client):
        payload = {
            "id": "cm4lvx1rf00006fujdr7w5u9h",
            "date": "2024-12-14",
            "createdBy": "Jane Smith",
            "title": "Duplicate",
        }

        assert_error(client.post("/api/site-diary", json=payload), 409, "VALIDATION")

    def test_create_invalid(self, client):
        response = client.post(
            "/api/site-diary", json={"date": "yesterday", "createdBy": "", "title": "x"}
        )

        error = assert_error(response, 422, "VALIDATION")
        assert set(error["details"]["invalidFields"]) == {"date", "createdBy"}


class BrokenRepository(DiaryRepository):
    def list_all(self):
        raise RuntimeError("connection refused: postgres://admin:secret@db")


def test_unhandled_error_returns_generic_envelope(provider):
    services = build_services(provider=provider, diaries=BrokenRepository())
    client = TestClient(create_app(services, development=False), raise_server_exceptions=False)

    response = client.get("/api/site-diary")

    error = assert_error(response, 500, "INTERNAL")
    assert error["message"] == "An unexpected error occurred."
    assert "secret" not in response.text
    services.gateway.shutdown()


def test_shutdown_stops_gateway(services, monkeypatch):
    stopped = []
    monkeypatch.setattr(services.gateway, "shutdown", lambda: stopped.append(True))

    with TestClient(create_app(services, development=True)) as client:
        assert client.get("/health").status_code == 200
        assert stopped == []

    assert stopped == [True]
