"""Tests für die HTTP-Schnittstelle (FastAPI)."""

import httpx
import pytest
from fastapi.testclient import TestClient

from app.classifier.fallback import synthesize_verdict
from app.classifier.models import FALLBACK_MARKER
from app.classifier.pipeline import ClassificationPipeline
from app.main import create_app, get_pipeline
from app.provider.adapter import ProviderAdapter
from tests.conftest import FakeBackend, RecordingTransport, make_settings


@pytest.fixture
def client():
    app = create_app(make_settings())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def backend_client(unsafe_response):
    """Client mit FakeBackend statt echtem Provider."""
    backend = FakeBackend(unsafe_response)
    app = create_app(make_settings())
    http = httpx.AsyncClient(transport=RecordingTransport())
    pipeline = ClassificationPipeline(ProviderAdapter(backend, http))
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    with TestClient(app) as test_client:
        yield test_client, backend


class TestAnalyzeContent:
    def test_fallback_verdict_in_camel_case(self, client):
        response = client.post(
            "/analyze-content",
            json={"content": "hello", "contentType": "text"},
        )

        assert response.status_code == 200
        body = response.json()
        expected = synthesize_verdict("hello", "text")
        assert body["safe"] is expected.safe
        assert body["confidence"] == expected.confidence
        assert body["rawResponse"].startswith(FALLBACK_MARKER)
        assert body["detailedAnalysis"] == expected.detailed_analysis
        assert set(body) == {"safe", "reason", "category", "confidence", "rawResponse", "detailedAnalysis"}

    def test_content_type_defaults_to_text(self, client):
        response = client.post("/analyze-content", json={"content": "ab"})

        assert response.status_code == 200
        assert response.json()["category"] == "text_policy_violation"

    def test_unknown_content_type_is_text(self, client):
        first = client.post("/analyze-content", json={"content": "ab", "contentType": "audio"})
        second = client.post("/analyze-content", json={"content": "ab", "contentType": "text"})

        assert first.json() == second.json()

    def test_provider_verdict(self, backend_client):
        test_client, backend = backend_client
        response = test_client.post(
            "/analyze-content",
            json={"content": "I will hurt you", "contentType": "text"},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["safe"] is False
        assert body["reason"] == "it contains a threat"
        assert body["category"] == "text_policy_violation"
        assert not body["rawResponse"].startswith(FALLBACK_MARKER)
        assert len(backend.calls) == 1


class TestRequestValidation:
    @pytest.mark.parametrize("payload", [{}, {"content": ""}, {"contentType": "image"}])
    def test_missing_content(self, client, payload):
        response = client.post("/analyze-content", json=payload)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Content is required",
            "safe": False,
            "reason": "Missing content",
        }

    def test_invalid_json(self, client):
        response = client.post(
            "/analyze-content",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request body"
        assert body["safe"] is False
        assert body["reason"] == "Invalid request format"
        assert "details" in body


class TestCors:
    def test_preflight(self, client):
        response = client.options(
            "/analyze-content",
            headers={
                "Origin": "https://dashboard.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_simple_request_header(self, client):
        response = client.post(
            "/analyze-content",
            json={"content": "hello"},
            headers={"Origin": "https://dashboard.example.com"},
        )

        assert response.headers["access-control-allow-origin"] == "*"


class TestHealth:
    def test_degraded_without_provider(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["checks"]["provider"] == {
            "status": "not_configured",
            "provider": "claude",
            "mode": "fallback",
        }

    def test_invalid_key_is_reported(self):
        app = create_app(make_settings(anthropic_api_key="not-a-claude-key"))
        with TestClient(app) as test_client:
            body = test_client.get("/health").json()

        assert body["status"] == "degraded"
        assert body["checks"]["provider"]["status"] == "invalid"

    def test_healthy_with_key(self):
        app = create_app(make_settings(anthropic_api_key="sk-ant-0123456789"))
        with TestClient(app) as test_client:
            body = test_client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["checks"]["provider"]["key_prefix"] == "sk-ant-0..."
