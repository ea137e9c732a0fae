"""
API tests for the compliance scan and health endpoints.

Settings and the completion client are swapped through FastAPI
dependency overrides.
"""
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from credit_review.config import get_settings
from credit_review.main import app
from credit_review.routers.scan import get_completion_client
from credit_review.services.llm import OpenAICompletionClient, build_completion_client

from conftest import AI_RESPONSE, AI_VIOLATIONS, StubCompletionClient, make_account, make_report


@pytest.fixture
def deps(settings):
    """Settings and completion client served to the endpoint, replaceable per test."""
    return {"settings": settings, "client": StubCompletionClient()}


@pytest.fixture
def api(deps):
    app.dependency_overrides[get_settings] = lambda: deps["settings"]
    app.dependency_overrides[get_completion_client] = lambda: deps["client"]
    yield TestClient(app)
    app.dependency_overrides.clear()


def _report():
    return make_report(accounts=[
        make_account("TRADE-A"),
        make_account("TRADE-B", creditor="MIDLAND FUNDING"),
    ])


class TestAiScanEndpoint:

    def test_successful_scan(self, api):
        response = api.post("/api/ai-scan", json=_report())
        assert response.status_code == 200

        body = response.json()
        assert body["success"] is True
        assert body["violations"] == {"TRADE-A": AI_VIOLATIONS, "TRADE-B": AI_VIOLATIONS}
        assert body["totalViolations"] == 6
        assert body["affectedAccounts"] == 2
        assert body["suggestions"] == {}
        assert body["breakdown"] == {"accounts": 2, "publicRecords": 0, "inquiries": 0}
        assert body["categoryBreakdown"] == {"metro2": 2, "fcra": 2, "fdcpa": 2}
        assert body["tokenInfo"]["itemsAnalyzedWithAI"] == 2
        assert body["tokenInfo"]["fallbackUsed"] is False

    def test_offline_scan(self, api, deps, offline_settings):
        deps["settings"] = offline_settings
        deps["client"] = None
        body = api.post("/api/ai-scan", json=_report()).json()
        assert list(body["violations"]) == ["TRADE001", "TRADE002", "TRADE003"]
        assert body["tokenInfo"]["fallbackUsed"] is True

    def test_input_too_large(self, api, deps, settings):
        deps["settings"] = replace(settings, max_input_tokens=10)
        response = api.post("/api/ai-scan", json=_report())

        assert response.status_code == 413
        assert response.json() == {
            "success": False,
            "error": "INPUT_TOO_LARGE",
            "message": "Credit data is too large for AI analysis. Using static violations instead.",
            "fallbackUsed": True,
        }
        assert deps["client"].requests == []

    def test_quota_exceeded(self, api, deps):
        deps["client"] = StubCompletionClient(quota_on=("MIDLAND",))
        response = api.post("/api/ai-scan", json=_report())

        assert response.status_code == 429
        body = response.json()
        assert body["error"] == "QUOTA_EXCEEDED"
        assert body["fallbackUsed"] is True

    def test_unexpected_failure(self, api, monkeypatch):
        async def broken_scan(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("credit_review.routers.scan.perform_ai_scan", broken_scan)
        response = api.post("/api/ai-scan", json=_report())

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "AI_SCAN_FAILED"
        assert body["fallbackUsed"] is True

    def test_non_object_body_rejected(self, api):
        response = api.post("/api/ai-scan", json=[1, 2, 3])
        assert response.status_code == 422

    def test_item_failures_do_not_fail_request(self, api, deps):
        deps["client"] = StubCompletionClient(fail_on=("ACME",))
        response = api.post("/api/ai-scan", json=_report())
        assert response.status_code == 200
        assert response.json()["tokenInfo"]["itemsFailed"] == 1


class TestHealth:

    def test_health(self, api):
        body = api.get("/health").json()
        assert body["status"] == "healthy"
        assert body["service"] == "Credit Review Dashboard"

    def test_api_health(self, api):
        body = api.get("/api/health").json()
        assert body["status"] == "healthy"
        assert "timestamp" in body


class TestCompletionClientLifecycle:

    @pytest.fixture
    def created(self, settings, monkeypatch):
        """Real OpenAI clients built per request, with the network call stubbed."""
        clients = []

        def recording_build(scan_settings):
            client = build_completion_client(scan_settings)
            clients.append(client)
            return client

        async def canned_complete(self, request):
            return AI_RESPONSE

        monkeypatch.setattr("credit_review.routers.scan.build_completion_client", recording_build)
        monkeypatch.setattr(OpenAICompletionClient, "complete", canned_complete)
        app.dependency_overrides[get_settings] = lambda: settings
        yield clients
        app.dependency_overrides.clear()

    def test_client_closed_after_each_request(self, created):
        api = TestClient(app)
        for _ in range(3):
            assert api.post("/api/ai-scan", json=_report()).status_code == 200

        assert len(created) == 3
        assert all(client._client.is_closed() for client in created)

    def test_client_closed_when_scan_fails(self, created):
        api = TestClient(app)
        response = api.post("/api/ai-scan", json={"CREDIT_RESPONSE": {"pad": "x" * 500000}})

        assert response.status_code == 413
        assert len(created) == 1
        assert created[0]._client.is_closed()
