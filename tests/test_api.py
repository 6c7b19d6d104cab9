"""Tests for the FastAPI endpoints."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from resume_assistant import config
from resume_assistant.agent import IntentRouter
from resume_assistant.prompts import DEMO_FALLBACK_REPLY, UNKNOWN_NAME_REPLY
from resume_assistant.server import app
from resume_assistant.services.llm_gateway import UpstreamError
from resume_assistant.services.resume import DataLoadError
from resume_assistant.summary import FALLBACK_SUMMARY


@pytest.fixture
def intent_router(mock_gateway):
    """Attach a router on the mock gateway to app state (mirrors the lifespan)."""
    router = IntentRouter(gateway=mock_gateway)
    app.state.intent_router = router
    yield router
    # Clean up
    app.state.intent_router = None


@pytest.fixture
def client(intent_router):
    """FastAPI test client with the mock-backed router wired up."""
    return TestClient(app)


def _ask(client, query, **extra):
    return client.post("/api/assistant/ask", json={"query": query, "mode": "text", **extra})


class TestHealthEndpoint:
    def test_health_returns_ok(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "resume-assistant"
        assert "timestamp" in data


class TestAskEndpoint:
    def test_career_question_returns_model_reply(self, client, mock_gateway):
        response = _ask(client, "Tell me about your experience with Kubernetes")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "I have nine years of experience."
        assert data["metadata"]["model"] == "sonar"
        assert data["metadata"]["usage"]["total_tokens"] == 457
        # Model replies carry no popup flag at all
        assert "showMeetingPopup" not in data["metadata"]
        mock_gateway.chat.assert_called_once()

    def test_direct_scheduling_opens_meeting_form(self, client, mock_gateway):
        response = _ask(client, "Can we schedule a call next week?")
        assert response.status_code == 200
        metadata = response.json()["metadata"]
        assert metadata["model"] == "meeting-scheduled"
        assert metadata["showMeetingPopup"] is True
        assert metadata["usage"] == {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}
        mock_gateway.chat.assert_not_called()

    def test_availability_offer_has_false_popup(self, client):
        metadata = _ask(client, "Are you free tomorrow?").json()["metadata"]
        assert metadata["model"] == "meeting-offer"
        assert metadata["showMeetingPopup"] is False

    def test_resume_download_link(self, client):
        data = _ask(client, "Can you download my resume?").json()
        assert data["metadata"]["model"] == "direct"
        assert "(http://testserver/api/assistant/download)" in data["message"]

    def test_user_name_is_used_for_name_query(self, client):
        data = _ask(client, "What is my name?", userName="Sam").json()
        assert data["message"] == "Your name is Sam."

    def test_name_query_without_name(self, client):
        data = _ask(client, "What's my name?").json()
        assert data["message"] == UNKNOWN_NAME_REPLY

    def test_history_is_passed_to_classifier(self, client, mock_gateway):
        history = [
            {"role": "user", "content": "Are you free tomorrow?"},
            {"role": "assistant", "content": "Would you like to schedule a meeting?"},
        ]
        data = _ask(client, "What time works best?", history=history).json()
        assert data["metadata"]["model"] == "meeting-scheduled"
        mock_gateway.chat.assert_not_called()

    def test_history_is_forwarded_to_model(self, client, mock_gateway):
        history = [
            {"role": "user", "content": "What stack do you use?"},
            {"role": "assistant", "content": "Mostly TypeScript and Python."},
        ]
        _ask(client, "Describe your Terraform setup", history=history)
        messages = mock_gateway.chat.call_args[0][0]
        assert [m.content for m in messages[1:]] == [
            "What stack do you use?",
            "Mostly TypeScript and Python.",
            "Describe your Terraform setup",
        ]

    def test_upstream_failure_still_returns_200(self, client, mock_gateway):
        mock_gateway.chat.side_effect = UpstreamError("Model API error: 500", status_code=500)
        response = _ask(client, "Tell me about your experience with Kubernetes")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == DEMO_FALLBACK_REPLY
        assert data["metadata"]["model"] == "demo-fallback"
        assert data["metadata"]["usage"]["total_tokens"] == 150

    def test_unexpected_gateway_error_still_returns_200(self, client, mock_gateway):
        mock_gateway.chat.side_effect = RuntimeError("socket closed")
        response = _ask(client, "Hello, how are you?")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == DEMO_FALLBACK_REPLY
        assert data["metadata"]["model"] == "demo-fallback"

    def test_missing_api_key_returns_demo(self, client, mock_gateway):
        mock_gateway.is_configured = False
        data = _ask(client, "Hello, how are you?").json()
        assert data["metadata"]["model"] == "demo"

    def test_voice_mode_is_accepted(self, client):
        response = client.post(
            "/api/assistant/ask", json={"query": "Are you free tomorrow?", "mode": "voice"},
        )
        assert response.status_code == 200

    @pytest.mark.parametrize(
        "body",
        [
            {"query": "", "mode": "text"},
            {"query": "x" * 1001, "mode": "text"},
            {"mode": "text"},
            {"query": "Hello", "mode": "video"},
            {"query": "Hello", "mode": "text", "history": [{"role": "system", "content": "x"}]},
        ],
    )
    def test_invalid_request_returns_422(self, client, mock_gateway, body):
        response = client.post("/api/assistant/ask", json=body)
        assert response.status_code == 422
        mock_gateway.chat.assert_not_called()

    def test_unexpected_error_returns_500(self, client, intent_router):
        with patch.object(intent_router, "handle", side_effect=RuntimeError("boom")):
            response = _ask(client, "Hello")
        assert response.status_code == 500
        assert response.json()["detail"] == "An internal error occurred. Please try again."

    def test_error_detail_exposed_in_development(self, client, intent_router):
        with (
            patch.object(config, "EXPOSE_ERROR_DETAILS", True),
            patch.object(intent_router, "handle", side_effect=RuntimeError("boom")),
        ):
            response = _ask(client, "Hello")
        assert response.status_code == 500
        assert response.json()["detail"] == "boom"

    def test_resume_load_failure_returns_500(self, client, mock_gateway):
        with patch(
            "resume_assistant.agent.get_career_prompt",
            side_effect=DataLoadError("Resume data could not be read"),
        ):
            response = _ask(client, "Tell me about your experience with Kubernetes")
        assert response.status_code == 500
        mock_gateway.chat.assert_not_called()

    def test_response_includes_request_id_header(self, client):
        response = _ask(client, "Hello")
        assert "X-Request-ID" in response.headers

    def test_client_supplied_request_id_is_echoed(self, client):
        response = client.post(
            "/api/assistant/ask",
            json={"query": "Hello", "mode": "text"},
            headers={"X-Request-ID": "my-trace-id-123"},
        )
        assert response.headers["X-Request-ID"] == "my-trace-id-123"


class TestRouterNotReady:
    def test_returns_503_when_router_not_initialised(self):
        """If the router hasn't been set via lifespan, return 503."""
        # Enter the test client (triggers lifespan), then wipe the router
        # to simulate the state before lifespan completes.
        with TestClient(app) as tc:
            app.state.intent_router = None
            response = tc.post(
                "/api/assistant/ask",
                json={"query": "Hello!", "mode": "text"},
            )
            assert response.status_code == 503
            assert "starting up" in response.json()["detail"].lower()


class TestDownloadEndpoint:
    def test_serves_pdf_attachment(self, client, tmp_path):
        pdf = tmp_path / "resume.pdf"
        pdf.write_bytes(b"%PDF-1.4 test")
        with patch.object(config, "RESUME_PDF_PATH", pdf):
            response = client.get("/api/assistant/download")
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="Resume.pdf"' in response.headers["content-disposition"]
        assert response.content == b"%PDF-1.4 test"

    def test_missing_pdf_returns_404(self, client, tmp_path):
        with patch.object(config, "RESUME_PDF_PATH", tmp_path / "missing.pdf"):
            response = client.get("/api/assistant/download")
        assert response.status_code == 404


class TestSummaryEndpoint:
    _HISTORY = [
        {"role": "user", "content": "Can we talk about the senior role?"},
        {"role": "assistant", "content": "Sure, would you like to schedule a meeting?"},
    ]

    def test_returns_model_summary(self, client, mock_gateway):
        reply = {"summary": "• Senior role", "title": "Role Chat", "suggestedMode": "meeting"}
        mock_gateway.chat.return_value = {"choices": [{"message": {"content": json.dumps(reply)}}]}

        response = client.post("/api/ai/summary", json={"chatHistory": self._HISTORY})

        assert response.status_code == 200
        assert response.json() == {
            "summary": "• Senior role",
            "suggestedTitle": "Role Chat",
            "suggestedMode": "meeting",
        }

    def test_fallback_summary_on_failure(self, client, mock_gateway):
        mock_gateway.chat.side_effect = UpstreamError("Model API request failed")
        response = client.post("/api/ai/summary", json={"chatHistory": self._HISTORY})

        assert response.status_code == 200
        data = response.json()
        assert data["summary"] == FALLBACK_SUMMARY.summary
        assert data["suggestedTitle"] == "Project Discussion"
        assert data["suggestedMode"] == "email"

    def test_missing_history_returns_422(self, client):
        response = client.post("/api/ai/summary", json={})
        assert response.status_code == 422


class TestRootEndpoint:
    def test_root_returns_service_info(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "Resume Assistant"
        assert "docs" in data


class TestUnhandledErrors:
    def test_last_resort_handler_returns_json_500(self, intent_router):
        client = TestClient(app, raise_server_exceptions=False)
        with patch(
            "resume_assistant.api.routes.SummaryResponse", side_effect=RuntimeError("bad"),
        ):
            response = client.post("/api/ai/summary", json={"chatHistory": []})
        assert response.status_code == 500
        assert response.json() == {"error": {"message": "Internal server error"}}
