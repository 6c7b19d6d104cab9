"""Shared test fixtures for the Resume Assistant test suite."""

from __future__ import annotations

import os
from unittest.mock import MagicMock

import pytest


def pytest_configure(config):
    """Set test environment variables BEFORE collection starts.

    This runs before any imports, so config.py picks these values up on
    module load.
    """
    os.environ.setdefault("PERPLEXITY_API_KEY", "test-perplexity-key-123")
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
    os.environ.setdefault("METRICS_ENABLED", "false")
    os.environ.setdefault("PUBLIC_BASE_URL", "http://testserver")


def _make_completion(content: str, model: str = "sonar") -> dict:
    """Build a chat-completion payload as the model API returns it."""
    return {
        "id": "cmpl-test",
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 420, "completion_tokens": 37, "total_tokens": 457},
    }


@pytest.fixture
def mock_gateway():
    """A configured gateway mock that answers every call successfully."""
    gateway = MagicMock()
    gateway.is_configured = True
    gateway.model = "sonar"
    gateway.chat.return_value = _make_completion("I have nine years of experience.")
    return gateway


@pytest.fixture
def mock_http_response():
    """Factory fixture for creating mock httpx responses."""

    def _make(data, status_code: int = 200):
        mock = MagicMock()
        mock.status_code = status_code
        mock.json.return_value = data
        mock.text = str(data)
        return mock

    return _make
