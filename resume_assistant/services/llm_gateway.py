"""HTTP client for the Perplexity chat-completions API.

Perplexity exposes an OpenAI-compatible ``POST /chat/completions``
endpoint authenticated with a Bearer token.  The gateway sends one
request per call and returns the decoded completion payload unchanged::

    {"model": "sonar", "choices": [{"message": {"content": "..."}}], "usage": {...}}

There is no retry loop here: a failed call is reported to the caller as
an ``UpstreamError`` and the assistant degrades to a scripted reply.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

import httpx
from langchain_core.messages import BaseMessage, convert_to_openai_messages

from resume_assistant.config import (
    MODEL_MAX_TOKENS,
    MODEL_NAME,
    MODEL_TEMPERATURE,
    PERPLEXITY_API_KEY,
    PERPLEXITY_BASE_URL,
)
from resume_assistant.services.metrics import metrics

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 60.0
_SERVICE = "perplexity"
_OPERATION = "chat_completion"


class UpstreamError(Exception):
    """Raised when the model API call fails (network, non-2xx, bad payload)."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class LanguageModelGateway:
    """Thin wrapper around the hosted chat-completions endpoint.

    An empty API key is a valid configuration: ``is_configured`` is then
    ``False`` and callers are expected to skip the call entirely.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        *,
        model: str | None = None,
        temperature: float = MODEL_TEMPERATURE,
        max_tokens: int = MODEL_MAX_TOKENS,
    ):
        self._api_key = PERPLEXITY_API_KEY if api_key is None else api_key
        self._model = model or MODEL_NAME
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client = httpx.Client(
            base_url=base_url or PERPLEXITY_BASE_URL,
            headers={
                "Authorization": f"Bearer {self._api_key or ''}",
                "Content-Type": "application/json",
            },
            timeout=REQUEST_TIMEOUT_SECONDS,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    @property
    def model(self) -> str:
        return self._model

    def chat(self, messages: list[BaseMessage]) -> dict[str, Any]:
        """Send *messages* as one chat completion and return the payload.

        Args:
            messages: LangChain messages in conversation order
                (system first, current user query last).

        Raises:
            UpstreamError: on transport errors, non-2xx responses, or a
                payload without ``choices[0].message.content``.
        """
        body = {
            "model": self._model,
            "messages": convert_to_openai_messages(messages),
            "stream": False,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }

        t0 = time.perf_counter()
        try:
            response = self._client.post("/chat/completions", json=body)
        except httpx.HTTPError as exc:
            elapsed = (time.perf_counter() - t0) * 1000
            metrics.record_failure(
                _SERVICE, _OPERATION, error_type=type(exc).__name__, latency_ms=elapsed,
            )
            raise UpstreamError(f"Model API request failed: {exc}") from exc

        elapsed = (time.perf_counter() - t0) * 1000
        if response.status_code >= 400:
            logger.error(
                "Model API error response %d: %s", response.status_code, response.text,
            )
            metrics.record_failure(
                _SERVICE, _OPERATION,
                error_type=f"http_{response.status_code}", latency_ms=elapsed,
            )
            raise UpstreamError(
                f"Model API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            if not isinstance(data["choices"][0]["message"]["content"], str):
                raise TypeError("choices[0].message.content is not a string")
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            metrics.record_failure(
                _SERVICE, _OPERATION, error_type="malformed_payload", latency_ms=elapsed,
            )
            raise UpstreamError(f"Model API returned a malformed payload: {exc}") from exc

        metrics.record_success(_SERVICE, _OPERATION, latency_ms=elapsed)
        if isinstance(data.get("usage"), dict):
            metrics.record_usage(data.get("model", self._model), data["usage"])
        logger.debug(
            "Model API responded in %.0fms (model=%s)", elapsed, data.get("model"),
        )
        return data


# ── Module-level singleton (thread-safe) ────────────────────────────
_gateway: LanguageModelGateway | None = None
_gateway_lock = threading.Lock()


def get_language_model_gateway() -> LanguageModelGateway:
    """Return a module-level LanguageModelGateway singleton.

    Uses double-checked locking so that the lock is only acquired during
    the first initialisation, not on every subsequent call.
    """
    global _gateway
    if _gateway is None:
        with _gateway_lock:
            if _gateway is None:
                _gateway = LanguageModelGateway()
    return _gateway
