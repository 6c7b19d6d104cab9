"""CloudWatch custom metrics emitter with background batching.

Publishes metrics for the language-model gateway (request count, latency,
errors, token usage) and a per-intent counter so the share of canned vs.
model-routed queries can be tracked.

Design
------
* Metrics are collected in a thread-safe in-memory buffer.
* A daemon thread flushes the buffer to CloudWatch every
  ``FLUSH_INTERVAL_SECONDS`` (default 60 s).
* When running locally (``METRICS_ENABLED != "true"``), metrics are
  logged at DEBUG level but **not** pushed to CloudWatch.
* Each ``put_metric_data`` call sends up to 1 000 metric data points
  (the CloudWatch API limit per request).

Usage
-----
>>> from resume_assistant.services.metrics import metrics
>>> metrics.record_success("perplexity", "chat_completion", latency_ms=812.0)
>>> metrics.record_failure("perplexity", "chat_completion", error_type="UpstreamError")
>>> metrics.record_intent("salary_redirect")
"""

from __future__ import annotations

import atexit
import logging
import os
import threading
import time
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

NAMESPACE = "ResumeAssistant"
FLUSH_INTERVAL_SECONDS = 60
MAX_BATCH_SIZE = 1_000  # CloudWatch API limit per PutMetricData call


class MetricsClient:
    """Batched CloudWatch metrics publisher."""

    def __init__(self) -> None:
        self._enabled = os.getenv("METRICS_ENABLED", "false").lower() == "true"
        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._cw_client = None  # lazy-init

        if self._enabled:
            self._start_flush_thread()

    # ── Lazy CloudWatch client ────────────────────────────────────────

    def _get_cw_client(self):
        """Create the boto3 CloudWatch client on first use."""
        if self._cw_client is None:
            import boto3

            self._cw_client = boto3.client("cloudwatch")
        return self._cw_client

    # ── Public API ────────────────────────────────────────────────────

    def record_success(
        self,
        service: str,
        operation: str,
        latency_ms: float,
    ) -> None:
        """Record a successful upstream call."""
        now = datetime.now(UTC)
        dims = [
            {"Name": "Service", "Value": service},
            {"Name": "Operation", "Value": operation},
        ]
        self._append(
            {
                "MetricName": "Upstream/RequestCount",
                "Dimensions": dims + [{"Name": "Status", "Value": "success"}],
                "Timestamp": now,
                "Value": 1,
                "Unit": "Count",
            }
        )
        self._append(
            {
                "MetricName": "Upstream/Latency",
                "Dimensions": dims,
                "Timestamp": now,
                "Value": latency_ms,
                "Unit": "Milliseconds",
            }
        )
        logger.debug(
            "Metric: %s %s success latency=%.1fms", service, operation, latency_ms,
        )

    def record_failure(
        self,
        service: str,
        operation: str,
        error_type: str,
        latency_ms: float = 0,
    ) -> None:
        """Record a failed upstream call."""
        now = datetime.now(UTC)
        dims = [
            {"Name": "Service", "Value": service},
            {"Name": "Operation", "Value": operation},
        ]
        self._append(
            {
                "MetricName": "Upstream/RequestCount",
                "Dimensions": dims + [{"Name": "Status", "Value": "failure"}],
                "Timestamp": now,
                "Value": 1,
                "Unit": "Count",
            }
        )
        self._append(
            {
                "MetricName": "Upstream/ErrorCount",
                "Dimensions": dims + [{"Name": "ErrorType", "Value": error_type}],
                "Timestamp": now,
                "Value": 1,
                "Unit": "Count",
            }
        )
        if latency_ms > 0:
            self._append(
                {
                    "MetricName": "Upstream/Latency",
                    "Dimensions": dims,
                    "Timestamp": now,
                    "Value": latency_ms,
                    "Unit": "Milliseconds",
                }
            )
        logger.debug(
            "Metric: %s %s failure error=%s latency=%.1fms",
            service, operation, error_type, latency_ms,
        )

    def record_usage(self, model: str, usage: dict[str, Any]) -> None:
        """Record prompt/completion token counts reported by the model API."""
        now = datetime.now(UTC)
        for kind in ("prompt_tokens", "completion_tokens"):
            value = usage.get(kind)
            if not isinstance(value, int | float):
                continue
            self._append(
                {
                    "MetricName": "Model/TokenCount",
                    "Dimensions": [
                        {"Name": "Model", "Value": model},
                        {"Name": "Kind", "Value": kind},
                    ],
                    "Timestamp": now,
                    "Value": value,
                    "Unit": "Count",
                }
            )
        logger.debug("Metric: %s usage %s", model, usage)

    def record_intent(self, intent: str) -> None:
        """Count one classified query for *intent*."""
        self._append(
            {
                "MetricName": "Assistant/IntentCount",
                "Dimensions": [{"Name": "Intent", "Value": intent}],
                "Timestamp": datetime.now(UTC),
                "Value": 1,
                "Unit": "Count",
            }
        )
        logger.debug("Metric: intent=%s", intent)

    def flush(self) -> int:
        """Send buffered metrics to CloudWatch.  Returns count sent."""
        with self._lock:
            if not self._buffer:
                return 0
            batch = self._buffer[:]
            self._buffer.clear()

        if not self._enabled:
            logger.debug("Metrics flush skipped (not enabled): %d items", len(batch))
            return 0

        sent = 0
        try:
            cw = self._get_cw_client()
            for i in range(0, len(batch), MAX_BATCH_SIZE):
                chunk = batch[i : i + MAX_BATCH_SIZE]
                cw.put_metric_data(Namespace=NAMESPACE, MetricData=chunk)
                sent += len(chunk)
            logger.info("Flushed %d metrics to CloudWatch", sent)
        except Exception:
            logger.exception("Failed to flush metrics to CloudWatch")
        return sent

    # ── Internal ──────────────────────────────────────────────────────

    def _append(self, metric_data: dict[str, Any]) -> None:
        with self._lock:
            self._buffer.append(metric_data)

    def _start_flush_thread(self) -> None:
        """Start a daemon thread that flushes metrics periodically."""

        def _loop():
            while True:
                time.sleep(FLUSH_INTERVAL_SECONDS)
                try:
                    self.flush()
                except Exception:
                    logger.exception("Metrics flush thread error")

        t = threading.Thread(target=_loop, daemon=True, name="metrics-flush")
        t.start()
        atexit.register(self.flush)
        logger.info(
            "Metrics flush thread started (interval=%ds)", FLUSH_INTERVAL_SECONDS,
        )


# ── Module-level singleton ──────────────────────────────────────────
metrics = MetricsClient()
