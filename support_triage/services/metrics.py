"""CloudWatch custom metrics emitter with background batching.

Publishes per-node latency and per-run outcome metrics for the triage
workflow.

Design
------
* Metrics are collected in a thread-safe in-memory buffer.
* A daemon thread flushes the buffer to CloudWatch every
  ``FLUSH_INTERVAL_SECONDS`` (default 60 s).
* When running locally (``METRICS_ENABLED != "true"``), metrics are
  logged at DEBUG level and dropped; nothing is buffered or pushed to
  CloudWatch.
* Each ``put_metric_data`` call sends up to 1 000 metric data points
  (the CloudWatch API limit per request).

Usage
-----
>>> from support_triage.services.metrics import metrics
>>> metrics.record_step("Classify ticket", "langgraph", latency_ms=0.4)
>>> metrics.record_run("optimized", "billing", requires_human=False, latency_ms=3.2)
>>> metrics.record_failure("triage", error_type="ValueError")
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

DEFAULT_NAMESPACE = "SupportTriage"
FLUSH_INTERVAL_SECONDS = 60
MAX_BATCH_SIZE = 1_000  # CloudWatch API limit per PutMetricData call


class MetricsClient:
    """Batched CloudWatch metrics publisher."""

    def __init__(self) -> None:
        self._enabled = os.getenv("METRICS_ENABLED", "false").lower() == "true"
        self._namespace = os.getenv("METRICS_NAMESPACE", DEFAULT_NAMESPACE)
        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._cw_client = None  # lazy-init

        if self._enabled:
            self._start_flush_thread()

    @property
    def namespace(self) -> str:
        return self._namespace

    # ── Lazy CloudWatch client ────────────────────────────────────────

    def _get_cw_client(self):
        """Create the boto3 CloudWatch client on first use."""
        if self._cw_client is None:
            import boto3

            self._cw_client = boto3.client("cloudwatch")
        return self._cw_client

    # ── Public API ────────────────────────────────────────────────────

    def record_step(self, step: str, kind: str, latency_ms: float) -> None:
        """Record how long a single workflow node took."""
        self._append(
            {
                "MetricName": "Triage/StepLatency",
                "Dimensions": [
                    {"Name": "Step", "Value": step},
                    {"Name": "Kind", "Value": kind},
                ],
                "Timestamp": datetime.now(UTC),
                "Value": latency_ms,
                "Unit": "Milliseconds",
            }
        )
        logger.debug("Metric: step %r (%s) latency=%.1fms", step, kind, latency_ms)

    def record_run(
        self,
        mode: str,
        classification: str,
        requires_human: bool,
        latency_ms: float,
    ) -> None:
        """Record a completed triage run."""
        now = datetime.now(UTC)
        dims_mode = [{"Name": "Mode", "Value": mode}]

        self._append(
            {
                "MetricName": "Triage/RunCount",
                "Dimensions": dims_mode + [
                    {"Name": "Classification", "Value": classification},
                ],
                "Timestamp": now,
                "Value": 1,
                "Unit": "Count",
            }
        )
        self._append(
            {
                "MetricName": "Triage/RunLatency",
                "Dimensions": dims_mode,
                "Timestamp": now,
                "Value": latency_ms,
                "Unit": "Milliseconds",
            }
        )
        if requires_human:
            self._append(
                {
                    "MetricName": "Triage/HumanEscalations",
                    "Dimensions": [{"Name": "Classification", "Value": classification}],
                    "Timestamp": now,
                    "Value": 1,
                    "Unit": "Count",
                }
            )
        logger.debug(
            "Metric: run mode=%s classification=%s human=%s latency=%.1fms",
            mode, classification, requires_human, latency_ms,
        )

    def record_failure(
        self,
        operation: str,
        error_type: str,
        latency_ms: float = 0,
    ) -> None:
        """Record a failed triage run."""
        now = datetime.now(UTC)
        self._append(
            {
                "MetricName": "Triage/ErrorCount",
                "Dimensions": [
                    {"Name": "Operation", "Value": operation},
                    {"Name": "ErrorType", "Value": error_type},
                ],
                "Timestamp": now,
                "Value": 1,
                "Unit": "Count",
            }
        )
        if latency_ms > 0:
            self._append(
                {
                    "MetricName": "Triage/FailedRunLatency",
                    "Dimensions": [{"Name": "Operation", "Value": operation}],
                    "Timestamp": now,
                    "Value": latency_ms,
                    "Unit": "Milliseconds",
                }
            )
        logger.debug(
            "Metric: %s failure error=%s latency=%.1fms",
            operation, error_type, latency_ms,
        )

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
                cw.put_metric_data(Namespace=self._namespace, MetricData=chunk)
                sent += len(chunk)
            logger.info("Flushed %d metrics to CloudWatch", sent)
        except Exception:
            logger.exception("Failed to flush metrics to CloudWatch")
        return sent

    # ── Internal ──────────────────────────────────────────────────────

    def _append(self, metric_data: dict[str, Any]) -> None:
        if not self._enabled:
            return
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
