"""
Prometheus metrics collection.

In-memory counters on a dedicated registry; Prometheus handles storage.
"""

from typing import Optional

import structlog
from prometheus_client import CollectorRegistry, Counter, Histogram, Info

logger = structlog.get_logger(__name__)


class MetricsCollector:
    """
    Centralized metrics collection for QuotaGate.

    Each collector owns its registry so several apps (tests) can coexist
    in one process.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry or CollectorRegistry()

        # Service info
        self.service_info = Info(
            "quotagate_service",
            "QuotaGate service information",
            registry=self.registry,
        )
        self.service_info.info({
            "version": "0.1.0",
            "service": "quotagate",
        })

        # Request metrics
        self.requests_total = Counter(
            "quotagate_http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry,
        )

        self.request_duration = Histogram(
            "quotagate_http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry,
        )

        # Credential lifecycle
        self.keys_issued_total = Counter(
            "quotagate_keys_issued_total",
            "Key issuance attempts",
            ["outcome"],
            registry=self.registry,
        )

        self.key_verifications_total = Counter(
            "quotagate_key_verifications_total",
            "Key verifications by outcome",
            ["outcome"],
            registry=self.registry,
        )

        # Generation
        self.image_generations_total = Counter(
            "quotagate_image_generations_total",
            "Image generation attempts",
            ["outcome"],
            registry=self.registry,
        )

        self.upstream_request_duration = Histogram(
            "quotagate_upstream_request_duration_seconds",
            "Duration of calls to Unkey and OpenAI in seconds",
            ["service", "operation"],
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry,
        )

    def record_request(
        self,
        method: str,
        endpoint: str,
        status_code: int,
        duration_seconds: float
    ) -> None:
        """Record HTTP request metrics."""
        self.requests_total.labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()

        self.request_duration.labels(
            method=method,
            endpoint=endpoint
        ).observe(duration_seconds)

    def record_issuance(self, outcome: str) -> None:
        self.keys_issued_total.labels(outcome=outcome).inc()

    def record_verification(self, outcome: str) -> None:
        self.key_verifications_total.labels(outcome=outcome).inc()

    def record_generation(self, outcome: str) -> None:
        self.image_generations_total.labels(outcome=outcome).inc()

    def record_upstream_call(self, service: str, operation: str, duration_seconds: float) -> None:
        """Record latency of one outbound call, successful or not."""
        self.upstream_request_duration.labels(
            service=service,
            operation=operation,
        ).observe(duration_seconds)
