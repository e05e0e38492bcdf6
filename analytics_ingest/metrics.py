"""
Prometheus metrics for the analytics ingest service.
"""
from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry


class Metrics:
    """
    Centralized metrics for the analytics ingest service.

    Each instance owns its own registry, so several applications can live
    in one process (tests create one per app).
    """

    def __init__(self, service_name: str = "analytics-ingest", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # HTTP Metrics
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["service", "method", "path", "status"],
            registry=self.registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["service", "method", "path"],
            registry=self.registry,
        )

        self.http_requests_active = Gauge(
            "http_requests_active",
            "Number of active HTTP requests",
            ["service"],
            registry=self.registry,
        )
        self.http_requests_active.labels(service=service_name).set(0)

        # Application Info
        self.app_info = Info(
            "app",
            "Application information",
            registry=self.registry,
        )
        self.app_info.info({"service": service_name, "version": version})

        self.app_up = Gauge(
            "app_up",
            "Application up status (1=up, 0=down)",
            ["service", "version"],
            registry=self.registry,
        )
        self.app_up.labels(service=service_name, version=version).set(1)

        # Business Metrics
        self.records_ingested_total = Counter(
            "ingest_records_total",
            "Total records ingested and persisted",
            ["kind"],
            registry=self.registry,
        )

        self.ingest_failures_total = Counter(
            "ingest_failures_total",
            "Total ingestion calls that failed to persist",
            ["kind"],
            registry=self.registry,
        )

        self.payload_log_entries = Gauge(
            "ingest_payload_log_entries",
            "Number of entries currently held in the payload log",
            registry=self.registry,
        )

    def record_ingested(self, kind: str):
        """Record a successfully persisted record."""
        self.records_ingested_total.labels(kind=kind).inc()

    def record_failure(self, kind: str):
        """Record an ingestion that failed to persist."""
        self.ingest_failures_total.labels(kind=kind).inc()

    def set_payload_log_entries(self, count: int):
        """Set the current payload log size."""
        self.payload_log_entries.set(count)
