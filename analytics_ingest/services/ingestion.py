"""Ingestion pipeline: normalize, persist, then mirror into the payload log."""
import structlog
from ..api.schemas import EventRequest, MetricRequest
from ..db.models import Event, Metric
from ..errors import PersistenceError
from ..metrics import Metrics
from .database_service import DatabaseService
from .normalizer import normalize_properties
from .payload_log import PayloadLog

log = structlog.get_logger()

EVENT = "EVENT"
METRIC = "METRIC"


def format_entry(kind: str, payload: object) -> str:
    """Build a payload log line, e.g. ``[EVENT] EventRequest(...)``."""
    return f"[{kind}] {payload!r}"


class IngestionService:
    """
    Single-record ingestion for events and metrics.

    The payload log is appended only after the record is persisted, so a
    failed write never shows up in the log.
    """

    def __init__(self, store: DatabaseService, payload_log: PayloadLog, metrics: Metrics | None = None):
        """
        Initialize the ingestion service.

        Args:
            store: Persistence service for events and metrics
            payload_log: Shared bounded log of ingested payloads
            metrics: Optional Prometheus metrics
        """
        self._store = store
        self._payload_log = payload_log
        self._metrics = metrics

    def ingest_event(self, request: EventRequest) -> Event:
        """
        Ingest one event.

        Raises:
            PersistenceError: If the event could not be stored
        """
        log.info("event.ingesting", event_name=request.event_name)
        properties = normalize_properties(request.properties)

        try:
            event = self._store.save_event(request.event_name, request.timestamp, properties)
        except PersistenceError:
            self._record_failure("event")
            raise

        self._record_success("event", format_entry(EVENT, request))
        return event

    def ingest_metric(self, request: MetricRequest) -> Metric:
        """
        Ingest one metric sample.

        Raises:
            PersistenceError: If the metric could not be stored
        """
        log.info("metric.ingesting", metric_name=request.metric_name)

        try:
            metric = self._store.save_metric(request.metric_name, request.value, request.timestamp, request.unit)
        except PersistenceError:
            self._record_failure("metric")
            raise

        self._record_success("metric", format_entry(METRIC, request))
        return metric

    def _record_success(self, kind: str, entry: str):
        self._payload_log.append(entry)
        if self._metrics:
            self._metrics.record_ingested(kind)
            self._metrics.set_payload_log_entries(self._payload_log.count())

    def _record_failure(self, kind: str):
        if self._metrics:
            self._metrics.record_failure(kind)
