"""Persistence of ingested events and metrics."""
from datetime import datetime
from typing import Callable, List, Mapping, TypeVar
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import structlog
from ..db.database import Database
from ..db.models import Event, EventProperty, Metric
from ..db.repository import EventRepository, MetricRepository
from ..errors import PersistenceError

log = structlog.get_logger()

T = TypeVar("T")


class DatabaseService:
    """
    Writes normalized records to the relational store.

    Every save runs in its own transaction. Storage failures are logged
    and re-raised as PersistenceError; nothing is retried here.
    """

    def __init__(self, database: Database):
        self._database = database

    def save_event(self, event_name: str, timestamp: datetime, properties: Mapping[str, str | None]) -> Event:
        """
        Persist one event with already-normalized properties.

        Args:
            event_name: Event name
            timestamp: Caller-supplied event time
            properties: String-valued property map

        Returns:
            The stored event with id and created_at assigned

        Raises:
            PersistenceError: If the write fails
        """
        log.info("event.persisting", event_name=event_name)
        # Rows are built directly so an empty map is still a loaded collection
        event = Event(
            event_name=event_name,
            timestamp=timestamp,
            property_rows={key: EventProperty(key=key, value=value) for key, value in properties.items()},
        )
        saved = self._write("event", lambda session: EventRepository(session).add(event))
        log.info("event.persisted", id=saved.id, event_name=event_name)
        return saved

    def save_metric(self, metric_name: str, value: float, timestamp: datetime, unit: str | None = None) -> Metric:
        """
        Persist one metric sample.

        Raises:
            PersistenceError: If the write fails
        """
        log.info("metric.persisting", metric_name=metric_name)
        metric = Metric(metric_name=metric_name, value=value, timestamp=timestamp, unit=unit)
        saved = self._write("metric", lambda session: MetricRepository(session).add(metric))
        log.info("metric.persisted", id=saved.id, metric_name=metric_name)
        return saved

    def find_events_by_name(self, event_name: str) -> List[Event]:
        with self._database.session() as session:
            return EventRepository(session).find_by_name(event_name)

    def find_events_between(self, start: datetime, end: datetime) -> List[Event]:
        with self._database.session() as session:
            return EventRepository(session).find_by_timestamp_between(start, end)

    def find_metrics_by_name(self, metric_name: str) -> List[Metric]:
        with self._database.session() as session:
            return MetricRepository(session).find_by_name(metric_name)

    def find_metrics_between(self, start: datetime, end: datetime) -> List[Metric]:
        with self._database.session() as session:
            return MetricRepository(session).find_by_timestamp_between(start, end)

    def _write(self, entity: str, operation: Callable[[Session], T]) -> T:
        try:
            with self._database.session() as session:
                return operation(session)
        except SQLAlchemyError as e:
            log.error(f"{entity}.persist_failed", error=str(e), error_type=e.__class__.__name__)
            raise PersistenceError(f"Failed to persist {entity}", entity=entity) from e
