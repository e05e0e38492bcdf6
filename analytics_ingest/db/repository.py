from __future__ import annotations
from datetime import datetime
from typing import List
from sqlalchemy import select
from sqlalchemy.orm import Session
from .models import Event, Metric


class EventRepository:
    def __init__(self, session: Session):
        self.session = session

    def add(self, event: Event) -> Event:
        self.session.add(event)
        self.session.flush()
        return event

    def find_by_name(self, event_name: str) -> List[Event]:
        stmt = select(Event).where(Event.event_name == event_name).order_by(Event.id)
        return list(self.session.scalars(stmt))

    def find_by_timestamp_between(self, start: datetime, end: datetime) -> List[Event]:
        """Both bounds are inclusive."""
        stmt = select(Event).where(Event.timestamp.between(start, end)).order_by(Event.id)
        return list(self.session.scalars(stmt))


class MetricRepository:
    def __init__(self, session: Session):
        self.session = session

    def add(self, metric: Metric) -> Metric:
        self.session.add(metric)
        self.session.flush()
        return metric

    def find_by_name(self, metric_name: str) -> List[Metric]:
        stmt = select(Metric).where(Metric.metric_name == metric_name).order_by(Metric.id)
        return list(self.session.scalars(stmt))

    def find_by_timestamp_between(self, start: datetime, end: datetime) -> List[Metric]:
        """Both bounds are inclusive."""
        stmt = select(Metric).where(Metric.timestamp.between(start, end)).order_by(Metric.id)
        return list(self.session.scalars(stmt))
