"""Tests for event and metric persistence."""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch
import pytest
from sqlalchemy.exc import OperationalError
from analytics_ingest.errors import PersistenceError

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_save_event(store):
    """Test that an event is stored with server-assigned id and created_at."""
    before = datetime.now(timezone.utc)
    saved = store.save_event("user.login", T0, {"userId": "123", "action": "login"})

    assert saved.id is not None
    assert saved.event_name == "user.login"
    assert saved.timestamp == T0
    assert saved.properties["userId"] == "123"
    assert saved.properties["action"] == "login"
    assert saved.created_at is not None
    assert saved.created_at >= before


def test_save_event_with_empty_properties(store):
    """Test that an event without properties is stored with an empty map."""
    saved = store.save_event("simple.event", T0, {})

    found = store.find_events_by_name("simple.event")
    assert saved.id is not None
    assert dict(saved.properties) == {}
    assert len(found) == 1
    assert dict(found[0].properties) == {}


def test_save_event_keeps_null_property_values(store):
    """Test that a null property value is stored as null."""
    store.save_event("with.null", T0, {"optional": None, "present": "x"})

    found = store.find_events_by_name("with.null")[0]
    assert dict(found.properties) == {"optional": None, "present": "x"}


def test_event_ids_increase(store):
    """Test that surrogate ids grow with each insert."""
    first = store.save_event("seq", T0, {})
    second = store.save_event("seq", T0, {})

    assert second.id > first.id


def test_find_events_by_name_is_exact(store):
    """Test that lookups by name only return exact matches."""
    store.save_event("user.login", T0, {})
    store.save_event("user.login", T0, {})
    store.save_event("user.logout", T0, {})

    assert len(store.find_events_by_name("user.login")) == 2
    assert len(store.find_events_by_name("user.logout")) == 1
    assert store.find_events_by_name("user") == []


def test_find_events_between_is_inclusive(store):
    """Test that both range bounds are inclusive."""
    for hours in range(5):
        store.save_event(f"e{hours}", T0 + timedelta(hours=hours), {})

    found = store.find_events_between(T0 + timedelta(hours=1), T0 + timedelta(hours=3))

    assert [e.event_name for e in found] == ["e1", "e2", "e3"]


def test_find_events_between_converts_timezones(store):
    """Test that range bounds in other timezones are compared as UTC."""
    store.save_event("tz", T0, {})
    plus_two = timezone(timedelta(hours=2))

    found = store.find_events_between(
        datetime(2024, 1, 1, 2, 0, tzinfo=plus_two),
        datetime(2024, 1, 1, 2, 0, tzinfo=plus_two),
    )

    assert [e.event_name for e in found] == ["tz"]
    assert found[0].timestamp.tzinfo is not None


def test_save_metric(store):
    """Test that a metric is stored unchanged."""
    saved = store.save_metric("cpu.usage", 75.5, T0, "percent")

    assert saved.id is not None
    assert saved.metric_name == "cpu.usage"
    assert saved.value == 75.5
    assert saved.unit == "percent"
    assert saved.created_at is not None


def test_save_metric_without_unit(store):
    """Test that a missing unit stays null."""
    store.save_metric("memory.usage", 1024.0, T0)

    found = store.find_metrics_by_name("memory.usage")
    assert len(found) == 1
    assert found[0].unit is None


def test_find_metrics_between_is_inclusive(store):
    """Test the metric range query bounds."""
    store.save_metric("m", 1.0, T0)
    store.save_metric("m", 2.0, T0 + timedelta(minutes=1))
    store.save_metric("m", 3.0, T0 + timedelta(minutes=2))

    found = store.find_metrics_between(T0, T0 + timedelta(minutes=1))

    assert [m.value for m in found] == [1.0, 2.0]


def test_storage_failure_raises_persistence_error(store):
    """Test that engine errors surface as PersistenceError."""
    error = OperationalError("INSERT", {}, Exception("disk I/O error"))

    with patch("analytics_ingest.services.database_service.EventRepository.add", side_effect=error):
        with pytest.raises(PersistenceError) as exc_info:
            store.save_event("user.login", T0, {})

    assert exc_info.value.entity == "event"
    assert exc_info.value.__cause__ is error
    assert store.find_events_by_name("user.login") == []
