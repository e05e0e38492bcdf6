from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr, field_validator
from typing import Any, Dict, List, Optional, Union

# Closed set of property value shapes accepted at the API boundary
PropertyValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, Dict[str, Any], List[Any], None]


def _require_not_blank(value: str, message: str) -> str:
    if not value.strip():
        raise ValueError(message)
    return value


def _to_utc(value: datetime) -> datetime:
    """Convert to UTC (naive values are taken as UTC); reject instants outside the datetime range."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError("Timestamp is out of the supported range") from None


class EventRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_name: str = Field(..., alias="eventName", description="Event name, e.g. user.login")
    timestamp: datetime = Field(..., description="When the event happened (ISO-8601)")
    properties: Optional[Dict[str, PropertyValue]] = Field(default=None, description="Free-form event properties")

    @field_validator("event_name")
    @classmethod
    def event_name_not_blank(cls, v: str) -> str:
        return _require_not_blank(v, "Event name is required")

    @field_validator("timestamp")
    @classmethod
    def timestamp_utc(cls, v: datetime) -> datetime:
        return _to_utc(v)


class MetricRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    metric_name: str = Field(..., alias="metricName", description="Metric name, e.g. cpu.usage")
    value: float = Field(..., description="Measured value")
    timestamp: datetime = Field(..., description="When the value was measured (ISO-8601)")
    unit: Optional[str] = Field(default=None, description="Unit of measure")

    @field_validator("metric_name")
    @classmethod
    def metric_name_not_blank(cls, v: str) -> str:
        return _require_not_blank(v, "Metric name is required")

    @field_validator("timestamp")
    @classmethod
    def timestamp_utc(cls, v: datetime) -> datetime:
        return _to_utc(v)


class IngestResponse(BaseModel):
    status: str
    message: str


class PayloadLogResponse(BaseModel):
    enabled: bool
    capacity: int
    count: int
    entries: List[str]
