"""Conversion of loosely-typed event properties into storable strings."""
import math
from typing import Any, Mapping
import orjson
import structlog

log = structlog.get_logger()


def _has_non_finite(value: Any) -> bool:
    # orjson writes NaN and Infinity as null, which would silently change the value
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, dict):
        return any(_has_non_finite(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(_has_non_finite(v) for v in value)
    return False


def normalize_value(value: Any, key: str | None = None) -> str | None:
    """
    Convert a single property value to its canonical text form.

    None stays None, scalars use their natural text form and anything
    structured is encoded as compact JSON. Values JSON cannot
    represent, including nested NaN or Infinity, fall back to str() with
    a warning.

    Args:
        value: Property value as received from the client
        key: Property name, used only for diagnostics

    Returns:
        Text representation, or None for a null value
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    # bool is an int subclass, so it has to be checked first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)

    if _has_non_finite(value):
        log.warning("property.serialization_failed", key=key, error="non-finite float")
        return str(value)

    try:
        return orjson.dumps(value).decode()
    except orjson.JSONEncodeError as e:
        log.warning("property.serialization_failed", key=key, error=str(e))
        return str(value)


def normalize_properties(properties: Mapping[str, Any] | None) -> dict[str, str | None]:
    """Normalize every value of a property mapping; a missing mapping becomes empty."""
    if not properties:
        return {}
    return {key: normalize_value(value, key=key) for key, value in properties.items()}
