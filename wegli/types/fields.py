"""Field readers shared by the record types."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from wegli.common.errors import ConversionError, DateParseError
from wegli.common.time_utils import parse_rfc3339

_MISSING = object()


def _get(payload: Mapping[str, Any], key: str) -> Any:
    if not isinstance(payload, Mapping):
        raise ConversionError(f"Expected a JSON object, got {type(payload).__name__}")
    value = payload.get(key, _MISSING)
    if value is _MISSING:
        raise ConversionError(f"Missing field '{key}'")
    return value


def req_str(payload: Mapping[str, Any], key: str) -> str:
    value = _get(payload, key)
    if not isinstance(value, str):
        raise ConversionError(f"Field '{key}' must be a string, got {value!r}")
    return value


def opt_str(payload: Mapping[str, Any], key: str) -> str | None:
    if payload.get(key) is None:
        return None
    return req_str(payload, key)


def req_int(payload: Mapping[str, Any], key: str) -> int:
    value = _get(payload, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConversionError(f"Field '{key}' must be an integer, got {value!r}")
    return value


def opt_int(payload: Mapping[str, Any], key: str) -> int | None:
    if payload.get(key) is None:
        return None
    return req_int(payload, key)


def req_float(payload: Mapping[str, Any], key: str) -> float:
    value = _get(payload, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConversionError(f"Field '{key}' must be a number, got {value!r}")
    return float(value)


def req_bool(payload: Mapping[str, Any], key: str) -> bool:
    value = _get(payload, key)
    if not isinstance(value, bool):
        raise ConversionError(f"Field '{key}' must be a boolean, got {value!r}")
    return value


def req_decimal_str(payload: Mapping[str, Any], key: str) -> float:
    """Read a float the API sends as a string, e.g. ``"35.0"``."""
    value = req_str(payload, key)
    try:
        return float(value)
    except ValueError as exc:
        raise ConversionError(f"Field '{key}' is not a decimal string: {value!r}") from exc


def req_str_list(payload: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = _get(payload, key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConversionError(f"Field '{key}' must be a list of strings, got {value!r}")
    return tuple(value)


def opt_str_list(payload: Mapping[str, Any], key: str) -> tuple[str, ...] | None:
    if payload.get(key) is None:
        return None
    return req_str_list(payload, key)


def req_datetime(payload: Mapping[str, Any], key: str) -> datetime:
    value = _get(payload, key)
    try:
        return parse_rfc3339(value)
    except ValueError as exc:
        raise DateParseError(key, value) from exc


def opt_datetime(payload: Mapping[str, Any], key: str) -> datetime | None:
    if payload.get(key) is None:
        return None
    return req_datetime(payload, key)


def req_mapping(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = _get(payload, key)
    if not isinstance(value, Mapping):
        raise ConversionError(f"Field '{key}' must be an object, got {value!r}")
    return value


def req_list(payload: Mapping[str, Any], key: str) -> list:
    value = _get(payload, key)
    if not isinstance(value, list):
        raise ConversionError(f"Field '{key}' must be a list, got {value!r}")
    return value
