"""Decode helpers and type guards shared by the channel decoders."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional


class DecodeError(ValueError):
    """Raised when a raw channel message cannot be decoded."""


def parse_json_object(raw: str) -> dict[str, Any]:
    """Parse ``raw`` as JSON and require a top-level object.

    Examples:
        >>> parse_json_object('{"VBattery": 28.1}')
        {'VBattery': 28.1}
    """
    try:
        payload = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"Invalid JSON payload: {exc}") from exc

    if not isinstance(payload, dict):
        raise DecodeError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )
    return payload


def is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false is never a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def optional_number(payload: Mapping[str, Any], key: str) -> Optional[float]:
    value = payload.get(key)
    if value is None:
        return None
    if not is_number(value):
        raise DecodeError(f"Field {key!r} must be a number, got {value!r}")
    return float(value)


def optional_int(payload: Mapping[str, Any], key: str) -> Optional[int]:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not is_number(value) or not isinstance(value, int):
        raise DecodeError(f"Field {key!r} must be an integer, got {value!r}")
    return value


def optional_bool(payload: Mapping[str, Any], key: str) -> Optional[bool]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise DecodeError(f"Field {key!r} must be a boolean, got {value!r}")
    return value


def optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"Field {key!r} must be a string, got {value!r}")
    return value


def optional_number_list(
    payload: Mapping[str, Any], key: str
) -> Optional[tuple[float, ...]]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(is_number(item) for item in value):
        raise DecodeError(f"Field {key!r} must be a list of numbers")
    return tuple(float(item) for item in value)


def optional_object(
    payload: Mapping[str, Any], key: str
) -> Optional[Mapping[str, Any]]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise DecodeError(f"Field {key!r} must be an object, got {value!r}")
    return value
