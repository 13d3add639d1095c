from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable

from eventcompat.core.errors import ContractError

from . import types


ENVELOPE_REQUIRED_KEYS = {"specversion", "id", "source", "type"}
ENVELOPE_OPTIONAL_KEYS = {"time", "data", "datacontenttype", "subject"}

PUBSUB_DATA_REQUIRED_KEYS = {"message"}
PUBSUB_DATA_OPTIONAL_KEYS = {"subscription"}


def _require_exact_keys(obj: dict[str, Any], *, required: set[str], optional: set[str] | None = None) -> None:
    optional = optional or set()
    keys = set(obj.keys())
    missing = required - keys
    extra = keys - required - optional
    if missing:
        raise ContractError(f"missing keys: {sorted(missing)}")
    if extra:
        raise ContractError(f"extra keys not allowed: {sorted(extra)}")


def _require_str(d: dict[str, Any], k: str) -> str:
    v = d.get(k)
    if not isinstance(v, str) or not v.strip():
        raise ContractError(f"{k} must be non-empty string")
    return v


def _optional_str(d: dict[str, Any], k: str) -> str | None:
    v = d.get(k)
    if v is not None and not isinstance(v, str):
        raise ContractError(f"{k} must be string")
    return v


def _parse_iso8601(s: str) -> datetime:
    try:
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError as e:
        raise ContractError(f"invalid ISO8601 timestamp: {s}") from e
    if dt.tzinfo is None:
        raise ContractError("timestamp must include timezone")
    return dt


def validate_envelope_dict(event: dict[str, Any]) -> None:
    """Strict structured-mode validation.

    - CloudEvents extension attributes are rejected (only the keys we map)
    - payload must match type-specific rules where a type is known
    """

    if not isinstance(event, dict):
        raise ContractError("event must be object")
    _require_exact_keys(event, required=ENVELOPE_REQUIRED_KEYS, optional=ENVELOPE_OPTIONAL_KEYS)
    if _require_str(event, "specversion") != types.SPECVERSION:
        raise ContractError(f"specversion must be {types.SPECVERSION}")
    _require_str(event, "id")
    _require_str(event, "source")
    ce_type = _require_str(event, "type")
    ts = _optional_str(event, "time")
    if ts is not None:
        _parse_iso8601(ts)
    _optional_str(event, "datacontenttype")
    _optional_str(event, "subject")

    validate_payload(ce_type, event.get("data"))


def validate_payload(ce_type: str, data: Any) -> None:
    if ce_type == types.PUBSUB_MESSAGE_PUBLISHED:
        if not isinstance(data, dict):
            raise ContractError("data must be object")
        _require_exact_keys(data, required=PUBSUB_DATA_REQUIRED_KEYS, optional=PUBSUB_DATA_OPTIONAL_KEYS)
        _optional_str(data, "subscription")
        message = data.get("message")
        if not isinstance(message, dict):
            raise ContractError("message must be object")
        _optional_str(message, "data")
        _optional_str(message, "messageId")
        _optional_str(message, "orderingKey")
        publish_time = _optional_str(message, "publishTime")
        if publish_time is not None:
            _parse_iso8601(publish_time)
        attributes = message.get("attributes")
        if attributes is not None:
            if not isinstance(attributes, dict):
                raise ContractError("attributes must be object")
            for k, v in attributes.items():
                if not isinstance(v, str):
                    raise ContractError(f"attribute {k} must be string")
        return

    # Types without a v1 translation are passed through; payload is opaque.


def validate_many(events: Iterable[dict[str, Any]]) -> None:
    for ev in events:
        validate_envelope_dict(ev)
