"""Pub/Sub payload types carried by `google.cloud.pubsub.topic.v1.messagePublished`.

The push/Eventarc wire shape is::

    {"message": {"data": "<base64>", "messageId": "...", "publishTime": "...",
                 "attributes": {...}, "orderingKey": "..."},
     "subscription": "projects/P/subscriptions/S"}
"""

from __future__ import annotations

import base64
import enum
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from eventcompat.core.errors import MessageDecodeError


class _Unset(enum.Enum):
    UNSET = 0


# Enum members survive copy and pickle as the same object.
_UNSET = _Unset.UNSET


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _decode_json(data: Optional[str]) -> Any:
    if data is None:
        raise MessageDecodeError("Unable to parse Pub/Sub message data as JSON: message has no data")
    try:
        return json.loads(base64.b64decode(data).decode("utf-8"))
    except ValueError as e:
        # binascii.Error, UnicodeDecodeError and JSONDecodeError are all ValueErrors.
        raise MessageDecodeError(f"Unable to parse Pub/Sub message data as JSON: {e}") from e


@dataclass
class Message:
    """Canonical Pub/Sub message.

    `json` decodes `data` on first access and caches the result on this
    instance. A pre-decoded value passed through `from_raw(..., json=...)`
    short-circuits decoding.
    """

    data: Optional[str] = None
    message_id: str = ""
    publish_time: str = field(default_factory=_now_iso)
    attributes: Dict[str, str] = field(default_factory=dict)
    ordering_key: str = ""
    _json: Any = field(default=_UNSET, init=False, repr=False, compare=False)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "Message":
        if not isinstance(raw, Mapping):
            raise TypeError(f"Pub/Sub message must be an object, got {type(raw).__name__}")
        msg = cls(
            data=raw.get("data"),
            message_id=str(raw.get("messageId") or raw.get("message_id") or ""),
            publish_time=str(raw.get("publishTime") or raw.get("publish_time") or _now_iso()),
            attributes=dict(raw.get("attributes") or {}),
            ordering_key=str(raw.get("orderingKey") or raw.get("ordering_key") or ""),
        )
        if "json" in raw:
            msg._json = raw["json"]
        return msg

    @property
    def json(self) -> Any:
        if self._json is _UNSET:
            self._json = _decode_json(self.data)
        return self._json

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "messageId": self.message_id,
            "data": self.data,
            "publishTime": self.publish_time,
        }
        if self.attributes:
            out["attributes"] = dict(self.attributes)
        if self.ordering_key:
            out["orderingKey"] = self.ordering_key
        return out


@dataclass
class MessagePublishedData:
    message: Any
    subscription: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "MessagePublishedData":
        message = raw.get("message")
        if message is not None and not isinstance(message, Message):
            message = Message.from_raw(message)
        return cls(message=message, subscription=str(raw.get("subscription") or ""))

    def to_dict(self) -> Dict[str, Any]:
        message = self.message.to_dict() if isinstance(self.message, Message) else self.message
        return {"message": message, "subscription": self.subscription}
