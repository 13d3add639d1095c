"""Legacy (v1) compatibility for CloudEvents.

`patch_v1_compat` augments a CloudEvent in place so handlers written against
the v1 `(message, context)` shape can read `event.message` / `event.context`,
while handlers written against CloudEvents keep seeing the original fields.

- the same object is returned; patching twice is a no-op
- no original field is removed or renamed
- `context` and `message` are computed views, re-evaluated on every access
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from eventcompat.contracts import types
from eventcompat.core.errors import MalformedEventError
from eventcompat.core.models import CloudEvent
from eventcompat.providers.pubsub import Message

logger = logging.getLogger(__name__)

V1_COMPAT_PATCHED = "eventcompat.compat.v1_patched"


@dataclass(frozen=True)
class Resource:
    service: str
    name: str


@dataclass(frozen=True)
class V1Context:
    event_id: str
    timestamp: str
    event_type: str
    resource: Resource
    params: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eventId": self.event_id,
            "timestamp": self.timestamp,
            "eventType": self.event_type,
            "resource": {"service": self.resource.service, "name": self.resource.name},
            "params": dict(self.params),
        }


@dataclass(frozen=True)
class V1PubSubMessage:
    data: Optional[str]
    message_id: str
    publish_time: str
    attributes: Dict[str, str]
    ordering_key: Optional[str] = None
    _message: Optional[Message] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_message(cls, message: Message) -> "V1PubSubMessage":
        return cls(
            data=message.data,
            message_id=message.message_id,
            publish_time=message.publish_time,
            attributes=message.attributes,
            ordering_key=message.ordering_key or None,
            _message=message,
        )

    @property
    def json(self) -> Any:
        if self._message is None:
            return Message(data=self.data).json
        return self._message.json

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "data": self.data,
            "messageId": self.message_id,
            "publishTime": self.publish_time,
            "attributes": self.attributes,
        }
        if self.ordering_key:
            out["orderingKey"] = self.ordering_key
        return out


def _resource_name(source: Optional[str], service: str) -> str:
    prefix = types.source_prefix(service)
    if source and source.startswith(prefix):
        return source[len(prefix):]
    return source or ""


def pubsub_v1_context(event: CloudEvent, message: Message) -> V1Context:
    return V1Context(
        event_id=message.message_id,
        timestamp=message.publish_time,
        event_type=types.V1_PUBSUB_PUBLISH,
        resource=Resource(
            service=types.PUBSUB_SERVICE,
            name=_resource_name(event.source, types.PUBSUB_SERVICE),
        ),
        params={},
    )


def pubsub_v1_message(message: Message) -> V1PubSubMessage:
    return V1PubSubMessage.from_message(message)


def _payload_message(data: Any) -> Any:
    if data is None:
        return None
    if isinstance(data, Mapping):
        return data.get("message")
    return getattr(data, "message", None)


def _missing_message(raw: Any) -> bool:
    # Empty mappings still count as a message; None, "", 0 and False do not.
    return raw is None or (not raw and not isinstance(raw, Mapping))


def _event_message(event: CloudEvent) -> Message:
    raw = _payload_message(event.data)
    if isinstance(raw, Message):
        return raw
    if _missing_message(raw):
        raise MalformedEventError("Malformed Pub/Sub event: missing 'message' property.")
    return Message.from_raw(raw)


def _replace_payload_message(data: Any, message: Message) -> None:
    if isinstance(data, Mapping):
        # Immutable mappings raise TypeError here; that propagates to the caller.
        data["message"] = message  # type: ignore[index]
    else:
        data.message = message


def _patch_pubsub(event: CloudEvent) -> None:
    data = event.data
    raw = _payload_message(data)
    if _missing_message(raw):
        logger.warning("malformed_pubsub_event", extra={"event_id": event.id, "source": event.source})
        raise MalformedEventError("Malformed Pub/Sub event: missing 'message' property.")

    if not isinstance(raw, Message):
        _replace_payload_message(data, Message.from_raw(raw))

    # Getters take the event being read, not the one patched.
    event.define_view("context", lambda ev: pubsub_v1_context(ev, _event_message(ev)))
    event.define_view("message", lambda ev: pubsub_v1_message(_event_message(ev)))
    logger.debug(f"v1 compat views attached: id={event.id} type={event.type}")


def patch_v1_compat(event: CloudEvent) -> CloudEvent:
    """Attach v1 `context`/`message` views to a supported CloudEvent.

    Returns the same object. Events that are already patched, or whose type has
    no v1 translation, come back unchanged. A Pub/Sub event without a message
    raises `MalformedEventError` and stays unpatched, so the same object can be
    retried once its payload is fixed.
    """

    if event.is_marked(V1_COMPAT_PATCHED):
        return event

    if event.type == types.PUBSUB_MESSAGE_PUBLISHED:
        _patch_pubsub(event)

    event.mark(V1_COMPAT_PATCHED)
    return event
