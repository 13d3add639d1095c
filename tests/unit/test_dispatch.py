from __future__ import annotations

import pytest

from eventcompat.contracts import types
from eventcompat.core.errors import UnsupportedEventError
from eventcompat.core.models import CloudEvent
from eventcompat.dispatch import cloud_event_handler, dispatch, legacy_handler


def _event(ce_type: str = types.PUBSUB_MESSAGE_PUBLISHED) -> CloudEvent:
    return CloudEvent(
        id="e1",
        source="//pubsub.googleapis.com/projects/P/topics/T",
        type=ce_type,
        data={"message": {"data": "eyJmb28iOiJiYXIifQ==", "messageId": "m1"}, "subscription": "s"},
    )


def test_legacy_and_cloud_event_handlers_share_the_event() -> None:
    seen = {}

    @legacy_handler
    def on_publish(message, context):
        seen["legacy"] = (message.json, context.resource.name)
        return "legacy"

    @cloud_event_handler
    def on_event(event):
        seen["event"] = event
        return "new"

    ev = _event()
    assert dispatch(ev, [on_publish, on_event]) == ["legacy", "new"]
    assert seen["legacy"] == ({"foo": "bar"}, "projects/P/topics/T")
    assert seen["event"] is ev
    assert seen["event"].data["message"].message_id == "m1"


def test_legacy_handler_rejects_untranslated_type() -> None:
    @legacy_handler
    def on_publish(message, context):  # pragma: no cover
        raise AssertionError("should not be called")

    with pytest.raises(UnsupportedEventError, match="google.cloud.storage.object.v1.finalized"):
        on_publish(_event("google.cloud.storage.object.v1.finalized"))


def test_cloud_event_handler_accepts_untranslated_type() -> None:
    calls = []
    handler = cloud_event_handler(calls.append)
    ev = _event("google.cloud.storage.object.v1.finalized")
    handler(ev)
    assert calls == [ev]
    assert not ev.has_view("context")


def test_handler_errors_propagate() -> None:
    @cloud_event_handler
    def boom(event):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        dispatch(_event(), [boom])
