from __future__ import annotations

import pytest

from eventcompat.core.errors import MessageDecodeError
from eventcompat.providers.pubsub import Message, MessagePublishedData


def test_from_raw_reads_wire_keys() -> None:
    m = Message.from_raw(
        {
            "data": "eyJmb28iOiJiYXIifQ==",
            "messageId": "m1",
            "publishTime": "2024-01-01T00:00:00Z",
            "attributes": {"k": "v"},
            "orderingKey": "ok",
        }
    )
    assert m.message_id == "m1"
    assert m.publish_time == "2024-01-01T00:00:00Z"
    assert m.attributes == {"k": "v"}
    assert m.ordering_key == "ok"
    assert m.json == {"foo": "bar"}


def test_from_raw_accepts_push_snake_case_aliases() -> None:
    m = Message.from_raw({"data": "dGVzdA==", "message_id": "m2", "publish_time": "2024-01-01T00:00:00Z"})
    assert m.message_id == "m2"
    assert m.publish_time == "2024-01-01T00:00:00Z"


def test_from_raw_defaults() -> None:
    m = Message.from_raw({"data": "dGVzdA=="})
    assert m.attributes == {}
    assert m.ordering_key == ""
    assert m.publish_time.endswith("Z")


def test_json_is_cached_per_instance() -> None:
    a = Message(data="eyJmb28iOiJiYXIifQ==")
    b = Message(data="eyJmb28iOiJiYXIifQ==")
    assert a.json == b.json == {"foo": "bar"}
    assert a.json is a.json
    assert a.json is not b.json


def test_prepared_json_is_used_without_decoding() -> None:
    m = Message.from_raw({"data": "not base64 json", "json": {"already": "decoded"}})
    assert m.json == {"already": "decoded"}


@pytest.mark.parametrize("data", [None, "dGVzdA==", "!!!"])
def test_json_decode_failures_raise(data) -> None:
    m = Message(data=data)
    with pytest.raises(MessageDecodeError, match="Unable to parse Pub/Sub message data as JSON"):
        m.json


def test_to_dict_omits_empty_optional_fields() -> None:
    m = Message(data="dGVzdA==", message_id="m1", publish_time="2024-01-01T00:00:00Z")
    assert m.to_dict() == {"messageId": "m1", "data": "dGVzdA==", "publishTime": "2024-01-01T00:00:00Z"}

    m2 = Message(data="dGVzdA==", message_id="m1", publish_time="t", attributes={"a": "b"}, ordering_key="k")
    assert m2.to_dict()["attributes"] == {"a": "b"}
    assert m2.to_dict()["orderingKey"] == "k"


def test_message_published_data_from_raw_wraps_message() -> None:
    d = MessagePublishedData.from_raw({"message": {"data": "dGVzdA==", "messageId": "m1"}, "subscription": "s"})
    assert isinstance(d.message, Message)
    assert d.subscription == "s"
    assert d.to_dict()["message"]["messageId"] == "m1"


def test_from_raw_rejects_non_mapping() -> None:
    with pytest.raises(TypeError):
        Message.from_raw(["data"])
