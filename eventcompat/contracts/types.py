from __future__ import annotations

# CloudEvent types with a registered v1 translation.

PUBSUB_MESSAGE_PUBLISHED = "google.cloud.pubsub.topic.v1.messagePublished"

# Legacy (v1) event types and services.

V1_PUBSUB_PUBLISH = "google.pubsub.topic.publish"
PUBSUB_SERVICE = "pubsub.googleapis.com"

SPECVERSION = "1.0"


def source_prefix(service: str) -> str:
    return f"//{service}/"
