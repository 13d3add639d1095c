"""Handler adapters.

A dispatcher hands every CloudEvent through one of these wrappers, so legacy
`(message, context)` handlers and CloudEvent handlers can be registered side
by side and see the same envelope object.
"""

from __future__ import annotations

import functools
import logging
from typing import Callable, TypeVar

from eventcompat.compat import V1Context, V1PubSubMessage, patch_v1_compat
from eventcompat.core.errors import UnsupportedEventError
from eventcompat.core.models import CloudEvent

logger = logging.getLogger(__name__)

R = TypeVar("R")

LegacyHandler = Callable[[V1PubSubMessage, V1Context], R]
CloudEventHandler = Callable[[CloudEvent], R]


def legacy_handler(fn: LegacyHandler) -> CloudEventHandler:
    """Wrap a v1-style `fn(message, context)` to accept a CloudEvent."""

    @functools.wraps(fn)
    def wrapper(event: CloudEvent):
        patched = patch_v1_compat(event)
        if not (patched.has_view("message") and patched.has_view("context")):
            raise UnsupportedEventError(f"no v1 translation for event type: {patched.type}")
        return fn(patched.message, patched.context)

    return wrapper


def cloud_event_handler(fn: CloudEventHandler) -> CloudEventHandler:
    """Wrap a CloudEvent handler; the event is still patched before the call."""

    @functools.wraps(fn)
    def wrapper(event: CloudEvent):
        return fn(patch_v1_compat(event))

    return wrapper


def dispatch(event: CloudEvent, handlers: list[CloudEventHandler]) -> list:
    """Call each wrapped handler with the same event, in order.

    Handler errors propagate; the caller decides whether delivery failed.
    """

    results = []
    for h in handlers:
        logger.debug(f"dispatch: id={event.id} type={event.type} handler={getattr(h, '__name__', h)!r}")
        results.append(h(event))
    return results
