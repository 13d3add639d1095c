from __future__ import annotations


class EventCompatError(ValueError):
    """Base class for envelope/payload contract violations."""


class ContractError(EventCompatError):
    pass


class MalformedEventError(EventCompatError):
    """A recognized event type arrived without the payload it must carry."""


class MessageDecodeError(EventCompatError):
    pass


class UnsupportedEventError(EventCompatError):
    """No v1 translation is registered for the event type."""
