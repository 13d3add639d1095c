"""CloudEvents to legacy (v1) event compatibility."""

from eventcompat.compat import V1Context, V1PubSubMessage, patch_v1_compat
from eventcompat.core.errors import MalformedEventError
from eventcompat.core.models import CloudEvent

__all__ = ["CloudEvent", "MalformedEventError", "V1Context", "V1PubSubMessage", "patch_v1_compat"]
