from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Mapping, Optional

_VIEWS_ATTR = "_computed_views"
_MARKS_ATTR = "_marks"


def _serialize(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, Mapping):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass
class CloudEvent:
    """Structured CloudEvents envelope.

    Instances are patched in place by the compat layer, so the envelope is
    mutable. Two kinds of out-of-band state live next to the declared fields:

    - computed views: read-only attributes backed by a getter that receives
      the event and runs on every access (included in `to_dict`, excluded
      from `==` and `repr`)
    - marks: write-once tags, invisible to `==`, `repr` and `to_dict`
    """

    id: str
    source: str
    type: str
    specversion: str = "1.0"
    time: Optional[str] = None
    data: Any = None
    datacontenttype: Optional[str] = None
    subject: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "CloudEvent":
        return cls(
            id=d["id"],
            source=d["source"],
            type=d["type"],
            specversion=d.get("specversion", "1.0"),
            time=d.get("time"),
            data=d.get("data"),
            datacontenttype=d.get("datacontenttype"),
            subject=d.get("subject"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            if v is None and f.default is None:
                continue
            out[f.name] = _serialize(v)
        for name, getter in self._views().items():
            out[name] = _serialize(getter(self))
        return out

    # -- computed views -----------------------------------------------------

    def _views(self) -> Dict[str, Callable[["CloudEvent"], Any]]:
        return self.__dict__.get(_VIEWS_ATTR, {})

    def define_view(self, name: str, getter: Callable[["CloudEvent"], Any]) -> None:
        """Attach (or replace) a read-only attribute computed by `getter(event)`.

        The getter is called with the instance being read, so copies of the
        event compute views from their own fields.
        """
        if name in {f.name for f in fields(self)} or name.startswith("_"):
            raise ValueError(f"cannot define view over reserved attribute: {name}")
        views = self.__dict__.setdefault(_VIEWS_ATTR, {})
        views[name] = getter

    def has_view(self, name: str) -> bool:
        return name in self._views()

    def __getattr__(self, name: str) -> Any:
        # Only reached when regular attribute lookup fails.
        views = self.__dict__.get(_VIEWS_ATTR)
        if views is not None and name in views:
            return views[name](self)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __copy__(self) -> "CloudEvent":
        cls = type(self)
        new = cls.__new__(cls)
        new.__dict__.update(self.__dict__)
        # Views and marks belong to one envelope; give the copy its own tables.
        for attr in (_VIEWS_ATTR, _MARKS_ATTR):
            if attr in self.__dict__:
                new.__dict__[attr] = type(self.__dict__[attr])(self.__dict__[attr])
        return new

    def __setattr__(self, name: str, value: Any) -> None:
        if name in (_VIEWS_ATTR, _MARKS_ATTR):
            raise AttributeError(f"{name} is managed internally")
        if name in self._views():
            raise AttributeError(f"{name} is a read-only view")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if name in (_VIEWS_ATTR, _MARKS_ATTR):
            raise AttributeError(f"{name} is managed internally")
        if name in self._views():
            raise AttributeError(f"{name} is a read-only view")
        object.__delattr__(self, name)

    # -- marks --------------------------------------------------------------

    def mark(self, tag: str) -> None:
        self.__dict__.setdefault(_MARKS_ATTR, set()).add(tag)

    def is_marked(self, tag: str) -> bool:
        return tag in self.__dict__.get(_MARKS_ATTR, ())
