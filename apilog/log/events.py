"""
Typed events for the spec event log.

Each record in the log is a single-key object: ``{"FieldAdded": {...}}``.
The key is the event kind, the value its payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from ..errors import MalformedEvent


class EventKind(str, Enum):
    """Event kinds the projector understands.

    Kinds not listed here decode to UNKNOWN and keep their raw tag on the
    event, so newer logs still replay.
    """

    PATH_COMPONENT_ADDED = "PathComponentAdded"
    PATH_PARAMETER_ADDED = "PathParameterAdded"
    SHAPE_ADDED = "ShapeAdded"
    FIELD_ADDED = "FieldAdded"
    REQUEST_ADDED = "RequestAdded"
    REQUEST_BODY_SET = "RequestBodySet"
    RESPONSE_ADDED_BY_PATH_AND_METHOD = "ResponseAddedByPathAndMethod"
    RESPONSE_BODY_SET = "ResponseBodySet"
    REQUEST_PARAMETER_SHAPE_SET = "RequestParameterShapeSet"
    BATCH_COMMIT_STARTED = "BatchCommitStarted"
    BATCH_COMMIT_ENDED = "BatchCommitEnded"
    UNKNOWN = "unknown"

    @classmethod
    def from_tag(cls, tag: str) -> "EventKind":
        try:
            kind = cls(tag)
        except ValueError:
            return cls.UNKNOWN
        return cls.UNKNOWN if kind is cls.UNKNOWN else kind


@dataclass(frozen=True)
class Event:
    """One decoded log record."""

    kind: EventKind
    tag: str  # raw type key, differs from kind.value only for UNKNOWN
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, prop: str, default: Any = None) -> Any:
        return self.data.get(prop, default)

    def require(self, prop: str) -> Any:
        """Get a payload property that must be present."""
        if prop not in self.data:
            raise MalformedEvent(f"{self.tag} event is missing '{prop}'")
        return self.data[prop]

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the single-key wire form."""
        return {self.tag: dict(self.data)}


def decode_event(record: Any, index: int | None = None) -> Event:
    """Decode one raw record into an Event.

    Raises:
        MalformedEvent: if the record is not a mapping with exactly one key
            whose value is a mapping.
    """
    if not isinstance(record, dict):
        raise MalformedEvent(f"expected an object, got {type(record).__name__}", index)
    if len(record) != 1:
        keys = ", ".join(sorted(str(k) for k in record)) or "none"
        raise MalformedEvent(f"expected exactly one event kind, got {len(record)} ({keys})", index)

    ((tag, payload),) = record.items()
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise MalformedEvent(f"{tag} payload must be an object", index)

    return Event(kind=EventKind.from_tag(str(tag)), tag=str(tag), data=payload)


def decode_events(records: Iterable[Any]) -> list[Event]:
    """Decode a sequence of raw records, keeping log order."""
    return [decode_event(record, index=i) for i, record in enumerate(records)]
