"""
Graph projection.

Replays every event of every batch into per-entity tables. The result is a
point-in-time snapshot of the spec: a pure, deterministic function of the log.

Merge policy is last-write-wins: an event naming an id that is already in its
table replaces the whole record. Fields are never merged. References between
tables are not checked here; lookups raise UnresolvedReference on demand.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Iterable

from .errors import UnresolvedReference
from .log.batches import Batch
from .log.events import Event, EventKind
from .models import (
    Field,
    Path,
    Request,
    RequestBody,
    RequestParameter,
    Response,
    ResponseBody,
    Shape,
)


def _status_code(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isascii():
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _descriptor(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


@dataclass
class Graph:
    """Entity tables keyed by id, in first-insertion order."""

    paths: dict[str, Path] = field(default_factory=dict)
    shapes: dict[str, Shape] = field(default_factory=dict)
    fields: dict[str, Field] = field(default_factory=dict)
    requests: dict[str, Request] = field(default_factory=dict)
    request_bodies: dict[str, RequestBody] = field(default_factory=dict)
    responses: dict[str, Response] = field(default_factory=dict)
    response_bodies: dict[str, ResponseBody] = field(default_factory=dict)
    request_parameters: dict[str, RequestParameter] = field(default_factory=dict)

    @classmethod
    def from_batches(cls, batches: Iterable[Batch]) -> "Graph":
        graph = cls()
        for batch in batches:
            for event in batch.events:
                graph.apply(event)
        return graph

    @classmethod
    def from_events(cls, events: Iterable[Event]) -> "Graph":
        graph = cls()
        for event in events:
            graph.apply(event)
        return graph

    # --- Projection ---

    def apply(self, event: Event) -> None:
        """Dispatch one event to its table. Unhandled kinds are no-ops."""
        handler = _HANDLERS.get(event.kind)
        if handler is None:
            return
        handler(self, event)

    def _path_component_added(self, event: Event) -> None:
        path_id = str(event.require("pathId"))
        self.paths[path_id] = Path(
            path_id=path_id,
            parent_path_id=_optional_str(event.get("parentPathId")),
            name=str(event.get("name") or ""),
        )

    def _path_parameter_added(self, event: Event) -> None:
        path_id = str(event.require("pathId"))
        self.paths[path_id] = Path(
            path_id=path_id,
            parent_path_id=_optional_str(event.get("parentPathId")),
            name=str(event.get("name") or ""),
            is_parameter=True,
        )

    def _shape_added(self, event: Event) -> None:
        shape_id = str(event.require("shapeId"))
        self.shapes[shape_id] = Shape(
            shape_id=shape_id,
            base_shape_id=_optional_str(event.get("baseShapeId")),
        )

    def _field_added(self, event: Event) -> None:
        field_id = str(event.require("fieldId"))
        self.fields[field_id] = Field(
            field_id=field_id,
            shape_id=str(event.get("shapeId") or ""),
            name=str(event.get("name") or ""),
            shape_descriptor=_descriptor(event.get("shapeDescriptor")),
        )

    def _request_added(self, event: Event) -> None:
        request_id = str(event.require("requestId"))
        self.requests[request_id] = Request(
            request_id=request_id,
            path_id=str(event.get("pathId") or ""),
            http_method=str(event.get("httpMethod") or ""),
        )

    def _request_body_set(self, event: Event) -> None:
        request_id = str(event.require("requestId"))
        self.request_bodies[request_id] = RequestBody(
            owner_id=request_id,
            body_descriptor=_descriptor(event.get("bodyDescriptor")),
        )

    def _response_added(self, event: Event) -> None:
        response_id = str(event.require("responseId"))
        self.responses[response_id] = Response(
            response_id=response_id,
            path_id=str(event.get("pathId") or ""),
            http_method=str(event.get("httpMethod") or ""),
            http_status_code=_status_code(event.get("httpStatusCode")),
        )

    def _response_body_set(self, event: Event) -> None:
        response_id = str(event.require("responseId"))
        self.response_bodies[response_id] = ResponseBody(
            owner_id=response_id,
            body_descriptor=_descriptor(event.get("bodyDescriptor")),
        )

    def _request_parameter_shape_set(self, event: Event) -> None:
        parameter_id = str(event.require("parameterId"))
        self.request_parameters[parameter_id] = RequestParameter(
            parameter_id=parameter_id,
            parameter_descriptor=_descriptor(event.get("parameterDescriptor")),
        )

    # --- Lookups ---

    def resolve_path(self, path_id: str) -> Path:
        try:
            return self.paths[path_id]
        except KeyError:
            raise UnresolvedReference("path", path_id) from None

    def resolve_shape(self, shape_id: str | None) -> Shape:
        if shape_id is None or shape_id not in self.shapes:
            raise UnresolvedReference("shape", shape_id)
        return self.shapes[shape_id]

    def resolve_field(self, field_id: str) -> Field:
        try:
            return self.fields[field_id]
        except KeyError:
            raise UnresolvedReference("field", field_id) from None

    def resolve_request(self, request_id: str) -> Request:
        try:
            return self.requests[request_id]
        except KeyError:
            raise UnresolvedReference("request", request_id) from None

    def resolve_response(self, response_id: str) -> Response:
        try:
            return self.responses[response_id]
        except KeyError:
            raise UnresolvedReference("response", response_id) from None

    def route(self, path_id: str) -> str:
        """Render the route for a path by walking parents to the root.

        The walk stops at a null parent or a parent not in the table (the
        implicit root).
        """
        segments: list[str] = []
        seen: set[str] = set()
        current: str | None = path_id
        while current is not None and current in self.paths and current not in seen:
            seen.add(current)
            node = self.paths[current]
            if node.name:
                segments.append(node.segment)
            current = node.parent_path_id
        return "/" + "/".join(reversed(segments))

    # --- Summary ---

    def stats(self) -> dict[str, int]:
        return {name: len(table) for name, table in self._tables().items()}

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable snapshot of every table."""
        return {
            name: {key: asdict(value) for key, value in table.items()}
            for name, table in self._tables().items()
        }

    def _tables(self) -> dict[str, dict[str, Any]]:
        return {
            "paths": self.paths,
            "shapes": self.shapes,
            "fields": self.fields,
            "requests": self.requests,
            "request_bodies": self.request_bodies,
            "responses": self.responses,
            "response_bodies": self.response_bodies,
            "request_parameters": self.request_parameters,
        }


_HANDLERS: dict[EventKind, Callable[[Graph, Event], None]] = {
    EventKind.PATH_COMPONENT_ADDED: Graph._path_component_added,
    EventKind.PATH_PARAMETER_ADDED: Graph._path_parameter_added,
    EventKind.SHAPE_ADDED: Graph._shape_added,
    EventKind.FIELD_ADDED: Graph._field_added,
    EventKind.REQUEST_ADDED: Graph._request_added,
    EventKind.REQUEST_BODY_SET: Graph._request_body_set,
    EventKind.RESPONSE_ADDED_BY_PATH_AND_METHOD: Graph._response_added,
    EventKind.RESPONSE_BODY_SET: Graph._response_body_set,
    EventKind.REQUEST_PARAMETER_SHAPE_SET: Graph._request_parameter_shape_set,
}


def project(batches: Iterable[Batch]) -> Graph:
    """Replay all batches from an empty graph."""
    return Graph.from_batches(batches)


__all__ = ["Graph", "project"]
