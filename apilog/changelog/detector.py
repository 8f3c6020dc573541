"""
Change detection.

Walks an event stream against a projected graph and emits an entry for every
body a newly added field belongs to. Only FieldAdded is classified today.

Lookups that fail raise UnresolvedReference inside the graph; the detector
records them as warnings and skips that field (or that field/body pairing).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..errors import UnresolvedReference
from ..graph import Graph
from ..log.events import Event, EventKind
from ..models import Body, Field, RequestBody, ResponseBody
from .entries import REQUEST_FIELD_ADDED, RESPONSE_FIELD_ADDED, ChangeEntry, ChangeInfo


@dataclass
class BodyIndex:
    """Reverse index: body shape id -> bodies bound to it, in table order."""

    responses: dict[str, list[ResponseBody]] = field(default_factory=dict)
    requests: dict[str, list[RequestBody]] = field(default_factory=dict)

    @classmethod
    def build(cls, graph: Graph) -> "BodyIndex":
        index = cls()
        for body in graph.response_bodies.values():
            if body.shape_id is not None:
                index.responses.setdefault(body.shape_id, []).append(body)
        for body in graph.request_bodies.values():
            if body.shape_id is not None:
                index.requests.setdefault(body.shape_id, []).append(body)
        return index


@dataclass
class DetectionResult:
    changes: list[ChangeEntry] = field(default_factory=list)
    warnings: list[UnresolvedReference] = field(default_factory=list)


class ChangeDetector:
    """Classifies events against one projected graph."""

    def __init__(self, graph: Graph):
        self.graph = graph
        self.index = BodyIndex.build(graph)

    def detect(self, events: Iterable[Event]) -> DetectionResult:
        result = DetectionResult()
        for event in events:
            if event.kind is EventKind.FIELD_ADDED:
                self._field_added(event, result)
            # Other kinds are not classified yet.
        return result

    def _field_added(self, event: Event, result: DetectionResult) -> None:
        field_id = str(event.get("fieldId") or "")
        try:
            fld = self.graph.resolve_field(field_id)
            type_name = self.graph.resolve_shape(fld.value_shape_id).base_shape_id
        except UnresolvedReference as e:
            e.context = e.context or f"field {field_id!r}"
            result.warnings.append(e)
            return

        for body in self.index.responses.get(fld.shape_id, []):
            self._emit(result, self._response_entry, fld, type_name, body)
        for body in self.index.requests.get(fld.shape_id, []):
            self._emit(result, self._request_entry, fld, type_name, body)

    def _emit(self, result: DetectionResult, build, fld: Field, type_name: str | None, body: Body) -> None:
        try:
            result.changes.append(build(fld, type_name, body))
        except UnresolvedReference as e:
            e.context = e.context or f"field {fld.field_id!r} in body of {body.owner_id!r}"
            result.warnings.append(e)

    def _response_entry(self, fld: Field, type_name: str | None, body: Body) -> ChangeEntry:
        response = self.graph.resolve_response(body.owner_id)
        path = self.graph.resolve_path(response.path_id)
        return ChangeEntry(
            category=RESPONSE_FIELD_ADDED,
            name=fld.name,
            type_name=type_name,
            info=ChangeInfo(
                field_id=fld.field_id,
                http_method=response.http_method,
                http_status_code=response.http_status_code,
                path=path,
                route=self.graph.route(path.path_id),
            ),
        )

    def _request_entry(self, fld: Field, type_name: str | None, body: Body) -> ChangeEntry:
        request = self.graph.resolve_request(body.owner_id)
        path = self.graph.resolve_path(request.path_id)
        return ChangeEntry(
            category=REQUEST_FIELD_ADDED,
            name=fld.name,
            type_name=type_name,
            info=ChangeInfo(
                field_id=fld.field_id,
                http_method=request.http_method,
                path=path,
                route=self.graph.route(path.path_id),
            ),
        )


def detect_changes(events: Iterable[Event], graph: Graph) -> DetectionResult:
    """Classify ``events`` against ``graph`` (projected from the same log or a superset)."""
    return ChangeDetector(graph).detect(events)
