"""Tests for change detection against a projected graph."""

from __future__ import annotations

from apilog.changelog import (
    REQUEST_FIELD_ADDED,
    RESPONSE_FIELD_ADDED,
    BodyIndex,
    detect_changes,
)
from apilog.graph import Graph
from apilog.log import Batch, decode_events, flatten
from builders import (
    endpoint_with_response,
    field_added,
    path_added,
    request_added,
    request_body_set,
    response_added,
    response_body_set,
    shape_added,
)


def _detect(*records):
    events = decode_events(list(records))
    return detect_changes(events, Graph.from_events(events))


def test_concrete_email_scenario(email_batches: list[Batch], email_graph: Graph) -> None:
    result = detect_changes(flatten(email_batches), email_graph)

    assert result.warnings == []
    assert [c.to_dict() for c in result.changes] == [
        {
            "category": "response.field.added",
            "name": "email",
            "type": "string",
            "info": {
                "fieldId": "f1",
                "httpMethod": "GET",
                "httpStatusCode": 200,
                "path": {"pathId": "p1", "parentPathId": None, "name": "users"},
                "route": "/users",
            },
        }
    ]


def test_additive_counting() -> None:
    n = 5
    fields = [field_added(f"f{i}", "s_body", f"name{i}", "s_str") for i in range(n)]
    result = _detect(*endpoint_with_response("s_body"), *fields)

    assert len(result.changes) == n
    assert all(c.category == RESPONSE_FIELD_ADDED for c in result.changes)
    assert [c.name for c in result.changes] == [f"name{i}" for i in range(n)]


def test_unbound_field_yields_nothing() -> None:
    result = _detect(
        *endpoint_with_response("s_body"),
        shape_added("s_loose", "$object"),
        field_added("f1", "s_loose", "orphan", "s_str"),
    )
    assert result.changes == []
    assert result.warnings == []


def test_dual_binding_yields_one_entry_per_category() -> None:
    result = _detect(
        *endpoint_with_response("s_body"),
        request_added("q_post", "p_items", "POST"),
        request_body_set("q_post", "s_body"),
        field_added("f1", "s_body", "title", "s_str"),
    )
    assert [c.category for c in result.changes] == [RESPONSE_FIELD_ADDED, REQUEST_FIELD_ADDED]

    request_entry = result.changes[1]
    assert request_entry.info.http_method == "POST"
    assert request_entry.info.http_status_code is None
    assert "httpStatusCode" not in request_entry.to_dict()["info"]


def test_one_entry_per_bound_response() -> None:
    result = _detect(
        *endpoint_with_response("s_body"),
        response_added("r_201", "p_items", "POST", 201),
        response_body_set("r_201", "s_body"),
        field_added("f1", "s_body", "title", "s_str"),
    )
    assert [(c.info.http_method, c.info.http_status_code) for c in result.changes] == [
        ("GET", 200),
        ("POST", 201),
    ]


def test_only_field_added_is_classified() -> None:
    result = _detect(*endpoint_with_response("s_body"))
    assert result.changes == []


def test_missing_value_shape_is_skipped_with_warning() -> None:
    result = _detect(
        *endpoint_with_response("s_body"),
        field_added("f_bad", "s_body", "broken", "s_missing"),
        field_added("f_ok", "s_body", "fine", "s_str"),
    )
    assert [c.name for c in result.changes] == ["fine"]
    assert len(result.warnings) == 1
    warning = result.warnings[0]
    assert warning.kind == "shape"
    assert warning.ref_id == "s_missing"
    assert "f_bad" in str(warning)


def test_unreadable_descriptor_is_unresolved() -> None:
    result = _detect(
        *endpoint_with_response("s_body"),
        {"FieldAdded": {"fieldId": "f1", "shapeId": "s_body", "name": "x", "shapeDescriptor": {"A": 1, "B": 2}}},
    )
    assert result.changes == []
    assert result.warnings[0].kind == "shape"


def test_body_without_owner_skips_only_that_pairing() -> None:
    result = _detect(
        *endpoint_with_response("s_body"),
        response_body_set("r_ghost", "s_body"),
        field_added("f1", "s_body", "title", "s_str"),
    )
    assert len(result.changes) == 1
    assert result.changes[0].info.http_status_code == 200
    assert [(w.kind, w.ref_id) for w in result.warnings] == [("response", "r_ghost")]


def test_owner_without_path_is_unresolved() -> None:
    result = _detect(
        shape_added("s_body", "$object"),
        shape_added("s_str", "$string"),
        request_added("q1", "p_gone", "PUT"),
        request_body_set("q1", "s_body"),
        field_added("f1", "s_body", "title", "s_str"),
    )
    assert result.changes == []
    assert [(w.kind, w.ref_id) for w in result.warnings] == [("path", "p_gone")]


def test_field_missing_from_graph_is_unresolved() -> None:
    events = decode_events([field_added("f1", "s_body", "title", "s_str")])
    result = detect_changes(events, Graph())
    assert result.changes == []
    assert result.warnings[0].kind == "field"


def test_index_matches_full_scan() -> None:
    records = [
        *endpoint_with_response("s_body"),
        path_added("p_other", "other"),
        shape_added("s_other", "$object"),
        response_added("r_other", "p_other", "GET", 404),
        response_body_set("r_other", "s_other"),
        request_added("q1", "p_other", "POST"),
        request_body_set("q1", "s_body"),
    ]
    graph = Graph.from_events(decode_events(records))
    index = BodyIndex.build(graph)

    for shape_id in ("s_body", "s_other", "s_str"):
        scanned_responses = [b for b in graph.response_bodies.values() if b.shape_id == shape_id]
        scanned_requests = [b for b in graph.request_bodies.values() if b.shape_id == shape_id]
        assert index.responses.get(shape_id, []) == scanned_responses
        assert index.requests.get(shape_id, []) == scanned_requests
