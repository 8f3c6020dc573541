"""Entity records projected from the spec event log."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Path:
    """One path component. A null (or unknown) parent ends the route."""

    path_id: str
    parent_path_id: str | None
    name: str
    is_parameter: bool = False

    @property
    def segment(self) -> str:
        return f"{{{self.name}}}" if self.is_parameter else self.name

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "pathId": self.path_id,
            "parentPathId": self.parent_path_id,
            "name": self.name,
        }
        if self.is_parameter:
            d["isParameter"] = True
        return d


@dataclass(frozen=True)
class Shape:
    """A named type that refines a base shape."""

    shape_id: str
    base_shape_id: str | None


@dataclass(frozen=True)
class Field:
    """A named member of an owning shape.

    ``shape_descriptor`` points at the shape of the field's value.
    """

    field_id: str
    shape_id: str
    name: str
    shape_descriptor: dict[str, Any] = field(default_factory=dict)

    @property
    def value_shape_id(self) -> str | None:
        return descriptor_shape_id(self.shape_descriptor)


@dataclass(frozen=True)
class Request:
    request_id: str
    path_id: str
    http_method: str


@dataclass(frozen=True)
class Response:
    response_id: str
    path_id: str
    http_method: str
    http_status_code: int | None


@dataclass(frozen=True)
class Body:
    """Request or response body binding: owner id -> body shape."""

    owner_id: str
    body_descriptor: dict[str, Any] = field(default_factory=dict)

    @property
    def shape_id(self) -> str | None:
        return descriptor_shape_id(self.body_descriptor)


@dataclass(frozen=True)
class RequestParameter:
    parameter_id: str
    parameter_descriptor: dict[str, Any] = field(default_factory=dict)


def descriptor_shape_id(descriptor: Any) -> str | None:
    """Extract the shape id from a descriptor.

    Accepts ``{"shapeId": S}`` and single-key wrappers such as
    ``{"FieldShapeFromShape": {"fieldId": F, "shapeId": S}}``.
    """
    if not isinstance(descriptor, dict):
        return None
    shape_id = descriptor.get("shapeId")
    if isinstance(shape_id, str) and shape_id:
        return shape_id
    if len(descriptor) == 1:
        (inner,) = descriptor.values()
        if isinstance(inner, dict):
            shape_id = inner.get("shapeId")
            if isinstance(shape_id, str) and shape_id:
                return shape_id
    return None


class RequestBody(Body):
    @property
    def request_id(self) -> str:
        return self.owner_id


class ResponseBody(Body):
    @property
    def response_id(self) -> str:
        return self.owner_id
