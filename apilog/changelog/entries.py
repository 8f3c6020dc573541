"""
Changelog value types.

A changelog entry records one field that became part of a request or
response body, attributed to the endpoint that carries it.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Any, Literal

from ..errors import ApilogError
from ..models import Path

REQUEST_FIELD_ADDED = "request.field.added"
RESPONSE_FIELD_ADDED = "response.field.added"

Category = Literal["request.field.added", "response.field.added"]

CATEGORIES: tuple[str, ...] = (REQUEST_FIELD_ADDED, RESPONSE_FIELD_ADDED)


@dataclass(frozen=True)
class ChangeInfo:
    """Where a change lives: field id plus endpoint coordinates."""

    field_id: str
    http_method: str
    path: Path
    route: str = ""
    http_status_code: int | None = None  # responses only

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "fieldId": self.field_id,
            "httpMethod": self.http_method,
        }
        if self.http_status_code is not None:
            d["httpStatusCode"] = self.http_status_code
        d["path"] = self.path.to_dict()
        d["route"] = self.route
        return d


@dataclass(frozen=True)
class ChangeEntry:
    category: Category
    name: str
    type_name: str | None  # base shape of the field's value, e.g. "string"
    info: ChangeInfo

    @property
    def is_request(self) -> bool:
        return self.category == REQUEST_FIELD_ADDED

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "name": self.name,
            "type": self.type_name,
            "info": self.info.to_dict(),
        }


@dataclass
class Changelog:
    """Result of diffing two log revisions.

    ``warnings`` holds recovered errors (structural errors of a side that fell
    back to the empty log, unresolved references that were skipped).
    """

    changes: list[ChangeEntry] = field(default_factory=list)
    warnings: list[ApilogError] = field(default_factory=list)
    base_batch_commit: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.changes

    def by_category(self) -> dict[str, list[ChangeEntry]]:
        """Group changes by category, in CATEGORIES order, omitting empty groups."""
        grouped: dict[str, list[ChangeEntry]] = {}
        for category in CATEGORIES:
            matching = [c for c in self.changes if c.category == category]
            if matching:
                grouped[category] = matching
        return grouped

    def counts(self) -> dict[str, int]:
        return {category: len(entries) for category, entries in self.by_category().items()}

    def content_hash(self, spec_id: str | None = None) -> str:
        """sha256 of the canonical JSON of what the comment shows.

        Covers the change list plus the inputs of the documentation link
        (base batch commit and uploaded spec id).
        """
        payload = json.dumps(
            {
                "changes": [c.to_dict() for c in self.changes],
                "baseBatchCommit": self.base_batch_commit,
                "specId": spec_id,
            },
            sort_keys=True,
            separators=(",", ":"),
        )
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"changes": [c.to_dict() for c in self.changes]}
        if self.warnings:
            d["warnings"] = [str(w) for w in self.warnings]
        if self.base_batch_commit:
            d["baseBatchCommit"] = self.base_batch_commit
        return d
