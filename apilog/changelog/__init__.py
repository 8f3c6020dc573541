"""
Semantic changelog between spec log revisions.

- entries: ChangeEntry / Changelog value types
- detector: FieldAdded classification against a projected graph
- diff: base/head diffing with the empty-log fallback
"""

from .detector import BodyIndex, ChangeDetector, DetectionResult, detect_changes
from .diff import diff_batches, generate_changelog, last_shared_batch, new_batches
from .entries import (
    CATEGORIES,
    REQUEST_FIELD_ADDED,
    RESPONSE_FIELD_ADDED,
    ChangeEntry,
    ChangeInfo,
    Changelog,
)

__all__ = [
    "CATEGORIES",
    "REQUEST_FIELD_ADDED",
    "RESPONSE_FIELD_ADDED",
    "BodyIndex",
    "ChangeDetector",
    "ChangeEntry",
    "ChangeInfo",
    "Changelog",
    "DetectionResult",
    "detect_changes",
    "diff_batches",
    "generate_changelog",
    "last_shared_batch",
    "new_batches",
]
