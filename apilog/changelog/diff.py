"""
Changelog between two revisions of a spec log.

Logs are append-only, so the head log normally extends the base log. The
events to classify are those in head batches the base log does not contain;
the graph they are classified against is the full head projection.
"""

from __future__ import annotations

from ..errors import ApilogError, MalformedEvent, MalformedLog
from ..graph import Graph
from ..log.batches import Batch, flatten
from ..log.reader import read_batches
from .detector import detect_changes
from .entries import Changelog


def new_batches(base: list[Batch], head: list[Batch]) -> list[Batch]:
    """Head batches whose id does not occur in the base log, in head order."""
    known = {batch.batch_id for batch in base}
    return [batch for batch in head if batch.batch_id not in known]


def last_shared_batch(base: list[Batch], head: list[Batch]) -> str | None:
    """Id of the last base batch that head also contains."""
    head_ids = {batch.batch_id for batch in head}
    for batch in reversed(base):
        if batch.batch_id in head_ids:
            return batch.batch_id
    return None


def diff_batches(base: list[Batch], head: list[Batch]) -> Changelog:
    """Core diff over already decoded logs."""
    graph = Graph.from_batches(head)
    result = detect_changes(flatten(new_batches(base, head)), graph)
    return Changelog(
        changes=result.changes,
        warnings=list(result.warnings),
        base_batch_commit=last_shared_batch(base, head),
    )


def _read_side(text: str | None, side: str, warnings: list[ApilogError]) -> list[Batch]:
    if text is None:
        return []
    try:
        return read_batches(text)
    except (MalformedEvent, MalformedLog) as e:
        warnings.append(type(e)(f"{side} log treated as empty: {e}"))
        return []


def generate_changelog(base_text: str | None, head_text: str | None) -> Changelog:
    """Diff two raw log documents.

    A side that is missing (None) or structurally malformed is replaced by
    the empty log; the structural error is kept in ``warnings``. This
    function does not raise for bad input.
    """
    warnings: list[ApilogError] = []
    base = _read_side(base_text, "base", warnings)
    head = _read_side(head_text, "head", warnings)

    try:
        changelog = diff_batches(base, head)
    except MalformedEvent as e:
        # Batches decoded but an event lacks its key field.
        warnings.append(MalformedEvent(f"head log treated as empty: {e}"))
        changelog = diff_batches(base, [])
    changelog.warnings[:0] = warnings
    return changelog
