"""
apilog - semantic changelogs for event-sourced API specifications.

The spec is an append-only log of typed mutation events grouped into commit
batches. apilog replays that log into a graph of current state and reports
which fields were added to request and response bodies between two revisions.

Components:
- log: event decoding, batch grouping, raw log reading
- graph: projection of batches into per-entity tables
- changelog: change detection and base/head diffing
- pr: comment marker, Markdown rendering, idempotent publishing
- github: REST client and Actions context
"""

__version__ = "0.3.0"

from .changelog import Changelog, ChangeEntry, generate_changelog
from .errors import ApilogError, MalformedEvent, MalformedLog, UnresolvedReference
from .graph import Graph, project

__all__ = [
    "__version__",
    "ApilogError",
    "ChangeEntry",
    "Changelog",
    "Graph",
    "MalformedEvent",
    "MalformedLog",
    "UnresolvedReference",
    "generate_changelog",
    "project",
]
