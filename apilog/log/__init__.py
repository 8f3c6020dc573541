"""
Event log handling.

- events: single-key record decoding into typed events
- batches: commit batch grouping (explicit state machine)
- reader: raw JSON text to batches
"""

from .batches import Batch, BatchGrouper, GrouperState, flatten, group_batches
from .events import Event, EventKind, decode_event, decode_events
from .reader import parse_records, read_batches, read_batches_file

__all__ = [
    "Batch",
    "BatchGrouper",
    "Event",
    "EventKind",
    "GrouperState",
    "decode_event",
    "decode_events",
    "flatten",
    "group_batches",
    "parse_records",
    "read_batches",
    "read_batches_file",
]
